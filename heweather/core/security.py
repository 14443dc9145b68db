from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from heweather.core.config import Settings
from heweather.core.errors import ConfigurationError

API_KEY_HEADER = "X-QW-Api-Key"
JWT_ALGORITHM = "EdDSA"
TOKEN_BACKDATE = timedelta(seconds=30)
TOKEN_LIFETIME = timedelta(seconds=900)
TOKEN_REFRESH_MARGIN = timedelta(seconds=60)


def _normalize_private_key(value: str) -> str:
    # Keys passed through env vars usually arrive with literal "\n".
    return value.replace("\\n", "\n").strip()


def create_qweather_token(
    *,
    subject: str,
    key_id: str,
    private_key: str,
    now: datetime | None = None,
) -> str:
    if not subject or not key_id or not private_key:
        raise ConfigurationError("Missing required JWT configuration parameters")

    now = now or datetime.now(tz=timezone.utc)
    payload: dict[str, Any] = {
        "sub": subject,
        "iat": now - TOKEN_BACKDATE,
        "exp": now + TOKEN_LIFETIME,
    }
    try:
        return jwt.encode(
            payload,
            _normalize_private_key(private_key),
            algorithm=JWT_ALGORITHM,
            headers={"kid": key_id},
        )
    except (ValueError, TypeError, jwt.PyJWTError) as e:
        raise ConfigurationError("Invalid JWT private key") from e


class CredentialProvider:
    def __init__(
        self,
        settings: Settings,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._settings = settings
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))
        self._lock = threading.Lock()
        self._token: str | None = None
        self._token_expires_at: datetime | None = None

    def ensure_configured(self) -> None:
        if self._settings.qweather_apikey:
            return
        if not self._settings.qweather_use_jwt:
            raise ConfigurationError("No credential configured: set an API key or enable JWT")
        missing = [
            name
            for name, value in (
                ("qweather_jwt_sub", self._settings.qweather_jwt_sub),
                ("qweather_jwt_kid", self._settings.qweather_jwt_kid),
                ("qweather_jwt_private_key", self._settings.qweather_jwt_private_key),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required JWT configuration parameters: {', '.join(missing)}"
            )

    def headers(self) -> dict[str, str]:
        if self._settings.qweather_apikey:
            return {API_KEY_HEADER: self._settings.qweather_apikey}
        self.ensure_configured()
        return {"Authorization": f"Bearer {self._bearer_token()}"}

    def _bearer_token(self) -> str:
        now = self._clock()
        with self._lock:
            if (
                self._token is not None
                and self._token_expires_at is not None
                and now < self._token_expires_at - TOKEN_REFRESH_MARGIN
            ):
                return self._token

            token = create_qweather_token(
                subject=self._settings.qweather_jwt_sub or "",
                key_id=self._settings.qweather_jwt_kid or "",
                private_key=self._settings.qweather_jwt_private_key or "",
                now=now,
            )
            self._token = token
            self._token_expires_at = now + TOKEN_LIFETIME
            return token
