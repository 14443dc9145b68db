from fastapi import APIRouter

from heweather.api.routes import chat, weather

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(chat.router, tags=["chat"])
api_router.include_router(weather.router, tags=["weather"])
