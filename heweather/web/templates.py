from fastapi.templating import Jinja2Templates

from heweather.rendering.renderer import TEMPLATES_DIR

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
