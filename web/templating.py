"""
Jinja2 setup and the render helper shared by the page routes.
"""
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from core.config import APP_NAME
from web.flash import pop_flashes

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _date(value, fmt="%b %d, %Y"):
    if not value:
        return ""
    return value.strftime(fmt)


templates.env.filters["date"] = _date


def render(request: Request, template_name: str, ctx: dict = None, status_code: int = 200):
    """TemplateResponse wrapper injecting app name and pending flash messages."""
    base_ctx = {
        "app_name": APP_NAME,
        "flashes": pop_flashes(request),
        "current_user": None,
        "error": "",
    }
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(request, template_name, merged, status_code=status_code)
