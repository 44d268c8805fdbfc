"""Template rendering and flash messages."""

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def flash(request: Request, category: str, message: str) -> None:
    """Queue a message for the next rendered page."""
    messages = request.session.setdefault("flash", {})
    messages.setdefault(category, []).append(message)


def pop_flashes(request: Request) -> dict[str, list[str]]:
    """Remove and return every queued flash message."""
    return request.session.pop("flash", {})


def render(request: Request, template_name: str, context: dict | None = None):
    """Render a template with the session's user and pending flash messages."""
    context = dict(context or {})
    context["flash"] = pop_flashes(request)
    context["current_username"] = request.session.get("username")
    context["signed_in"] = bool(request.session.get("signed_in"))
    return templates.TemplateResponse(request, template_name, context)
