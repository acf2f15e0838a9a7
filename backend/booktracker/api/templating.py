from pathlib import Path
from typing import List
from fastapi import Request
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from booktracker.services.cover_service import PLACEHOLDER_COVER

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["placeholder_cover"] = PLACEHOLDER_COVER

# Session key for one-shot messages shown on the next rendered page
FLASH_KEY = "_flash"


def flash(request: Request, message: str) -> None:
    request.session[FLASH_KEY] = request.session.get(FLASH_KEY, []) + [message]


def pop_flashes(request: Request) -> List[str]:
    return request.session.pop(FLASH_KEY, [])


def render(request: Request, name: str, context: dict | None = None, status_code: int = 200):
    """Render a template with the current user and pending flash messages"""
    context = dict(context or {})
    context.setdefault("current_user", getattr(request.state, "user", None))
    context.setdefault("messages", pop_flashes(request))
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def form_errors(exc: ValidationError) -> List[str]:
    """Flatten a pydantic ValidationError into messages for a form page"""
    messages = []
    for error in exc.errors():
        msg = error["msg"]
        if msg.startswith("Value error, "):
            messages.append(msg[len("Value error, "):])
            continue
        field = str(error["loc"][0]) if error["loc"] else "form"
        messages.append(f"{field.replace('_', ' ').capitalize()}: {msg}")
    return messages
