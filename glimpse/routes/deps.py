"""Shared helpers for page routes."""
from typing import Any

from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from ..config import TEMPLATES_DIR
from ..navigation import Navigator, route_url

templates = Jinja2Templates(directory=TEMPLATES_DIR)


def render(request: Request, name: str, context: dict[str, Any], status_code: int = 200):
    """Render a page with the session user, shell flow and pending alerts."""
    state = request.app.state
    return templates.TemplateResponse(
        request,
        name,
        {
            "user": state.session.user,
            "flow": state.shell.flow,
            "alerts": state.alerts.drain(),
            "route_url": route_url,
            **context,
        },
        status_code=status_code
    )


def redirect_to_current(navigator: Navigator) -> RedirectResponse:
    """Redirect to whatever route the navigator now shows."""
    return RedirectResponse(url=route_url(navigator.current), status_code=303)
