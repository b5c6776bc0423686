"""Application middleware."""
from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .config import PUBLIC_PATHS, PUBLIC_PREFIXES

# Pages of the auth flow; signed-in users are sent to the feed instead
AUTH_PAGES = {"/login", "/register"}


class AuthMiddleware(BaseHTTPMiddleware):
    """Gate every route on the process-wide session.

    While nobody is signed in only the auth flow is reachable; once a user
    is signed in the auth pages redirect to the feed.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        session = request.app.state.session
        user = session.user

        if path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES):
            if user is not None and path in AUTH_PAGES and request.method == "GET":
                return RedirectResponse(url="/feed", status_code=302)
            return await call_next(request)

        if user is not None:
            request.state.user = user
            return await call_next(request)

        # Not signed in - redirect pages to login
        if request.method == "GET":
            return RedirectResponse(url="/login", status_code=302)

        return JSONResponse(status_code=401, content={"detail": "Not authenticated"})
