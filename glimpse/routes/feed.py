"""Feed routes and shell-level navigation."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from ..application import Backend
from ..dependencies import get_alerts, get_backend, get_navigator
from ..navigation import FEED_HOME, Navigator, Route
from ..screens import AlertPresenter, FeedScreen
from .deps import redirect_to_current, render

router = APIRouter()


@router.get("/")
async def index():
    return RedirectResponse(url="/feed", status_code=302)


@router.get("/feed")
async def feed_page(
    request: Request,
    backend: Backend = Depends(get_backend),
    navigator: Navigator = Depends(get_navigator),
    alerts: AlertPresenter = Depends(get_alerts)
):
    """Newest photos from everyone."""
    navigator.sync(Route(FEED_HOME))
    screen = FeedScreen(backend, navigator, alerts)
    await screen.mount()
    return render(request, "feed.html", {"screen": screen})


@router.post("/back")
async def go_back(navigator: Navigator = Depends(get_navigator)):
    """Pop the navigation stack."""
    navigator.go_back()
    return redirect_to_current(navigator)
