"""Profile routes."""
from fastapi import APIRouter, Depends, HTTPException, Request

from ..application import Backend, SessionStore
from ..dependencies import get_alerts, get_backend, get_navigator, get_session
from ..navigation import PROFILE, Navigator, Route
from ..screens import AlertPresenter, ProfileScreen, ScreenState
from ..screens.profile import TABS
from .deps import redirect_to_current, render

router = APIRouter(prefix="/profile")


async def _open_profile(
    backend: Backend,
    session: SessionStore,
    navigator: Navigator,
    alerts: AlertPresenter
) -> ProfileScreen:
    navigator.sync(Route(PROFILE))
    screen = ProfileScreen(backend, session, navigator, alerts)
    screen.set_tab(navigator.current.params.get("tab", "albums"))
    await screen.mount()
    return screen


@router.get("")
async def profile_page(
    request: Request,
    backend: Backend = Depends(get_backend),
    session: SessionStore = Depends(get_session),
    navigator: Navigator = Depends(get_navigator),
    alerts: AlertPresenter = Depends(get_alerts)
):
    screen = await _open_profile(backend, session, navigator, alerts)
    return render(request, "profile.html", {"screen": screen})


@router.post("/tab/{tab}")
async def switch_tab(tab: str, navigator: Navigator = Depends(get_navigator)):
    if tab not in TABS:
        raise HTTPException(status_code=404, detail="Unknown tab")
    navigator.sync(Route(PROFILE))
    navigator.set_params(tab=tab)
    return redirect_to_current(navigator)


@router.get("/photos/{index}")
async def open_photo(
    index: int,
    backend: Backend = Depends(get_backend),
    session: SessionStore = Depends(get_session),
    navigator: Navigator = Depends(get_navigator),
    alerts: AlertPresenter = Depends(get_alerts)
):
    """Open the viewer over all of the user's photos."""
    screen = await _open_profile(backend, session, navigator, alerts)
    if screen.state == ScreenState.LOADED and 0 <= index < len(screen.user_photos):
        screen.select_photo(index)
    return redirect_to_current(navigator)
