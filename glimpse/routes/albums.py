"""Album detail routes."""
from typing import Optional

from fastapi import APIRouter, Depends, Request

from ..application import Backend, SessionStore
from ..dependencies import get_alerts, get_backend, get_navigator, get_session
from ..navigation import ALBUM_DETAIL, Navigator, Route
from ..screens import AlbumDetailScreen, AlertPresenter, ScreenState
from .deps import redirect_to_current, render

router = APIRouter(prefix="/albums")


async def _open_album(
    album_id: str,
    backend: Backend,
    session: SessionStore,
    navigator: Navigator,
    alerts: AlertPresenter,
    photo_id: Optional[str] = None
) -> AlbumDetailScreen:
    navigator.sync(Route(ALBUM_DETAIL, {"album_id": album_id}))
    screen = AlbumDetailScreen(backend, session, navigator, album_id, photo_id, alerts)
    await screen.mount()
    return screen


@router.get("/{album_id}")
async def album_page(
    request: Request,
    album_id: str,
    photo_id: Optional[str] = None,
    backend: Backend = Depends(get_backend),
    session: SessionStore = Depends(get_session),
    navigator: Navigator = Depends(get_navigator),
    alerts: AlertPresenter = Depends(get_alerts)
):
    """Album header and photo grid; forwards to the viewer for ``photo_id``."""
    screen = await _open_album(album_id, backend, session, navigator, alerts, photo_id)

    if navigator.current.name != ALBUM_DETAIL:
        return redirect_to_current(navigator)

    status_code = 404 if screen.state == ScreenState.ERROR and screen.not_found else 200
    return render(request, "album.html", {"screen": screen}, status_code=status_code)


@router.get("/{album_id}/photos/{index}")
async def open_photo(
    album_id: str,
    index: int,
    backend: Backend = Depends(get_backend),
    session: SessionStore = Depends(get_session),
    navigator: Navigator = Depends(get_navigator),
    alerts: AlertPresenter = Depends(get_alerts)
):
    """Open the viewer at one photo of the album."""
    screen = await _open_album(album_id, backend, session, navigator, alerts)
    if screen.state == ScreenState.LOADED and 0 <= index < len(screen.photos):
        screen.select_photo(index)
    return redirect_to_current(navigator)


@router.post("/{album_id}/delete")
async def delete_album(
    album_id: str,
    backend: Backend = Depends(get_backend),
    session: SessionStore = Depends(get_session),
    navigator: Navigator = Depends(get_navigator),
    alerts: AlertPresenter = Depends(get_alerts)
):
    """Delete the album (owner only) and go back."""
    screen = await _open_album(album_id, backend, session, navigator, alerts)
    if screen.state == ScreenState.LOADED and not screen.can_delete:
        alerts.alert("Error", "Only the owner can delete this album")
    else:
        await screen.delete_album()
    return redirect_to_current(navigator)
