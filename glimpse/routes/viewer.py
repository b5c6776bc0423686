"""Photo viewer routes.

The viewer shows the photo list held by the navigator's current route,
so these routes only work while the viewer is on top of the stack.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request

from ..application import Backend, SessionStore
from ..dependencies import get_alerts, get_backend, get_navigator, get_session
from ..navigation import PHOTO_VIEWER, Navigator
from ..screens import AlertPresenter, PhotoViewerScreen
from .deps import redirect_to_current, render

router = APIRouter(prefix="/viewer")


async def get_viewer(
    backend: Backend = Depends(get_backend),
    session: SessionStore = Depends(get_session),
    navigator: Navigator = Depends(get_navigator),
    alerts: AlertPresenter = Depends(get_alerts)
) -> Optional[PhotoViewerScreen]:
    """Viewer screen for the current route, None if the viewer isn't open."""
    route = navigator.current
    if route.name != PHOTO_VIEWER:
        return None

    screen = PhotoViewerScreen(
        backend, session, navigator,
        photos=route.params.get("photos", []),
        initial_index=route.params.get("initial_index", 0),
        album_id=route.params.get("album_id"),
        alerts=alerts,
    )
    await screen.mount()
    return screen


@router.get("")
async def viewer_page(
    request: Request,
    screen: Optional[PhotoViewerScreen] = Depends(get_viewer),
    navigator: Navigator = Depends(get_navigator)
):
    if screen is None or screen.current_photo is None:
        return redirect_to_current(navigator)

    interactions = await screen.open_interactions()
    return render(request, "viewer.html", {"screen": screen, "interactions": interactions})


@router.post("/show/{index}")
async def show_photo(
    index: int,
    screen: Optional[PhotoViewerScreen] = Depends(get_viewer),
    navigator: Navigator = Depends(get_navigator)
):
    if screen is not None:
        screen.show(index)
    return redirect_to_current(navigator)


@router.post("/delete")
async def delete_photo(
    screen: Optional[PhotoViewerScreen] = Depends(get_viewer),
    navigator: Navigator = Depends(get_navigator)
):
    """Delete the current photo (owner only) and leave the viewer."""
    if screen is not None:
        await screen.delete_photo()
    return redirect_to_current(navigator)


@router.post("/like")
async def toggle_like(
    screen: Optional[PhotoViewerScreen] = Depends(get_viewer),
    navigator: Navigator = Depends(get_navigator)
):
    if screen is not None:
        interactions = await screen.open_interactions()
        if interactions is not None:
            await interactions.toggle_like()
    return redirect_to_current(navigator)


@router.post("/comments")
async def add_comment(
    text: str = Form(""),
    screen: Optional[PhotoViewerScreen] = Depends(get_viewer),
    navigator: Navigator = Depends(get_navigator)
):
    if screen is not None:
        interactions = await screen.open_interactions()
        if interactions is not None:
            await interactions.add_comment(text)
    return redirect_to_current(navigator)


@router.post("/comments/{comment_id}/delete")
async def delete_comment(
    comment_id: str,
    screen: Optional[PhotoViewerScreen] = Depends(get_viewer),
    navigator: Navigator = Depends(get_navigator)
):
    if screen is not None:
        interactions = await screen.open_interactions()
        if interactions is not None:
            await interactions.delete_comment(comment_id)
    return redirect_to_current(navigator)
