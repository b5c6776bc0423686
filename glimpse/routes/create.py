"""Create album routes."""
import shutil
import tempfile
from pathlib import Path

import aiofiles
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from ..application import Backend, SessionStore
from ..config import ALLOWED_IMAGE_TYPES
from ..dependencies import get_alerts, get_backend, get_navigator, get_session
from ..navigation import CREATE, Navigator, Route
from ..screens import AlertPresenter, CreateAlbumScreen, SelectedImage
from .deps import redirect_to_current, render

router = APIRouter()


@router.get("/create")
async def create_page(
    request: Request,
    backend: Backend = Depends(get_backend),
    session: SessionStore = Depends(get_session),
    navigator: Navigator = Depends(get_navigator),
    alerts: AlertPresenter = Depends(get_alerts)
):
    """Show the create album form."""
    navigator.sync(Route(CREATE))
    screen = CreateAlbumScreen(backend, session, navigator, alerts)
    await screen.mount()
    return render(request, "create.html", {"screen": screen})


@router.post("/create")
async def create_album(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    photos: list[UploadFile] = File(default=[]),
    backend: Backend = Depends(get_backend),
    session: SessionStore = Depends(get_session),
    navigator: Navigator = Depends(get_navigator),
    alerts: AlertPresenter = Depends(get_alerts)
):
    """Create an album from the submitted form and files."""
    navigator.sync(Route(CREATE))
    screen = CreateAlbumScreen(backend, session, navigator, alerts)
    await screen.mount()
    screen.title = title
    screen.description = description

    uploads = [photo for photo in photos if photo.filename]
    rejected = [p.filename for p in uploads if p.content_type not in ALLOWED_IMAGE_TYPES]
    if rejected:
        alerts.alert("Error", f"Unsupported file type: {', '.join(rejected)}")
        return render(request, "create.html", {"screen": screen}, status_code=400)

    tmp_dir = Path(tempfile.mkdtemp(prefix="glimpse-"))
    try:
        screen.select_images([
            await _save_upload(tmp_dir, index, upload)
            for index, upload in enumerate(uploads)
        ])
        album_id = await screen.create()
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)

    if album_id is None:
        return render(request, "create.html", {"screen": screen}, status_code=400)
    return redirect_to_current(navigator)


async def _save_upload(tmp_dir: Path, index: int, upload: UploadFile) -> SelectedImage:
    """Spool an uploaded file to disk so it can be streamed to storage."""
    path = tmp_dir / f"{index}{Path(upload.filename).suffix.lower()}"
    size = 0
    async with aiofiles.open(path, "wb") as f:
        while chunk := await upload.read(64 * 1024):
            size += len(chunk)
            await f.write(chunk)

    return SelectedImage(
        path=path,
        file_name=upload.filename,
        file_size=size,
        content_type=upload.content_type,
    )
