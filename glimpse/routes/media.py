"""Serve objects of the local storage backend."""
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse

from ..config import STORAGE_PUBLIC_URL
from ..infrastructure.storage import LocalStorage, StorageError

router = APIRouter()


@router.get(STORAGE_PUBLIC_URL + "/{folder}/{file_id}")
async def get_media(request: Request, folder: str, file_id: str):
    storage = request.app.state.storage
    if not isinstance(storage, LocalStorage):
        raise HTTPException(status_code=404, detail="Not found")

    try:
        path = storage.path_for(file_id, folder)
    except StorageError:
        raise HTTPException(status_code=404, detail="Not found")

    if not path.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(path)
