import hmac
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db
from import_from_storage import import_from_storage
from schemas.import_job import ImportFromStorageRequest, ImportFromStorageResponse
from utils.storage import BucketStorage, get_storage

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger("uvicorn.error")


@router.post(
    "/import-from-storage",
    response_model=ImportFromStorageResponse,
    summary="Link bucket folders to profiles and create their image records",
)
async def trigger_import_from_storage(
    payload: ImportFromStorageRequest,
    db: AsyncSession = Depends(get_db),
    storage: BucketStorage = Depends(get_storage),
) -> ImportFromStorageResponse:
    if not payload.folder.strip("/ "):
        raise HTTPException(status_code=400, detail="Folder name can't be empty")

    if not settings.IMPORT_PASSWORD:
        logger.warning("Import attempted while IMPORT_PASSWORD is not configured")
        raise HTTPException(status_code=503, detail="Import password is not configured")

    if not hmac.compare_digest(payload.password, settings.IMPORT_PASSWORD):
        raise HTTPException(status_code=403, detail="Wrong password")

    normalized_folder = payload.folder.strip("/ ")
    try:
        imported = await import_from_storage(db, storage, prefix=normalized_folder)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Import from storage failed: %s", exc)
        raise HTTPException(status_code=500, detail="Import failed") from exc

    return ImportFromStorageResponse(folder=normalized_folder, imported=imported)
