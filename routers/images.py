import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.database import get_db
from core.security import get_current_session, require_api_key
from models.profile import Profile
from models.profile_image import ProfileImage
from schemas.image import (
    DeleteImageRequest,
    ImageRecordRead,
    ImagesResponse,
    MessageResponse,
    UploadResponse,
)
from services.gallery import list_image_records
from services.upload_pipeline import MissingFieldsError, ProfileNotFoundError, upload_profile_image
from utils.image_tools import ImageValidationError, compress_image, validate_image_upload
from utils.names import base_file_name
from utils.storage import BucketStorage, StorageError, get_storage

router = APIRouter(prefix="/api", tags=["images"], dependencies=[Depends(require_api_key)])
logger = logging.getLogger("uvicorn.error")

_PROFILE_ID = re.compile(r"^\d+$")


def _parse_profile_id(value) -> int:
    if isinstance(value, int):
        return value
    if not isinstance(value, str) or not _PROFILE_ID.match(value):
        raise HTTPException(status_code=400, detail="Invalid profile_id format")
    return int(value)


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Compress an image and store it in the profile's folder",
)
async def upload_image(
    file: Optional[UploadFile] = File(None),
    profile_id: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
    storage: BucketStorage = Depends(get_storage),
    session: dict = Depends(get_current_session),
) -> UploadResponse:
    # 1) Input checks, nothing touches the backend before they pass
    if file is None or not profile_id or not name:
        raise HTTPException(status_code=400, detail="Missing fields")
    pid = _parse_profile_id(profile_id)
    # Only the base name is kept, the object stays inside the profile folder
    file_name = base_file_name(file.filename)
    if not file_name:
        raise HTTPException(status_code=400, detail="Invalid file name")

    try:
        validate_image_upload(file.content_type, file.size or 0, settings.MAX_UPLOAD_BYTES)
        data = await file.read()
        validate_image_upload(file.content_type, len(data), settings.MAX_UPLOAD_BYTES)
    except ImageValidationError as ve:
        code = (
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE if ve.too_large
            else status.HTTP_400_BAD_REQUEST
        )
        raise HTTPException(status_code=code, detail=str(ve))

    # 2) Re-encode off the event loop
    try:
        image = await run_in_threadpool(compress_image, data, file_name, file.content_type)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))

    # 3) Folder path -> bucket -> image record
    try:
        file_url = await upload_profile_image(db, storage, image, pid, name)
    except MissingFieldsError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Upload failed: profile not found")
    except (SQLAlchemyError, StorageError) as e:
        logger.exception("Upload for profile %s failed: %s", pid, e)
        raise HTTPException(status_code=500, detail="Upload failed")

    return UploadResponse(message="File uploaded successfully", fileUrl=file_url)


@router.get(
    "/getImages",
    response_model=ImagesResponse,
    summary="Image records of a profile",
)
async def get_images(
    profile_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> ImagesResponse:
    if not profile_id:
        raise HTTPException(status_code=400, detail="Missing profile_id parameter")
    pid = _parse_profile_id(profile_id)

    try:
        records = await list_image_records(db, pid)
    except SQLAlchemyError as e:
        logger.exception("Image records query failed: %s", e)
        raise HTTPException(status_code=500, detail="Database query failed")

    return ImagesResponse(images=[ImageRecordRead(file_url=r.file_url) for r in records])


@router.post(
    "/deleteImages",
    response_model=MessageResponse,
    summary="Remove an image of a profile from the bucket",
)
async def delete_image(
    payload: DeleteImageRequest,
    db: AsyncSession = Depends(get_db),
    storage: BucketStorage = Depends(get_storage),
    session: dict = Depends(get_current_session),
) -> MessageResponse:
    if not payload.fileUrl or not payload.profileId:
        raise HTTPException(status_code=400, detail="Missing required fields")

    # 1) Only URLs of our own bucket, checked before any backend call
    relative_path = storage.relative_path(payload.fileUrl)
    if relative_path is None:
        raise HTTPException(status_code=400, detail="Invalid file URL")
    pid = _parse_profile_id(payload.profileId)

    # 2) The object has to live in the folder recorded on the profile
    try:
        profile = await db.get(Profile, pid)
    except SQLAlchemyError as e:
        logger.exception("Profile lookup failed: %s", e)
        raise HTTPException(status_code=500, detail="Delete failed")
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    folder_path = (profile.images or "").rstrip("/")
    if not folder_path or not relative_path.startswith(folder_path + "/"):
        raise HTTPException(status_code=400, detail="File does not belong to this profile")

    # 3) Object first, then its records
    try:
        await run_in_threadpool(storage.remove, [relative_path])
        await db.execute(
            delete(ProfileImage).where(
                ProfileImage.profile_id == pid,
                ProfileImage.file_url == payload.fileUrl,
            )
        )
        await db.commit()
    except (SQLAlchemyError, StorageError) as e:
        logger.exception("Delete of %s failed: %s", relative_path, e)
        raise HTTPException(status_code=500, detail="Delete failed")

    logger.info("Deleted %s of profile %s (%s)", relative_path, pid, payload.name or profile.name)
    return MessageResponse(message="File deleted successfully")
