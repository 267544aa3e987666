import logging
from datetime import datetime, timezone
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_session, require_api_key
from schemas.image import GalleryRead
from schemas.profile import (
    Language,
    ProfileLocalizedRead,
    ProfileRead,
    ProfileSummary,
    ProfileUpsert,
)
from services.gallery import list_profile_image_urls
from services.listing import (
    Section,
    get_profile,
    list_all_profiles,
    list_poster_images,
    list_section_profiles,
)
from services.profile_form import upsert_profile
from utils.profile_helpers import to_localized_read, to_profile_read, to_profile_reads
from utils.storage import BucketStorage, StorageError, get_storage

router = APIRouter(prefix="/api/profiles", tags=["profiles"], dependencies=[Depends(require_api_key)])
logger = logging.getLogger("uvicorn.error")


@router.get(
    "",
    response_model=List[ProfileRead],
    summary="All profiles, for the admin editor",
)
async def read_profiles(db: AsyncSession = Depends(get_db)) -> List[ProfileRead]:
    try:
        profiles = await list_all_profiles(db)
    except SQLAlchemyError as e:
        logger.exception("Profile list query failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch profiles")
    return to_profile_reads(profiles)


@router.post(
    "",
    response_model=ProfileRead,
    summary="Create or update a profile from the admin draft",
)
async def save_profile(
    payload: ProfileUpsert,
    db: AsyncSession = Depends(get_db),
    session: dict = Depends(get_current_session),
) -> ProfileRead:
    try:
        profile = await upsert_profile(db, payload)
    except SQLAlchemyError as e:
        logger.exception("Profile upsert failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to save profile")
    return to_profile_read(profile)


@router.get(
    "/section/{section}",
    response_model=List[ProfileSummary],
    summary="Cards of a public section (actors, actresses, young actors)",
)
async def read_section(
    section: Section,
    db: AsyncSession = Depends(get_db),
) -> List[ProfileSummary]:
    try:
        profiles = await list_section_profiles(db, section)
    except SQLAlchemyError as e:
        logger.exception("Section %s query failed: %s", section.value, e)
        raise HTTPException(status_code=500, detail="Error fetching profiles")
    return [ProfileSummary.model_validate(p) for p in profiles]


@router.get(
    "/posters",
    response_model=List[str],
    summary="Primary images of all profiles for the home page carousel",
)
async def read_posters(db: AsyncSession = Depends(get_db)) -> List[str]:
    try:
        return await list_poster_images(db)
    except SQLAlchemyError as e:
        logger.exception("Poster query failed: %s", e)
        raise HTTPException(status_code=500, detail="Error fetching posters")


@router.get(
    "/{profile_id}",
    response_model=Union[ProfileLocalizedRead, ProfileRead],
    summary="One profile; with ?lang= every bilingual field is resolved",
)
async def read_profile(
    profile_id: int,
    lang: Optional[Language] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    try:
        profile = await get_profile(db, profile_id)
    except SQLAlchemyError as e:
        logger.exception("Profile query failed: %s", e)
        raise HTTPException(status_code=500, detail="Error fetching profile")
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    read = to_profile_read(profile)
    if lang is None:
        return read
    return to_localized_read(read, lang, datetime.now(timezone.utc).date())


@router.get(
    "/{profile_id}/gallery",
    response_model=GalleryRead,
    summary="Public image URLs of a profile in display order",
)
async def read_gallery(
    profile_id: int,
    db: AsyncSession = Depends(get_db),
    storage: BucketStorage = Depends(get_storage),
) -> GalleryRead:
    try:
        images = await list_profile_image_urls(db, storage, profile_id)
    except (SQLAlchemyError, StorageError) as e:
        logger.exception("Gallery of profile %s failed: %s", profile_id, e)
        raise HTTPException(status_code=500, detail="Error fetching images")
    return GalleryRead(profile_id=profile_id, images=images)
