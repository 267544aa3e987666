from typing import List, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from models.profile import Profile
from models.profile_image import ProfileImage
from utils.names import FOLDER_ROOT, sanitize_folder_name
from utils.storage import BucketStorage

T = TypeVar("T")


async def list_image_records(db: AsyncSession, profile_id: int) -> List[ProfileImage]:
    res = await db.execute(
        select(ProfileImage)
        .where(ProfileImage.profile_id == profile_id)
        .order_by(ProfileImage.created_at.asc(), ProfileImage.id.asc())
    )
    return list(res.scalars().all())


def fallback_folder(name: str) -> str:
    return f"{FOLDER_ROOT}/{sanitize_folder_name(name)}/images"


async def list_profile_image_urls(
    db: AsyncSession,
    storage: BucketStorage,
    profile_id: int,
) -> List[str]:
    """
    Public image URLs of a profile in display order.

    Image records are authoritative. A profile without records falls back to
    listing the folder derived from its sanitized name; an absent or empty
    folder gives an empty list.
    """
    records = await list_image_records(db, profile_id)
    if records:
        return [r.file_url for r in records]

    profile = await db.get(Profile, profile_id)
    if profile is None:
        return []

    folder = fallback_folder(profile.name)
    entries = await run_in_threadpool(storage.list, folder)
    return [
        storage.public_url(f"{folder}/{entry.name}")
        for entry in entries
        if not entry.is_folder
    ]


def image_at(images: Sequence[T], index: int) -> T:
    """Carousel access: the index wraps around the sequence."""
    if not images:
        raise IndexError("No images to show")
    return images[index % len(images)]
