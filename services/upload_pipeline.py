"""
Image upload for a profile.

Side effects run strictly in this order, each awaiting the previous one:
1. persist the folder path on the profile (first upload only);
2. put the object into the bucket;
3. insert the image record.

Nothing is retried or rolled back: a folder path may stay on a profile that
has no files yet, which the gallery treats as an empty folder. Two first
uploads racing for the same profile both write a folder path; the last write
wins.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from models.profile import Profile
from models.profile_image import ProfileImage
from utils.image_tools import CompressedImage
from utils.names import base_file_name, profile_folder_path
from utils.storage import BucketStorage

logger = logging.getLogger("uvicorn.error")


class MissingFieldsError(ValueError):
    pass


class ProfileNotFoundError(LookupError):
    pass


async def resolve_folder_path(db: AsyncSession, profile_id: int, profile_name: str) -> str:
    profile = await db.get(Profile, profile_id)
    if profile is None:
        raise ProfileNotFoundError(f"Profile {profile_id} not found")

    if profile.images:
        return profile.images

    folder_path = profile_folder_path(profile_name)
    profile.images = folder_path
    await db.commit()
    logger.info("Profile %s: storage folder set to %s", profile_id, folder_path)
    return folder_path


async def upload_profile_image(
    db: AsyncSession,
    storage: BucketStorage,
    image: Optional[CompressedImage],
    profile_id: Optional[int],
    profile_name: Optional[str],
) -> str:
    """Store an already-compressed image for a profile and return its public URL."""
    if image is None or not profile_id or not profile_name:
        raise MissingFieldsError("Missing fields")
    file_name = base_file_name(image.filename)
    if not file_name:
        raise MissingFieldsError("Invalid file name")

    # 1) Folder path goes onto the profile before anything reaches the bucket
    folder_path = await resolve_folder_path(db, profile_id, profile_name)

    # 2) Same file name in the folder overwrites the previous object
    object_path = f"{folder_path}/{file_name}"
    await run_in_threadpool(storage.upload, object_path, image.data, image.content_type)

    # 3) Record the public URL
    file_url = storage.public_url(object_path)
    db.add(ProfileImage(profile_id=profile_id, file_url=file_url))
    await db.commit()

    return file_url
