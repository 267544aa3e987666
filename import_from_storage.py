"""
One-shot import: link the image files already sitting in the bucket to
their profiles.

Every folder under `actors/` is matched against the profile whose name,
whitespace removed, equals the folder name (case-insensitive). Each file in
`actors/<folder>/images/` gets an image record with its public URL.

Nothing is deduplicated: running the import twice inserts every record twice.

    python import_from_storage.py
"""
import asyncio
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.database import AsyncSessionLocal, engine
from models.profile import Profile
from models.profile_image import ProfileImage
from utils.names import FOLDER_ROOT, folder_matches_name
from utils.storage import BucketStorage, StorageError, get_storage

log = logging.getLogger(__name__)


async def find_profile_for_folder(db: AsyncSession, folder_name: str) -> Optional[int]:
    # The full list is loaded for every folder; the first exact match wins
    rows = (await db.execute(select(Profile.id, Profile.name).order_by(Profile.id))).all()
    for profile_id, name in rows:
        if name and folder_matches_name(folder_name, name):
            return profile_id
    return None


async def import_from_storage(
    db: AsyncSession,
    storage: BucketStorage,
    prefix: str = FOLDER_ROOT,
) -> int:
    """Returns the number of image records inserted."""
    prefix = prefix.strip("/")
    folders = [e for e in await run_in_threadpool(storage.list, prefix) if e.is_folder]
    if not folders:
        log.info("No folders under %s/", prefix)
        return 0

    imported = 0
    for folder in folders:
        profile_id = await find_profile_for_folder(db, folder.name)
        if profile_id is None:
            log.warning("No matching profile found for folder: %s", folder.name)
            continue

        images_path = f"{prefix}/{folder.name}/images"
        try:
            files = await run_in_threadpool(storage.list, images_path)
        except StorageError as e:
            log.error("Error listing files in %s: %s", images_path, e)
            continue

        for entry in files:
            if entry.is_folder:
                continue
            file_url = storage.public_url(f"{images_path}/{entry.name}")
            db.add(ProfileImage(profile_id=profile_id, file_url=file_url))
            try:
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                log.error("Error inserting image record for %s: %s", file_url, e)
                continue
            imported += 1
            log.info("Inserted: %s -> %s", folder.name, entry.name)

    return imported


async def main() -> None:
    async with AsyncSessionLocal() as db:
        imported = await import_from_storage(db, get_storage())
    await engine.dispose()
    log.info("Migration complete: %d image records inserted", imported)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
