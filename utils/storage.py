from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import quote, unquote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from core.config import settings

# Marker object the hosted storage writes into folders created from its UI
PLACEHOLDER_NAME = ".emptyFolderPlaceholder"


class StorageError(Exception):
    """Object storage call failed."""


@dataclass(frozen=True)
class StorageEntry:
    name: str
    is_folder: bool


class BucketStorage:
    """
    The hosted backend's bucket, reached through its S3-compatible endpoint.
    Paths are bucket-relative, e.g. 'actors/FabioLevy/images/1.jpg'.
    """

    def __init__(self, client, bucket: str, public_base_url: str):
        self._client = client
        self.bucket = bucket
        self._public_base_url = public_base_url.rstrip("/")

    @property
    def public_prefix(self) -> str:
        return f"{self._public_base_url}/storage/v1/object/public/{self.bucket}/"

    def public_url(self, path: str) -> str:
        return self.public_prefix + quote(path.lstrip("/"), safe="/")

    def relative_path(self, url: str) -> str | None:
        """Bucket path of a public URL, or None if the URL is not from this bucket."""
        if not url.startswith(self.public_prefix):
            return None
        return unquote(url[len(self.public_prefix):])

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        # An existing object with the same path is overwritten
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Upload to storage failed: {e}") from e

    def remove(self, paths: list[str]) -> None:
        try:
            for path in paths:
                self._client.delete_object(Bucket=self.bucket, Key=path)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Removal from storage failed: {e}") from e

    def list(self, prefix: str) -> list[StorageEntry]:
        """
        Direct children of `prefix`, sorted by name. A prefix with no objects
        is an empty folder, not an error.
        """
        prefix = prefix.strip("/") + "/"
        entries: list[StorageEntry] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix, Delimiter="/"):
                for common in page.get("CommonPrefixes", []):
                    name = common["Prefix"][len(prefix):].rstrip("/")
                    entries.append(StorageEntry(name=name, is_folder=True))
                for obj in page.get("Contents", []):
                    name = obj["Key"][len(prefix):]
                    if name and name != PLACEHOLDER_NAME:
                        entries.append(StorageEntry(name=name, is_folder=False))
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Listing {prefix} failed: {e}") from e
        return sorted(entries, key=lambda e: e.name)


def _s3_client():
    session = boto3.session.Session(
        aws_access_key_id=settings.STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY,
        region_name=settings.STORAGE_REGION,
    )
    return session.client(
        "s3",
        endpoint_url=settings.storage_endpoint,
        config=Config(s3={"addressing_style": "path"}),
    )


@lru_cache(maxsize=1)
def get_storage() -> BucketStorage:
    """Process-wide bucket client; used as Depends(get_storage)."""
    return BucketStorage(_s3_client(), settings.STORAGE_BUCKET_NAME, settings.BACKEND_URL)
