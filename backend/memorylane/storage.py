"""Blob subsystem: media uploads and retrieval locations in Supabase Storage.

Payload bytes never pass through this service. A caller asks for a signed
upload target, sends the file straight to storage, then hands the returned
key back on create/update. Keys are resolved to short-lived signed URLs on
every read.
"""

import uuid
from typing import Annotated, Protocol

from fastapi import Depends
from pydantic import BaseModel
from storage3.utils import StorageException

from supabase import Client

from .config import Settings, get_settings
from .database import Database
from .logging_config import get_logger

logger = get_logger("memorylane.storage")


class UploadTarget(BaseModel):
    """Time-bounded write target for an out-of-band upload."""
    url: str
    key: str
    expires_in: int | None = None


class BlobStore(Protocol):
    """What the memory contract needs from the blob subsystem."""

    def create_upload_target(self, owner_id: str) -> UploadTarget: ...

    def resolve(self, key: str) -> str | None: ...


class SupabaseBlobStore:
    """BlobStore backed by a Supabase Storage bucket."""

    def __init__(self, client: Client, bucket: str, expires_in: int = 3600):
        self.client = client
        self.bucket = bucket
        self.expires_in = expires_in

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def create_upload_target(self, owner_id: str) -> UploadTarget:
        # Keys are opaque to callers; the owner prefix only groups objects in the bucket
        key = f"{owner_id}/{uuid.uuid4().hex}"
        response = self._bucket().create_signed_upload_url(key)
        url = response.get("signed_url") or response.get("signedUrl") or response.get("signedURL")
        if not url:
            raise RuntimeError(f"Storage returned no upload URL for {key}")
        return UploadTarget(url=url, key=response.get("path") or key)

    def resolve(self, key: str) -> str | None:
        try:
            response = self._bucket().create_signed_url(key, self.expires_in)
        except StorageException as e:
            logger.debug(f"Could not resolve blob {key}: {e}")
            return None
        return response.get("signedURL") or response.get("signedUrl") or None


def get_blob_store(
    db: Database,
    settings: Annotated[Settings, Depends(get_settings)],
) -> BlobStore:
    """FastAPI dependency for the media blob store."""
    return SupabaseBlobStore(db, settings.media_bucket, settings.media_url_expires_in)


# Type alias for dependency injection
BlobStorage = Annotated[BlobStore, Depends(get_blob_store)]
