"""Blob reference resolution.

Media keys stored on a memory are turned into retrievable locations right
before the memory leaves the service. Locations may expire, so they are
recomputed on every read and never written back.
"""

from typing import Iterable

from .models import MemoryView
from .storage import BlobStore


def resolve_media(record: dict, blobs: BlobStore) -> MemoryView:
    """Build the caller-facing view of a stored memory row.

    Only keys relevant to the memory's type are resolved. A key the blob
    layer cannot resolve leaves its location unset; the memory itself is
    still returned.
    """
    view = MemoryView.model_validate(record)
    updates: dict[str, str | None] = {}

    if view.type == "photo" and view.image_storage_id:
        updates["image_url"] = blobs.resolve(view.image_storage_id)

    if view.type == "video" and view.video_storage_id:
        updates["video_url"] = blobs.resolve(view.video_storage_id)
        if view.video_thumbnail_storage_id:
            updates["video_thumbnail_url"] = blobs.resolve(view.video_thumbnail_storage_id)

    return view.model_copy(update=updates) if updates else view


def resolve_all(records: Iterable[dict], blobs: BlobStore) -> list[MemoryView]:
    return [resolve_media(record, blobs) for record in records]
