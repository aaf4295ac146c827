"""Test blob reference resolution."""

from unittest.mock import MagicMock

import pytest
from conftest import ALICE
from memorylane.database import MEMORIES_TABLE
from memorylane.media import resolve_media
from memorylane.memories import create_memory, get_memory, list_memories
from memorylane.storage import SupabaseBlobStore
from storage3.utils import StorageException


def stored_row(**overrides) -> dict:
    row = {
        "id": "11111111-1111-1111-1111-111111111111",
        "owner_id": ALICE,
        "title": "t",
        "content": "c",
        "type": "photo",
        "date": 10,
        "tags": [],
        "importance": 3,
        "connections": [],
    }
    row.update(overrides)
    return row


class TestResolveMedia:
    """Per-type resolution of blob keys."""

    def test_photo(self, blobs):
        blobs.put("img-1")
        view = resolve_media(stored_row(image_storage_id="img-1"), blobs)
        assert view.image_url == "https://blobs.test/object/img-1?token=signed"
        assert view.image_storage_id == "img-1"

    def test_missing_blob_degrades_to_absent(self, blobs):
        view = resolve_media(stored_row(image_storage_id="gone"), blobs)
        assert view.image_url is None
        assert view.title == "t"

    def test_video_with_thumbnail(self, blobs):
        blobs.put("vid")
        blobs.put("thumb")
        view = resolve_media(
            stored_row(type="video", video_storage_id="vid", video_thumbnail_storage_id="thumb"), blobs
        )
        assert view.video_url.endswith("/vid?token=signed")
        assert view.video_thumbnail_url.endswith("/thumb?token=signed")

    def test_thumbnail_needs_video(self, blobs):
        blobs.put("thumb")
        view = resolve_media(stored_row(type="video", video_thumbnail_storage_id="thumb"), blobs)
        assert view.video_thumbnail_url is None
        assert blobs.resolved == []

    def test_keys_of_other_types_ignored(self, blobs):
        blobs.put("img-1")
        view = resolve_media(stored_row(type="event", image_storage_id="img-1"), blobs)
        assert view.image_url is None
        assert blobs.resolved == []

    def test_no_revalidation_on_read(self, blobs):
        view = resolve_media(stored_row(type="event", importance=42), blobs)
        assert view.importance == 42


class TestResolutionNotPersisted:
    """Locations are computed on every read and never stored."""

    @pytest.mark.asyncio
    async def test_location_not_written_back(self, db, blobs, make_memory):
        blobs.put("img-1")
        memory_id = await create_memory(db, ALICE, make_memory(type="photo", image_storage_id="img-1"))

        memory = await get_memory(db, blobs, ALICE, memory_id)
        assert memory.image_url is not None
        row = db.tables[MEMORIES_TABLE][0]
        assert "image_url" not in row

        # Blob vanishes: memory still readable, location gone
        blobs.objects.clear()
        memory = await get_memory(db, blobs, ALICE, memory_id)
        assert memory.image_url is None
        assert memory.image_storage_id == "img-1"

    @pytest.mark.asyncio
    async def test_resolved_on_each_read(self, db, blobs, make_memory):
        blobs.put("img-1")
        await create_memory(db, ALICE, make_memory(type="photo", image_storage_id="img-1"))
        await list_memories(db, blobs, ALICE)
        await list_memories(db, blobs, ALICE)
        assert blobs.resolved == ["img-1", "img-1"]


class TestSupabaseBlobStore:
    """Supabase Storage adapter."""

    def _store(self):
        client = MagicMock()
        bucket = client.storage.from_.return_value
        return SupabaseBlobStore(client, "memory-media", expires_in=600), client, bucket

    def test_resolve(self):
        store, client, bucket = self._store()
        bucket.create_signed_url.return_value = {"signedURL": "https://cdn.test/a?token=x"}

        assert store.resolve("a") == "https://cdn.test/a?token=x"
        client.storage.from_.assert_called_with("memory-media")
        bucket.create_signed_url.assert_called_once_with("a", 600)

    def test_resolve_not_found(self):
        store, _, bucket = self._store()
        bucket.create_signed_url.side_effect = StorageException({"message": "Object not found"})
        assert store.resolve("missing") is None

    def test_transport_errors_propagate(self):
        store, _, bucket = self._store()
        bucket.create_signed_url.side_effect = ConnectionError("down")
        with pytest.raises(ConnectionError):
            store.resolve("a")

    def test_create_upload_target(self):
        store, _, bucket = self._store()
        bucket.create_signed_upload_url.side_effect = lambda path: {
            "signed_url": f"https://cdn.test/upload/{path}?token=t",
            "token": "t",
            "path": path,
        }

        target = store.create_upload_target(ALICE)
        assert target.key.startswith(f"{ALICE}/")
        assert target.url == f"https://cdn.test/upload/{target.key}?token=t"

    def test_create_upload_target_without_url(self):
        store, _, bucket = self._store()
        bucket.create_signed_upload_url.return_value = {}
        with pytest.raises(RuntimeError):
            store.create_upload_target(ALICE)
