"""Memory routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, status

from ..auth import CurrentCaller, OptionalCaller
from ..database import Database
from ..errors import InvalidArgument, NotFoundOrUnauthorized
from ..memories import (
    create_memory,
    delete_memory,
    get_memory,
    get_memory_map,
    get_timeline,
    list_memories,
    list_memories_by_calendar_range,
    list_memories_by_mood,
    list_memories_by_type,
    update_memory,
)
from ..models import MemoryCreated, MemoryMap, MemoryView
from ..storage import BlobStorage

router = APIRouter(prefix="/memories", tags=["memories"])

MemoryBody = Annotated[dict[str, Any], Body(...)]


@router.get("", response_model=list[MemoryView])
async def read_memories(
    caller_id: OptionalCaller,
    db: Database,
    blobs: BlobStorage,
    type: str | None = None,
    mood: str | None = None,
):
    """
    List the caller's memories, newest first.

    Filter by ``type`` or ``mood`` (not both). Anonymous callers get an
    empty list.
    """
    if type and mood:
        raise InvalidArgument("Filter by type or mood, not both")
    if type:
        return await list_memories_by_type(db, blobs, caller_id, type)
    if mood:
        return await list_memories_by_mood(db, blobs, caller_id, mood)
    return await list_memories(db, blobs, caller_id)


@router.get("/timeline", response_model=list[MemoryView])
async def read_timeline(caller_id: OptionalCaller, db: Database, blobs: BlobStorage):
    """The caller's memories in timeline (newest first) order."""
    return await get_timeline(db, blobs, caller_id)


@router.get("/map", response_model=MemoryMap)
async def read_memory_map(caller_id: OptionalCaller, db: Database, blobs: BlobStorage):
    """Positions and connections for the memory map."""
    return await get_memory_map(db, blobs, caller_id)


@router.get("/calendar", response_model=list[MemoryView])
async def read_calendar(
    caller_id: OptionalCaller,
    db: Database,
    blobs: BlobStorage,
    start: Annotated[int | None, Query(description="Range start, ms since epoch")] = None,
    end: Annotated[int | None, Query(description="Range end, ms since epoch")] = None,
):
    """Calendar memories falling within [start, end]."""
    return await list_memories_by_calendar_range(db, blobs, caller_id, start, end)


@router.get("/{memory_id}", response_model=MemoryView)
async def read_memory(memory_id: str, caller_id: OptionalCaller, db: Database, blobs: BlobStorage):
    memory = await get_memory(db, blobs, caller_id, memory_id)
    if memory is None:
        raise NotFoundOrUnauthorized("Memory")
    return memory


@router.post("", response_model=MemoryCreated, status_code=status.HTTP_201_CREATED)
async def add_memory(payload: MemoryBody, caller_id: CurrentCaller, db: Database):
    """Create a memory. ``date`` and ``connections`` are set by the server."""
    return MemoryCreated(id=await create_memory(db, caller_id, payload))


@router.put("/{memory_id}", response_model=MemoryCreated)
async def replace_memory(memory_id: str, payload: MemoryBody, caller_id: CurrentCaller, db: Database):
    """Replace every editable field of a memory."""
    return MemoryCreated(id=await update_memory(db, caller_id, memory_id, payload))


@router.delete("/{memory_id}", response_model=MemoryCreated)
async def remove_memory(memory_id: str, caller_id: CurrentCaller, db: Database):
    return MemoryCreated(id=await delete_memory(db, caller_id, memory_id))
