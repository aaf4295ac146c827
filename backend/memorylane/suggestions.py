"""AI suggestion operations.

Suggestions are produced outside this service. Here they are only listed,
dismissed or marked as acted upon. ``related_memory_ids`` are weak
references and are skipped when they no longer resolve.
"""

from supabase import Client

from .config import get_settings
from .database import SUGGESTIONS_TABLE, patch_record
from .errors import InvalidArgument, MemoryLaneError
from .logging_config import log_memory_operation
from .memories import get_memory
from .models import MemoryView, Suggestion
from .ownership import fetch_owned, fetch_owned_for_write, query_owned
from .storage import BlobStore


async def list_suggestions(db: Client, caller_id: str | None, limit: int | None = None) -> list[Suggestion]:
    """The caller's active (not dismissed) suggestions, newest first."""
    if limit is None:
        limit = get_settings().suggestion_limit
    if limit < 1:
        raise InvalidArgument("Suggestion limit must be at least 1")
    records = await query_owned(
        db,
        SUGGESTIONS_TABLE,
        caller_id,
        {"dismissed": False},
        order=("created_at", True),
        limit=limit,
    )
    return [Suggestion.model_validate(r) for r in records]


async def dismiss_suggestion(db: Client, caller_id: str | None, suggestion_id: str) -> Suggestion:
    try:
        await fetch_owned_for_write(db, SUGGESTIONS_TABLE, suggestion_id, caller_id, kind="Suggestion")
    except MemoryLaneError as e:
        log_memory_operation(caller_id, "dismiss", SUGGESTIONS_TABLE, suggestion_id, False, e.detail)
        raise

    record = await patch_record(db, SUGGESTIONS_TABLE, suggestion_id, {"dismissed": True})
    log_memory_operation(caller_id, "dismiss", SUGGESTIONS_TABLE, suggestion_id, True)
    return Suggestion.model_validate(record)


async def mark_suggestion_actioned(db: Client, caller_id: str | None, suggestion_id: str) -> Suggestion:
    try:
        await fetch_owned_for_write(db, SUGGESTIONS_TABLE, suggestion_id, caller_id, kind="Suggestion")
    except MemoryLaneError as e:
        log_memory_operation(caller_id, "action", SUGGESTIONS_TABLE, suggestion_id, False, e.detail)
        raise

    record = await patch_record(db, SUGGESTIONS_TABLE, suggestion_id, {"action_taken": True})
    log_memory_operation(caller_id, "action", SUGGESTIONS_TABLE, suggestion_id, True)
    return Suggestion.model_validate(record)


async def get_suggestion_memories(
    db: Client, blobs: BlobStore, caller_id: str | None, suggestion_id: str
) -> list[MemoryView]:
    """Memories a suggestion refers to that still exist, in reference order."""
    record = await fetch_owned(db, SUGGESTIONS_TABLE, suggestion_id, caller_id)
    if record is None:
        return []
    memories = []
    for memory_id in record.get("related_memory_ids") or []:
        memory = await get_memory(db, blobs, caller_id, memory_id)
        if memory is not None:
            memories.append(memory)
    return memories
