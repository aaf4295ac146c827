"""AI suggestion routes."""

from typing import Annotated

from fastapi import APIRouter, Query

from ..auth import CurrentCaller, OptionalCaller
from ..database import Database
from ..models import MemoryView, Suggestion
from ..storage import BlobStorage
from ..suggestions import (
    dismiss_suggestion,
    get_suggestion_memories,
    list_suggestions,
    mark_suggestion_actioned,
)

router = APIRouter(prefix="/suggestions", tags=["suggestions"])


@router.get("", response_model=list[Suggestion])
async def read_suggestions(
    caller_id: OptionalCaller,
    db: Database,
    limit: Annotated[int | None, Query(ge=1, le=50)] = None,
):
    """Active suggestions, newest first."""
    return await list_suggestions(db, caller_id, limit=limit)


@router.post("/{suggestion_id}/dismiss", response_model=Suggestion)
async def dismiss(suggestion_id: str, caller_id: CurrentCaller, db: Database):
    return await dismiss_suggestion(db, caller_id, suggestion_id)


@router.post("/{suggestion_id}/action", response_model=Suggestion)
async def record_action(suggestion_id: str, caller_id: CurrentCaller, db: Database):
    return await mark_suggestion_actioned(db, caller_id, suggestion_id)


@router.get("/{suggestion_id}/memories", response_model=list[MemoryView])
async def read_suggestion_memories(
    suggestion_id: str, caller_id: OptionalCaller, db: Database, blobs: BlobStorage
):
    """Related memories that still exist."""
    return await get_suggestion_memories(db, blobs, caller_id, suggestion_id)
