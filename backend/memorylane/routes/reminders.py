"""Reminder routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, status

from ..auth import CurrentCaller, OptionalCaller
from ..database import Database
from ..errors import NotFoundOrUnauthorized
from ..models import MemoryCreated, MemoryView, Reminder, ReminderUpdate
from ..reminders import (
    create_reminder,
    delete_reminder,
    get_reminder_memory,
    list_reminders,
    set_reminder_completed,
)
from ..storage import BlobStorage

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.get("", response_model=list[Reminder])
async def read_reminders(caller_id: OptionalCaller, db: Database, include_completed: bool = False):
    """Pending reminders, soonest due first."""
    return await list_reminders(db, caller_id, include_completed=include_completed)


@router.post("", response_model=MemoryCreated, status_code=status.HTTP_201_CREATED)
async def add_reminder(
    payload: Annotated[dict[str, Any], Body(...)],
    caller_id: CurrentCaller,
    db: Database,
):
    return MemoryCreated(id=await create_reminder(db, caller_id, payload))


@router.patch("/{reminder_id}", response_model=Reminder)
async def change_reminder(reminder_id: str, payload: ReminderUpdate, caller_id: CurrentCaller, db: Database):
    return await set_reminder_completed(db, caller_id, reminder_id, payload.completed)


@router.delete("/{reminder_id}", response_model=MemoryCreated)
async def remove_reminder(reminder_id: str, caller_id: CurrentCaller, db: Database):
    return MemoryCreated(id=await delete_reminder(db, caller_id, reminder_id))


@router.get("/{reminder_id}/memory", response_model=MemoryView)
async def read_reminder_memory(reminder_id: str, caller_id: OptionalCaller, db: Database, blobs: BlobStorage):
    """The memory a reminder points at; 404 if none or deleted since."""
    memory = await get_reminder_memory(db, blobs, caller_id, reminder_id)
    if memory is None:
        raise NotFoundOrUnauthorized("Memory")
    return memory
