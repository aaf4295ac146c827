"""Reminder operations.

Reminders live independently of memories. ``memory_id`` is a weak
reference: it is looked up on demand and may point at a memory that has
since been deleted.
"""

from typing import Any

from pydantic import ValidationError

from supabase import Client

from .database import REMINDERS_TABLE, delete_record, insert_record, patch_record
from .errors import InvalidArgument, MemoryLaneError
from .logging_config import log_memory_operation
from .memories import get_memory
from .models import MemoryView, Reminder, ReminderCreate, validation_errors
from .ownership import fetch_owned, fetch_owned_for_write, query_owned, require_caller
from .storage import BlobStore


async def create_reminder(db: Client, caller_id: str | None, fields: dict[str, Any]) -> str:
    """Create a pending reminder for the caller. Returns the new id."""
    caller_id = require_caller(caller_id)
    try:
        reminder = ReminderCreate.model_validate(fields)
    except ValidationError as e:
        error = InvalidArgument("Invalid reminder fields", validation_errors(e.errors()))
        log_memory_operation(caller_id, "create", REMINDERS_TABLE, None, False, error.detail)
        raise error

    record = await insert_record(db, REMINDERS_TABLE, {
        **reminder.model_dump(mode="json"),
        "owner_id": caller_id,
        "completed": False,
    })
    reminder_id = str(record["id"])
    log_memory_operation(caller_id, "create", REMINDERS_TABLE, reminder_id, True)
    return reminder_id


async def list_reminders(db: Client, caller_id: str | None, include_completed: bool = False) -> list[Reminder]:
    """The caller's reminders, soonest due first. Pending only unless asked."""
    key = {} if include_completed else {"completed": False}
    records = await query_owned(db, REMINDERS_TABLE, caller_id, key, order=("due_date", False))
    return [Reminder.model_validate(r) for r in records]


async def set_reminder_completed(db: Client, caller_id: str | None, reminder_id: str, completed: bool = True) -> Reminder:
    operation = "complete" if completed else "reopen"
    try:
        await fetch_owned_for_write(db, REMINDERS_TABLE, reminder_id, caller_id, kind="Reminder")
    except MemoryLaneError as e:
        log_memory_operation(caller_id, operation, REMINDERS_TABLE, reminder_id, False, e.detail)
        raise

    record = await patch_record(db, REMINDERS_TABLE, reminder_id, {"completed": completed})
    log_memory_operation(caller_id, operation, REMINDERS_TABLE, reminder_id, True)
    return Reminder.model_validate(record)


async def delete_reminder(db: Client, caller_id: str | None, reminder_id: str) -> str:
    try:
        await fetch_owned_for_write(db, REMINDERS_TABLE, reminder_id, caller_id, kind="Reminder")
    except MemoryLaneError as e:
        log_memory_operation(caller_id, "delete", REMINDERS_TABLE, reminder_id, False, e.detail)
        raise

    await delete_record(db, REMINDERS_TABLE, reminder_id)
    log_memory_operation(caller_id, "delete", REMINDERS_TABLE, reminder_id, True)
    return reminder_id


async def get_reminder_memory(
    db: Client, blobs: BlobStore, caller_id: str | None, reminder_id: str
) -> MemoryView | None:
    """Follow a reminder's memory reference. None if unset or dangling."""
    record = await fetch_owned(db, REMINDERS_TABLE, reminder_id, caller_id)
    if record is None or not record.get("memory_id"):
        return None
    return await get_memory(db, blobs, caller_id, record["memory_id"])
