"""Timeline ordering: newest memory first."""

from typing import Iterable

from .models import MemoryView


def order_timeline(memories: Iterable[MemoryView]) -> list[MemoryView]:
    """Stable sort by ``date`` descending; equal dates keep their input order."""
    return sorted(memories, key=lambda memory: memory.date, reverse=True)
