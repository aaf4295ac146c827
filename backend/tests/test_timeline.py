"""Test timeline ordering."""

import pytest
from conftest import ALICE
from memorylane import memories
from memorylane.memories import create_memory, get_memory_map, get_timeline
from memorylane.models import MemoryView
from memorylane.timeline import order_timeline


def view(memory_id: str, date: int) -> MemoryView:
    return MemoryView(
        id=memory_id, owner_id="usr_x", title="t", content="c", type="event", date=date, importance=1
    )


def test_newest_first():
    ordered = order_timeline([view("a", 10), view("b", 30), view("c", 20)])
    assert [m.date for m in ordered] == [30, 20, 10]


def test_stable_for_equal_dates():
    ordered = order_timeline([view("a", 5), view("b", 5), view("c", 9)])
    assert [m.id for m in ordered] == ["c", "a", "b"]


def test_empty():
    assert order_timeline([]) == []


@pytest.mark.asyncio
async def test_timeline_and_map_orders_differ(db, blobs, make_memory, monkeypatch):
    """Timeline sorts by date; the map keeps creation order."""
    dates = iter([10, 30, 20])
    monkeypatch.setattr(memories, "now_ms", lambda: next(dates))

    ids = [await create_memory(db, ALICE, make_memory(title=f"m{i}")) for i in range(3)]

    timeline = await get_timeline(db, blobs, ALICE)
    assert [m.date for m in timeline] == [30, 20, 10]

    memory_map = await get_memory_map(db, blobs, ALICE)
    assert [n.memory.id for n in memory_map.nodes] == ids


@pytest.mark.asyncio
async def test_timeline_without_caller(db, blobs, make_memory):
    await create_memory(db, ALICE, make_memory())
    assert await get_timeline(db, blobs, None) == []
    assert (await get_memory_map(db, blobs, None)).nodes == []
