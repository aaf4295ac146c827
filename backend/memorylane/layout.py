"""Map layout: place memories on a circle and link related neighbours.

Layout is a pure function of the input sequence. Memories are spread
evenly around a circle in the order given (the store's creation order),
sized by importance, and consecutive memories that share a tag are joined.
Only consecutive pairs are compared, so the edge count is at most n - 1;
two tagged-alike memories that are not neighbours in the sequence stay
unconnected.
"""

import math
from typing import Sequence

from .models import MapEdge, MapNode, MemoryMap, MemoryView

CENTER_X = 400.0
CENTER_Y = 300.0
ORBIT_RADIUS = 200.0
MIN_NODE_RADIUS = 20
RADIUS_PER_IMPORTANCE = 5


def node_position(index: int, total: int) -> tuple[float, float]:
    """Position of the ``index``-th of ``total`` memories on the orbit."""
    if total <= 0:
        raise ValueError("Cannot place a node in an empty layout")
    angle = 2 * math.pi * index / total
    return (
        CENTER_X + ORBIT_RADIUS * math.cos(angle),
        CENTER_Y + ORBIT_RADIUS * math.sin(angle),
    )


def node_radius(importance: int) -> int:
    return max(MIN_NODE_RADIUS, importance * RADIUS_PER_IMPORTANCE)


def shared_tags(first: MemoryView, second: MemoryView) -> list[str]:
    """Tags present on both memories (exact, case-sensitive match)."""
    other = set(second.tags)
    return sorted({tag for tag in first.tags if tag in other})


def connect_neighbours(memories: Sequence[MemoryView]) -> list[MapEdge]:
    """Edges between each consecutive pair that shares at least one tag."""
    edges = []
    for current, following in zip(memories, memories[1:]):
        common = shared_tags(current, following)
        if common:
            edges.append(MapEdge(source_id=current.id, target_id=following.id, shared_tags=common))
    return edges


def build_memory_map(memories: Sequence[MemoryView]) -> MemoryMap:
    """Lay out ``memories`` in the order given."""
    memories = list(memories)
    if not memories:
        return MemoryMap()

    total = len(memories)
    nodes = []
    for index, memory in enumerate(memories):
        x, y = node_position(index, total)
        nodes.append(MapNode(memory=memory, x=x, y=y, radius=node_radius(memory.importance)))

    return MemoryMap(nodes=nodes, connections=connect_neighbours(memories))
