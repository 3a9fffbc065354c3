from __future__ import annotations

import heapq
from collections.abc import Hashable
from itertools import count


class PriorityFrontier:
    """Binary-heap worklist that always yields the lowest-priority node first.

    Entries are never deduplicated: a node pushed again with a better priority
    leaves its older entry in the heap, and callers discard such stale entries
    when they surface. Equal priorities come out in insertion order, so node
    identifiers never have to be comparable with each other.
    """

    __slots__ = ("_heap", "_seq")

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, Hashable]] = []
        self._seq = count()

    def insert(self, node: Hashable, priority: float) -> None:
        heapq.heappush(self._heap, (float(priority), next(self._seq), node))

    def extract_min(self) -> tuple[Hashable, float]:
        if not self._heap:
            raise IndexError("extract_min from an empty frontier")
        priority, _seq, node = heapq.heappop(self._heap)
        return node, priority

    def peek(self) -> tuple[Hashable, float]:
        if not self._heap:
            raise IndexError("peek at an empty frontier")
        priority, _seq, node = self._heap[0]
        return node, priority

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
