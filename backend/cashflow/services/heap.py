"""Max-heap of settlement balances with a deterministic tie-break."""
from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True, slots=True)
class HeapNode:
    amount: int
    id: str


class MaxHeap:
    """
    Array-backed binary max-heap over HeapNode.

    heapq is a min-heap, so entries are keyed on (-amount, id): the smallest key
    is the largest amount, and equal amounts fall to the lexicographically
    smaller id.
    """

    def __init__(self, nodes: Iterable[HeapNode] = ()):
        self._data: list[tuple[int, str]] = [(-n.amount, n.id) for n in nodes]
        heapq.heapify(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def size(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def push(self, node: HeapNode) -> None:
        heapq.heappush(self._data, (-node.amount, node.id))

    def pop(self) -> Optional[HeapNode]:
        if not self._data:
            return None
        neg_amount, node_id = heapq.heappop(self._data)
        return HeapNode(amount=-neg_amount, id=node_id)

    def peek(self) -> Optional[HeapNode]:
        if not self._data:
            return None
        neg_amount, node_id = self._data[0]
        return HeapNode(amount=-neg_amount, id=node_id)
