"""
Size-capped max-retention container.
"""

import heapq
from typing import Generic, Iterable, List, TypeVar

T = TypeVar("T")


class BoundedTopK(Generic[T]):
    """
    Keeps the k largest elements ever added, per the elements' natural order.

    Backed by a min-heap, so the current minimum is evicted first once
    the container grows past k. Duplicates are kept (multiset semantics).
    """

    def __init__(self, k: int, items: Iterable[T] = ()):
        if k < 0:
            raise ValueError(f"k must be >= 0, got {k}")
        self.k = k
        self._heap: List[T] = []
        for item in items:
            self.add(item)

    def add(self, item: T) -> None:
        """Insert an item, evicting the minimum if more than k are held."""
        if self.k == 0:
            return
        if len(self._heap) < self.k:
            heapq.heappush(self._heap, item)
        elif self._heap[0] < item:
            heapq.heapreplace(self._heap, item)

    def merge(self, other: "BoundedTopK[T]") -> None:
        """
        Fold another container into this one.

        Both must have the same k. The result equals the top-k of the
        union of everything added to either container.
        """
        if other.k != self.k:
            raise ValueError(f"Cannot merge top-{other.k} into top-{self.k}")
        for item in other._heap:
            self.add(item)

    def items(self) -> List[T]:
        """Retained items, largest first."""
        return sorted(self._heap, reverse=True)

    def __len__(self) -> int:
        return len(self._heap)

    def __iter__(self):
        return iter(self.items())

    def __repr__(self) -> str:
        return f"BoundedTopK(k={self.k}, items={self.items()!r})"
