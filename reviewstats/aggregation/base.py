"""
Aggregator contract.

One aggregator instance owns the state of exactly one group key.
The runner calls merge()/combine() for every value of the group, in any
order, then finalize() exactly once.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Hashable, List, Tuple

from reviewstats.errors import AggregatorStateError

logger = logging.getLogger(__name__)

Row = Tuple[Any, ...]


class Aggregator(ABC):
    """
    Two-phase per-group reducer.

    Subclasses implement _merge(), _finalize() and, when the reduction is
    associative and commutative, _combine().
    """

    combinable = False

    def __init__(self, key: Hashable):
        self.key = key
        self._finalized = False

    def merge(self, value: Any) -> None:
        """Fold one value of the group into the state."""
        self._check_open("merge")
        self._merge(value)

    def combine(self, other: "Aggregator") -> None:
        """Fold a partial aggregator of the same key into this one."""
        self._check_open("combine")
        if not self.combinable:
            raise NotImplementedError(f"{type(self).__name__} cannot be pre-combined")
        if other.key != self.key:
            raise ValueError(f"Cannot combine group {other.key!r} into {self.key!r}")
        self._combine(other)

    def finalize(self) -> List[Row]:
        """Emit the output rows of the group. Can only be called once."""
        self._check_open("finalize")
        self._finalized = True
        return self._finalize()

    @property
    def finalized(self) -> bool:
        return self._finalized

    @abstractmethod
    def _merge(self, value: Any) -> None:
        ...

    def _combine(self, other: "Aggregator") -> None:
        raise NotImplementedError

    @abstractmethod
    def _finalize(self) -> List[Row]:
        ...

    def _check_open(self, operation: str) -> None:
        if self._finalized:
            raise AggregatorStateError(
                f"{operation}() called on finalized {type(self).__name__} for {self.key!r}"
            )
