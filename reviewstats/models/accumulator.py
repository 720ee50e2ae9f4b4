"""
Per (month, product) running score state.
"""

from dataclasses import dataclass
from typing import Optional

from reviewstats.errors import AggregatorStateError


@dataclass
class ProductMeanAccumulator:
    """
    Running sum and count of the scores of one product in one month.

    Scores are integers, so the sum stays exact whatever the arrival
    order. The mean is divided once, by finalize().
    """
    product_id: str
    total: int = 0
    count: int = 0
    mean: Optional[float] = None

    def add(self, score: int) -> None:
        """Add one score."""
        self._check_open()
        self.total += score
        self.count += 1

    def merge(self, other: "ProductMeanAccumulator") -> None:
        """Fold another partial accumulator of the same product into this one."""
        self._check_open()
        if other.product_id != self.product_id:
            raise ValueError(
                f"Cannot merge accumulator of {other.product_id!r} into {self.product_id!r}"
            )
        self.total += other.total
        self.count += other.count

    def finalize(self) -> float:
        """Compute the mean. Can only be called once."""
        self._check_open()
        if self.count == 0:
            raise ValueError(f"No scores accumulated for {self.product_id!r}")
        self.mean = self.total / self.count
        return self.mean

    @property
    def finalized(self) -> bool:
        return self.mean is not None

    def _check_open(self) -> None:
        if self.finalized:
            raise AggregatorStateError(f"Accumulator for {self.product_id!r} is already finalized")
