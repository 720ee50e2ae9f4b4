"""
Monthly mean ranker.

Accumulates sum/count per product within one month, then ranks the
products by mean score once every review of the month has been seen.
"""

import heapq
import logging
from datetime import datetime, timezone
from typing import Dict, Hashable, List, Tuple

import config.settings as settings
from reviewstats.aggregation.base import Aggregator, Row
from reviewstats.models.accumulator import ProductMeanAccumulator

logger = logging.getLogger(__name__)


def month_label(timestamp: int) -> str:
    """
    Derive the "YYYY-MM" label of a unix timestamp, in UTC.

    Args:
        timestamp: Seconds since the epoch

    Raises:
        ValueError: If the timestamp is outside the supported date range
    """
    try:
        moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError) as e:
        raise ValueError(f"Timestamp out of range: {timestamp}") from e
    return moment.strftime(settings.MONTH_FORMAT)


class MonthlyMeanRanker(Aggregator):
    """
    Ranks the products of one month by mean score.

    Values are (product_id, score) tuples. Output rows are
    (month, product_id, mean) for the first k products, by descending
    mean, equal means by ascending product_id.
    """

    combinable = True

    def __init__(self, key: Hashable, k: int):
        super().__init__(key)
        self.k = k
        self.products: Dict[str, ProductMeanAccumulator] = {}

    def _accumulator(self, product_id: str) -> ProductMeanAccumulator:
        accumulator = self.products.get(product_id)
        if accumulator is None:
            accumulator = ProductMeanAccumulator(product_id)
            self.products[product_id] = accumulator
        return accumulator

    def _merge(self, value: Tuple[str, int]) -> None:
        product_id, score = value
        self._accumulator(product_id).add(score)

    def _combine(self, other: "MonthlyMeanRanker") -> None:
        for product_id, partial in other.products.items():
            self._accumulator(product_id).merge(partial)

    def _finalize(self) -> List[Row]:
        for accumulator in self.products.values():
            accumulator.finalize()

        best = heapq.nsmallest(
            self.k,
            self.products.values(),
            key=lambda acc: (-acc.mean, acc.product_id)
        )
        logger.debug(f"{self.key}: ranked {len(self.products)} products")
        return [(self.key, acc.product_id, acc.mean) for acc in best]
