"""
Top-K items per group key.

Used for each user's favourite products. Keeping the K largest items is
an associative, commutative reduction, so partial aggregators built on
any sub-partition of a group can be combined before the final reduce.
"""

import logging
from typing import Hashable, List

from reviewstats.aggregation.base import Aggregator, Row
from reviewstats.aggregation.bounded_topk import BoundedTopK
from reviewstats.models.keys import RankedScoreKey

logger = logging.getLogger(__name__)


class TopKPerKeyAggregator(Aggregator):
    """
    Retains the K highest-scored RankedScoreKey items of a group.

    Output rows are (group_key, product_id, score), by descending score,
    equal scores by ascending product_id.
    """

    combinable = True

    def __init__(self, key: Hashable, k: int):
        super().__init__(key)
        self.top = BoundedTopK(k)

    def _merge(self, value: RankedScoreKey) -> None:
        self.top.add(value)

    def _combine(self, other: "TopKPerKeyAggregator") -> None:
        self.top.merge(other.top)

    def _finalize(self) -> List[Row]:
        ranked = sorted(self.top.items(), key=lambda item: (-item.score, item.product_id))
        return [(self.key, item.product_id, item.score) for item in ranked]
