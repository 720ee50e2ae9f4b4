"""
User affinity reducers.

Pass 1 (CandidatePairGenerator), grouped by product: every unordered
pair of distinct users who rated the product highly, with the product
as evidence. The fan-out is quadratic in the number of such users, so
very popular products dominate the cost of the pass.

Pass 2 (SharedProductFilter), grouped by canonical pair: keeps the pairs
backed by at least min_products distinct products.

Neither reducer is pre-combinable: pass 1 needs the full user set of a
product, pass 2 the full evidence set of a pair.
"""

import logging
from itertools import combinations
from typing import Hashable, List, Set

import config.settings as settings
from reviewstats.aggregation.base import Aggregator, Row
from reviewstats.models.keys import UnorderedPairKey

logger = logging.getLogger(__name__)


class CandidatePairGenerator(Aggregator):
    """
    Collects the users of one product and expands them into pairs.

    Output rows are (UnorderedPairKey, product_id), sorted by pair.
    A user appearing several times is counted once.
    """

    def __init__(self, key: Hashable):
        super().__init__(key)
        self.users: Set[str] = set()

    def _merge(self, value: str) -> None:
        self.users.add(value)

    def _finalize(self) -> List[Row]:
        users = sorted(self.users)
        if len(users) > settings.FANOUT_WARNING_USERS:
            logger.warning(
                f"Product {self.key} has {len(users)} qualifying users, "
                f"expanding {len(users) * (len(users) - 1) // 2} pairs"
            )
        # users is sorted and duplicate-free, so each (a, b) is already canonical
        return [(UnorderedPairKey(a, b), self.key) for a, b in combinations(users, 2)]


class SharedProductFilter(Aggregator):
    """
    Collects the distinct products evidenced for one user pair.

    Emits a single row (pair, product_1, ..., product_n), products in
    ascending order, when n >= min_products; nothing otherwise.
    """

    def __init__(self, key: UnorderedPairKey, min_products: int):
        super().__init__(key)
        self.min_products = min_products
        self.products: Set[str] = set()

    def _merge(self, value: str) -> None:
        self.products.add(value)

    def _finalize(self) -> List[Row]:
        if len(self.products) < self.min_products:
            return []
        return [(self.key, *sorted(self.products))]
