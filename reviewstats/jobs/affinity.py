"""
User affinity jobs.

Finds the pairs of users who gave a high score (>= MIN_SCORE) to at
least MIN_PRODUCTS common products.

Two passes:
- pass 1 groups highly-rated reviews by product and emits one
  (pair, product) row per pair of users of that product;
- pass 2 groups those rows by canonical pair and keeps the pairs with
  enough distinct products.

Output rows: (pair, product_1, ..., product_n), sorted by pair.
"""

import logging
from typing import Iterable, Optional

import config.settings as settings
from reviewstats.aggregation.affinity import CandidatePairGenerator, SharedProductFilter
from reviewstats.engine.job import Job, KeyValue
from reviewstats.models.keys import UnorderedPairKey
from reviewstats.models.review import parse_review_line

logger = logging.getLogger(__name__)

PASS_1_NAME = "UserAffinity-pass-1"
PASS_2_NAME = "UserAffinity-pass-2"


def build_candidate_job(min_score: int = settings.MIN_SCORE) -> Job:
    """
    Pass 1: product -> users who scored it >= min_score.

    Args:
        min_score: Lowest score that counts as highly rated
    """
    def mapper(line: str) -> Optional[Iterable[KeyValue]]:
        record = parse_review_line(line)
        if record is None:
            return None
        if record.score < min_score:
            return ()
        return ((record.product_id, record.user_id),)

    return Job(
        name=PASS_1_NAME,
        mapper=mapper,
        aggregator_factory=CandidatePairGenerator
    )


def parse_candidate_line(line: str) -> Optional[KeyValue]:
    """
    Parse one intermediate line "user1 \\t user2 \\t product".

    The users are re-canonicalized, so either order is accepted.
    """
    cols = line.rstrip("\r\n").split(settings.FIELD_DELIMITER)
    if len(cols) != 3:
        logger.debug(f"Rejected intermediate row with {len(cols)} fields")
        return None
    user1, user2, product_id = cols
    try:
        pair = UnorderedPairKey.make(user1, user2)
    except ValueError:
        logger.debug(f"Rejected intermediate row pairing {user1!r} with itself")
        return None
    return pair, product_id


def build_filter_job(min_products: int = settings.MIN_PRODUCTS) -> Job:
    """
    Pass 2: canonical pair -> distinct shared products.

    Args:
        min_products: Smallest number of distinct shared products kept
    """
    def mapper(line: str) -> Optional[Iterable[KeyValue]]:
        pair_product = parse_candidate_line(line)
        if pair_product is None:
            return None
        return (pair_product,)

    return Job(
        name=PASS_2_NAME,
        mapper=mapper,
        aggregator_factory=lambda pair: SharedProductFilter(pair, min_products)
    )
