"""
Top favourite products job.

For each user, the TOP_FAVOURITES products with the highest score.
A single pass is enough: one aggregator sees every review of a user.
Output rows: (user_id, product_id, score).
"""

from typing import Iterable, Optional

import config.settings as settings
from reviewstats.aggregation.top_k import TopKPerKeyAggregator
from reviewstats.engine.job import Job, KeyValue
from reviewstats.models.keys import RankedScoreKey
from reviewstats.models.review import parse_review_line

JOB_NAME = "TopFavouriteProducts"


def favourites_mapper(line: str) -> Optional[Iterable[KeyValue]]:
    """Project a review line to (user_id, RankedScoreKey)."""
    record = parse_review_line(line)
    if record is None:
        return None
    return ((record.user_id, RankedScoreKey(record.score, record.product_id)),)


def build_favourites_job(k: int = settings.TOP_FAVOURITES) -> Job:
    """
    Build the per-user top-k job.

    Args:
        k: Number of products kept per user
    """
    return Job(
        name=JOB_NAME,
        mapper=favourites_mapper,
        aggregator_factory=lambda user_id: TopKPerKeyAggregator(user_id, k),
        combinable=True
    )
