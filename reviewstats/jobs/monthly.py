"""
Monthly top products job.

For each month, the TOP_MONTHLY products with the highest mean score.
Output rows: (month, product_id, mean), months ascending.
"""

import logging
from typing import Iterable, Optional

import config.settings as settings
from reviewstats.aggregation.monthly import MonthlyMeanRanker, month_label
from reviewstats.engine.job import Job, KeyValue
from reviewstats.models.review import parse_review_line

logger = logging.getLogger(__name__)

JOB_NAME = "TopHighestScore"


def monthly_mapper(line: str) -> Optional[Iterable[KeyValue]]:
    """Project a review line to (month, (product_id, score))."""
    record = parse_review_line(line)
    if record is None:
        return None
    try:
        month = month_label(record.timestamp)
    except ValueError as e:
        logger.debug(f"Rejected row: {e}")
        return None
    return ((month, (record.product_id, record.score)),)


def build_monthly_job(k: int = settings.TOP_MONTHLY) -> Job:
    """
    Build the per-month top-k job.

    Args:
        k: Number of products kept per month
    """
    return Job(
        name=JOB_NAME,
        mapper=monthly_mapper,
        aggregator_factory=lambda month: MonthlyMeanRanker(month, k),
        combinable=True
    )
