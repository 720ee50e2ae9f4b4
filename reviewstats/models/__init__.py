"""
Data models for ReviewStats.

- ReviewRecord: one validated input row
- UnorderedPairKey / RankedScoreKey: composite grouping and ranking keys
- ProductMeanAccumulator: per-product running score state
"""

from reviewstats.models.accumulator import ProductMeanAccumulator
from reviewstats.models.keys import RankedScoreKey, UnorderedPairKey
from reviewstats.models.review import ReviewColumns, ReviewRecord, parse_review_line

__all__ = [
    "ProductMeanAccumulator",
    "RankedScoreKey",
    "UnorderedPairKey",
    "ReviewColumns",
    "ReviewRecord",
    "parse_review_line",
]
