"""
Per-group aggregators for ReviewStats.

- Aggregator: merge/combine/finalize contract
- BoundedTopK: size-capped max-retention container
- TopKPerKeyAggregator: top-K items per key (favourite products)
- MonthlyMeanRanker: top products by mean score within a month
- CandidatePairGenerator / SharedProductFilter: the two affinity passes
"""

from reviewstats.aggregation.affinity import CandidatePairGenerator, SharedProductFilter
from reviewstats.aggregation.base import Aggregator
from reviewstats.aggregation.bounded_topk import BoundedTopK
from reviewstats.aggregation.monthly import MonthlyMeanRanker, month_label
from reviewstats.aggregation.top_k import TopKPerKeyAggregator

__all__ = [
    "Aggregator",
    "BoundedTopK",
    "CandidatePairGenerator",
    "MonthlyMeanRanker",
    "SharedProductFilter",
    "TopKPerKeyAggregator",
    "month_label",
]
