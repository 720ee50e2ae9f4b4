"""
Job definition and result types.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Tuple

from reviewstats.aggregation.base import Aggregator, Row

KeyValue = Tuple[Hashable, Any]
Mapper = Callable[[Any], Optional[Iterable[KeyValue]]]
AggregatorFactory = Callable[[Hashable], Aggregator]


@dataclass
class Job:
    """
    A single grouping pass.

    mapper(item) projects one input item to zero or more (key, value)
    pairs. It returns None when the item is malformed (counted as
    rejected) and an empty iterable when the item is filtered out.

    aggregator_factory(key) builds the aggregator owning one group.
    When combinable is True the runner pre-combines values per input
    partition before the shuffle.
    """
    name: str
    mapper: Mapper
    aggregator_factory: AggregatorFactory
    combinable: bool = False


@dataclass
class JobResult:
    """Outcome of one job run."""
    name: str
    success: bool
    rows: List[Row] = field(default_factory=list)
    counters: Dict[str, int] = field(default_factory=dict)
    elapsed_seconds: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict (without the rows)."""
        return {
            "name": self.name,
            "success": self.success,
            "counters": self.counters,
            "elapsed_seconds": self.elapsed_seconds,
            "error": self.error
        }
