"""
Unit tests for the local grouping engine.
"""

from unittest.mock import Mock

import pytest
from reviewstats.aggregation.base import Aggregator
from reviewstats.engine.job import Job
from reviewstats.engine.local_runner import LocalJobRunner, run_chained
from reviewstats.errors import BarrierError


class SumAggregator(Aggregator):
    """Sums the values of a group."""

    combinable = True

    def __init__(self, key):
        super().__init__(key)
        self.total = 0

    def _merge(self, value):
        self.total += value

    def _combine(self, other):
        self.total += other.total

    def _finalize(self):
        return [(self.key, self.total)]


class ListAggregator(Aggregator):
    """Records values in arrival order."""

    def __init__(self, key):
        super().__init__(key)
        self.values = []

    def _merge(self, value):
        self.values.append(value)

    def _finalize(self):
        return [(self.key, tuple(self.values))]


def word_mapper(line):
    if line.startswith("#"):
        return None
    return [(word, 1) for word in line.split()]


def test_groups_and_sorts_by_key():
    """Test word counting across partitions, output sorted by key."""
    runner = LocalJobRunner(num_workers=2, num_partitions=3)
    lines = ["b a", "c a", "a", "# comment", "b"]

    result = runner.run(Job("count", word_mapper, SumAggregator), lines)

    assert result.success
    assert result.rows == [("a", 3), ("b", 2), ("c", 1)]
    assert result.counters == {"input": 5, "rejected": 1, "map_output": 6, "groups": 3, "output": 3}


@pytest.mark.parametrize("combinable", [True, False])
def test_combining_does_not_change_result(combinable):
    """Test that pre-combining is transparent for a monoid reduction."""
    runner = LocalJobRunner(num_workers=3, num_partitions=4, shuffle_seed=11)
    lines = ["x y z"] * 10 + ["y"] * 5

    result = runner.run(Job("count", word_mapper, SumAggregator, combinable=combinable), lines)

    assert result.rows == [("x", 10), ("y", 15), ("z", 10)]


def test_shuffle_seed_permutes_group_values():
    """Test that values can reach the reducer in any order."""
    lines = [f"k {i}" for i in range(20)]

    def mapper(line):
        key, value = line.split()
        return [(key, int(value))]

    ordered = LocalJobRunner(num_workers=1, num_partitions=1).run(Job("list", mapper, ListAggregator), lines)
    shuffled = LocalJobRunner(num_workers=1, num_partitions=1, shuffle_seed=5).run(Job("list", mapper, ListAggregator), lines)

    assert ordered.rows[0][1] == tuple(range(20))
    assert shuffled.rows[0][1] != tuple(range(20))
    assert sorted(shuffled.rows[0][1]) == list(range(20))


def test_empty_input():
    """Test that no input yields a successful, empty result."""
    result = LocalJobRunner().run(Job("count", word_mapper, SumAggregator), [])

    assert result.success
    assert result.rows == []
    assert result.counters["input"] == 0


def test_failing_task_fails_job():
    """Test that an exception in a task is reported as a failed job."""
    def broken_mapper(line):
        raise RuntimeError("disk on fire")

    result = LocalJobRunner().run(Job("broken", broken_mapper, SumAggregator), ["a"])

    assert not result.success
    assert "disk on fire" in result.error
    assert result.rows == []


def test_invalid_runner_configuration():
    """Test that worker and partition counts must be positive."""
    with pytest.raises(ValueError):
        LocalJobRunner(num_workers=0)
    with pytest.raises(ValueError):
        LocalJobRunner(num_partitions=0)


def test_chained_jobs_pass_materialized_output():
    """Test that the second pass reads what the first pass materialized."""
    runner = LocalJobRunner(num_workers=2, num_partitions=2)
    first = Job("first", word_mapper, SumAggregator)
    second = Job("second", lambda row: [(row[1], row[0])], ListAggregator)

    first_result, second_result = run_chained(runner, first, ["a b", "a"], second, lambda r: r.rows)

    assert first_result.rows == [("a", 2), ("b", 1)]
    assert second_result.rows == [(1, ("b",)), (2, ("a",))]


def test_barrier_stops_second_pass():
    """Test that a failed first pass never starts the second."""
    def broken_mapper(line):
        raise RuntimeError("lost worker")

    materialize = Mock()
    second_mapper = Mock()
    runner = LocalJobRunner()

    with pytest.raises(BarrierError, match="first") as exc:
        run_chained(
            runner,
            Job("first", broken_mapper, SumAggregator),
            ["a"],
            Job("second", second_mapper, ListAggregator),
            materialize
        )

    assert exc.value.result.name == "first"
    assert not exc.value.result.success
    materialize.assert_not_called()
    second_mapper.assert_not_called()


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
