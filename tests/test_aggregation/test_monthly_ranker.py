"""
Unit tests for month labels and MonthlyMeanRanker.
"""

import random

import pytest
from reviewstats.aggregation.monthly import MonthlyMeanRanker, month_label


def test_month_label_utc():
    """Test "YYYY-MM" derivation from epoch seconds."""
    assert month_label(0) == "1970-01"
    assert month_label(1331812800) == "2012-03"
    # 2012-03-31 23:59:59 and 2012-04-01 00:00:00 UTC
    assert month_label(1333238399) == "2012-03"
    assert month_label(1333238400) == "2012-04"


def test_month_labels_sort_chronologically():
    """Test that label order is chronological order."""
    timestamps = [1333238400, 0, 1331812800, 946684800]
    labels = [month_label(ts) for ts in sorted(timestamps)]

    assert labels == sorted(labels)


def test_month_label_out_of_range():
    """Test that unrepresentable timestamps raise ValueError."""
    with pytest.raises(ValueError):
        month_label(10 ** 18)


def test_ranks_by_mean():
    """Test that P1 (5, 5) ranks above P2 (4, 4, 4)."""
    ranker = MonthlyMeanRanker("2012-03", 5)
    for value in [("P2", 4), ("P1", 5), ("P3", 1), ("P2", 4), ("P1", 5), ("P2", 4), ("P3", 3)]:
        ranker.merge(value)

    rows = ranker.finalize()

    assert rows == [("2012-03", "P1", 5.0), ("2012-03", "P2", 4.0), ("2012-03", "P3", 2.0)]


def test_equal_means_by_product_id():
    """Test that equal means are ordered by ascending product id."""
    ranker = MonthlyMeanRanker("2012-03", 5)
    for value in [("PB", 4), ("PA", 5), ("PA", 3), ("PC", 4)]:
        ranker.merge(value)

    rows = ranker.finalize()

    assert [product for _, product, _ in rows] == ["PA", "PB", "PC"]


def test_keeps_top_k():
    """Test that only the first k products are emitted."""
    ranker = MonthlyMeanRanker("2012-03", 5)
    for i in range(8):
        ranker.merge((f"P{i}", 1 + i % 5))

    rows = ranker.finalize()

    assert len(rows) == 5
    assert rows[0] == ("2012-03", "P4", 5.0)


def test_order_independent_and_combinable():
    """Test that arrival order and partial combining do not change the ranking."""
    rng = random.Random(3)
    values = [(f"P{rng.randint(0, 9)}", rng.randint(1, 5)) for _ in range(200)]

    direct = MonthlyMeanRanker("2012-03", 5)
    for value in values:
        direct.merge(value)
    expected = direct.finalize()

    rng.shuffle(values)
    combined = MonthlyMeanRanker("2012-03", 5)
    for start in range(0, len(values), 37):
        partial = MonthlyMeanRanker("2012-03", 5)
        for value in values[start:start + 37]:
            partial.merge(value)
        combined.combine(partial)

    assert combined.finalize() == expected


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
