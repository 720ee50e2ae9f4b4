"""
Unit tests for TopKPerKeyAggregator.
"""

import pytest
from reviewstats.aggregation.top_k import TopKPerKeyAggregator
from reviewstats.errors import AggregatorStateError
from reviewstats.models.keys import RankedScoreKey

ELEVEN_SCORES = [5, 4, 3, 5, 2, 5, 4, 3, 5, 1, 4]


def test_drops_lowest_of_eleven():
    """Test that 11 reviews with K=10 keep the 10 highest, descending."""
    aggregator = TopKPerKeyAggregator("U1", 10)
    for i, score in enumerate(ELEVEN_SCORES):
        aggregator.merge(RankedScoreKey(score, f"P{i:02d}"))

    rows = aggregator.finalize()

    assert len(rows) == 10
    assert [score for _, _, score in rows] == sorted(
        (float(s) for s in ELEVEN_SCORES if s != 1), reverse=True
    )
    assert all(user == "U1" for user, _, _ in rows)
    assert "P09" not in [product for _, product, _ in rows]


def test_equal_scores_listed_by_product_id():
    """Test that ties are emitted in ascending product id order."""
    aggregator = TopKPerKeyAggregator("U1", 10)
    for product in ["P3", "P1", "P2"]:
        aggregator.merge(RankedScoreKey(5, product))
    aggregator.merge(RankedScoreKey(4, "P0"))

    rows = aggregator.finalize()

    assert rows == [("U1", "P1", 5.0), ("U1", "P2", 5.0), ("U1", "P3", 5.0), ("U1", "P0", 4.0)]


def test_combine_partials():
    """Test that pre-combined partial aggregators give the direct result."""
    items = [RankedScoreKey(score, f"P{i:02d}") for i, score in enumerate(ELEVEN_SCORES)]
    direct = TopKPerKeyAggregator("U1", 3)
    for item in items:
        direct.merge(item)

    final = TopKPerKeyAggregator("U1", 3)
    for chunk in (items[:4], items[4:5], items[5:]):
        partial = TopKPerKeyAggregator("U1", 3)
        for item in chunk:
            partial.merge(item)
        final.combine(partial)

    assert final.finalize() == direct.finalize()


def test_combine_other_key_rejected():
    """Test that partials of another group cannot be combined."""
    with pytest.raises(ValueError):
        TopKPerKeyAggregator("U1", 3).combine(TopKPerKeyAggregator("U2", 3))


def test_finalize_only_once():
    """Test that the aggregator is closed after finalize."""
    aggregator = TopKPerKeyAggregator("U1", 3)
    aggregator.merge(RankedScoreKey(5, "P1"))
    aggregator.finalize()

    with pytest.raises(AggregatorStateError):
        aggregator.finalize()
    with pytest.raises(AggregatorStateError):
        aggregator.merge(RankedScoreKey(4, "P2"))


def test_empty_group_has_no_rows():
    """Test that a group without items emits nothing."""
    assert TopKPerKeyAggregator("U1", 10).finalize() == []


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
