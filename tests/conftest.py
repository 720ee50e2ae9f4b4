"""
Shared fixtures for ReviewStats tests.
"""

import pytest

from reviewstats.engine.local_runner import LocalJobRunner

# 2012-03-15 12:00:00 UTC
MARCH_2012 = 1331812800


def build_review_line(product_id, user_id, score, timestamp=MARCH_2012, review_id="1"):
    """Build a 10-field tab-delimited review line."""
    fields = [
        str(review_id),
        product_id,
        user_id,
        f"profile of {user_id}",
        "0",
        "0",
        str(score),
        str(timestamp),
        "summary",
        "Some review text",
    ]
    return "\t".join(fields)


@pytest.fixture
def review_line():
    """Factory for valid review lines."""
    return build_review_line


@pytest.fixture
def runner():
    """Multi-partition runner with shuffled group values."""
    return LocalJobRunner(num_workers=4, num_partitions=3, shuffle_seed=7)
