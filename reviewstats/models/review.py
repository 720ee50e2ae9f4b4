"""
Review data model.

Represents one validated row of the tab-delimited review dump.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

import config.settings as settings

logger = logging.getLogger(__name__)

# Optional sign followed by ASCII digits
INTEGER_FIELD = re.compile(r"[+-]?[0-9]+")


class ReviewColumns:
    """Positions of the fields in an input row."""
    ID = 0
    PROD_ID = 1  # unique identifier for the product
    USER_ID = 2  # unique identifier for the user
    PROFILE = 3
    HELP_NUM = 4  # number of users who found the review helpful
    HELP_DEN = 5  # number of users who graded the review
    SCORE = 6  # rating between 1 and 5
    TIME = 7  # unix time, in seconds
    SUMMARY = 8
    TEXT = 9


@dataclass(frozen=True)
class ReviewRecord:
    """
    A validated review row.
    Only the fields consumed by the analytics are kept.
    """
    product_id: str
    user_id: str
    score: int  # expected 1-5, not enforced
    timestamp: int  # unix epoch seconds

    @classmethod
    def from_line(cls, line: str) -> Optional["ReviewRecord"]:
        """
        Parse one delimited input line.

        Args:
            line: Raw text line, with or without its line terminator

        Returns:
            ReviewRecord, or None if the line is malformed
        """
        cols = line.rstrip("\r\n").split(settings.FIELD_DELIMITER)
        if len(cols) != settings.FIELD_COUNT:
            logger.debug(f"Rejected row with {len(cols)} fields")
            return None

        score_field = cols[ReviewColumns.SCORE]
        time_field = cols[ReviewColumns.TIME]
        if not (INTEGER_FIELD.fullmatch(score_field) and INTEGER_FIELD.fullmatch(time_field)):
            logger.debug(
                f"Rejected row with score={score_field!r} time={time_field!r}"
            )
            return None

        return cls(
            product_id=cols[ReviewColumns.PROD_ID],
            user_id=cols[ReviewColumns.USER_ID],
            score=int(score_field),
            timestamp=int(time_field)
        )


def parse_review_line(line: str) -> Optional[ReviewRecord]:
    """Parse a review line, returning None for malformed rows."""
    return ReviewRecord.from_line(line)
