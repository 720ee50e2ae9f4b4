"""
Composite key types.

UnorderedPairKey groups user pairs regardless of construction order.
RankedScoreKey is the element type of bounded top-K containers.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class UnorderedPairKey:
    """
    Unordered pair {first, second} of identifiers.

    Always stored canonically (first < second), so the generated
    equality, hash and ordering agree: make(a, b) == make(b, a).
    Sorting pairs sorts by first identifier, then by second.
    """
    first: str
    second: str

    def __post_init__(self):
        if self.first == self.second:
            raise ValueError(f"A pair needs two distinct identifiers, got {self.first!r} twice")
        if self.first > self.second:
            raise ValueError(
                f"Pair is not canonical: {self.first!r} > {self.second!r}. "
                "Use UnorderedPairKey.make()"
            )

    @classmethod
    def make(cls, a: str, b: str) -> "UnorderedPairKey":
        """Build the canonical pair, smaller identifier first."""
        if a <= b:
            return cls(a, b)
        return cls(b, a)

    def __str__(self) -> str:
        return f"{self.first}\t{self.second}"


@dataclass(frozen=True, order=True)
class RankedScoreKey:
    """
    A product with a score.

    Ordered by score ascending, then by product_id ascending.
    Equal iff both score and product_id are equal.
    """
    score: float
    product_id: str

    def __post_init__(self):
        # Normalize ints so 5 and 5.0 hash and print the same way
        object.__setattr__(self, "score", float(self.score))

    def __str__(self) -> str:
        return f"{self.product_id}\t{self.score}"


# Design Rationale and Trade-offs:
#
# 1. Why reject non-canonical pairs instead of silently swapping?
#    - A swapped constructor call is almost always a caller bug
#    - make() is the one place that orders the identifiers
#    - Trade-off: Callers must use make() for unordered input
#
# 2. Why frozen dataclasses?
#    - Keys are hashed into group tables and heaps
#    - Generated equality and ordering follow the field order
#    - Trade-off: Slightly slower construction than plain tuples
