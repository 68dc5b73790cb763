"""
Protein score tiers.
"""

from enum import Enum

from ..config import RATING_THRESHOLDS, RATING_TIERS


class RatingTier(str, Enum):
    """Qualitative rating of a protein-per-100-calories ratio."""

    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    LOW = "low"
    POOR = "poor"

    @property
    def color(self) -> str:
        return RATING_TIERS[self.value]["color"]

    @property
    def label(self) -> str:
        return RATING_TIERS[self.value]["label"]


def classify(ratio: float) -> RatingTier:
    """Map a ratio to its tier; thresholds are inclusive lower bounds."""
    for name, threshold in RATING_THRESHOLDS:
        if ratio >= threshold:
            return RatingTier(name)
    return RatingTier.POOR
