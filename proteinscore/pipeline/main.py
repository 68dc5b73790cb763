"""
Label-reading pipeline for one OCR pass.

This module ties the stages together:
1. Row reconstruction from positioned OCR fragments
2. "Nutrition Facts" gate
3. Calorie and protein extraction
4. Rolling-median smoothing across passes
5. Protein score rating
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..config import ROW_VERTICAL_THRESHOLD
from .extraction import Reading, parse_reading
from .layout import ORIGIN_BOTTOM, TextFragment, group_rows
from .rating import RatingTier, classify
from .smoothing import ReadingSmoother
from .validation import is_nutrition_label

logger = logging.getLogger(__name__)


class ScanResult:
    """A stabilized reading and everything derived from it for display."""

    def __init__(self, reading: Reading, raw_reading: Reading, lines: List[str]):
        self.reading = reading
        self.raw_reading = raw_reading
        self.lines = lines
        self.ratio = reading.ratio
        self.tier: RatingTier = classify(self.ratio)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary format."""
        return {
            "calories": self.reading.calories,
            "protein": self.reading.protein,
            "ratio": round(self.ratio, 2),
            "tier": self.tier.value,
            "label": self.tier.label,
            "color": self.tier.color,
            "raw": {
                "calories": self.raw_reading.calories,
                "protein": self.raw_reading.protein,
            },
        }

    def __repr__(self) -> str:
        return (
            f"ScanResult(calories={self.reading.calories}, "
            f"protein={self.reading.protein}, ratio={self.ratio:.1f}, "
            f"tier={self.tier.value})"
        )


class LabelPipeline:
    """Turns OCR passes into stabilized, rated readings."""

    def __init__(
        self,
        smoother: Optional[ReadingSmoother] = None,
        row_threshold: float = ROW_VERTICAL_THRESHOLD,
        origin: str = ORIGIN_BOTTOM,
    ):
        """
        Initialize the pipeline.

        Args:
            smoother: Smoother holding the reading history (a new one by default)
            row_threshold: Vertical distance that keeps fragments on one row
            origin: Vertical coordinate convention of incoming fragments
        """
        self.smoother = smoother if smoother is not None else ReadingSmoother()
        self.row_threshold = row_threshold
        self.origin = origin

        self.stats = {
            "passes": 0,
            "not_a_label": 0,
            "incomplete": 0,
            "readings": 0,
        }

    def process(self, fragments: Iterable[TextFragment]) -> Optional[ScanResult]:
        """
        Run one OCR pass through the pipeline.

        Args:
            fragments: Positioned OCR fragments, in any order

        Returns:
            ScanResult, or None when this pass did not yield a full reading
        """
        lines = group_rows(fragments, threshold=self.row_threshold, origin=self.origin)
        return self.process_lines(lines)

    def process_lines(self, lines: List[str]) -> Optional[ScanResult]:
        """Run one pass whose text has already been grouped into lines."""
        self.stats["passes"] += 1

        if not lines:
            self.stats["not_a_label"] += 1
            return None

        for index, line in enumerate(lines):
            logger.debug("Row %d: %s", index, line)

        if not is_nutrition_label(lines):
            self.stats["not_a_label"] += 1
            return None

        raw_reading = parse_reading(lines)
        if raw_reading is None:
            logger.debug("Missing calories or protein, no reading this pass")
            self.stats["incomplete"] += 1
            return None

        reading = self.smoother.add(raw_reading)
        self.stats["readings"] += 1
        result = ScanResult(reading, raw_reading, list(lines))
        logger.debug("Pass produced %r", result)
        return result

    def reset(self):
        """Clear the smoothing history."""
        self.smoother.reset()
