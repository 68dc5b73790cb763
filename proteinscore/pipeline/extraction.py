"""
Calorie and protein extraction from reconstructed label lines.

Both extractors tolerate the usual OCR letter/digit confusions (o/0, i/l/1)
through character classes instead of a list of fallback patterns.
"""

import logging
import re
from typing import List, NamedTuple, Optional, Sequence

from ..config import CALORIE_RANGE, PROTEIN_RANGE

logger = logging.getLogger(__name__)

CALORIES_WORD = re.compile(r"\bca[l1][o0]r[il1]es?\b", re.IGNORECASE)
PROTEIN_VALUE = re.compile(r"pr[o0]t[ei]in\s*(\d+)\s*[a-z]?", re.IGNORECASE)
INTEGER = re.compile(r"\d+")

# Longer digit runs cannot be in either range and are too long to convert safely
MAX_DIGITS = 6


class Reading(NamedTuple):
    """One (calories, protein) pair read off a label."""

    calories: int
    protein: int

    @property
    def ratio(self) -> float:
        """Grams of protein per 100 calories."""
        if self.protein > 0 and self.calories > 0:
            return self.protein / self.calories * 100
        return 0.0


def in_range(value: int, bounds) -> bool:
    low, high = bounds
    return low <= value < high


def find_integers(line: str) -> List[int]:
    """All integer substrings of a line, left to right."""
    return [int(match) for match in INTEGER.findall(line) if len(match) <= MAX_DIGITS]


def _largest_calorie_value(line: str) -> Optional[int]:
    candidates = [n for n in find_integers(line) if in_range(n, CALORIE_RANGE)]
    return max(candidates) if candidates else None


def parse_calories(lines: Sequence[str]) -> Optional[int]:
    """
    Find the calorie count on a label.

    The first plausible number on a line containing the word "Calories" wins.
    If that line has none, the previous line and then the next line are tried,
    taking the largest plausible number there (an "Amount per serving" line
    often carries a small serving count next to the calorie figure).

    Returns:
        Calories, or None if no "Calories" line yields a value
    """
    for index, line in enumerate(lines):
        if not CALORIES_WORD.search(line):
            continue
        logger.debug("Found 'Calories' word on line: %r", line)

        for number in find_integers(line):
            if in_range(number, CALORIE_RANGE):
                logger.debug("Found calories on same line: %d", number)
                return number

        if index > 0:
            value = _largest_calorie_value(lines[index - 1])
            if value is not None:
                logger.debug("Found calories on previous line: %d", value)
                return value

        if index < len(lines) - 1:
            value = _largest_calorie_value(lines[index + 1])
            if value is not None:
                logger.debug("Found calories on next line: %d", value)
                return value

        logger.debug("No calorie value around line %d", index)
    return None


def parse_protein(lines: Sequence[str]) -> Optional[int]:
    """Grams of protein from the first "Protein <n>" match in document order."""
    for line in lines:
        for match in PROTEIN_VALUE.finditer(line):
            digits = match.group(1)
            if len(digits) > MAX_DIGITS:
                continue
            number = int(digits)
            if in_range(number, PROTEIN_RANGE):
                logger.debug("Found protein: %dg on line %r", number, line)
                return number
    return None


def parse_reading(lines: Sequence[str]) -> Optional[Reading]:
    """Extract a Reading, or None unless both calories and protein are found."""
    lines = [line for line in lines if isinstance(line, str)]
    calories = parse_calories(lines)
    protein = parse_protein(lines)
    logger.debug("Parsed calories=%s protein=%s", calories, protein)
    if calories is None or protein is None:
        return None
    return Reading(calories=calories, protein=protein)
