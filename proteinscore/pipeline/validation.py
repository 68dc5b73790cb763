"""
Nutrition label detection.
"""

import logging
from typing import Iterable

from ..config import LABEL_KEYWORDS

logger = logging.getLogger(__name__)


def normalize_line(line: str) -> str:
    """Lowercase a line and strip all spaces so split words compare equal."""
    return line.lower().replace(" ", "")


def is_nutrition_label(lines: Iterable[str], keywords=LABEL_KEYWORDS) -> bool:
    """
    Check whether any line looks like a "Nutrition Facts" header.

    The gate is permissive on purpose: a false positive is caught later by
    numeric extraction, a false negative hides a real label.
    """
    for line in lines:
        if not isinstance(line, str):
            continue
        normalized = normalize_line(line)
        if any(keyword in normalized for keyword in keywords):
            logger.debug("Found nutrition label indicator: %r", line)
            return True
    logger.debug("No 'Nutrition Facts' found in text")
    return False
