"""
Layout analysis: rebuild the visual rows of a label from scattered OCR fragments.
"""

import logging
import math
from numbers import Real
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from ..config import MIN_OCR_CONFIDENCE, MIN_TEXT_HEIGHT, ROW_VERTICAL_THRESHOLD
from .utils import poly_height, x_start, y_center

logger = logging.getLogger(__name__)

ORIGIN_BOTTOM = "bottom"
ORIGIN_TOP = "top"


class TextFragment(NamedTuple):
    """One OCR text run with its normalized position in the scanned region."""

    text: str
    vertical_center: float
    horizontal_start: float


def _is_coordinate(value) -> bool:
    if not isinstance(value, Real) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except (OverflowError, TypeError):
        return False


def _usable(fragment) -> bool:
    try:
        text, vertical, horizontal = fragment
    except (TypeError, ValueError):
        return False
    return (
        isinstance(text, str) and _is_coordinate(vertical) and _is_coordinate(horizontal)
    )


def group_rows(
    fragments: Iterable[TextFragment],
    threshold: float = ROW_VERTICAL_THRESHOLD,
    origin: str = ORIGIN_BOTTOM,
) -> List[str]:
    """
    Group OCR fragments into text lines ordered from the top of the label down.

    Fragments are walked once in visual top-to-bottom order. A fragment joins
    the current row when its vertical distance to the row's anchor (the first
    fragment placed in it) is below ``threshold``; otherwise it opens a new
    row. Rows are never merged or revisited afterwards.

    Args:
        fragments: TextFragments from one OCR pass, in any order
        threshold: Max vertical distance to the row anchor (normalized units)
        origin: "bottom" if larger vertical values are higher on the image
            (Vision-style coordinates), "top" for top-left image coordinates

    Returns:
        List of row strings, fragments joined left to right by a single space
    """
    items = []
    for fragment in fragments:
        if _usable(fragment):
            items.append(TextFragment(*fragment))
        else:
            logger.debug("Skipping malformed fragment: %r", fragment)

    if not items:
        return []

    if origin == ORIGIN_TOP:
        ordered = sorted(items, key=lambda f: f.vertical_center)
    else:
        ordered = sorted(items, key=lambda f: -f.vertical_center)

    rows: List[List[TextFragment]] = []
    for item in ordered:
        if rows and abs(item.vertical_center - rows[-1][0].vertical_center) < threshold:
            rows[-1].append(item)
        else:
            rows.append([item])

    lines = [
        " ".join(f.text for f in sorted(row, key=lambda f: f.horizontal_start))
        for row in rows
    ]
    logger.debug("Grouped %d fragments into %d rows", len(items), len(lines))
    return lines


def fragments_from_boxes(
    boxes: Sequence,
    texts: Sequence[str],
    scores: Optional[Sequence[Optional[float]]],
    image_size: Tuple[int, int],
    min_text_height: float = MIN_TEXT_HEIGHT,
    min_confidence: float = MIN_OCR_CONFIDENCE,
) -> List[TextFragment]:
    """
    Convert pixel-space OCR polygons into normalized TextFragments.

    Image coordinates have their origin at the top-left; the fragments use the
    bottom-left convention, so the vertical center is flipped.

    Args:
        boxes: Polygons as lists of [x, y] points (pixels)
        texts: Recognized text for each polygon
        scores: Optional confidence for each polygon
        image_size: (width, height) of the image the polygons refer to

    Returns:
        List of TextFragments, empty or tiny or low-confidence runs dropped
    """
    width, height = image_size
    if not width or not height:
        return []

    fragments = []
    for i, box in enumerate(boxes):
        text = texts[i] if i < len(texts) else ""
        if not box or not text or not str(text).strip():
            continue
        score = scores[i] if scores and i < len(scores) else None
        if score is not None and score < min_confidence:
            logger.debug("Dropping low-confidence text %r (%.2f)", text, score)
            continue
        if poly_height(box) / height < min_text_height:
            logger.debug("Dropping undersized text %r", text)
            continue
        fragments.append(
            TextFragment(
                text=str(text),
                vertical_center=1.0 - y_center(box) / height,
                horizontal_start=x_start(box) / width,
            )
        )
    return fragments

