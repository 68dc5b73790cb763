"""
Label-text interpretation pipeline: OCR fragments in, rated readings out.
"""

from .extraction import Reading, parse_calories, parse_protein, parse_reading
from .layout import TextFragment, fragments_from_boxes, group_rows
from .main import LabelPipeline, ScanResult
from .rating import RatingTier, classify
from .smoothing import ReadingSmoother
from .validation import is_nutrition_label

__all__ = [
    "LabelPipeline",
    "Reading",
    "ReadingSmoother",
    "RatingTier",
    "ScanResult",
    "TextFragment",
    "classify",
    "fragments_from_boxes",
    "group_rows",
    "is_nutrition_label",
    "parse_calories",
    "parse_protein",
    "parse_reading",
]
