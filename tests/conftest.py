"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from proteinscore.pipeline import TextFragment  # noqa: E402


def rows_as_fragments(lines, top=0.9, spacing=0.05):
    """Lay out lines as single fragments, top to bottom, bottom-left origin."""
    return [
        TextFragment(text=line, vertical_center=top - i * spacing, horizontal_start=0.1)
        for i, line in enumerate(lines)
    ]


@pytest.fixture
def basic_label_lines():
    return ["Nutrition Facts", "Calories 140", "Protein 20g"]


@pytest.fixture
def scattered_label_fragments():
    """A label as OCR returns it: value and name split, in no particular order."""
    return [
        TextFragment("20g", 0.401, 0.80),
        TextFragment("Calories", 0.700, 0.10),
        TextFragment("Nutrition Facts", 0.900, 0.10),
        TextFragment("Protein", 0.405, 0.10),
        TextFragment("140", 0.690, 0.75),
        TextFragment("Total Fat 8g", 0.550, 0.10),
    ]
