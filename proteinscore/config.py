"""
Configuration and constants for the ProteinScore label scanner.
"""

# Row reconstruction: max vertical distance (normalized) to a row's anchor
ROW_VERTICAL_THRESHOLD = 0.02

# Substrings (lowercase, spaces removed) that mark a nutrition label
LABEL_KEYWORDS = ("nutritionfacts", "nutritlonfacts", "nutrition")

# Half-open plausibility ranges [low, high)
CALORIE_RANGE = (50, 10000)
PROTEIN_RANGE = (0, 1000)

# Temporal smoothing
SMOOTHING_WINDOW = 5
SMOOTHING_MIN_SAMPLES = 3

# Rating thresholds, highest first (ratio is grams of protein per 100 calories)
RATING_THRESHOLDS = (
    ("excellent", 15.0),
    ("good", 10.0),
    ("moderate", 5.0),
    ("low", 2.0),
)

RATING_TIERS = {
    "excellent": {"color": "#22C55E", "label": "Excellent"},
    "good": {"color": "#84CC16", "label": "Good"},
    "moderate": {"color": "#EAB308", "label": "Moderate"},
    "low": {"color": "#F97316", "label": "Low"},
    "poor": {"color": "#EF4444", "label": "Poor"},
}

# Capture configuration: (x, y, width, height) as fractions of the frame
REGION_OF_INTEREST = (0.15, 0.15, 0.7, 0.7)
PROCESSING_INTERVAL_SECONDS = 0.5
FADE_OUT_DELAY_SECONDS = 3.0

# OCR configuration
MIN_TEXT_HEIGHT = 0.015  # fraction of the scanned region height
MIN_OCR_CONFIDENCE = 0.5
MAX_LONG_SIDE = 1080  # cap longest edge at ~HD resolution
