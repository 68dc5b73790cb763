#!/usr/bin/env python3
"""
ProteinScore
Reads nutrition labels with OCR and rates them by grams of protein per 100 calories.
"""

from proteinscore.cli import main

if __name__ == "__main__":
    main()
