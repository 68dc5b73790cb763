"""
ProteinScore: read nutrition labels and rate their protein per 100 calories.
"""

__version__ = "1.0.0"
