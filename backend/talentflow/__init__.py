"""Talentflow - job posting and application lifecycle backend"""

__version__ = "1.0.0"
