"""Tier-based job-market reports for college placement offices."""

__version__ = "0.1.0"
