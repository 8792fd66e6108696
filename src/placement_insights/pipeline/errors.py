"""Error taxonomy for report acquisition.

Every error carries a single human-readable message; callers show
``str(exc)`` and nothing else.
"""

from __future__ import annotations


class ReportError(Exception):
    """Base class for failures surfaced by the report pipeline."""


class TierFetchError(ReportError):
    """One tier could not be analyzed. Tolerated by the aggregator."""

    def __init__(self, tier: str, reason: str):
        self.tier = tier
        self.reason = reason
        super().__init__(f"{tier}: {reason}")


class ReportUnavailableError(ReportError):
    """No tier could be analyzed at all."""

    def __init__(self, failures: list[TierFetchError] | None = None):
        self.failures = list(failures or [])
        super().__init__(
            "Failed to generate market report. The AI model might be busy or "
            "returned an invalid format. Please try again."
        )


class NarrativeSynthesisError(ReportError):
    """The overall cross-tier narrative could not be produced."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            "Failed to summarize the market report across tiers. Please try again."
        )
