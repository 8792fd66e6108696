"""Report Assembler - packages successful tiers into a MarketReport."""

from __future__ import annotations

from placement_insights.models.report import MarketReport, TierAnalysis
from placement_insights.pipeline.errors import ReportUnavailableError, TierFetchError


def assemble_report(
    analyses: list[TierAnalysis],
    overall_analysis: str | None,
    failures: list[TierFetchError] | None = None,
) -> MarketReport:
    """Build the final report, or raise when no tier was analyzed at all.

    Tiers whose role lists are empty still count as analyzed; such a report
    is valid and renders as "no results".
    """
    if not analyses:
        raise ReportUnavailableError(failures)
    if overall_analysis is None:
        raise ValueError("overall_analysis is required when tiers succeeded")
    return MarketReport(overall_analysis=overall_analysis, tier_analyses=list(analyses))
