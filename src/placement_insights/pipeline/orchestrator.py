"""Main report orchestrator - coordinates tier fetching, aggregation and assembly."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from placement_insights.clients.llm_client import LLMClient
from placement_insights.models.filters import Filters
from placement_insights.models.report import MarketReport
from placement_insights.pipeline.aggregator import TierAggregator, TierOutcome
from placement_insights.pipeline.assembler import assemble_report
from placement_insights.pipeline.narrative_writer import NarrativeWriter
from placement_insights.pipeline.tier_fetcher import TierFetcher

logger = logging.getLogger(__name__)


@dataclass
class ReportResult:
    """Complete result from one analyze action."""

    report: MarketReport
    outcomes: list[TierOutcome] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def failed_tiers(self) -> list[str]:
        return [o.tier for o in self.outcomes if not o.ok]


class ReportOrchestrator:
    """Runs the tier fan-out and returns one report or raises one error."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        extraction_model: str = "claude-sonnet-4-5-20250929",
        narrative_model: str = "claude-haiku-4-5-20251001",
        extraction_temperature: float = 0.3,
        synthesis_temperature: float = 0.7,
        max_tokens: int = 16000,
    ):
        self.fetcher = TierFetcher(
            llm,
            model=extraction_model,
            temperature=extraction_temperature,
            max_tokens=max_tokens,
        )
        self.narrator = NarrativeWriter(
            llm, model=narrative_model, temperature=synthesis_temperature
        )
        self.aggregator = TierAggregator(self.fetcher, self.narrator)

    async def run(
        self,
        filters: Filters,
        *,
        on_phase: callable | None = None,
    ) -> ReportResult:
        """Produce a MarketReport for ``filters``.

        Args:
            filters: Filters chosen for this analyze action.
            on_phase: Optional callback(phase_name, detail) for progress.

        Raises:
            ReportUnavailableError: every tier fetch failed.
            NarrativeSynthesisError: the overall analysis could not be written.
        """
        start = time.monotonic()

        def _notify(phase: str, detail: str = ""):
            if on_phase:
                on_phase(phase, detail)

        _notify("fetch", "Analyzing live job market by tier...")
        aggregate = await self.aggregator.aggregate(filters)
        report = assemble_report(
            aggregate.analyses, aggregate.overall_analysis, aggregate.failures
        )

        elapsed = time.monotonic() - start
        failed = [o.tier for o in aggregate.outcomes if not o.ok]
        if failed:
            logger.info("Report assembled without tiers: %s", ", ".join(failed))
        _notify(
            "done",
            f"Analyzed {len(report.tier_analyses)}/{len(aggregate.tiers)} tiers in {elapsed:.1f}s",
        )
        return ReportResult(
            report=report,
            outcomes=aggregate.outcomes,
            elapsed_seconds=elapsed,
        )
