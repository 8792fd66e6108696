"""Aggregator - concurrent per-tier fan-out with partial-failure tolerance."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from placement_insights.models.filters import Filters, derive_tiers
from placement_insights.models.report import TierAnalysis
from placement_insights.pipeline.errors import TierFetchError
from placement_insights.pipeline.narrative_writer import NarrativeWriter
from placement_insights.pipeline.tier_fetcher import TierFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierOutcome:
    """Settled result of one tier fetch: exactly one of analysis/error is set."""

    tier: str
    analysis: TierAnalysis | None = None
    error: TierFetchError | None = None

    @property
    def ok(self) -> bool:
        return self.analysis is not None


@dataclass
class AggregateResult:
    outcomes: list[TierOutcome]
    overall_analysis: str | None = None
    tiers: list[str] = field(default_factory=list)

    @property
    def analyses(self) -> list[TierAnalysis]:
        return [o.analysis for o in self.outcomes if o.ok]

    @property
    def failures(self) -> list[TierFetchError]:
        return [o.error for o in self.outcomes if not o.ok]


class TierAggregator:
    def __init__(self, fetcher: TierFetcher, narrator: NarrativeWriter):
        self.fetcher = fetcher
        self.narrator = narrator

    async def fan_out(self, filters: Filters, tiers: list[str]) -> list[TierOutcome]:
        """Fetch every tier concurrently and wait for all of them to settle.

        Outcomes come back in the order of ``tiers``.
        """
        results = await asyncio.gather(
            *(self.fetcher.fetch(filters, tier) for tier in tiers),
            return_exceptions=True,
        )
        outcomes = []
        for tier, result in zip(tiers, results):
            if isinstance(result, TierAnalysis):
                outcomes.append(TierOutcome(tier=tier, analysis=result))
                continue
            if not isinstance(result, Exception):
                # CancelledError, KeyboardInterrupt, SystemExit
                raise result
            if not isinstance(result, TierFetchError):
                result = TierFetchError(tier, f"unexpected error: {result!r}")
            logger.warning("Tier analysis failed for %s: %s", tier, result.reason)
            outcomes.append(TierOutcome(tier=tier, error=result))
        return outcomes

    async def aggregate(self, filters: Filters) -> AggregateResult:
        """Fan out over the derived tiers, then synthesize the overall narrative.

        Synthesis is skipped when no tier succeeded. A synthesis failure
        propagates as NarrativeSynthesisError.
        """
        tiers = derive_tiers(filters)
        outcomes = await self.fan_out(filters, tiers)
        result = AggregateResult(outcomes=outcomes, tiers=tiers)
        logger.info(
            "Tier fan-out settled: %d/%d succeeded", len(result.analyses), len(tiers)
        )
        if result.analyses:
            result.overall_analysis = await self.narrator.write(filters, result.analyses)
        return result
