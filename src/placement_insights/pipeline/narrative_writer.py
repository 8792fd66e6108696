"""Narrative Writer - synthesizes the cross-tier overall analysis."""

from __future__ import annotations

from placement_insights.clients.llm_client import LLMClient
from placement_insights.models.filters import Filters
from placement_insights.models.report import TierAnalysis
from placement_insights.pipeline.errors import NarrativeSynthesisError

SYSTEM_PROMPT = """\
You are an expert job market analyst for India. You write concise, strategic \
overviews for a college placement office. Answer with a single plain-text \
paragraph, no headings, lists or markdown."""


def build_narrative_prompt(filters: Filters, analyses: list[TierAnalysis]) -> str:
    """Only tier labels and summaries go into the prompt, never role data."""
    summaries = "\n".join(f"- {a.tier}: {a.summary}" for a in analyses)
    return f"""\
Entry-level job market for a {filters.qualification} graduate \
(sector: {filters.sector}, role: {filters.job_role}).

Tier summaries:
{summaries}

Write one paragraph describing the overall trends across these tiers: where \
demand concentrates, how opportunities differ between tiers, and what a \
graduate should prioritise."""


class NarrativeWriter:
    def __init__(
        self,
        llm: LLMClient,
        model: str = "claude-haiku-4-5-20251001",
        temperature: float = 0.7,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature

    async def write(self, filters: Filters, analyses: list[TierAnalysis]) -> str:
        """Return the overall analysis paragraph or raise NarrativeSynthesisError."""
        try:
            text = await self.llm.generate_text(
                prompt=build_narrative_prompt(filters, analyses),
                system=SYSTEM_PROMPT,
                model=self.model,
                temperature=self.temperature,
            )
        except Exception as exc:
            raise NarrativeSynthesisError(str(exc)) from exc
        if not text:
            raise NarrativeSynthesisError("empty response")
        return text
