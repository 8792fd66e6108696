"""Tier Fetcher - requests and validates one tier's job-market analysis."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from placement_insights.clients.llm_client import LLMClient
from placement_insights.models.filters import CANONICAL_TIERS, Filters
from placement_insights.models.report import TierAnalysis
from placement_insights.pipeline.errors import TierFetchError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an expert job market analyst for India, tasked with providing a strategic, \
tier-based analysis of the current, live entry-level job market. Your entire response \
must be a single, valid JSON object that strictly adheres to the provided schema. \
Do not output any markdown."""

FOCUS_DOMAINS = (
    "Business Process Outsourcing (BPO), Banking, FinTech, "
    "IT (specifically BPO-related roles), and Logistics"
)


def build_role_instruction(filters: Filters) -> str:
    if filters.all_roles:
        return (
            "Identify a comprehensive list of 25-50 of the most common entry-level job "
            f"roles for a {filters.qualification} graduate in the {filters.sector} sector. "
            "The goal is a large, detailed dataset. Crucially, you must focus specifically "
            f"on roles within these domains: **{FOCUS_DOMAINS}**. Your target is to find a "
            "large number of roles, aiming for over 100 role-city combinations if the data exists."
        )
    return (
        f'Conduct a focused analysis exclusively for the **"{filters.job_role}"** position '
        f"suitable for a {filters.qualification} graduate. Do not include any other roles; "
        "commonRoles must contain exactly this one role."
    )


def build_tier_prompt(filters: Filters, tier: str) -> str:
    """Build the extraction instructions for a single tier."""
    return f"""\
**User Filters:**
- **Qualification:** {filters.qualification}
- **Sector Focus:** {filters.sector}
- **Location Tier to Analyze:** {tier}
- **Specific Job Role:** {filters.job_role}

**Your Instructions:**
1.  **Analyze this tier only:** Report on "{tier}" and set the `tier` field to exactly "{tier}".
2.  **Job Roles:** {build_role_instruction(filters)}
3.  **Find Quantitative Data:** For each role, you MUST find the top 3-5 cities within this \
tier where the role is prevalent. For each city, provide an **estimated number of current, \
live job openings** as a string like "50-100" or "150+".
4.  **Detail Structured Skills:** For each role, break skills into **technicalSkills**, \
**softSkills**, and **languageRequirements**. Be specific (e.g., 'English (Fluent, Written & Spoken)').
5.  **Find Companies:** For each role, list the top 5-10 hiring companies in this tier.
6.  **Estimate Salary:** Provide an estimated entry-level monthly salary range with currency "INR".
7.  **Provide CORRECT Platform Links:** For each role, provide 2-4 direct search links to major \
Indian job platforms (e.g., Naukri.com, LinkedIn, Indeed.co.in). The URLs **MUST be valid, \
clickable, and lead directly to a search results page** pre-filtered with the role title and location.
8.  **Summarize:** Write a short summary of the job landscape within this tier."""


class TierFetcher:
    def __init__(
        self,
        llm: LLMClient,
        model: str = "claude-sonnet-4-5-20250929",
        temperature: float = 0.3,
        max_tokens: int = 16000,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def fetch(self, filters: Filters, tier: str) -> TierAnalysis:
        """Fetch one tier's analysis; raise TierFetchError on any failure."""
        if tier not in CANONICAL_TIERS:
            raise TierFetchError(tier, "unknown location tier")

        try:
            analysis = await self.llm.extract_structured(
                prompt=build_tier_prompt(filters, tier),
                schema=TierAnalysis,
                system=SYSTEM_PROMPT,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except ValidationError as exc:
            raise TierFetchError(
                tier, f"response did not match schema ({exc.error_count()} errors)"
            ) from exc
        except ValueError as exc:
            raise TierFetchError(tier, f"unparseable response: {exc}") from exc
        except Exception as exc:
            logger.debug("Transport failure for %s", tier, exc_info=True)
            raise TierFetchError(tier, f"request failed: {exc}") from exc

        if analysis.tier != tier:
            raise TierFetchError(tier, f"response labelled as {analysis.tier!r}")
        return analysis
