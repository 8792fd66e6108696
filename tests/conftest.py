"""Shared test fixtures."""

from __future__ import annotations

import copy
from unittest.mock import AsyncMock

import pytest

from placement_insights.clients.llm_client import LLMClient, LLMResponse
from placement_insights.models.filters import Filters
from placement_insights.models.report import TierAnalysis


def make_role_json(name: str = "Customer Support Executive", **overrides) -> dict:
    role = {
        "roleName": name,
        "roleDescription": "Handles inbound customer queries over phone and chat.",
        "skillSet": {
            "technicalSkills": ["MS Excel", "Typing Speed 40 WPM"],
            "softSkills": ["Active Listening", "Problem-Solving"],
            "languageRequirements": ["English - Fluent", "Hindi - Spoken"],
        },
        "platforms": [
            {
                "platformName": "Naukri",
                "searchLink": "https://www.naukri.com/customer-support-executive-jobs-in-mumbai",
            },
            {
                "platformName": "LinkedIn",
                "searchLink": "https://www.linkedin.com/jobs/search/?keywords=customer%20support&location=Mumbai",
            },
        ],
        "hiringCompanies": ["Teleperformance", "Concentrix", "Genpact"],
        "cityOpenings": [
            {"cityName": "Mumbai", "estimatedOpenings": "150+"},
            {"cityName": "Bengaluru", "estimatedOpenings": "50-100"},
        ],
        "salaryRange": {"min": 15000, "max": 22000, "currency": "INR"},
    }
    role.update(overrides)
    return role


def make_tier_json(tier: str, roles: list[dict] | None = None) -> dict:
    return {
        "tier": tier,
        "summary": f"Strong BPO hiring across {tier}.",
        "commonRoles": [make_role_json()] if roles is None else roles,
    }


def make_tier_dispatch(payloads: dict):
    """Build an extract_structured side effect keyed by tier label.

    A payload may be a dict (validated against the requested schema) or an
    exception instance (raised).
    """

    async def _extract(prompt, schema, **kwargs):
        for tier, payload in payloads.items():
            if f'exactly "{tier}"' in prompt:
                if isinstance(payload, BaseException):
                    raise payload
                return schema.model_validate(copy.deepcopy(payload))
        raise AssertionError(f"No payload for prompt: {prompt[:80]}")

    return _extract


@pytest.fixture
def default_filters() -> Filters:
    return Filters(qualification="BSC", sector="IT", location="All Tiers", job_role="All Roles")


@pytest.fixture
def tier1_json() -> dict:
    return make_tier_json("Tier 1 (Metros)")


@pytest.fixture
def sample_tier_analysis(tier1_json) -> TierAnalysis:
    return TierAnalysis.model_validate(tier1_json)


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="{}", input_tokens=100, output_tokens=50)
    )
    client.extract_structured = AsyncMock()
    client.generate_text = AsyncMock(return_value="Demand concentrates in metros.")
    return client


@pytest.fixture
def make_tier():
    return make_tier_json


@pytest.fixture
def make_role():
    return make_role_json


@pytest.fixture
def tier_dispatch():
    return make_tier_dispatch
