"""Tests for the tier fetcher with a mocked LLM."""

import pytest
from pydantic import ValidationError

from placement_insights.models.filters import Filters
from placement_insights.models.report import TierAnalysis
from placement_insights.pipeline.errors import TierFetchError
from placement_insights.pipeline.tier_fetcher import (
    SYSTEM_PROMPT,
    TierFetcher,
    build_role_instruction,
    build_tier_prompt,
)


class TestPrompt:
    def test_all_roles_asks_for_many_roles(self, default_filters):
        instruction = build_role_instruction(default_filters)
        assert "25-50" in instruction
        assert "BPO" in instruction
        assert "Logistics" in instruction

    def test_specific_role_restricts_to_one(self):
        filters = Filters(job_role="KYC Analyst", location="Tier 2")
        instruction = build_role_instruction(filters)
        assert '"KYC Analyst"' in instruction
        assert "25-50" not in instruction

    def test_prompt_embeds_filters_and_tier(self, default_filters):
        prompt = build_tier_prompt(default_filters, "Tier 2")
        assert "BSC" in prompt
        assert "**Sector Focus:** IT" in prompt
        assert 'exactly "Tier 2"' in prompt
        assert "INR" in prompt
        assert "3-5 cities" in prompt


class TestTierFetcher:
    async def test_fetch_returns_analysis(self, mock_llm_client, default_filters, tier_dispatch, make_tier):
        mock_llm_client.extract_structured.side_effect = tier_dispatch(
            {"Tier 2": make_tier("Tier 2")}
        )
        fetcher = TierFetcher(mock_llm_client)
        result = await fetcher.fetch(default_filters, "Tier 2")

        assert isinstance(result, TierAnalysis)
        assert result.tier == "Tier 2"

    async def test_request_parameters(self, mock_llm_client, default_filters, tier_dispatch, make_tier):
        mock_llm_client.extract_structured.side_effect = tier_dispatch(
            {"Tier 3": make_tier("Tier 3")}
        )
        fetcher = TierFetcher(mock_llm_client, model="test-model", temperature=0.3)
        await fetcher.fetch(default_filters, "Tier 3")

        kwargs = mock_llm_client.extract_structured.call_args.kwargs
        assert kwargs["schema"] is TierAnalysis
        assert kwargs["system"] == SYSTEM_PROMPT
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.3

    async def test_unknown_tier_fails_without_request(self, mock_llm_client, default_filters):
        fetcher = TierFetcher(mock_llm_client)
        with pytest.raises(TierFetchError, match="unknown location tier"):
            await fetcher.fetch(default_filters, "Tier 9")
        assert not mock_llm_client.extract_structured.called

    async def test_missing_currency_is_tier_failure(
        self, mock_llm_client, default_filters, tier_dispatch, make_tier
    ):
        payload = make_tier("Tier 2")
        del payload["commonRoles"][0]["salaryRange"]["currency"]
        mock_llm_client.extract_structured.side_effect = tier_dispatch({"Tier 2": payload})
        fetcher = TierFetcher(mock_llm_client)

        with pytest.raises(TierFetchError) as exc_info:
            await fetcher.fetch(default_filters, "Tier 2")
        assert exc_info.value.tier == "Tier 2"
        assert isinstance(exc_info.value.__cause__, ValidationError)

    async def test_mislabelled_tier_is_tier_failure(
        self, mock_llm_client, default_filters, tier_dispatch, make_tier
    ):
        mock_llm_client.extract_structured.side_effect = tier_dispatch(
            {"Tier 2": make_tier("Tier 1 (Metros)")}
        )
        fetcher = TierFetcher(mock_llm_client)
        with pytest.raises(TierFetchError, match="labelled as"):
            await fetcher.fetch(default_filters, "Tier 2")

    async def test_unparseable_response_is_tier_failure(self, mock_llm_client, default_filters):
        mock_llm_client.extract_structured.side_effect = ValueError("Could not extract JSON")
        fetcher = TierFetcher(mock_llm_client)
        with pytest.raises(TierFetchError, match="unparseable"):
            await fetcher.fetch(default_filters, "Tier 1 (Metros)")

    async def test_transport_failure_is_tier_failure(self, mock_llm_client, default_filters):
        mock_llm_client.extract_structured.side_effect = ConnectionError("reset by peer")
        fetcher = TierFetcher(mock_llm_client)
        with pytest.raises(TierFetchError, match="request failed"):
            await fetcher.fetch(default_filters, "Tier 1 (Metros)")
