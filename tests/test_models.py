"""Tests for filter and report models."""

import pytest
from pydantic import ValidationError

from placement_insights.models.filters import (
    AGGREGATE_TIERS,
    ALL_ROLES,
    CANONICAL_TIERS,
    JOB_ROLES,
    Filters,
    derive_tiers,
)
from placement_insights.models.report import MarketReport, SalaryRange, TierAnalysis


class TestFilters:
    def test_defaults(self):
        filters = Filters()
        assert filters.qualification == "BSC"
        assert filters.sector == "All Sectors"
        assert filters.location == "All Tiers"
        assert filters.job_role == ALL_ROLES
        assert filters.all_roles

    def test_wire_alias(self):
        filters = Filters.model_validate(
            {"qualification": "BA", "sector": "IT", "location": "Tier 2", "jobRole": "Telecaller"}
        )
        assert filters.job_role == "Telecaller"
        assert filters.model_dump(by_alias=True)["jobRole"] == "Telecaller"

    def test_unknown_location_rejected(self):
        with pytest.raises(ValidationError):
            Filters(location="Tier 5")

    def test_frozen(self):
        filters = Filters()
        with pytest.raises(ValidationError):
            filters.location = "Tier 2"

    def test_job_roles_vocabulary(self):
        assert len(JOB_ROLES) == 17
        assert ALL_ROLES not in JOB_ROLES


class TestDeriveTiers:
    @pytest.mark.parametrize("qualification", ["BSC", "BCom", "BA"])
    @pytest.mark.parametrize("job_role", [ALL_ROLES, "Fraud Analyst"])
    def test_all_tiers_expands_to_three_principal_tiers(self, qualification, job_role):
        filters = Filters(qualification=qualification, job_role=job_role, location="All Tiers")
        assert derive_tiers(filters) == ["Tier 1 (Metros)", "Tier 2", "Tier 3"]

    def test_tier4_excluded_from_aggregate(self):
        assert "Tier 4" not in AGGREGATE_TIERS
        assert "Tier 4" in CANONICAL_TIERS

    @pytest.mark.parametrize("tier", CANONICAL_TIERS)
    def test_specific_tier_is_singleton(self, tier):
        assert derive_tiers(Filters(location=tier)) == [tier]

    def test_returns_fresh_list(self):
        tiers = derive_tiers(Filters())
        tiers.append("Tier 4")
        assert derive_tiers(Filters()) == ["Tier 1 (Metros)", "Tier 2", "Tier 3"]


class TestTierAnalysis:
    def test_validate_wire_payload(self, tier1_json):
        analysis = TierAnalysis.model_validate(tier1_json)
        role = analysis.common_roles[0]
        assert analysis.tier == "Tier 1 (Metros)"
        assert role.role_name == "Customer Support Executive"
        assert role.skill_set.soft_skills == ["Active Listening", "Problem-Solving"]
        assert [c.city_name for c in role.city_openings] == ["Mumbai", "Bengaluru"]
        assert role.salary_range.currency == "INR"

    def test_empty_roles_valid(self, make_tier):
        analysis = TierAnalysis.model_validate(make_tier("Tier 2", roles=[]))
        assert analysis.common_roles == []
        assert not analysis.has_roles

    def test_missing_currency_rejected(self, tier1_json):
        del tier1_json["commonRoles"][0]["salaryRange"]["currency"]
        with pytest.raises(ValidationError):
            TierAnalysis.model_validate(tier1_json)

    def test_missing_tier_rejected(self, tier1_json):
        del tier1_json["tier"]
        with pytest.raises(ValidationError):
            TierAnalysis.model_validate(tier1_json)

    def test_blank_tier_rejected(self, tier1_json):
        tier1_json["tier"] = "   "
        with pytest.raises(ValidationError):
            TierAnalysis.model_validate(tier1_json)

    def test_missing_skill_category_rejected(self, tier1_json):
        del tier1_json["commonRoles"][0]["skillSet"]["languageRequirements"]
        with pytest.raises(ValidationError):
            TierAnalysis.model_validate(tier1_json)

    def test_openings_must_be_text(self, tier1_json):
        tier1_json["commonRoles"][0]["cityOpenings"][0]["estimatedOpenings"] = 150
        with pytest.raises(ValidationError):
            TierAnalysis.model_validate(tier1_json)


class TestSalaryRange:
    def test_currency_kept_as_returned(self):
        assert SalaryRange(min=10000, max=20000, currency="INR").currency == "INR"

    @pytest.mark.parametrize("currency", ["inr", " INR", "Rs"])
    def test_currency_must_be_exactly_inr(self, currency):
        with pytest.raises(ValidationError):
            SalaryRange(min=10000, max=20000, currency=currency)

    def test_non_inr_rejected(self):
        with pytest.raises(ValidationError):
            SalaryRange(min=100, max=200, currency="USD")

    def test_inverted_bounds_rejected(self):
        with pytest.raises(ValidationError):
            SalaryRange(min=30000, max=20000, currency="INR")


class TestMarketReport:
    def test_has_results(self, sample_tier_analysis, make_tier):
        empty = TierAnalysis.model_validate(make_tier("Tier 3", roles=[]))
        assert MarketReport(overall_analysis="x", tier_analyses=[sample_tier_analysis, empty]).has_results
        assert not MarketReport(overall_analysis="x", tier_analyses=[empty]).has_results

    def test_to_wire_uses_schema_names(self, sample_tier_analysis):
        wire = MarketReport(overall_analysis="x", tier_analyses=[sample_tier_analysis]).to_wire()
        assert wire["overallAnalysis"] == "x"
        assert wire["tierAnalyses"][0]["commonRoles"][0]["roleName"] == "Customer Support Executive"
        assert MarketReport.model_validate(wire).tier_analyses[0] == sample_tier_analysis
