"""Pydantic models for the tier-based market report.

Field aliases mirror the JSON schema the model is asked to produce, so a
response payload validates directly with ``TierAnalysis.model_validate``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_WIRE = ConfigDict(populate_by_name=True, frozen=True)


class CityOpening(BaseModel):
    city_name: str = Field(alias="cityName")
    # Free text: "50-100", "150+", "approx. 75"
    estimated_openings: str = Field(alias="estimatedOpenings")

    model_config = _WIRE


class PlatformLink(BaseModel):
    platform_name: str = Field(alias="platformName")
    search_link: str = Field(alias="searchLink")

    model_config = _WIRE


class SkillSet(BaseModel):
    technical_skills: list[str] = Field(alias="technicalSkills")
    soft_skills: list[str] = Field(alias="softSkills")
    language_requirements: list[str] = Field(alias="languageRequirements")

    model_config = _WIRE


class SalaryRange(BaseModel):
    """Estimated entry-level monthly salary."""

    min: float
    max: float
    currency: str

    model_config = _WIRE

    @field_validator("currency")
    @classmethod
    def _inr_only(cls, value: str) -> str:
        if value != "INR":
            raise ValueError(f"Salary currency must be INR, got {value!r}")
        return value

    @model_validator(mode="after")
    def _ordered_bounds(self) -> SalaryRange:
        if self.min < 0 or self.max < self.min:
            raise ValueError(f"Invalid salary range: {self.min} - {self.max}")
        return self


class CommonRole(BaseModel):
    role_name: str = Field(alias="roleName")
    role_description: str = Field(alias="roleDescription")
    skill_set: SkillSet = Field(alias="skillSet")
    platforms: list[PlatformLink]
    hiring_companies: list[str] = Field(alias="hiringCompanies")
    city_openings: list[CityOpening] = Field(alias="cityOpenings")
    salary_range: SalaryRange = Field(alias="salaryRange")

    model_config = _WIRE


class TierAnalysis(BaseModel):
    tier: str
    summary: str
    common_roles: list[CommonRole] = Field(alias="commonRoles")

    model_config = _WIRE

    @field_validator("tier")
    @classmethod
    def _non_blank_tier(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Tier label must not be blank")
        return value

    @property
    def has_roles(self) -> bool:
        return bool(self.common_roles)


class MarketReport(BaseModel):
    """Final report: an overall narrative plus one analysis per successful tier."""

    overall_analysis: str = Field(alias="overallAnalysis")
    tier_analyses: list[TierAnalysis] = Field(alias="tierAnalyses")

    model_config = _WIRE

    @property
    def has_results(self) -> bool:
        """False when every tier came back without roles ("no results")."""
        return any(t.has_roles for t in self.tier_analyses)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
