"""Data models for the placement insights pipeline."""

from placement_insights.models.filters import (
    AGGREGATE_TIERS,
    ALL_ROLES,
    ALL_SECTORS,
    ALL_TIERS,
    CANONICAL_TIERS,
    JOB_ROLES,
    LOCATIONS,
    QUALIFICATIONS,
    SECTORS,
    Filters,
    derive_tiers,
)
from placement_insights.models.report import (
    CityOpening,
    CommonRole,
    MarketReport,
    PlatformLink,
    SalaryRange,
    SkillSet,
    TierAnalysis,
)

__all__ = [
    "AGGREGATE_TIERS",
    "ALL_ROLES",
    "ALL_SECTORS",
    "ALL_TIERS",
    "CANONICAL_TIERS",
    "CityOpening",
    "CommonRole",
    "Filters",
    "JOB_ROLES",
    "LOCATIONS",
    "MarketReport",
    "PlatformLink",
    "QUALIFICATIONS",
    "SECTORS",
    "SalaryRange",
    "SkillSet",
    "TierAnalysis",
    "derive_tiers",
]
