"""Filter vocabulary for the job-market dashboard and tier-set derivation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

ALL_SECTORS = "All Sectors"
ALL_TIERS = "All Tiers"
ALL_ROLES = "All Roles"

QUALIFICATIONS: list[str] = ["BSC", "BCom", "BA"]
SECTORS: list[str] = [ALL_SECTORS, "IT", "Finance", "Retail", "Logistics"]

CANONICAL_TIERS: list[str] = ["Tier 1 (Metros)", "Tier 2", "Tier 3", "Tier 4"]
# Tier 4 can be picked explicitly but is left out of the aggregate view.
AGGREGATE_TIERS: tuple[str, ...] = ("Tier 1 (Metros)", "Tier 2", "Tier 3")
LOCATIONS: list[str] = [ALL_TIERS, *CANONICAL_TIERS]

JOB_ROLES: list[str] = [
    # BPO / IT (BPO)
    "Customer Support Executive",
    "Technical Support Representative",
    "Telecaller",
    "Chat Process Executive",
    "Data Entry Operator",
    "Process Associate",
    # Banking
    "Bank Teller",
    "Loan Officer",
    "Relationship Manager (Entry-Level)",
    "KYC Analyst",
    # Fintech
    "Operations Analyst (Fintech)",
    "Payment Support Specialist",
    "Fraud Analyst",
    # Logistics
    "Logistics Coordinator",
    "Supply Chain Executive",
    "Warehouse Supervisor",
    "Delivery Associate",
]


class Filters(BaseModel):
    """User-selected filters for one analyze action."""

    qualification: str = "BSC"
    sector: str = ALL_SECTORS
    location: str = ALL_TIERS
    job_role: str = Field(default=ALL_ROLES, alias="jobRole")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("location")
    @classmethod
    def _known_location(cls, value: str) -> str:
        if value not in LOCATIONS:
            raise ValueError(f"Unknown location tier: {value!r}")
        return value

    @property
    def all_roles(self) -> bool:
        return self.job_role == ALL_ROLES


def derive_tiers(filters: Filters) -> list[str]:
    """Return the tiers to analyze for the given filters, in display order."""
    if filters.location == ALL_TIERS:
        return list(AGGREGATE_TIERS)
    return [filters.location]
