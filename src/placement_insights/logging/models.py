"""Usage logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from placement_insights.logging.cost_calculator import calculate_cost
from placement_insights.models.filters import Filters, derive_tiers
from placement_insights.models.report import MarketReport


class UsageLog(BaseModel):
    """Single usage log entry for an analyze run."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    session_id: str = "anonymous"
    timestamp: datetime = Field(default_factory=datetime.now)
    qualification: str
    sector: str
    location: str
    job_role: str
    tiers_requested: int = 0
    tiers_succeeded: int = 0
    role_count: int = 0
    elapsed_seconds: float = 0.0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    estimated_cost_usd: float = 0.0
    success: bool = True
    error_message: str | None = None

    @classmethod
    def for_run(
        cls,
        filters: Filters,
        token_summary: dict,
        *,
        report: MarketReport | None = None,
        elapsed_seconds: float = 0.0,
        error: Exception | None = None,
        session_id: str = "anonymous",
    ) -> UsageLog:
        """Build a log entry from one analyze run and the client's token summary."""
        tiers = report.tier_analyses if report is not None else []
        return cls(
            session_id=session_id,
            qualification=filters.qualification,
            sector=filters.sector,
            location=filters.location,
            job_role=filters.job_role,
            tiers_requested=len(derive_tiers(filters)),
            tiers_succeeded=len(tiers),
            role_count=sum(len(t.common_roles) for t in tiers),
            elapsed_seconds=elapsed_seconds,
            total_input_tokens=token_summary.get("input", 0),
            total_output_tokens=token_summary.get("output", 0),
            estimated_cost_usd=calculate_cost(token_summary.get("calls", [])),
            success=error is None,
            error_message=str(error) if error is not None else None,
        )
