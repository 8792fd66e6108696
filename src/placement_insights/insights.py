"""Chart data derived from a market report."""

from __future__ import annotations

import re
from collections import defaultdict

from placement_insights.models.report import MarketReport

TOP_N = 7

_PLUS_RE = re.compile(r"(\d+)\+")
_RANGE_RE = re.compile(r"(\d+)\s*-\s*(\d+)")
_NUMBER_RE = re.compile(r"\d+")


def parse_openings(text: str) -> float:
    """Turn an openings estimate into a number for charting.

    "150+" -> 150, "50-100" -> 75, "approx. 75" -> 75, anything else -> 0.
    """
    cleaned = text.replace(",", "")
    if match := _PLUS_RE.search(cleaned):
        return int(match.group(1))
    if match := _RANGE_RE.search(cleaned):
        return (int(match.group(1)) + int(match.group(2))) / 2
    if match := _NUMBER_RE.search(cleaned):
        return int(match.group(0))
    return 0


def city_demand(report: MarketReport, limit: int = TOP_N) -> list[tuple[str, float]]:
    """Cities ranked by summed estimated openings across all tiers and roles."""
    totals: dict[str, float] = defaultdict(float)
    for tier in report.tier_analyses:
        for role in tier.common_roles:
            for city in role.city_openings:
                totals[city.city_name] += parse_openings(city.estimated_openings)
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)[:limit]


def average_salary_by_role(report: MarketReport, limit: int = TOP_N) -> list[tuple[str, int]]:
    """Roles ranked by mean mid-point monthly salary."""
    sums: dict[str, list[float]] = defaultdict(list)
    for tier in report.tier_analyses:
        for role in tier.common_roles:
            salary = role.salary_range
            sums[role.role_name].append((salary.min + salary.max) / 2)
    averages = [(name, round(sum(v) / len(v))) for name, v in sums.items()]
    return sorted(averages, key=lambda item: item[1], reverse=True)[:limit]
