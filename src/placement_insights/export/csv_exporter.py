"""CSV export of tier analyses (one row per role x platform)."""

from __future__ import annotations

import csv
import io
import logging
import re
from itertools import groupby
from pathlib import Path

from placement_insights.models.report import (
    CityOpening,
    CommonRole,
    PlatformLink,
    SalaryRange,
    SkillSet,
    TierAnalysis,
)

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "market_tier_report.csv"
LIST_SEPARATOR = " | "

HEADERS: list[str] = [
    "Tier",
    "Role",
    "Role Description",
    "Technical Skills",
    "Soft Skills",
    "Language Requirements",
    "Hiring Companies",
    "Top Cities & Openings",
    "Salary Range (INR)",
    "Platform",
    "Live Search Link",
]
_BASE_COLUMNS = len(HEADERS) - 2

_ESCAPED_RE = re.compile(r"[\\|()]")
_UNESCAPE_RE = re.compile(r"\\(.)")
# Value parts are escaped, so the only bare parentheses are the delimiters.
_CITY_RE = re.compile(r"^(?P<city>(?:\\.|[^\\()])*) \((?P<openings>(?:\\.|[^\\()])*)\)$")
_SALARY_RE = re.compile(r"^₹(?P<min>\S+) - ₹(?P<max>\S+)$")


def _escape(value: str) -> str:
    return _ESCAPED_RE.sub(lambda m: "\\" + m.group(0), value)


def _unescape(value: str) -> str:
    return _UNESCAPE_RE.sub(r"\1", value)


def _format_amount(value: float) -> str:
    if float(value).is_integer():
        return f"{value:,.0f}"
    # Shortest repr keeps the exact float
    return f"{value:,}"


def format_salary(salary: SalaryRange) -> str:
    return f"₹{_format_amount(salary.min)} - ₹{_format_amount(salary.max)}"


def format_cities(openings: list[CityOpening], escape: bool = False) -> str:
    quote = _escape if escape else str
    return LIST_SEPARATOR.join(
        f"{quote(c.city_name)} ({quote(c.estimated_openings)})" for c in openings
    )


def _join(values: list[str]) -> str:
    return LIST_SEPARATOR.join(_escape(v) for v in values)


def _split_escaped(cell: str) -> list[str]:
    """Split on unescaped separators, leaving each part escaped."""
    if not cell:
        return []
    parts, current, i = [], [], 0
    while i < len(cell):
        if cell[i] == "\\" and i + 1 < len(cell):
            current.append(cell[i : i + 2])
            i += 2
        elif cell.startswith(LIST_SEPARATOR, i):
            parts.append("".join(current))
            current = []
            i += len(LIST_SEPARATOR)
        else:
            current.append(cell[i])
            i += 1
    parts.append("".join(current))
    return parts


def _split(cell: str) -> list[str]:
    return [_unescape(part) for part in _split_escaped(cell)]


def role_rows(tier: str, role: CommonRole) -> list[list[str]]:
    """Rows for one role: one per platform, or a single row without platform."""
    base = [
        tier,
        role.role_name,
        role.role_description,
        _join(role.skill_set.technical_skills),
        _join(role.skill_set.soft_skills),
        _join(role.skill_set.language_requirements),
        _join(role.hiring_companies),
        format_cities(role.city_openings, escape=True),
        format_salary(role.salary_range),
    ]
    if not role.platforms:
        return [base + ["", ""]]
    return [base + [p.platform_name, p.search_link] for p in role.platforms]


def build_rows(analyses: list[TierAnalysis]) -> list[list[str]]:
    rows = []
    for analysis in analyses:
        for role in analysis.common_roles:
            rows.extend(role_rows(analysis.tier, role))
    return rows


def to_csv_text(analyses: list[TierAnalysis]) -> str:
    """Serialize analyses to CSV text including the header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADERS)
    writer.writerows(build_rows(analyses))
    return buffer.getvalue()


def export_market_report_to_csv(
    analyses: list[TierAnalysis],
    path: str | Path = DEFAULT_FILENAME,
) -> Path | None:
    """Write analyses to ``path``. Returns None when there is nothing to export."""
    if not analyses:
        logger.warning("No market report data to export.")
        return None
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # utf-8-sig so spreadsheet apps pick up the rupee sign
    path.write_text(to_csv_text(analyses), encoding="utf-8-sig")
    logger.info("Exported %d tier(s) to %s", len(analyses), path)
    return path


def parse_salary(cell: str) -> SalaryRange:
    match = _SALARY_RE.match(cell.strip())
    if not match:
        raise ValueError(f"Unrecognised salary cell: {cell!r}")
    return SalaryRange(
        min=float(match["min"].replace(",", "")),
        max=float(match["max"].replace(",", "")),
        currency="INR",
    )


def parse_cities(cell: str) -> list[CityOpening]:
    openings = []
    for part in _split_escaped(cell):
        match = _CITY_RE.match(part)
        if not match:
            raise ValueError(f"Unrecognised city cell: {part!r}")
        openings.append(
            CityOpening(
                city_name=_unescape(match["city"]),
                estimated_openings=_unescape(match["openings"]),
            )
        )
    return openings


def _role_from_rows(rows: list[list[str]]) -> CommonRole:
    base = rows[0]
    return CommonRole(
        role_name=base[1],
        role_description=base[2],
        skill_set=SkillSet(
            technical_skills=_split(base[3]),
            soft_skills=_split(base[4]),
            language_requirements=_split(base[5]),
        ),
        platforms=[
            PlatformLink(platform_name=row[9], search_link=row[10])
            for row in rows
            if row[9] or row[10]
        ],
        hiring_companies=_split(base[6]),
        city_openings=parse_cities(base[7]),
        salary_range=parse_salary(base[8]),
    )


def read_tier_analyses(text: str) -> list[TierAnalysis]:
    """Rebuild tier analyses from exported CSV text.

    Summaries are not part of the export and come back empty; tiers without
    roles produce no rows and are not reconstructed.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    header = next(reader, None)
    if header != HEADERS:
        raise ValueError("CSV header does not match the market report export format")
    rows = [row for row in reader if row]

    analyses = []
    for tier, tier_rows in groupby(rows, key=lambda r: r[0]):
        roles = [
            _role_from_rows(list(role_rows_))
            for _, role_rows_ in groupby(tier_rows, key=lambda r: tuple(r[:_BASE_COLUMNS]))
        ]
        analyses.append(TierAnalysis(tier=tier, summary="", common_roles=roles))
    return analyses
