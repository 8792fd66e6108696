"""Streamlit Web UI for placement-insights.

Filter bar -> Analyze -> per-tier job-market report with charts and CSV export.
Filters, the last report and the search flag survive restarts via DashboardStore.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time

logger = logging.getLogger(__name__)

import nest_asyncio
import pandas as pd
import streamlit as st
from dotenv import load_dotenv

load_dotenv()
nest_asyncio.apply()

# Streamlit Cloud: sync st.secrets → os.environ so the LLM client can read them
if "ANTHROPIC_API_KEY" not in os.environ:
    try:
        os.environ["ANTHROPIC_API_KEY"] = st.secrets["ANTHROPIC_API_KEY"]
    except Exception:
        pass

from placement_insights.cache.dashboard_store import DashboardStore
from placement_insights.clients.llm_client import LLMClient
from placement_insights.config import load_config
from placement_insights.export.csv_exporter import (
    DEFAULT_FILENAME,
    LIST_SEPARATOR,
    format_cities,
    format_salary,
    to_csv_text,
)
from placement_insights.insights import average_salary_by_role, city_demand
from placement_insights.logging.models import UsageLog
from placement_insights.logging.usage_store import UsageStore
from placement_insights.models.filters import (
    ALL_ROLES,
    JOB_ROLES,
    LOCATIONS,
    QUALIFICATIONS,
    SECTORS,
    Filters,
)
from placement_insights.models.report import MarketReport
from placement_insights.pipeline.errors import ReportError
from placement_insights.pipeline.orchestrator import ReportOrchestrator

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Job Market Dashboard",
    page_icon=":bar_chart:",
    layout="wide",
)

config = load_config()


@st.cache_resource
def _get_store() -> DashboardStore:
    return DashboardStore(config.store.resolved_db_path)


@st.cache_resource
def _get_usage_store() -> UsageStore:
    return UsageStore(config.store.resolved_usage_db_path)


def _get_orchestrator() -> tuple[LLMClient, ReportOrchestrator]:
    try:
        llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    except Exception as e:
        raise RuntimeError(f"LLM client initialisation failed. Check ANTHROPIC_API_KEY: {e}") from e
    orchestrator = ReportOrchestrator(
        llm,
        extraction_model=config.llm.extraction_model,
        narrative_model=config.llm.narrative_model,
        extraction_temperature=config.report.extraction_temperature,
        synthesis_temperature=config.report.synthesis_temperature,
        max_tokens=config.report.max_tokens,
    )
    return llm, orchestrator


store = _get_store()

# Load-at-startup: session_state is seeded once from the store
if "filters" not in st.session_state:
    st.session_state.filters = store.load_filters()
    st.session_state.market_report = store.load_report()
    st.session_state.has_searched = store.load_has_searched()
    st.session_state.error = None


def _index(options: list[str], value: str) -> int:
    return options.index(value) if value in options else 0


# ---------------------------------------------------------------------------
# Filter bar
# ---------------------------------------------------------------------------

st.title("Job Market Dashboard")
st.caption("Tier-based analysis of the live entry-level job market in India")

current: Filters = st.session_state.filters
role_options = [ALL_ROLES, *sorted(JOB_ROLES)]

cols = st.columns(4)
qualification = cols[0].selectbox(
    "Qualification", QUALIFICATIONS, index=_index(QUALIFICATIONS, current.qualification)
)
sector = cols[1].selectbox("Sector", SECTORS, index=_index(SECTORS, current.sector))
location = cols[2].selectbox("Location Tier", LOCATIONS, index=_index(LOCATIONS, current.location))
job_role = cols[3].selectbox("Job Role", role_options, index=_index(role_options, current.job_role))

selected = Filters(qualification=qualification, sector=sector, location=location, job_role=job_role)
if selected != current:
    st.session_state.filters = selected
    store.save_filters(selected)

btn_cols = st.columns([1, 1, 4])
analyze_clicked = btn_cols[0].button("Analyze Market", type="primary")
clear_clicked = btn_cols[1].button(
    "Clear Results", disabled=not st.session_state.has_searched
)

if clear_clicked:
    store.clear()
    for key in ("filters", "market_report", "has_searched", "error"):
        st.session_state.pop(key, None)
    st.rerun()

# ---------------------------------------------------------------------------
# Analyze
# ---------------------------------------------------------------------------

if analyze_clicked:
    st.session_state.error = None
    st.session_state.market_report = None
    st.session_state.has_searched = True
    store.save_has_searched(True)
    store.save_report(None)

    start = time.monotonic()
    with st.spinner(
        "Analyzing Live Job Market... AI is gathering real-time data from multiple "
        "sources. This might take a moment."
    ):
        try:
            llm, orchestrator = _get_orchestrator()
            result = asyncio.run(orchestrator.run(selected))
        except ReportError as e:
            st.session_state.error = str(e)
            _get_usage_store().save_log(
                UsageLog.for_run(
                    selected,
                    llm.get_token_summary(),
                    elapsed_seconds=time.monotonic() - start,
                    error=e,
                )
            )
        except RuntimeError as e:
            logger.error("Dashboard setup failed", exc_info=True)
            st.session_state.error = str(e)
        else:
            st.session_state.market_report = result.report
            store.save_report(result.report)
            _get_usage_store().save_log(
                UsageLog.for_run(
                    selected,
                    llm.get_token_summary(),
                    report=result.report,
                    elapsed_seconds=result.elapsed_seconds,
                )
            )

# ---------------------------------------------------------------------------
# Rendering: exactly one of error / report / no results / welcome
# ---------------------------------------------------------------------------


def _render_charts(report: MarketReport) -> None:
    st.subheader("Market Insights at a Glance")
    chart_cols = st.columns(2)
    cities = city_demand(report)
    with chart_cols[0]:
        st.markdown("**Job Demand by City (by estimated openings)**")
        if cities:
            st.bar_chart(pd.DataFrame(cities, columns=["City", "Openings"]).set_index("City"))
        else:
            st.caption("Not enough data to display.")
    salaries = average_salary_by_role(report)
    with chart_cols[1]:
        st.markdown("**Average Monthly Salary by Role (INR)**")
        if salaries:
            st.bar_chart(pd.DataFrame(salaries, columns=["Role", "Salary"]).set_index("Role"))
        else:
            st.caption("Not enough data to display.")


def _render_report(report: MarketReport) -> None:
    st.subheader("Overall Analysis")
    st.write(report.overall_analysis)

    for tier in report.tier_analyses:
        st.subheader(tier.tier)
        st.write(tier.summary)
        if not tier.common_roles:
            st.caption("No roles found for this tier.")
            continue
        rows = [
            {
                "Role": role.role_name,
                "Description": role.role_description,
                "Technical Skills": LIST_SEPARATOR.join(role.skill_set.technical_skills),
                "Soft Skills": LIST_SEPARATOR.join(role.skill_set.soft_skills),
                "Languages": LIST_SEPARATOR.join(role.skill_set.language_requirements),
                "Hiring Companies": LIST_SEPARATOR.join(role.hiring_companies),
                "Top Cities & Openings": format_cities(role.city_openings),
                "Salary Range (INR)": format_salary(role.salary_range),
            }
            for role in tier.common_roles
        ]
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
        with st.expander("Live search links"):
            for role in tier.common_roles:
                links = ", ".join(
                    f"[{p.platform_name}]({p.search_link})" for p in role.platforms
                )
                st.markdown(f"- **{role.role_name}**: {links or 'none'}")


report: MarketReport | None = st.session_state.market_report

if st.session_state.error:
    st.error(st.session_state.error)
elif report is not None and report.has_results:
    st.download_button(
        label="Download CSV",
        data=to_csv_text(report.tier_analyses).encode("utf-8-sig"),
        file_name=DEFAULT_FILENAME,
        mime="text/csv",
    )
    _render_charts(report)
    _render_report(report)
elif st.session_state.has_searched:
    st.subheader("No Results Found")
    st.write(
        "The AI could not find a significant number of results for the selected "
        "filters. Please try a different combination."
    )
else:
    st.subheader("Welcome to the Job Dashboard")
    st.write(
        "Use the filters above to generate a strategic analysis of the job market by city tier."
    )
