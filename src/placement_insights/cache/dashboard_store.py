"""SQLite-backed persistence for dashboard state (filters, last report, search flag)."""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from pathlib import Path

from pydantic import ValidationError

from placement_insights.models.filters import Filters
from placement_insights.models.report import MarketReport

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".placement-insights" / "dashboard.db"

FILTERS_KEY = "jobDashboard_filters"
REPORT_KEY = "jobDashboard_marketReport"
HAS_SEARCHED_KEY = "jobDashboard_hasSearched"


class DashboardStore:
    """Key/value store with load-at-startup and save-on-change semantics.

    Missing or unreadable entries load as defaults; nothing here is fatal.
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS dashboard_state (
                    key TEXT PRIMARY KEY,
                    value_json TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
            """)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _get(self, key: str):
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value_json FROM dashboard_state WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            logger.warning("Error reading stored key %r", key)
            return None

    def _put(self, key: str, value) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO dashboard_state (key, value_json, updated_at)
                   VALUES (?, ?, ?)""",
                (key, json.dumps(value, ensure_ascii=False), time.time()),
            )

    def load_filters(self) -> Filters:
        raw = self._get(FILTERS_KEY)
        if raw is None:
            return Filters()
        try:
            return Filters.model_validate(raw)
        except ValidationError:
            logger.warning("Stored filters are invalid, using defaults")
            return Filters()

    def save_filters(self, filters: Filters) -> None:
        self._put(FILTERS_KEY, filters.model_dump(by_alias=True))

    def load_report(self) -> MarketReport | None:
        raw = self._get(REPORT_KEY)
        if raw is None:
            return None
        try:
            return MarketReport.model_validate(raw)
        except ValidationError:
            logger.warning("Stored market report is invalid, discarding")
            return None

    def save_report(self, report: MarketReport | None) -> None:
        self._put(REPORT_KEY, report.to_wire() if report is not None else None)

    def load_has_searched(self) -> bool:
        return bool(self._get(HAS_SEARCHED_KEY))

    def save_has_searched(self, value: bool) -> None:
        self._put(HAS_SEARCHED_KEY, bool(value))

    def clear(self) -> int:
        """Remove all stored state. Returns count of deleted rows."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM dashboard_state")
            return cursor.rowcount
