"""SQLite-backed usage log storage."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from placement_insights.logging.models import UsageLog

DEFAULT_DB_PATH = Path.home() / ".placement-insights" / "usage.db"

_COLUMNS = (
    "id", "session_id", "timestamp", "qualification", "sector", "location",
    "job_role", "tiers_requested", "tiers_succeeded", "role_count",
    "elapsed_seconds", "total_input_tokens", "total_output_tokens",
    "estimated_cost_usd", "success", "error_message",
)


class UsageStore:
    """SQLite-backed store for analyze-run usage logs with WAL mode."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS usage_logs (
                    id TEXT PRIMARY KEY,
                    session_id TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    qualification TEXT NOT NULL,
                    sector TEXT NOT NULL,
                    location TEXT NOT NULL,
                    job_role TEXT NOT NULL,
                    tiers_requested INTEGER NOT NULL DEFAULT 0,
                    tiers_succeeded INTEGER NOT NULL DEFAULT 0,
                    role_count INTEGER NOT NULL DEFAULT 0,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    total_input_tokens INTEGER NOT NULL DEFAULT 0,
                    total_output_tokens INTEGER NOT NULL DEFAULT 0,
                    estimated_cost_usd REAL NOT NULL DEFAULT 0.0,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_message TEXT
                )
            """)

    def save_log(self, log: UsageLog) -> None:
        """Persist a usage log entry."""
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO usage_logs ({', '.join(_COLUMNS)}) "
                f"VALUES ({placeholders})",
                (
                    log.id,
                    log.session_id,
                    log.timestamp.isoformat(),
                    log.qualification,
                    log.sector,
                    log.location,
                    log.job_role,
                    log.tiers_requested,
                    log.tiers_succeeded,
                    log.role_count,
                    log.elapsed_seconds,
                    log.total_input_tokens,
                    log.total_output_tokens,
                    log.estimated_cost_usd,
                    1 if log.success else 0,
                    log.error_message,
                ),
            )

    def get_logs(
        self,
        session_id: str | None = None,
        limit: int = 50,
    ) -> list[UsageLog]:
        """Retrieve usage logs, newest first, optionally filtered by session_id."""
        select = f"SELECT {', '.join(_COLUMNS)} FROM usage_logs"
        with self._connect() as conn:
            if session_id is not None:
                rows = conn.execute(
                    f"{select} WHERE session_id = ? ORDER BY timestamp DESC LIMIT ?",
                    (session_id, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    f"{select} ORDER BY timestamp DESC LIMIT ?",
                    (limit,),
                ).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_monthly_stats(self) -> dict:
        """Get aggregated stats for the current month."""
        now = datetime.now()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        with self._connect() as conn:
            row = conn.execute(
                """SELECT
                       COUNT(*) as total_runs,
                       SUM(total_input_tokens) as total_input,
                       SUM(total_output_tokens) as total_output,
                       SUM(estimated_cost_usd) as total_cost,
                       SUM(tiers_requested) as tiers_requested,
                       SUM(tiers_succeeded) as tiers_succeeded,
                       SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END) as success_count
                   FROM usage_logs
                   WHERE timestamp >= ?""",
                (month_start.isoformat(),),
            ).fetchone()
        return {
            "total_runs": row[0] or 0,
            "total_input_tokens": row[1] or 0,
            "total_output_tokens": row[2] or 0,
            "total_cost_usd": row[3] or 0.0,
            "tier_success_rate": (row[5] / row[4] * 100) if row[4] else 0.0,
            "success_rate": (row[6] / row[0] * 100) if row[0] else 0.0,
            "month": now.strftime("%Y-%m"),
        }

    @staticmethod
    def _row_to_log(row: tuple) -> UsageLog:
        data = dict(zip(_COLUMNS, row))
        data["timestamp"] = datetime.fromisoformat(data["timestamp"])
        data["success"] = bool(data["success"])
        return UsageLog(**data)
