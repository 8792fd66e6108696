"""CSV export module for placement-insights."""
from placement_insights.export.csv_exporter import (
    HEADERS,
    export_market_report_to_csv,
    read_tier_analyses,
    to_csv_text,
)

__all__ = ["HEADERS", "export_market_report_to_csv", "read_tier_analyses", "to_csv_text"]
