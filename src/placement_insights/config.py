"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    extraction_model: str = "claude-sonnet-4-5-20250929"
    narrative_model: str = "claude-haiku-4-5-20251001"
    max_retries: int = 3
    timeout: int = 120


@dataclass(frozen=True)
class ReportConfig:
    extraction_temperature: float = 0.3
    synthesis_temperature: float = 0.7
    max_tokens: int = 16000


@dataclass(frozen=True)
class StoreConfig:
    db_path: str = "~/.placement-insights/dashboard.db"
    usage_db_path: str = "~/.placement-insights/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()

    @property
    def resolved_usage_db_path(self) -> Path:
        return Path(self.usage_db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    store: StoreConfig = field(default_factory=StoreConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        report=ReportConfig(**raw.get("report", {})),
        store=StoreConfig(**raw.get("store", {})),
    )
