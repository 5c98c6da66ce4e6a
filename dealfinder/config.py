"""Configuration management for DealFinder."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from dealfinder.models import FinancingAssumptions, SortKey

CONFIG_DIR = Path(__file__).parent.parent / "config"


class FinancingConfig(BaseModel):
    """Default assumptions for the interactive calculator."""

    down_payment_percent: float = 25.0
    interest_rate_percent: float = 7.0
    loan_term_years: int = 30
    closing_costs_percent: float = 3.0
    maintenance_percent: float = 10.0
    management_percent: float = 10.0
    # Used when a listing carries no insurance or vacancy figure
    default_insurance_annual: float = 1200.0
    default_vacancy_rate: float = 5.0

    def assumptions(self) -> FinancingAssumptions:
        return FinancingAssumptions(
            down_payment_percent=self.down_payment_percent,
            interest_rate_percent=self.interest_rate_percent,
            loan_term_years=self.loan_term_years,
            closing_costs_percent=self.closing_costs_percent,
            maintenance_percent=self.maintenance_percent,
            management_percent=self.management_percent,
        )


class EnrichmentConfig(FinancingConfig):
    """Assumptions applied to freshly generated candidate listings."""

    default_insurance_annual: float = 1500.0


class FilterConfig(BaseModel):
    default_sort: SortKey = SortKey.INVESTMENT_SCORE


class SummaryConfig(BaseModel):
    top_deal_min_score: int = 70
    top_deal_limit: int = 5


class WebhookConfig(BaseModel):
    urls: list[str] = []
    timeout: float = 10.0


class AlertsConfig(BaseModel):
    channels: list[str] = ["console"]
    webhook: WebhookConfig = WebhookConfig()


class SourcesConfig(BaseModel):
    default: str = "file"
    file_path: str = "candidates.json"
    feed_url: str = ""
    timeout: float = 30.0


class AppConfig(BaseSettings):
    """Root configuration.

    Sections missing from the TOML files can be supplied through the
    environment, e.g. ``DEALFINDER_ALERTS__CHANNELS='["webhook"]'``.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEALFINDER_",
        env_nested_delimiter="__",
    )

    financing: FinancingConfig = FinancingConfig()
    enrichment: EnrichmentConfig = EnrichmentConfig()
    filters: FilterConfig = FilterConfig()
    summary: SummaryConfig = SummaryConfig()
    alerts: AlertsConfig = AlertsConfig()
    sources: SourcesConfig = SourcesConfig()


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML files.

    Loads default.toml first, then merges local.toml or a custom path on top.
    """
    default_path = CONFIG_DIR / "default.toml"
    data: dict[str, Any] = {}

    if default_path.exists():
        with open(default_path, "rb") as f:
            data = tomllib.load(f)

    local_path = config_path or CONFIG_DIR / "local.toml"
    if local_path.exists():
        with open(local_path, "rb") as f:
            overrides = tomllib.load(f)
        data = _deep_merge(data, overrides)

    return AppConfig(**data)
