"""Alert channel implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from dealfinder.config import WebhookConfig
from dealfinder.models import AlertMatch
from dealfinder.analysis.scoring import score_band

logger = logging.getLogger(__name__)

BAND_COLORS = {"strong": "green", "fair": "yellow", "weak": "white", "unscored": "dim"}


def _pct(value: float | None) -> str:
    return f"{value:.1f}%" if value is not None else "N/A"


def _money(value: float | None) -> str:
    return f"${value:,.0f}" if value is not None else "N/A"


class BaseChannel(ABC):
    @abstractmethod
    async def send(self, match: AlertMatch) -> None: ...


class ConsoleChannel(BaseChannel):
    """Prints alert matches to the terminal with rich formatting."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    async def send(self, match: AlertMatch) -> None:
        record = match.record
        color = BAND_COLORS[score_band(record.investment_score)]

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Key", style="bold")
        table.add_column("Value")

        table.add_row("Address", record.full_address)
        table.add_row("Price", _money(record.price))
        table.add_row("Type", record.property_type.value if record.property_type else "N/A")
        table.add_row("Units", str(record.units) if record.units else "N/A")
        table.add_row("Cap Rate", _pct(record.cap_rate))
        table.add_row("ROI", _pct(record.roi))
        table.add_row("Cash Flow", f"{_money(record.cash_flow_monthly)}/mo")
        table.add_row("Score", f"{record.investment_score or 0}/100")
        if record.listing_url:
            table.add_row("Link", record.listing_url)

        title = f"ALERT: {match.preference.name}"
        self.console.print(Panel(table, title=title, border_style=color))


class WebhookChannel(BaseChannel):
    """Posts alert matches to webhook URLs (Slack, Discord, etc.)."""

    def __init__(self, config: WebhookConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self._client = client

    def _payload(self, match: AlertMatch) -> dict:
        record = match.record
        return {
            "text": (
                f"*DealFinder Alert: {match.preference.name}*\n"
                f"*Address:* {record.full_address}\n"
                f"*Price:* {_money(record.price)} | "
                f"*Cap Rate:* {_pct(record.cap_rate)} | "
                f"*Cash Flow:* {_money(record.cash_flow_monthly)}/mo\n"
                f"*Score:* {record.investment_score or 0}/100\n"
                f"{record.listing_url}"
            ),
            "alert": match.preference.name,
            "property": record.model_dump(mode="json", exclude_none=True),
        }

    async def send(self, match: AlertMatch) -> None:
        payload = self._payload(match)
        client = self._client or httpx.AsyncClient(timeout=self.config.timeout)
        try:
            for url in self.config.urls:
                resp = await client.post(url, json=payload)
                resp.raise_for_status()
        finally:
            if self._client is None:
                await client.aclose()

        logger.info("Webhook alert sent for %s", match.record.address)
