"""Alert dispatcher that routes alert matches to configured channels."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from dealfinder.config import AlertsConfig
from dealfinder.models import AlertMatch
from dealfinder.alerts.channels import BaseChannel, ConsoleChannel, WebhookChannel

logger = logging.getLogger(__name__)


class AlertDispatcher:
    """Dispatches alert matches to all configured channels."""

    def __init__(self, config: AlertsConfig, channels: dict[str, BaseChannel] | None = None):
        self.config = config
        self._channels: dict[str, BaseChannel] = {}

        if channels is not None:
            self._channels.update(channels)
            return
        if "console" in config.channels:
            self._channels["console"] = ConsoleChannel()
        if "webhook" in config.channels and config.webhook.urls:
            self._channels["webhook"] = WebhookChannel(config.webhook)

    async def dispatch(self, matches: list[AlertMatch]) -> list[AlertMatch]:
        """Send every match; channel failures are logged and skipped."""
        sent: list[AlertMatch] = []

        if not matches:
            logger.info("No properties matched any active alert")
            return sent

        logger.info("Dispatching %d alert match(es)", len(matches))

        for match in matches:
            sent_channels: list[str] = []

            for name, channel in self._channels.items():
                try:
                    await channel.send(match)
                    sent_channels.append(name)
                except Exception as e:
                    logger.error("Failed to send alert via %s: %s", name, e)

            sent.append(
                match.model_copy(
                    update={"channels_sent": sent_channels, "sent_at": datetime.utcnow()}
                )
            )

        return sent

    def dispatch_sync(self, matches: list[AlertMatch]) -> list[AlertMatch]:
        """Synchronous wrapper for dispatch."""
        return asyncio.run(self.dispatch(matches))
