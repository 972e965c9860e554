from __future__ import annotations

from typing import List

from loguru import logger

from offer_radar.stores.base import RecordSource


class SubscriberRegistry:
    """Reads registered device tokens from a labeled record source."""

    def __init__(self, source: RecordSource, label: str, state: str = "open"):
        self.source = source
        self.label = label
        self.state = state

    def list_targets(self) -> List[str]:
        """Return trimmed, non-empty tokens. Query failures yield an empty list."""
        logger.info("Fetching device tokens from registry")
        try:
            bodies = self.source.list_bodies(self.label, self.state)
        except Exception as e:
            logger.error(f"Error fetching tokens: {e}")
            return []

        targets = [body.strip() for body in bodies if body and body.strip()]
        logger.info(f"Found {len(targets)} registered devices")
        return targets
