from __future__ import annotations

import json
from typing import Optional

from loguru import logger

from offer_radar.models import Offer
from offer_radar.stores.base import ContentStore


class OfferStateStore:
    """Persists the last notified offer as a JSON document in a content store."""

    def __init__(self, store: ContentStore, path: str):
        self.store = store
        self.path = path

    def read_last_offer(self) -> Optional[Offer]:
        """Return the last persisted offer, or None on first run / unreadable state."""
        try:
            stored = self.store.get(self.path)
        except Exception as e:
            logger.warning(f"Could not read {self.path}: {e}")
            return None

        if stored is None:
            logger.info("No previous offer found")
            return None

        try:
            data = json.loads(stored.body)
        except ValueError as e:
            logger.warning(f"Unparsable offer state at {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"Unexpected offer state at {self.path}: {data!r}")
            return None
        return Offer.from_dict(data)

    def write_offer(self, offer: Offer) -> bool:
        """Overwrite the persisted offer.

        The current version token is re-read right before the write so the
        update is guarded against concurrent writers. This narrows, but does
        not close, the race between two overlapping runs.

        Returns:
            True if the write succeeded, False otherwise.
        """
        body = json.dumps(offer.to_dict(), indent=2, ensure_ascii=False)
        message = f"Update last offer: {offer.title}"
        try:
            version = None
            try:
                current = self.store.get(self.path)
            except Exception as e:
                logger.warning(f"Could not read current version of {self.path}: {e}")
                current = None
            if current is not None:
                version = current.version

            self.store.put(self.path, body, message, version=version)
        except Exception as e:
            logger.error(f"Error saving offer: {e}")
            return False

        logger.info(f"Saved offer to {self.path}")
        return True
