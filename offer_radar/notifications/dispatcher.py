from __future__ import annotations

from typing import Iterator, List, Sequence

from loguru import logger

from offer_radar.models import DeliveryResult, Offer
from offer_radar.notifications.formatter import format_offer_message

DEFAULT_BATCH_SIZE = 5


def batched(items: Sequence[str], size: int) -> Iterator[List[str]]:
    """Yield consecutive slices of at most ``size`` items."""
    if size < 1:
        raise ValueError(f"batch size must be positive, got {size}")
    for i in range(0, len(items), size):
        yield list(items[i : i + size])


class NotificationDispatcher:
    """Fans an offer out to every target in sequential batches.

    Delivery is best-effort per target: a failed token, or a batch whose send
    call raises, is recorded and logged and the remaining batches still go out.
    """

    def __init__(self, sender, notification_title: str, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError(f"batch size must be positive, got {batch_size}")
        self.sender = sender
        self.notification_title = notification_title
        self.batch_size = batch_size

    def dispatch(self, targets: Sequence[str], offer: Offer) -> List[DeliveryResult]:
        """Send the offer to all targets.

        Args:
            targets: Device tokens; duplicates receive duplicate sends.
            offer: A valid offer.

        Returns:
            One DeliveryResult per target, in target order.
        """
        logger.info(f"Sending notifications to {len(targets)} devices")
        results: List[DeliveryResult] = []
        total_sent = 0

        for number, batch in enumerate(batched(targets, self.batch_size), start=1):
            payloads = [
                format_offer_message(token, offer, self.notification_title)
                for token in batch
            ]
            try:
                batch_results = self.sender.send_batch(payloads)
            except Exception as e:
                logger.error(f"Batch {number}: send failed for {len(batch)} devices: {e}")
                batch_results = [
                    DeliveryResult(target=token, success=False, error_detail=str(e))
                    for token in batch
                ]

            sent = sum(1 for result in batch_results if result.success)
            total_sent += sent
            logger.info(f"Batch {number}: {sent}/{len(batch)} sent")

            for result in batch_results:
                if not result.success:
                    logger.warning(
                        f"Failed token: {result.target} - {result.error_detail}"
                    )
            results.extend(batch_results)

        logger.info(f"Total notifications sent: {total_sent}")
        return results
