"""Change-detection and fan-out pipeline.

One run:
  1. load targets            (none -> stop, extraction skipped)
  2. extract current offer   (invalid -> stop)
  3. compare with last offer (same title -> stop)
  4. dispatch to all targets
  5. persist the offer, whatever the per-target outcomes were

Notification and persistence are not transactional: if step 5 fails the next
run sees the offer as new again and re-notifies. Delivery is at-least-once.
"""
from __future__ import annotations

from typing import Optional

from loguru import logger

from offer_radar.config import Settings
from offer_radar.extractors.offer import OfferExtractor
from offer_radar.models import Offer, RunOutcome, RunReport
from offer_radar.notifications.dispatcher import NotificationDispatcher
from offer_radar.registry import SubscriberRegistry
from offer_radar.state import OfferStateStore
from offer_radar.stores.github import GitHubClient, GitHubContentStore, GitHubIssueSource


def is_new_offer(current: Offer, last: Optional[Offer]) -> bool:
    """The title is the only change signal; a link-only change is not new."""
    return last is None or last.title != current.title


class OfferWatchPipeline:
    def __init__(
        self,
        registry: SubscriberRegistry,
        extractor: OfferExtractor,
        state_store: OfferStateStore,
        dispatcher: Optional[NotificationDispatcher],
        dry_run: bool = False,
    ):
        if dispatcher is None and not dry_run:
            raise ValueError("dispatcher is required unless dry_run is set")
        self.registry = registry
        self.extractor = extractor
        self.state_store = state_store
        self.dispatcher = dispatcher
        self.dry_run = dry_run

    def run(self) -> RunReport:
        """Run the pipeline once. Exceptions from extraction propagate."""
        targets = self.registry.list_targets()
        if not targets:
            logger.info("No device tokens registered yet")
            return self._finish(RunReport(outcome=RunOutcome.no_targets))

        offer = self.extractor.fetch_current_offer()
        if not offer.is_valid:
            logger.info("No offer found")
            return self._finish(
                RunReport(
                    outcome=RunOutcome.invalid_offer,
                    targets_count=len(targets),
                    offer=offer,
                )
            )

        last_offer = self.state_store.read_last_offer()
        if not is_new_offer(offer, last_offer):
            logger.info("Same offer as last time, no notifications sent")
            return self._finish(
                RunReport(
                    outcome=RunOutcome.unchanged,
                    targets_count=len(targets),
                    offer=offer,
                )
            )

        if self.dry_run:
            logger.info(
                f"Dry run: would notify {len(targets)} devices about {offer.title!r}"
            )
            return self._finish(
                RunReport(
                    outcome=RunOutcome.dry_run,
                    targets_count=len(targets),
                    offer=offer,
                )
            )

        results = self.dispatcher.dispatch(targets, offer)
        success_count = sum(1 for result in results if result.success)

        persisted = self.state_store.write_offer(offer)
        if not persisted:
            logger.warning(
                "Offer state not saved; the next run will treat this offer as new"
            )

        return self._finish(
            RunReport(
                outcome=RunOutcome.dispatched,
                targets_count=len(targets),
                success_count=success_count,
                failure_count=len(results) - success_count,
                persisted=persisted,
                offer=offer,
            )
        )

    @staticmethod
    def _finish(report: RunReport) -> RunReport:
        logger.info(f"Run completed: {report.summary()}")
        return report


def build_pipeline(
    settings: Settings, client: GitHubClient, dry_run: bool = False
) -> OfferWatchPipeline:
    """Wire the GitHub, Playwright and FCM backed components from settings."""
    registry = SubscriberRegistry(
        GitHubIssueSource(client),
        label=settings.registry_label,
        state=settings.registry_state,
    )
    state_store = OfferStateStore(GitHubContentStore(client), settings.state_path)

    dispatcher = None
    if not dry_run:
        from offer_radar.notifications.fcm import FcmSender

        dispatcher = NotificationDispatcher(
            FcmSender(settings),
            notification_title=settings.notification_title,
            batch_size=settings.batch_size,
        )

    return OfferWatchPipeline(
        registry=registry,
        extractor=OfferExtractor(settings),
        state_store=state_store,
        dispatcher=dispatcher,
        dry_run=dry_run,
    )
