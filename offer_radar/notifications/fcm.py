from __future__ import annotations

import json
from typing import Any, Dict, List

import firebase_admin
from firebase_admin import credentials, messaging
from loguru import logger

from offer_radar.config import Settings
from offer_radar.models import DeliveryResult

APP_NAME = "offer-radar"


def build_message(payload: Dict[str, Any]) -> messaging.Message:
    """Convert a formatted payload into a firebase Message."""
    notification = payload["notification"]
    webpush = payload["webpush"]
    webpush_notification = webpush["notification"]
    return messaging.Message(
        token=payload["token"],
        notification=messaging.Notification(
            title=notification["title"],
            body=notification["body"],
        ),
        data=payload["data"],
        webpush=messaging.WebpushConfig(
            notification=messaging.WebpushNotification(
                title=webpush_notification["title"],
                body=webpush_notification["body"],
                custom_data={"click_action": webpush_notification["click_action"]},
            ),
            fcm_options=messaging.WebpushFCMOptions(
                link=webpush["fcm_options"]["link"]
            ),
        ),
    )


class FcmSender:
    """Send push messages via Firebase Cloud Messaging."""

    def __init__(self, settings: Settings):
        self.app = self._get_app(settings.firebase_config)

    @staticmethod
    def _get_app(firebase_config: str) -> firebase_admin.App:
        try:
            return firebase_admin.get_app(APP_NAME)
        except ValueError:
            pass
        service_account = json.loads(firebase_config or "{}")
        return firebase_admin.initialize_app(
            credentials.Certificate(service_account), name=APP_NAME
        )

    def send_batch(self, payloads: List[Dict[str, Any]]) -> List[DeliveryResult]:
        """Send one multicast request and return a result per payload, in order."""
        messages = [build_message(payload) for payload in payloads]
        response = messaging.send_each(messages, app=self.app)

        results = []
        for payload, item in zip(payloads, response.responses):
            error = None
            if not item.success:
                error = str(item.exception) if item.exception else "unknown error"
            results.append(
                DeliveryResult(target=payload["token"], success=item.success, error_detail=error)
            )
        logger.debug(
            f"FCM batch: {response.success_count} ok, {response.failure_count} failed"
        )
        return results
