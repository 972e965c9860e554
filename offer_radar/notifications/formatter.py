from __future__ import annotations

from typing import Any, Dict

from offer_radar.models import Offer


def format_offer_message(token: str, offer: Offer, title: str) -> Dict[str, Any]:
    """Build the push message for one device.

    The display handler on the client reads ``notification.title``,
    ``notification.body`` and ``data.url``; the webpush section carries the
    same content for browsers that render the notification themselves.

    Returns:
        dict with keys "token", "notification", "data" and "webpush".
    """
    body = offer.title or ""
    link = offer.link or ""
    return {
        "token": token,
        "notification": {"title": title, "body": body},
        "data": {"url": link},
        "webpush": {
            "notification": {
                "title": title,
                "body": body,
                "click_action": link,
            },
            "fcm_options": {"link": link},
        },
    }
