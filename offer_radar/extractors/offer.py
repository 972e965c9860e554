from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import urljoin

from loguru import logger
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright
from playwright_stealth import Stealth

from offer_radar.config import Settings
from offer_radar.models import Offer

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-renderer-backgrounding",
    "--single-process",
]

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"

# Runs inside the page; receives [titleSelector, linkSelector]
EXTRACT_OFFER_SCRIPT = """
([titleSelector, linkSelector]) => {
    const titleEl = document.querySelector(titleSelector);
    const linkEl = document.querySelector(linkSelector);
    return {
        title: (titleEl && titleEl.innerText ? titleEl.innerText.trim() : '') || null,
        link: (linkEl ? linkEl.href : '') || null,
    };
}
"""


class ExtractionTimeout(Exception):
    """The page or the offer container did not load in time."""


def normalize_link(link: Optional[str], base_url: str) -> Optional[str]:
    """Resolve a link against the page URL so the result is always absolute."""
    if not link or not link.strip():
        return None
    return urljoin(base_url, link.strip())


class OfferExtractor:
    """Renders the tracked page in headless Chromium and reads the current offer."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _new_page(self, browser):
        context = browser.new_context(
            user_agent=self.settings.browser_user_agent,
            locale="en-US",
        )
        page = context.new_page()
        page.set_extra_http_headers({
            "Accept-Language": self.settings.accept_language,
            "Accept": ACCEPT_HEADER,
        })
        Stealth().apply_stealth_sync(page)
        return page

    def fetch_current_offer(self) -> Offer:
        """Return the offer currently shown on the page.

        Missing title or link elements produce an Offer with that field unset;
        validity is decided by the caller.

        Raises:
            ExtractionTimeout: navigation or the container wait timed out.
        """
        settings = self.settings
        logger.info("Launching browser")
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True, args=BROWSER_ARGS)
            try:
                page = self._new_page(browser)

                logger.info(f"Navigating to {settings.target_url}")
                try:
                    page.goto(
                        settings.target_url,
                        wait_until="networkidle",
                        timeout=settings.page_load_timeout_ms,
                    )
                except PlaywrightTimeoutError as e:
                    raise ExtractionTimeout(
                        f"Page load exceeded {settings.page_load_timeout_ms} ms"
                    ) from e

                try:
                    page.wait_for_selector(
                        settings.offer_container_selector,
                        timeout=settings.container_timeout_ms,
                    )
                except PlaywrightTimeoutError as e:
                    raise ExtractionTimeout(
                        f"Offer container {settings.offer_container_selector!r} "
                        f"did not appear within {settings.container_timeout_ms} ms"
                    ) from e

                data: Dict[str, Any] = page.evaluate(
                    EXTRACT_OFFER_SCRIPT,
                    [settings.offer_title_selector, settings.offer_link_selector],
                ) or {}
            finally:
                browser.close()

        offer = Offer(
            title=data.get("title") or None,
            link=normalize_link(data.get("link"), settings.target_url),
        )
        logger.info(f"Extracted offer: {offer}")
        return offer
