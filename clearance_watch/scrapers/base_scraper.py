# clearance_watch/scrapers/base_scraper.py

"""Abstract base class for catalog scrapers."""

import logging
import re
import time
from abc import ABC, abstractmethod
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from bs4 import BeautifulSoup
from curl_cffi import requests as curl_requests

from clearance_watch.config.settings import Settings
from clearance_watch.errors import FetchError
from clearance_watch.models.record import Record

# Cloudflare / DataDome challenge page markers
_CHALLENGE_MARKERS: tuple[str, ...] = (
    "challenges.cloudflare.com",
    "cdn-cgi/challenge-platform",
    "just a moment",
    "cf-turnstile",
    "captcha-delivery.com",
)

# Listing pages longer than this carry footer text that trips the
# CAPTCHA keyword scan, so only short pages are scanned
_KEYWORD_SCAN_MAX_LEN = 5000


def challenge_reason(text: str, captcha_keywords: list[str]) -> str | None:
    """Return why *text* looks like a bot-challenge page, or None."""
    lower = text.lower()
    for marker in _CHALLENGE_MARKERS:
        if marker in lower:
            return f"challenge marker '{marker}'"
    if "<body" in lower and len(text) > _KEYWORD_SCAN_MAX_LEN:
        return None
    for keyword in captcha_keywords:
        if keyword in lower:
            return f"CAPTCHA keyword '{keyword}'"
    return None


class BaseScraper(ABC):
    """Abstract base class for catalog scrapers.

    Subclasses turn one listing page into an ordered list of
    :class:`Record` objects.  Any failure to reach or parse the page
    raises :class:`FetchError`; an empty list means the page really
    listed nothing.

    A scraper lives for a single cycle.  Retries and back-off apply
    within that cycle only; nothing is carried over to the next one.
    """

    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.logger = logging.getLogger(
            f"clearance_watch.{source_name}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._current_delay: float = self.settings.REQUEST_DELAY

    def _escalate_delay(self) -> None:
        """Double the current delay up to the configured max."""
        max_delay = (
            self.settings.REQUEST_DELAY
            * self.settings.MAX_DELAY_MULTIPLIER
        )
        self._current_delay = min(self._current_delay * 2, max_delay)
        self.logger.warning(
            "[%s] Rate-limited, delay escalated to %.1fs",
            self.source_name,
            self._current_delay,
        )

    def _fetch_primary(
        self, url: str, headers: dict[str, str],
    ) -> tuple[str | None, str]:
        """GET through curl_cffi with retries and adaptive delay.

        Returns ``(html, "")`` on success or ``(None, reason)`` once
        MAX_RETRIES attempts have failed.
        """
        reason = "no attempt made"
        for attempt in range(1, self.settings.MAX_RETRIES + 1):
            try:
                resp = self.session.get(
                    url, headers=headers, timeout=self.settings.REQUEST_TIMEOUT
                )
            except Exception as exc:
                reason = f"{type(exc).__name__}: {exc}"
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.source_name,
                    attempt,
                    exc,
                    exc_info=True,
                )
                time.sleep(self._current_delay * attempt)
                continue

            if resp.status_code != 200:
                reason = f"HTTP {resp.status_code}"
                self.logger.warning(
                    "[%s] %s on attempt %d",
                    self.source_name,
                    reason,
                    attempt,
                )
                if resp.status_code in (403, 429):
                    self._escalate_delay()
                    time.sleep(self._current_delay)
                continue

            challenge = challenge_reason(
                resp.text, self.settings.CAPTCHA_KEYWORDS
            )
            if challenge:
                reason = challenge
                self.logger.warning(
                    "[%s] Bot challenge on attempt %d (%s)",
                    self.source_name,
                    attempt,
                    challenge,
                )
                self._escalate_delay()
                time.sleep(self._current_delay)
                continue

            self._current_delay = self.settings.REQUEST_DELAY
            return resp.text, ""
        return None, reason

    def _fetch_fallback(self, url: str, headers: dict[str, str]) -> str:
        """GET through cloudscraper, raising FetchError on failure."""
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            resp: Any = scraper.get(
                url, headers=headers, timeout=self.settings.REQUEST_TIMEOUT
            )
        except Exception as exc:
            self.logger.error(
                "[%s] cloudscraper fallback also failed: %s",
                self.source_name,
                exc,
                exc_info=True,
            )
            raise FetchError(
                f"[{self.source_name}] page unreachable: {exc}", url=url
            ) from exc

        if resp.status_code != 200:
            raise FetchError(
                f"[{self.source_name}] page unreachable: "
                f"HTTP {resp.status_code}",
                url=url,
            )
        return str(resp.text)

    def _get_page(self, url: str) -> BeautifulSoup:
        """Fetch a page, falling back to cloudscraper on failure.

        Raises FetchError when neither transport returns a usable page.
        """
        headers: dict[str, str] = {
            **self.settings.DEFAULT_HEADERS,
            "Referer": self._get_homepage(),
        }

        html, reason = self._fetch_primary(url, headers)
        if html is None:
            self.logger.info(
                "[%s] curl_cffi exhausted (%s), falling back to "
                "cloudscraper",
                self.source_name,
                reason,
            )
            html = self._fetch_fallback(url, headers)
        return BeautifulSoup(html, "lxml")

    @staticmethod
    def extract_price(text: str | None) -> float | None:
        """Extract a numeric price from a string like '$1,299.99'.

        Returns None when the text holds no number.
        """
        if not text:
            return None
        numbers = re.findall(r"\d+\.?\d*", text.replace(",", ""))
        return float(numbers[0]) if numbers else None

    @abstractmethod
    def _get_homepage(self) -> str:
        """Return the homepage URL for the Referer header."""
        ...

    @abstractmethod
    def fetch_observed(self, source_url: str) -> list[Record]:
        """Fetch and parse one listing page into records."""
        ...
