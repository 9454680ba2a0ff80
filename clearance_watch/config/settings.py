# clearance_watch/config/settings.py

"""Central configuration for the clearance_watch monitor."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_list(name: str) -> list[str]:
    """Split a comma-separated environment variable into a list."""
    raw = os.getenv(name, "")
    return [part.strip() for part in raw.split(",") if part.strip()]


class Settings:
    """Central configuration for the clearance_watch monitor."""

    # --- Source ---
    SOURCE_URL: str = os.getenv(
        "CW_SOURCE_URL",
        "https://www.microcenter.com/search/search_results.aspx"
        "?N=4294964290&prt=clearance&NTK=all&sortby=pricehigh",
    )
    SITE_BASE_URL: str = os.getenv(
        "CW_SITE_BASE_URL", "https://www.microcenter.com"
    )

    # --- Scraping ---
    REQUEST_DELAY: float = 2.0          # Seconds between requests
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Retry count on transient failures

    # --- Resilience ---
    MAX_DELAY_MULTIPLIER: int = 8       # Cap for adaptive backoff
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "verify you are human",
        "unusual traffic",
        "automated requests",
    ]

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8,"
            "application/signed-exchange;v=b3;q=0.7"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "max-age=0",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "sec-fetch-dest": "document",
        "sec-fetch-mode": "navigate",
        "sec-fetch-site": "none",
        "sec-fetch-user": "?1",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Storage ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("CW_DATA_DIR", str(BASE_DIR / "data"))
    )
    BASELINE_KEY: str = "data.json"
    MUTE_KEY: str = "snooze.json"
    LOGS_DIR: Path = Path(
        os.getenv("CW_LOGS_DIR", str(BASE_DIR / "logs"))
    )

    # --- Schedule ---
    SCRAPE_INTERVAL_MINUTES: int = int(
        os.getenv("CW_SCRAPE_INTERVAL_MINUTES", "5")
    )

    # --- Notification ---
    NOTIFIER: str = os.getenv("CW_NOTIFIER", "email")
    MUTE_LINK_BASE: str = os.getenv(
        "CW_MUTE_LINK_BASE", "http://127.0.0.1:8000/api/mute/"
    )
    EMAIL_SMTP_HOST: str = os.getenv("CW_EMAIL_SMTP_HOST", "smtp.gmail.com")
    EMAIL_SMTP_PORT: int = int(os.getenv("CW_EMAIL_SMTP_PORT", "587"))
    EMAIL_USERNAME: str = os.getenv("CW_EMAIL_USERNAME", "")
    EMAIL_PASSWORD: str = os.getenv("CW_EMAIL_PASSWORD", "")
    EMAIL_FROM: str = os.getenv("CW_EMAIL_FROM", "")
    EMAIL_TO: list[str] = _env_list("CW_EMAIL_TO")
    EMAIL_SUBJECT: str = os.getenv(
        "CW_EMAIL_SUBJECT", "Microcenter OpenBox Discount Change"
    )

    # --- HTTP API ---
    API_HOST: str = os.getenv("CW_API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("CW_API_PORT", "8000"))
