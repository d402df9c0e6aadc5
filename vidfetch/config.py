"""
Runtime configuration read from environment variables
"""

import os
from pathlib import Path

# Output directory for downloaded files
DOWNLOADS_DIR = Path(os.getenv("DOWNLOADS_DIR", "./downloads"))

# YouTube format selector: highest, lowest, a label like 720p, or a format_id
DEFAULT_QUALITY = os.getenv("DEFAULT_QUALITY", "highest")

# Bounded waits for the scraping strategies (milliseconds, Playwright units)
RESOLVER_WAIT_TIMEOUT_MS = int(os.getenv("RESOLVER_WAIT_TIMEOUT_MS", "30000"))
NAVIGATION_TIMEOUT_MS = int(os.getenv("NAVIGATION_TIMEOUT_MS", "60000"))

# Plain HTTP fetches (seconds, httpx units)
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "60"))

# Browser launch
BROWSER_HEADLESS = os.getenv("BROWSER_HEADLESS", "true").lower() not in ("0", "false", "no")
CHROME_BIN = os.getenv("CHROME_BIN") or None

# Third-party resolver services
TWITTER_RESOLVER_URL = os.getenv("TWITTER_RESOLVER_URL", "https://twitsave.com/")
INSTAGRAM_RESOLVER_URL = os.getenv("INSTAGRAM_RESOLVER_URL", "https://snapinsta.app/")

# CORS for the HTTP surface
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
