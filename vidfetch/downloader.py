"""
Social media video downloader.

acquire(url) classifies the URL, picks the strategy registered for its
platform and runs it inside a RenderSession that belongs to this call only:

  youtube    : yt-dlp metadata + format download to <output_dir>/<title>.mp4
  twitter    : twitsave resolves the tweet to a direct video URL (no download)
  instagram  : snapinsta resolves the post, then the file is streamed to
               <output_dir>/instagram_<id>.mp4

The browser is launched only if a scraping strategy opens a page, and is
closed when acquire() returns, raises, or is cancelled.

Environment variables (see config.py):
  DOWNLOADS_DIR, DEFAULT_QUALITY, RESOLVER_WAIT_TIMEOUT_MS,
  NAVIGATION_TIMEOUT_MS, HTTP_TIMEOUT_SECONDS, BROWSER_HEADLESS, CHROME_BIN,
  TWITTER_RESOLVER_URL, INSTAGRAM_RESOLVER_URL
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from . import config
from .browser import Launcher, RenderSession
from .errors import DownloadFailedError, UnsupportedUrlError, VidfetchError
from .fetch import ProgressCallback
from .models import AcquisitionResult, Platform
from .resolvers import LinkResolver, snapinsta_resolver, twitsave_resolver
from .strategies import (
    InstagramStrategy,
    PlatformStrategy,
    TwitterStrategy,
    YouTubeStrategy,
)
from .url_detector import detect_platform
from .youtube import YouTubeClient

logger = logging.getLogger(__name__)


class SocialMediaDownloader:
    """Classifies a URL and dispatches it to the matching platform strategy."""

    def __init__(
        self,
        output_dir: Optional[Path] = None,
        default_quality: str = config.DEFAULT_QUALITY,
        wait_timeout_ms: int = config.RESOLVER_WAIT_TIMEOUT_MS,
        navigation_timeout_ms: int = config.NAVIGATION_TIMEOUT_MS,
        http_timeout: float = config.HTTP_TIMEOUT_SECONDS,
        youtube_client: Optional[YouTubeClient] = None,
        twitter_resolver: Optional[LinkResolver] = None,
        instagram_resolver: Optional[LinkResolver] = None,
        launcher: Optional[Launcher] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.output_dir = Path(output_dir) if output_dir is not None else config.DOWNLOADS_DIR
        self._launcher = launcher
        self._ensure_output_directory()

        twitter_resolver = twitter_resolver or twitsave_resolver(
            wait_timeout_ms=wait_timeout_ms,
            navigation_timeout_ms=navigation_timeout_ms,
        )
        instagram_resolver = instagram_resolver or snapinsta_resolver(
            wait_timeout_ms=wait_timeout_ms,
            navigation_timeout_ms=navigation_timeout_ms,
        )

        self.strategies: Dict[Platform, PlatformStrategy] = {
            Platform.YOUTUBE: YouTubeStrategy(
                self.output_dir,
                client=youtube_client or YouTubeClient(socket_timeout=http_timeout),
                default_quality=default_quality,
                on_progress=on_progress,
            ),
            Platform.TWITTER: TwitterStrategy(twitter_resolver),
            Platform.INSTAGRAM: InstagramStrategy(
                instagram_resolver,
                self.output_dir,
                http_timeout=http_timeout,
                on_progress=on_progress,
            ),
        }

    def _ensure_output_directory(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def produces_local_file(self, platform: Platform) -> bool:
        """Whether acquire() for this platform writes the video to disk."""
        return self.strategies[platform].produces_local_file

    async def acquire(self, url: str, quality: Optional[str] = None) -> AcquisitionResult:
        """
        Acquire the video behind url.

        Raises:
            UnsupportedUrlError: the URL is not a supported platform/shape.
            ResolutionFailedError: a resolver service produced no video link.
            DownloadFailedError: metadata, format selection or transfer failed.
        """
        info = detect_platform(url)
        if not info.is_valid:
            logger.warning(f"⚠️ Unsupported URL: {url}")
            raise UnsupportedUrlError(url)

        strategy = self.strategies[info.platform]
        logger.info(f"📥 {info.platform.value}/{info.content_type.value} {info.content_id} ({info.canonical_url})")

        async with RenderSession(self._launcher) as session:
            try:
                result = await strategy.acquire(info, url, session, quality=quality)
            except VidfetchError as e:
                logger.error(f"❌ {info.platform.value} acquisition failed: {e}")
                raise
            except Exception as e:
                logger.exception(f"💥 Unexpected error acquiring {url}")
                raise DownloadFailedError(f"Unexpected error: {e}", cause=e) from e

        logger.info(f"✅ {result.title} -> {result.local_path or result.asset_url}")
        return result


# Global singleton
downloader = SocialMediaDownloader()
