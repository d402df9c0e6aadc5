"""
Per-platform acquisition strategies.

Each strategy turns a classified URL into an AcquisitionResult. The
produces_local_file flag says whether the strategy writes the video to disk
(YouTube, Instagram) or only resolves a remote URL (Twitter/X).
"""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Optional

from . import config
from .browser import RenderSession
from .errors import DownloadFailedError
from .fetch import ProgressCallback, stream_to_file
from .models import AcquisitionResult, Platform, PlatformInfo
from .resolvers import LinkResolver
from .youtube import YouTubeClient, choose_format, quality_label

logger = logging.getLogger(__name__)

def sanitize_filename(filename: str) -> str:
    """Replace every character outside [a-zA-Z0-9] with '_' and lower-case."""
    return re.sub(r"[^a-zA-Z0-9]", "_", filename).lower()


class PlatformStrategy(ABC):
    """acquire(PlatformInfo) -> AcquisitionResult for one platform."""

    platform: ClassVar[Platform]
    produces_local_file: ClassVar[bool]

    @abstractmethod
    async def acquire(
        self,
        info: PlatformInfo,
        source_url: str,
        session: RenderSession,
        quality: Optional[str] = None,
    ) -> AcquisitionResult:
        ...


class YouTubeStrategy(PlatformStrategy):
    """Metadata and bytes straight from YouTube via yt-dlp; never touches the browser."""

    platform = Platform.YOUTUBE
    produces_local_file = True

    def __init__(
        self,
        output_dir: Path,
        client: Optional[YouTubeClient] = None,
        default_quality: str = config.DEFAULT_QUALITY,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.output_dir = output_dir
        self.client = client or YouTubeClient()
        self.default_quality = default_quality
        self.on_progress = on_progress

    async def acquire(
        self,
        info: PlatformInfo,
        source_url: str,
        session: RenderSession,
        quality: Optional[str] = None,
    ) -> AcquisitionResult:
        quality = quality or self.default_quality
        try:
            video_info = await self.client.get_info(info.canonical_url)
            fmt = choose_format(video_info.get("formats") or [], quality)

            title = video_info.get("title") or info.content_id
            output_path = self.output_dir / f"{sanitize_filename(title)}.mp4"
            logger.info(f"⬇️ YouTube format {fmt.get('format_id')} ({quality_label(fmt)}) -> {output_path}")

            await self.client.download(video_info, fmt, output_path, on_progress=self.on_progress)
        except Exception as e:
            raise DownloadFailedError(f"Failed to download YouTube video: {e}", cause=e) from e

        return AcquisitionResult(
            title=title,
            source_url=source_url,
            platform=self.platform,
            asset_url=source_url,
            local_path=output_path,
            produces_local_file=self.produces_local_file,
            quality=quality_label(fmt),
            container=fmt.get("ext"),
        )


class TwitterStrategy(PlatformStrategy):
    """Resolves the tweet's video URL; nothing is written to disk."""

    platform = Platform.TWITTER
    produces_local_file = False

    def __init__(self, resolver: LinkResolver) -> None:
        self.resolver = resolver

    async def acquire(
        self,
        info: PlatformInfo,
        source_url: str,
        session: RenderSession,
        quality: Optional[str] = None,
    ) -> AcquisitionResult:
        asset_url = await self.resolver.resolve(session, info.canonical_url)
        return AcquisitionResult(
            title=f"twitter_{info.content_id}",
            source_url=source_url,
            platform=self.platform,
            asset_url=asset_url,
            local_path=None,
            produces_local_file=self.produces_local_file,
        )


def instagram_post_id(info: PlatformInfo) -> str:
    """Segment after /p/ in the canonical URL, else the classifier's content id."""
    url = info.canonical_url or ""
    if "/p/" in url:
        segment = url.split("/p/", 1)[1].split("/")[0]
        if segment:
            return segment
    return info.content_id


class InstagramStrategy(PlatformStrategy):
    """
    Resolves the post's video URL, then streams it to disk.

    Failures in the resolution step (navigation, element timeout, no link on
    the page) raise ResolutionFailedError. Failures while streaming the bytes
    raise DownloadFailedError.
    """

    platform = Platform.INSTAGRAM
    produces_local_file = True

    def __init__(
        self,
        resolver: LinkResolver,
        output_dir: Path,
        http_timeout: float = config.HTTP_TIMEOUT_SECONDS,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.resolver = resolver
        self.output_dir = output_dir
        self.http_timeout = http_timeout
        self.on_progress = on_progress

    async def acquire(
        self,
        info: PlatformInfo,
        source_url: str,
        session: RenderSession,
        quality: Optional[str] = None,
    ) -> AcquisitionResult:
        asset_url = await self.resolver.resolve(session, info.canonical_url)

        post_id = instagram_post_id(info)
        output_path = self.output_dir / f"instagram_{post_id}.mp4"
        try:
            await stream_to_file(
                asset_url,
                output_path,
                timeout=self.http_timeout,
                on_progress=self.on_progress,
            )
        except Exception as e:
            raise DownloadFailedError(f"Failed to download Instagram video: {e}", cause=e) from e

        return AcquisitionResult(
            title=f"instagram_{post_id}",
            source_url=source_url,
            platform=self.platform,
            asset_url=asset_url,
            local_path=output_path,
            produces_local_file=self.produces_local_file,
        )
