"""
yt-dlp adapter: metadata, format selection and download for YouTube.

Quality specifiers accepted by choose_format():
  highest      : best format carrying both video and audio (default)
  lowest       : smallest format carrying both video and audio
  <N>p         : best muxed format at or below N pixels high, e.g. 720p
  <format_id>  : an exact yt-dlp format id / itag, e.g. 18
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yt_dlp

from . import config
from .fetch import ProgressCallback

logger = logging.getLogger(__name__)

_LABEL_RE = re.compile(r"(\d+)p")


def _has_video(fmt: Dict[str, Any]) -> bool:
    return fmt.get("vcodec") != "none"


def _has_audio(fmt: Dict[str, Any]) -> bool:
    return fmt.get("acodec") != "none"


def _rank(fmt: Dict[str, Any]) -> tuple:
    return (fmt.get("height") or 0, fmt.get("tbr") or 0)


def choose_format(formats: List[Dict[str, Any]], quality: str = "highest") -> Dict[str, Any]:
    """
    Pick one entry of a yt-dlp format list.

    Raises:
        ValueError: nothing matches the quality specifier.
    """
    if not formats:
        raise ValueError("No formats available")

    quality = (quality or "highest").strip().lower()

    for fmt in formats:
        if str(fmt.get("format_id", "")).lower() == quality:
            return fmt

    muxed = [f for f in formats if _has_video(f) and _has_audio(f)]

    if quality in ("highest", "lowest"):
        if not muxed:
            raise ValueError("No format with both video and audio available")
        ranked = sorted(muxed, key=_rank)
        return ranked[-1] if quality == "highest" else ranked[0]

    label = _LABEL_RE.fullmatch(quality)
    if label:
        max_height = int(label.group(1))
        fitting = [f for f in muxed if (f.get("height") or 0) <= max_height]
        if not fitting:
            raise ValueError(f"No format at or below {quality}")
        return max(fitting, key=_rank)

    raise ValueError(f"No format matching quality '{quality}'")


def quality_label(fmt: Dict[str, Any]) -> Optional[str]:
    """Human label for a format: its format_note, else <height>p."""
    if fmt.get("format_note"):
        return fmt["format_note"]
    if fmt.get("height"):
        return f"{fmt['height']}p"
    return None


class YouTubeClient:
    """Thin async wrapper around yt_dlp.YoutubeDL."""

    def __init__(
        self,
        socket_timeout: float = config.HTTP_TIMEOUT_SECONDS,
        extra_opts: Optional[Dict[str, Any]] = None,
    ):
        self.socket_timeout = socket_timeout
        self.extra_opts = extra_opts or {}

    def _build_opts(self, **overrides: Any) -> Dict[str, Any]:
        opts: Dict[str, Any] = {
            'quiet': True,
            'noprogress': True,
            'no_warnings': True,
            'noplaylist': True,
            'socket_timeout': self.socket_timeout,
            # failures surface to the caller; no retry loops inside yt-dlp
            'retries': 0,
            'fragment_retries': 0,
        }
        opts.update(self.extra_opts)
        opts.update(overrides)
        return opts

    async def get_info(self, video_url: str) -> Dict[str, Any]:
        """Fetch title and format list without downloading."""
        opts = self._build_opts(skip_download=True)

        def _extract():
            with yt_dlp.YoutubeDL(opts) as ydl:
                return ydl.extract_info(video_url, download=False)

        loop = asyncio.get_event_loop()
        info = await loop.run_in_executor(None, _extract)
        if not info:
            raise ValueError(f"yt-dlp returned no info for {video_url}")
        return info

    async def download(
        self,
        info: Dict[str, Any],
        fmt: Dict[str, Any],
        output_path: Path,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Path:
        """
        Download a single format from an already extracted info dict.

        on_progress is invoked from the worker thread with
        (downloaded_bytes, total_bytes or None).
        """
        def _hook(d: Dict[str, Any]) -> None:
            if d.get("status") != "downloading":
                return
            downloaded = d.get("downloaded_bytes") or 0
            total = d.get("total_bytes") or d.get("total_bytes_estimate")
            if total:
                logger.debug(f"Downloading: {downloaded / total * 100:.2f}%")
            if on_progress:
                on_progress(downloaded, total)

        opts = self._build_opts(
            format=str(fmt["format_id"]),
            outtmpl=str(output_path),
            progress_hooks=[_hook],
        )

        def _do_download():
            with yt_dlp.YoutubeDL(opts) as ydl:
                ydl.process_ie_result(info, download=True)

        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, _do_download)

        if not output_path.exists():
            raise FileNotFoundError(f"File not found on disk after yt-dlp download: {output_path}")
        return output_path


def yt_dlp_version() -> str:
    return yt_dlp.version.__version__
