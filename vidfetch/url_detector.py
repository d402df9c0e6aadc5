"""
Platform detection and URL normalization.

Patterns are grouped per platform and tried in a fixed order
(YouTube, Twitter/X, Instagram); within a group the first matching variant wins.
Matching is case-insensitive, but identifiers are captured from the trimmed
input so case-sensitive ids (YouTube video ids, Instagram shortcodes) survive.
"""

import re
from typing import Callable, List, Optional, Tuple

from .models import ContentType, Platform, PlatformInfo

_PREFIX = r"^(?:https?://)?(?:www\.)?"


def _compile(pattern: str) -> "re.Pattern[str]":
    return re.compile(_PREFIX + pattern, re.IGNORECASE)


# (variant, pattern) pairs; order within each group is significant
YOUTUBE_PATTERNS: List[Tuple[str, "re.Pattern[str]"]] = [
    ("standard", _compile(r"youtube\.com/watch\?v=([a-zA-Z0-9_-]{11})")),
    ("short", _compile(r"youtu\.be/([a-zA-Z0-9_-]{11})")),
    ("mobile", _compile(r"m\.youtube\.com/watch\?v=([a-zA-Z0-9_-]{11})")),
    ("embed", _compile(r"youtube\.com/embed/([a-zA-Z0-9_-]{11})")),
    ("shorts", _compile(r"youtube\.com/shorts/([a-zA-Z0-9_-]{11})")),
]

TWITTER_PATTERNS: List[Tuple[str, "re.Pattern[str]"]] = [
    ("standard", _compile(r"twitter\.com/\w+/status/(\d+)")),
    ("mobile", _compile(r"mobile\.twitter\.com/\w+/status/(\d+)")),
    ("x", _compile(r"x\.com/\w+/status/(\d+)")),
]

INSTAGRAM_PATTERNS: List[Tuple[str, "re.Pattern[str]"]] = [
    ("post", _compile(r"instagram\.com/p/([a-zA-Z0-9_-]+)")),
    ("reel", _compile(r"instagram\.com/reels?/([a-zA-Z0-9_-]+)")),
    ("stories", _compile(r"instagram\.com/stories/([a-zA-Z0-9_-]+)")),
]

# Instagram variant -> (content type, canonical path segment)
_INSTAGRAM_VARIANTS = {
    "post": (ContentType.VIDEO, "p"),
    "reel": (ContentType.REEL, "reel"),
    "stories": (ContentType.STORY, "stories"),
}


def _youtube(variant: str, video_id: str) -> Tuple[ContentType, str]:
    content_type = ContentType.SHORT if variant == "shorts" else ContentType.VIDEO
    return content_type, f"https://www.youtube.com/watch?v={video_id}"


def _twitter(variant: str, tweet_id: str) -> Tuple[ContentType, str]:
    # Author handle is dropped on purpose; every domain maps to the same form
    return ContentType.VIDEO, f"https://twitter.com/i/status/{tweet_id}"


def _instagram(variant: str, post_id: str) -> Tuple[ContentType, str]:
    content_type, segment = _INSTAGRAM_VARIANTS[variant]
    return content_type, f"https://www.instagram.com/{segment}/{post_id}"


# Priority order across platforms
PLATFORM_GROUPS: List[Tuple[Platform, List[Tuple[str, "re.Pattern[str]"]], Callable[[str, str], Tuple[ContentType, str]]]] = [
    (Platform.YOUTUBE, YOUTUBE_PATTERNS, _youtube),
    (Platform.TWITTER, TWITTER_PATTERNS, _twitter),
    (Platform.INSTAGRAM, INSTAGRAM_PATTERNS, _instagram),
]


def detect_platform(url: str) -> PlatformInfo:
    """
    Detect the platform of a URL and extract its content id.

    Never raises: anything unrecognised comes back with is_valid=False and
    platform=unknown.

    Args:
        url: Raw URL as supplied by the caller.

    Returns:
        PlatformInfo describing the URL.
    """
    clean_url = (url or "").strip()
    raw_url = clean_url.lower()

    for platform, patterns, build in PLATFORM_GROUPS:
        for variant, pattern in patterns:
            match = pattern.match(clean_url)
            if not match:
                continue
            content_id = match.group(1)
            content_type, canonical_url = build(variant, content_id)
            return PlatformInfo(
                platform=platform,
                content_type=content_type,
                content_id=content_id,
                is_valid=True,
                raw_url=raw_url,
                canonical_url=canonical_url,
            )

    return PlatformInfo(
        platform=Platform.UNKNOWN,
        content_type=ContentType.UNKNOWN,
        content_id=None,
        is_valid=False,
        raw_url=raw_url,
        canonical_url=None,
    )


def is_valid_video_url(url: str) -> bool:
    """True if the URL points at supported video content."""
    return detect_platform(url).is_valid


def extract_video_id(url: str) -> Optional[str]:
    return detect_platform(url).content_id


def normalize_url(url: str) -> Optional[str]:
    """Canonical URL for the content, or None if the URL is not supported."""
    return detect_platform(url).canonical_url
