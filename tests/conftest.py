"""
Shared fixtures and fakes for the vidfetch test suite.

Playwright, yt-dlp and the network are replaced with in-process fakes so the
whole suite runs offline. The fakes implement only the calls the code makes.
"""

import asyncio
import os
import pathlib
import sys
import tempfile

import pytest

# ─── Path + env setup (must happen before any vidfetch import) ───────────────

_ROOT = pathlib.Path(__file__).parent.parent
sys.path.insert(0, str(_ROOT))

os.environ.setdefault("DOWNLOADS_DIR", tempfile.mkdtemp(prefix="vidfetch-tests-"))

# ─── Constants ───────────────────────────────────────────────────────────────

YOUTUBE_URL = "https://youtu.be/dQw4w9WgXcQ"
TWEET_URL = "https://x.com/jh3yy/status/1851106664235061379"
INSTAGRAM_POST_URL = "https://www.instagram.com/p/Cxyz_123/"
INSTAGRAM_REEL_URL = "https://instagram.com/reel/Cabc123/"
RESOLVED_URL = "https://cdn.example.com/video.mp4?token=abc"


# ─── Fake browser ────────────────────────────────────────────────────────────

class FakePage:
    """Records every call; behaviour is tuned with constructor arguments."""

    def __init__(self, link=RESOLVED_URL, wait_error=None, goto_error=None, hang=False, close_error=None):
        self.link = link
        self.close_error = close_error
        self.wait_error = wait_error
        self.goto_error = goto_error
        self.hang = hang
        self.calls = []
        self.closed = False

    async def goto(self, url, wait_until=None, timeout=None):
        self.calls.append(("goto", url, wait_until, timeout))
        if self.goto_error:
            raise self.goto_error
        if self.hang:
            await asyncio.Event().wait()

    async def fill(self, selector, value):
        self.calls.append(("fill", selector, value))

    async def click(self, selector):
        self.calls.append(("click", selector))

    async def wait_for_selector(self, selector, timeout=None):
        self.calls.append(("wait_for_selector", selector, timeout))
        if self.wait_error:
            raise self.wait_error

    async def evaluate(self, script):
        self.calls.append(("evaluate",))
        return self.link

    async def close(self):
        self.closed = True
        if self.close_error:
            raise self.close_error


class FakeBrowser:
    def __init__(self, page_factory, close_error=None):
        self.page_factory = page_factory
        self.close_error = close_error
        self.pages = []
        self.closed = False

    async def new_page(self):
        page = self.page_factory()
        self.pages.append(page)
        return page

    async def close(self):
        self.closed = True
        if self.close_error:
            raise self.close_error


class FakeLauncher:
    """Async callable standing in for launch_chromium()."""

    def __init__(self, page_factory=FakePage, close_error=None):
        self.page_factory = page_factory
        self.close_error = close_error
        self.browsers = []

    async def __call__(self):
        browser = FakeBrowser(self.page_factory, close_error=self.close_error)
        self.browsers.append(browser)
        return browser

    @property
    def launch_count(self):
        return len(self.browsers)


# ─── Fake yt-dlp client ──────────────────────────────────────────────────────

YOUTUBE_FORMATS = [
    {"format_id": "18", "ext": "mp4", "height": 360, "format_note": "360p",
     "vcodec": "avc1.42001E", "acodec": "mp4a.40.2", "tbr": 500},
    {"format_id": "22", "ext": "mp4", "height": 720, "format_note": "720p",
     "vcodec": "avc1.64001F", "acodec": "mp4a.40.2", "tbr": 1500},
    {"format_id": "137", "ext": "mp4", "height": 1080, "format_note": "1080p",
     "vcodec": "avc1.640028", "acodec": "none", "tbr": 4000},
    {"format_id": "140", "ext": "m4a", "format_note": "medium",
     "vcodec": "none", "acodec": "mp4a.40.2", "tbr": 128},
]


class FakeYouTubeClient:
    def __init__(self, title="Never Gonna Give You Up!", formats=None, info_error=None, download_error=None):
        self.title = title
        self.formats = YOUTUBE_FORMATS if formats is None else formats
        self.info_error = info_error
        self.download_error = download_error
        self.info_urls = []
        self.downloads = []

    async def get_info(self, video_url):
        self.info_urls.append(video_url)
        if self.info_error:
            raise self.info_error
        return {"title": self.title, "formats": self.formats}

    async def download(self, info, fmt, output_path, on_progress=None):
        self.downloads.append((fmt["format_id"], output_path))
        if self.download_error:
            raise self.download_error
        output_path.write_bytes(b"\x00" * 1024)
        if on_progress:
            on_progress(1024, 1024)
        return output_path


# ─── Fixtures ────────────────────────────────────────────────────────────────

@pytest.fixture
def output_dir(tmp_path):
    """Temporary output directory for a single test."""
    return tmp_path / "downloads"


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def yt_client():
    return FakeYouTubeClient()


@pytest.fixture
def fake_stream(monkeypatch):
    """Replace the HTTP byte stream used by the Instagram strategy."""
    fetched = []

    async def _stream_to_file(url, output_path, timeout=None, client=None, on_progress=None):
        fetched.append((url, output_path))
        output_path.write_bytes(b"instagram-bytes")
        return output_path

    monkeypatch.setattr("vidfetch.strategies.stream_to_file", _stream_to_file)
    return fetched
