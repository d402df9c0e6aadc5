"""
Link resolvers: turn a post URL into a direct video URL via a third-party
downloader site rendered in the call's browser session.

The selectors below describe markup we do not control; when a service changes
its page, swap in a different LinkResolver rather than touching the strategies.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from . import config
from .browser import RenderSession
from .errors import ResolutionFailedError

logger = logging.getLogger(__name__)


class LinkResolver(ABC):
    """resolve(session, url) -> direct asset URL, or ResolutionFailedError."""

    name: str = "resolver"

    @abstractmethod
    async def resolve(self, session: RenderSession, content_url: str) -> str:
        ...


class FormLinkResolver(LinkResolver):
    """
    Drives a "paste a link, press download" style page:
    goto -> fill input -> click submit -> wait for ready_selector -> read link.

    link_script is evaluated in the page and must return the href (or null).
    The page is always closed before returning; the session is left open.
    """

    def __init__(
        self,
        name: str,
        service_url: str,
        input_selector: str,
        submit_selector: str,
        ready_selector: str,
        link_script: str,
        wait_timeout_ms: int = config.RESOLVER_WAIT_TIMEOUT_MS,
        navigation_timeout_ms: int = config.NAVIGATION_TIMEOUT_MS,
    ) -> None:
        self.name = name
        self.service_url = service_url
        self.input_selector = input_selector
        self.submit_selector = submit_selector
        self.ready_selector = ready_selector
        self.link_script = link_script
        self.wait_timeout_ms = wait_timeout_ms
        self.navigation_timeout_ms = navigation_timeout_ms

    async def resolve(self, session: RenderSession, content_url: str) -> str:
        page = await session.new_page()
        try:
            link = await self._drive(page, content_url)
        except ResolutionFailedError:
            raise
        except Exception as e:
            raise ResolutionFailedError(
                f"[{self.name}] Could not resolve video URL for {content_url}: {e}",
                cause=e,
            ) from e
        finally:
            try:
                await page.close()
            except Exception as e:
                logger.warning(f"⚠️ [{self.name}] Page close failed: {e}")

        logger.info(f"🔗 [{self.name}] Resolved {content_url}")
        return link

    async def _drive(self, page, content_url: str) -> str:
        logger.info(f"[{self.name}] Navigating to {self.service_url}")
        await page.goto(
            self.service_url,
            wait_until="networkidle",
            timeout=self.navigation_timeout_ms,
        )
        await page.fill(self.input_selector, content_url)
        await page.click(self.submit_selector)

        await page.wait_for_selector(self.ready_selector, timeout=self.wait_timeout_ms)

        link: Optional[str] = await page.evaluate(self.link_script)
        if not link:
            raise ResolutionFailedError(f"[{self.name}] Could not find video URL for {content_url}")
        return link


def twitsave_resolver(
    service_url: str = config.TWITTER_RESOLVER_URL,
    wait_timeout_ms: int = config.RESOLVER_WAIT_TIMEOUT_MS,
    navigation_timeout_ms: int = config.NAVIGATION_TIMEOUT_MS,
) -> FormLinkResolver:
    """Tweet resolver; first entry of the quality list is the highest."""
    return FormLinkResolver(
        name="twitsave",
        service_url=service_url,
        input_selector='input[name="url"]',
        submit_selector='button[type="submit"]',
        ready_selector="video",
        link_script="""
            () => {
                const a = document.querySelector('td ul li a');
                return a ? a.getAttribute('href') : null;
            }
        """,
        wait_timeout_ms=wait_timeout_ms,
        navigation_timeout_ms=navigation_timeout_ms,
    )


def snapinsta_resolver(
    service_url: str = config.INSTAGRAM_RESOLVER_URL,
    wait_timeout_ms: int = config.RESOLVER_WAIT_TIMEOUT_MS,
    navigation_timeout_ms: int = config.NAVIGATION_TIMEOUT_MS,
) -> FormLinkResolver:
    return FormLinkResolver(
        name="snapinsta",
        service_url=service_url,
        input_selector="#url",
        submit_selector="#submit",
        ready_selector=".download-content .download-items a",
        link_script="""
            () => {
                const a = document.querySelector('.download-content .download-items a');
                return a ? a.getAttribute('href') : null;
            }
        """,
        wait_timeout_ms=wait_timeout_ms,
        navigation_timeout_ms=navigation_timeout_ms,
    )
