"""
Streaming HTTP download to a local file
"""

import logging
from pathlib import Path
from typing import Callable, Optional

import httpx

from . import config

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, Optional[int]], None]

CHUNK_SIZE = 65536


async def stream_to_file(
    url: str,
    output_path: Path,
    timeout: float = config.HTTP_TIMEOUT_SECONDS,
    client: Optional[httpx.AsyncClient] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> Path:
    """
    GET url and write the body to output_path chunk by chunk.

    Raises httpx.HTTPError on transport failures and non-2xx responses.
    A partially written file is left in place on failure.
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    try:
        async with client.stream("GET", url) as resp:
            resp.raise_for_status()
            total = int(resp.headers["content-length"]) if resp.headers.get("content-length") else None
            downloaded = 0
            with open(output_path, "wb") as f:
                async for chunk in resp.aiter_bytes(CHUNK_SIZE):
                    f.write(chunk)
                    downloaded += len(chunk)
                    if on_progress:
                        on_progress(downloaded, total)
    finally:
        if owns_client:
            await client.aclose()

    logger.info(f"💾 Saved {output_path.name} ({downloaded / 1024 / 1024:.2f} MB)")
    return output_path
