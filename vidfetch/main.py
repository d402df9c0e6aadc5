"""
FastAPI surface for the social media downloader
"""

import time
import logging

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse

from . import __version__, config
from .downloader import downloader
from .errors import ResolutionFailedError, UnsupportedUrlError, VidfetchError
from .models import (
    AcquireRequest,
    AcquireResponse,
    ErrorResponse,
    HealthResponse,
    PlatformInfo,
)
from .url_detector import detect_platform
from .youtube import yt_dlp_version

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

start_time = time.time()

app = FastAPI(
    title="vidfetch",
    description="Download or resolve videos from YouTube, Twitter/X and Instagram",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _status_for(error: VidfetchError) -> int:
    if isinstance(error, UnsupportedUrlError):
        return 400
    if isinstance(error, ResolutionFailedError):
        return 502
    return 500


@app.exception_handler(VidfetchError)
async def vidfetch_error_handler(request, exc: VidfetchError):
    return JSONResponse(
        status_code=_status_for(exc),
        content=ErrorResponse(error=exc.to_detail()).model_dump(mode='json'),
    )


# ============================================================================
# API ENDPOINTS
# ============================================================================


@app.get("/download")
async def download(url: str = Query(..., description="Video page URL")):
    """
    Acquire a video and hand it back.

    Local files are streamed as an attachment; link-only results (Twitter/X)
    redirect to the resolved asset URL.
    """
    logger.info(f"📥 Download request: {url}")
    result = await downloader.acquire(url)

    if result.produces_local_file and result.local_path:
        return FileResponse(
            path=result.local_path,
            media_type="video/mp4",
            filename=result.local_path.name,
        )
    return RedirectResponse(result.asset_url)


@app.post("/api/v1/acquire", response_model=AcquireResponse)
async def acquire(request: AcquireRequest):
    """Acquire a video and return the result record as JSON."""
    logger.info(f"📥 Acquire request: {request.url} (quality={request.quality})")
    result = await downloader.acquire(request.url, quality=request.quality)
    return AcquireResponse(result=result)


@app.get("/api/v1/classify", response_model=PlatformInfo)
async def classify(url: str = Query(..., description="URL to classify")):
    """Classify a URL without fetching anything."""
    return detect_platform(url)


@app.get("/api/v1/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - start_time,
        yt_dlp_version=yt_dlp_version(),
    )


@app.get("/")
async def root():
    """Root endpoint with service info"""
    return {
        "service": "vidfetch",
        "version": __version__,
        "status": "running",
        "endpoints": {
            "download": "/download?url=",
            "acquire": "/api/v1/acquire",
            "classify": "/api/v1/classify?url=",
            "health": "/api/v1/health",
        },
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
