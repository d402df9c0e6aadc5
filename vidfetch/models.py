"""
Pydantic models for acquisition results and request/response schemas
"""

from pathlib import Path
from typing import Optional, Dict, Any
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Platform(str, Enum):
    """Supported platforms"""
    YOUTUBE = "youtube"
    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    UNKNOWN = "unknown"


class ContentType(str, Enum):
    """Kind of content a URL points at"""
    VIDEO = "video"
    SHORT = "short"
    REEL = "reel"
    STORY = "story"
    UNKNOWN = "unknown"


class ErrorCode(str, Enum):
    """Error code classifications"""
    INVALID_URL = "INVALID_URL"
    RESOLUTION_FAILED = "RESOLUTION_FAILED"
    DOWNLOAD_FAILED = "DOWNLOAD_FAILED"
    SERVER_ERROR = "SERVER_ERROR"


class PlatformInfo(BaseModel):
    """Classification of a single URL"""
    model_config = ConfigDict(frozen=True)

    platform: Platform
    content_type: ContentType
    content_id: Optional[str] = None
    is_valid: bool
    raw_url: str = Field(..., description="Trimmed, lower-cased input")
    canonical_url: Optional[str] = None


class AcquisitionResult(BaseModel):
    """
    Outcome of one acquire() call.

    local_path is only set when the producing strategy wrote bytes to disk;
    callers branch on produces_local_file rather than on local_path.
    """
    model_config = ConfigDict(frozen=True)

    title: str
    source_url: str
    platform: Platform
    asset_url: str
    local_path: Optional[Path] = None
    produces_local_file: bool
    quality: Optional[str] = None
    container: Optional[str] = None


class ErrorDetail(BaseModel):
    """Error details"""
    code: ErrorCode
    message: str
    is_transient: bool = Field(..., description="True if retry might succeed, False if permanent")
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Error response for failed acquisitions"""
    success: bool = False
    error: ErrorDetail


class AcquireRequest(BaseModel):
    """Request schema for /api/v1/acquire"""
    url: str = Field(..., description="YouTube, Twitter/X or Instagram URL")
    quality: Optional[str] = Field(None, description="YouTube only: highest, lowest, 720p, or a format id")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "https://youtu.be/dQw4w9WgXcQ",
                "quality": "highest",
            }
        }
    )


class AcquireResponse(BaseModel):
    """Success response for /api/v1/acquire"""
    success: bool = True
    result: AcquisitionResult


class HealthResponse(BaseModel):
    """Response schema for /api/v1/health"""
    status: str
    version: str
    uptime_seconds: float
    yt_dlp_version: str
