"""
Typed failures raised by the downloader.

Every failure of acquire() surfaces as exactly one of these. The HTTP layer
turns them into ErrorDetail payloads via to_detail().
"""

from typing import Optional

from .models import ErrorCode, ErrorDetail


class VidfetchError(Exception):
    """Base class for all acquisition failures."""

    code: ErrorCode = ErrorCode.SERVER_ERROR
    is_transient: bool = True

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def to_detail(self) -> ErrorDetail:
        details = {"cause": f"{type(self.cause).__name__}: {self.cause}"} if self.cause else None
        return ErrorDetail(
            code=self.code,
            message=self.message,
            is_transient=self.is_transient,
            details=details,
        )


class UnsupportedUrlError(VidfetchError):
    """The URL did not classify as a supported platform."""

    code = ErrorCode.INVALID_URL
    is_transient = False

    def __init__(self, url: str):
        super().__init__(f"Unsupported platform or invalid URL format: {url}")
        self.url = url


class ResolutionFailedError(VidfetchError):
    """A resolver service did not yield a video link in time."""

    code = ErrorCode.RESOLUTION_FAILED


class DownloadFailedError(VidfetchError):
    """Metadata fetch, format selection or byte transfer failed."""

    code = ErrorCode.DOWNLOAD_FAILED
