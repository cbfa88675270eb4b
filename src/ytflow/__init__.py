"""
ytflow — YouTube metadata, downloads and transcripts behind a small HTTP API.

Public API:
    DownloadService         Metadata lookups and direct downloads with fallbacks.
    TranscriptionService    Whisper transcription with a YouTube-captions fallback.
    parse_video_ref()       Validate a YouTube URL and extract the video ID.
    select_variant()        Pick one rendition for an output format/quality.
    Settings                Environment-driven configuration.

Exception hierarchy (all importable from this package):
    YtflowError                  Base exception, carries http_status.
    ├── InvalidInputError        Missing/invalid URL or format (400).
    ├── VideoTooLongError        Over the transcription ceiling (400).
    ├── NoSuitableFormatError    No rendition fits the request (404).
    ├── NoCaptionsAvailableError Nothing to transcribe from captions (404).
    └── ProviderFailureError     An upstream provider failed (500).

Usage:
    from ytflow import TranscriptionService, Settings
    service = TranscriptionService.from_settings(Settings())
    result = service.transcribe("https://youtu.be/dQw4w9WgXcQ")
"""

from ytflow.config import Settings, get_settings
from ytflow.errors import (
    IdExtractionFailedError,
    InvalidInputError,
    InvalidUrlError,
    MissingUrlError,
    NoCaptionsAvailableError,
    NoSuitableFormatError,
    ProviderFailureError,
    UnsupportedFormatError,
    VideoTooLongError,
    YtflowError,
)
from ytflow.formats import resolve_quality, select_variant
from ytflow.metadata import MediaVariant, VideoMetadata
from ytflow.orchestrator import (
    DownloadedFile,
    DownloadService,
    FallbackRedirect,
    TranscriptionService,
)
from ytflow.transcript import TranscriptSegment
from ytflow.urls import VideoReference, parse_video_ref

__all__ = [
    "DownloadService",
    "TranscriptionService",
    "DownloadedFile",
    "FallbackRedirect",
    "parse_video_ref",
    "select_variant",
    "resolve_quality",
    "Settings",
    "get_settings",
    "VideoReference",
    "VideoMetadata",
    "MediaVariant",
    "TranscriptSegment",
    "YtflowError",
    "InvalidInputError",
    "MissingUrlError",
    "InvalidUrlError",
    "IdExtractionFailedError",
    "UnsupportedFormatError",
    "VideoTooLongError",
    "NoSuitableFormatError",
    "NoCaptionsAvailableError",
    "ProviderFailureError",
]
