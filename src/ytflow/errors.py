"""
errors.py — Exception hierarchy for ytflow.

Every exception carries an `http_status` attribute so the FastAPI error
handler can turn a service-level error straight into the HTTP response code.

Capability absence (no OpenAI key, extraction switched off) is NOT an error
and has no class here; it is reported as an `Unavailable` outcome and the
orchestrator moves on to the next provider.

Hierarchy:
    YtflowError (base, 500)
    ├── InvalidInputError (400)
    │   ├── MissingUrlError
    │   ├── InvalidUrlError
    │   ├── IdExtractionFailedError
    │   └── UnsupportedFormatError
    ├── VideoTooLongError (400)
    ├── NoSuitableFormatError (404)
    ├── NoCaptionsAvailableError (404)
    └── ProviderFailureError (500)
"""


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class YtflowError(Exception):
    """
    Root exception for all ytflow errors.

    Attributes:
        message:     Human-readable description of what went wrong.
        http_status: Suggested HTTP status code for the API layer.
    """

    def __init__(self, message: str, http_status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status


# ---------------------------------------------------------------------------
# Invalid input (400)
# ---------------------------------------------------------------------------

class InvalidInputError(YtflowError):
    """The request itself is malformed.  Maps to HTTP 400, never retried."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, http_status=400)


class MissingUrlError(InvalidInputError):
    """No URL was supplied in the request body or query string."""

    def __init__(self) -> None:
        super().__init__("URL is required")


class InvalidUrlError(InvalidInputError):
    """
    The URL is not one of the accepted YouTube shapes (watch, shorts, embed,
    youtu.be short link).
    """

    def __init__(self, url: str) -> None:
        super().__init__("Invalid YouTube URL")
        self.url = url


class IdExtractionFailedError(InvalidInputError):
    """The URL was accepted but no valid video identifier could be taken from it."""

    def __init__(self, value: str) -> None:
        super().__init__("Could not extract video ID")
        self.value = value


class UnsupportedFormatError(InvalidInputError):
    """The requested output container is not one of mp4, mp3, webm."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Unsupported format {fmt!r}; expected mp4, mp3 or webm")
        self.fmt = fmt


# ---------------------------------------------------------------------------
# Precondition failures
# ---------------------------------------------------------------------------

class VideoTooLongError(YtflowError):
    """
    Raised before downloading audio when the video exceeds the transcription
    ceiling.  Maps to HTTP 400.
    """

    def __init__(self, duration: int, limit: int) -> None:
        super().__init__(
            message=f"Video too long (max {limit // 60} min for Whisper transcription).",
            http_status=400,
        )
        self.duration = duration
        self.limit = limit


class NoSuitableFormatError(YtflowError):
    """The provider listed no rendition matching the requested output kind.  HTTP 404."""

    def __init__(self, video_id: str) -> None:
        super().__init__(message="No suitable format found", http_status=404)
        self.video_id = video_id


class NoCaptionsAvailableError(YtflowError):
    """
    The video has no caption tracks, or the chosen track held no usable text.

    The message tells the user which setting would make transcription work
    anyway.  Maps to HTTP 404.
    """

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=(
                "No captions available for this video. "
                "Set OPENAI_API_KEY for AI transcription of any video."
            ),
            http_status=404,
        )
        self.video_id = video_id


# ---------------------------------------------------------------------------
# Upstream failures
# ---------------------------------------------------------------------------

class ProviderFailureError(YtflowError):
    """
    An external provider (yt-dlp, noembed, OpenAI, YouTube captions) rejected
    the request or could not be reached.

    The provider's own message is passed through for diagnostics.  Maps to
    HTTP 500.
    """

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(message=message, http_status=500)
        self.provider = provider
