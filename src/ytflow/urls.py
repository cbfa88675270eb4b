"""
urls.py — YouTube URL validation and video-reference parsing.

One pattern serves both for accepting a URL and for pulling the identifier
out of it, so a URL that passes validation always yields the same id the
rest of the pipeline sees.

Accepted shapes (scheme and "www." optional):
    - youtube.com/watch?v=VIDEO_ID
    - youtube.com/shorts/VIDEO_ID
    - youtube.com/embed/VIDEO_ID
    - youtu.be/VIDEO_ID
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ytflow.errors import IdExtractionFailedError, InvalidUrlError, MissingUrlError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_URL_PATTERN = re.compile(
    r"^(?:https?://)?(?:www\.)?"
    r"(?:youtube\.com/(?:watch\?v=|shorts/|embed/)|youtu\.be/)"
    r"(?P<id>[A-Za-z0-9_-]{6,})"
)

_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{6,}$")

_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VideoReference:
    """
    A validated pointer to one YouTube video.

    Attributes:
        video_id:   The identifier taken from the URL.
        source_url: The URL exactly as the caller sent it (after trimming).
        url:        Canonical watch URL built from the identifier.
    """
    video_id: str
    source_url: str
    url: str = field(init=False)

    def __post_init__(self) -> None:
        if not _ID_PATTERN.match(self.video_id):
            raise IdExtractionFailedError(self.video_id)
        object.__setattr__(self, "url", _WATCH_URL.format(video_id=self.video_id))


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_video_ref(url: str | None) -> VideoReference:
    """
    Validate a YouTube URL and build a VideoReference from it.

    Args:
        url: The raw URL from the request.  None or blank counts as missing.

    Returns:
        A VideoReference whose video_id is at least 6 characters long.

    Raises:
        MissingUrlError:         *url* is None or blank.
        InvalidUrlError:         *url* is not an accepted YouTube shape.
        IdExtractionFailedError: The identifier failed the reference invariant.
    """
    if url is None or not url.strip():
        raise MissingUrlError()

    url = url.strip()
    match = _URL_PATTERN.match(url)
    if match is None:
        raise InvalidUrlError(url)

    return VideoReference(video_id=match.group("id"), source_url=url)
