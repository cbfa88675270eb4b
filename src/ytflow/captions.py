"""
captions.py — YouTube caption tracks through youtube-transcript-api.

This is the transcription path that needs no credential.  A video usually
has several tracks (manual and auto-generated, in different languages);
choose_track() picks one with an English preference, and caption_segments()
cleans the raw snippets into TranscriptSegment objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

import requests
import youtube_transcript_api as yta_errors  # exception classes live here
from youtube_transcript_api import YouTubeTranscriptApi

from ytflow.errors import ProviderFailureError
from ytflow.transcript import TranscriptSegment, normalize_segments

logger = logging.getLogger(__name__)

# Caption events without an explicit duration are assumed to last this long.
_DEFAULT_CAPTION_SECS = 2.0

# A single stray character (music note, dash) is not a caption.
_MIN_CAPTION_CHARS = 2


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CaptionTrack:
    """
    One caption track listed for a video.

    Attributes:
        language_code: BCP-47 style code, e.g. "en", "en-GB", "de".
        language:      Display name, e.g. "English (auto-generated)".
        is_generated:  True for YouTube's automatic captions.
        handle:        Provider object used to fetch the track's text.
    """
    language_code: str
    language: str = ""
    is_generated: bool = False
    handle: Any = field(default=None, compare=False, repr=False)


# ---------------------------------------------------------------------------
# Track choice and segment cleanup
# ---------------------------------------------------------------------------

def choose_track(tracks: Sequence[CaptionTrack]) -> CaptionTrack | None:
    """
    Pick the caption track to use.

    Preference: exactly "en", then any code starting with "en", then the
    first track listed.  Returns None when there are no tracks.
    """
    if not tracks:
        return None
    for track in tracks:
        if track.language_code == "en":
            return track
    for track in tracks:
        if track.language_code.startswith("en"):
            return track
    return tracks[0]


def caption_segments(snippets: Iterable[Any]) -> list[TranscriptSegment]:
    """
    Convert raw caption snippets (.text, .start, .duration) into segments.

    Line breaks inside a caption become spaces; captions shorter than two
    characters after trimming are dropped.
    """
    raw = []
    for snippet in snippets:
        text = (snippet.text or "").replace("\n", " ").strip()
        if len(text) < _MIN_CAPTION_CHARS:
            continue
        start = float(snippet.start or 0.0)
        duration = snippet.duration or _DEFAULT_CAPTION_SECS
        raw.append({"start": start, "end": start + float(duration), "text": text})
    return normalize_segments(raw)


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------

class YouTubeCaptions:
    """Caption lookup backed by youtube-transcript-api."""

    name = "youtube-captions"

    def __init__(self, api: YouTubeTranscriptApi | None = None) -> None:
        self._api = api

    def probe(self) -> bool:
        return True

    def _client(self) -> YouTubeTranscriptApi:
        if self._api is None:
            self._api = YouTubeTranscriptApi()
        return self._api

    def list_tracks(self, video_id: str) -> list[CaptionTrack]:
        """
        List the caption tracks of a video.

        A video without captions, or with captions disabled, yields an empty
        list; the caller reports that as "no captions".  Other upstream
        errors (video unavailable, IP blocked, network failures) raise
        ProviderFailureError.
        """
        try:
            transcript_list = self._client().list(video_id)
        except (yta_errors.TranscriptsDisabled, yta_errors.NoTranscriptFound) as exc:
            logger.info("No caption tracks for %s: %s", video_id, type(exc).__name__)
            return []
        except (yta_errors.CouldNotRetrieveTranscript, requests.exceptions.RequestException) as exc:
            raise ProviderFailureError(self.name, f"Could not fetch captions: {exc}") from exc

        return [
            CaptionTrack(
                language_code=t.language_code,
                language=t.language,
                is_generated=t.is_generated,
                handle=t,
            )
            for t in transcript_list
        ]

    def fetch_track(self, track: CaptionTrack) -> list[TranscriptSegment]:
        """Fetch one track and return its cleaned segments."""
        try:
            fetched = track.handle.fetch()
        except (yta_errors.CouldNotRetrieveTranscript, requests.exceptions.RequestException) as exc:
            raise ProviderFailureError(self.name, f"Could not fetch captions: {exc}") from exc
        return caption_segments(fetched)
