"""
responses.py — The JSON envelopes ytflow returns.

Whatever provider answered, callers see one shape per operation:

    metadata:      {success, video: {id, title, channel, duration, views,
                    thumbnail, formats[]}, [note]}
    transcription: {success, title, transcript, segments[], language,
                    duration, wordCount, source, [note]}
"""

from __future__ import annotations

from typing import Any, Sequence

from ytflow.metadata import VideoMetadata
from ytflow.transcript import TranscriptSegment, word_count

SOURCE_WHISPER = "whisper"
SOURCE_CAPTIONS = "youtube-captions"

_THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/hqdefault.jpg"

# Number of muxed renditions listed in a metadata response.
_MAX_LISTED_FORMATS = 10

LIGHTWEIGHT_NOTE = "Full format info requires the media extraction provider (yt-dlp)."
CAPTIONS_NOTE = (
    "Using YouTube auto-captions. "
    "Set OPENAI_API_KEY for AI-powered Whisper transcription."
)


def thumbnail_url(video_id: str, provided: str | None = None) -> str:
    """Return *provided*, or the constructed hqdefault thumbnail URL."""
    return provided or _THUMBNAIL_URL.format(video_id=video_id)


def video_payload(meta: VideoMetadata) -> dict[str, Any]:
    """Metadata envelope for a full extraction."""
    formats = [
        {
            "itag": v.format_id,
            "quality": v.quality_label,
            "container": v.container,
            "filesize": v.filesize,
        }
        for v in meta.variants
        if v.is_muxed
    ][:_MAX_LISTED_FORMATS]

    return {
        "success": True,
        "video": {
            "id": meta.video_id,
            "title": meta.title,
            "channel": meta.channel,
            "duration": meta.duration_secs,
            "views": meta.view_count,
            "thumbnail": thumbnail_url(meta.video_id, meta.thumbnail),
            "formats": formats,
        },
    }


def lightweight_payload(video_id: str, title: str, channel: str) -> dict[str, Any]:
    """Metadata envelope built from a title/author lookup only."""
    return {
        "success": True,
        "video": {
            "id": video_id,
            "title": title,
            "channel": channel,
            "duration": None,
            "views": None,
            "thumbnail": thumbnail_url(video_id),
            "formats": [],
        },
        "note": LIGHTWEIGHT_NOTE,
    }


def transcript_payload(
    *,
    title: str,
    transcript: str,
    segments: Sequence[TranscriptSegment],
    language: str | None,
    duration: float | None,
    source: str,
    words: int | None = None,
    note: str | None = None,
) -> dict[str, Any]:
    """Transcription envelope.  wordCount is computed when *words* is None."""
    payload: dict[str, Any] = {
        "success": True,
        "title": title,
        "transcript": transcript,
        "segments": [segment.to_dict() for segment in segments],
        "language": language,
        "duration": duration,
        "wordCount": words if words is not None else word_count(transcript),
        "source": source,
    }
    if note:
        payload["note"] = note
    return payload


def error_payload(message: str) -> dict[str, str]:
    return {"error": message}
