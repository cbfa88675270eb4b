"""
metadata.py — Video metadata and downloadable renditions.

yt-dlp describes a video as a large info_dict with a "formats" list.  This
module turns that dict into two small frozen dataclasses the rest of ytflow
works with:

    VideoMetadata  title, channel, duration, views, thumbnail, variants
    MediaVariant   one downloadable rendition (container, quality, tracks)

Nothing here talks to the network; see extraction.py for that.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MediaVariant:
    """
    One encoded rendition of a video, as reported by the provider.

    Attributes:
        format_id:     Provider identifier for the rendition (YouTube itag).
        container:     File extension of the rendition (e.g. "mp4", "webm").
        quality_label: "720p" style label for video, "128kbps" for audio-only.
        has_video:     True if the rendition carries a video track.
        has_audio:     True if the rendition carries an audio track.
        filesize:      Size in bytes when the provider knows it.
        audio_bitrate: Audio bitrate in kbps when the provider knows it.
    """
    format_id: str
    container: str
    quality_label: str | None
    has_video: bool
    has_audio: bool
    filesize: int | None = None
    audio_bitrate: float | None = None

    @property
    def is_audio_only(self) -> bool:
        return self.has_audio and not self.has_video

    @property
    def is_muxed(self) -> bool:
        """True when both tracks are in the same file."""
        return self.has_video and self.has_audio


@dataclass(frozen=True)
class VideoMetadata:
    """
    Structured metadata for a single YouTube video.

    frozen=True so one request cannot mutate what another request sees.

    Attributes:
        video_id:      The YouTube video identifier.
        title:         The video title.
        channel:       Human-readable channel (or uploader) name.
        duration_secs: Length in seconds; None for livestreams.
        view_count:    View counter; None when hidden.
        thumbnail:     Thumbnail URL supplied by the provider, if any.
        variants:      Every rendition the provider listed, in its order.
    """
    video_id: str
    title: str
    channel: str | None
    duration_secs: int | None
    view_count: int | None
    thumbnail: str | None
    variants: tuple[MediaVariant, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# yt-dlp info_dict parsing
# ---------------------------------------------------------------------------

def _has_codec(value: Any) -> bool:
    # yt-dlp uses the string "none" for an absent track.
    return value not in (None, "none")


def _as_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def variant_from_format(fmt: dict[str, Any]) -> MediaVariant:
    """
    Build a MediaVariant from one entry of yt-dlp's "formats" list.

    Video renditions are labelled by height ("1080p"); audio-only renditions
    by bitrate ("128kbps").  When neither is known the provider's own
    format_note is used.
    """
    has_video = _has_codec(fmt.get("vcodec"))
    has_audio = _has_codec(fmt.get("acodec"))
    abr = fmt.get("abr")

    label: str | None = fmt.get("format_note")
    if has_video and fmt.get("height"):
        label = f"{int(fmt['height'])}p"
    elif has_audio and not has_video and abr:
        label = f"{int(abr)}kbps"

    return MediaVariant(
        format_id=str(fmt.get("format_id", "")),
        container=fmt.get("ext") or "",
        quality_label=label,
        has_video=has_video,
        has_audio=has_audio,
        filesize=_as_int(fmt.get("filesize") or fmt.get("filesize_approx")),
        audio_bitrate=float(abr) if abr else None,
    )


def metadata_from_info(video_id: str, info: dict[str, Any]) -> VideoMetadata:
    """
    Convert a yt-dlp info_dict into a VideoMetadata.

    Missing optional fields become None rather than raising; the title falls
    back to a generic label.
    """
    return VideoMetadata(
        video_id=info.get("id") or video_id,
        title=info.get("title") or "YouTube Video",
        channel=info.get("channel") or info.get("uploader"),
        duration_secs=_as_int(info.get("duration")),
        view_count=_as_int(info.get("view_count")),
        thumbnail=info.get("thumbnail"),
        variants=tuple(variant_from_format(f) for f in info.get("formats") or []),
    )
