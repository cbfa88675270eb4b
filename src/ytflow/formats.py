"""
formats.py — Pick one rendition for a download request.

Two request kinds exist:

    mp3         best audio-only rendition (highest bitrate wins)
    mp4 / webm  a muxed video+audio rendition at the requested quality tier

Not every tier exists for every video, so video selection degrades:
exact tier, then 720p, then whatever the provider listed first.

Also holds the small lookup tables the download endpoint needs to describe
the file it sends back (content type, attachment filename).
"""

from __future__ import annotations

import re
from typing import Iterable
from urllib.parse import quote

from ytflow.errors import NoSuitableFormatError, UnsupportedFormatError
from ytflow.metadata import MediaVariant

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# User-facing quality tier -> provider quality label.
QUALITY_MAP: dict[str, str] = {
    "4K": "2160p",
    "2K": "1440p",
    "1080p": "1080p",
    "720p": "720p",
    "480p": "480p",
    "360p": "360p",
}

DEFAULT_QUALITY_LABEL = "1080p"
SAFETY_NET_LABEL = "720p"

OUTPUT_FORMATS = ("mp4", "mp3", "webm")

CONTENT_TYPES: dict[str, str] = {
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mp3": "audio/mpeg",
}

_MAX_FILENAME_CHARS = 60

# ASCII so accented letters are stripped from the header value as well.
_UNSAFE_TITLE_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE_RUN = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Quality mapping
# ---------------------------------------------------------------------------

def resolve_quality(tier: str | None) -> str:
    """
    Map a quality tier ("4K", "720p", ...) to the provider's label.

    Total: anything outside QUALITY_MAP resolves to "1080p".
    """
    if tier is None:
        return DEFAULT_QUALITY_LABEL
    return QUALITY_MAP.get(tier, DEFAULT_QUALITY_LABEL)


# ---------------------------------------------------------------------------
# Variant selection
# ---------------------------------------------------------------------------

def select_audio_variant(variants: Iterable[MediaVariant]) -> MediaVariant | None:
    """
    Return the audio-only rendition with the highest bitrate.

    sorted() is stable, so renditions with equal bitrate keep the provider's
    order and the first of them wins.  Unknown bitrate sorts as 0.
    """
    audio = [v for v in variants if v.is_audio_only]
    if not audio:
        return None
    ranked = sorted(audio, key=lambda v: v.audio_bitrate or 0, reverse=True)
    return ranked[0]


def select_video_variant(
    variants: Iterable[MediaVariant],
    quality: str | None,
) -> MediaVariant | None:
    """
    Return a muxed video+audio rendition for the requested quality tier.

    Priority: exact label for the tier, first "720p", first muxed rendition.
    """
    muxed = [v for v in variants if v.is_muxed]
    if not muxed:
        return None

    target = resolve_quality(quality)
    for label in (target, SAFETY_NET_LABEL):
        for variant in muxed:
            if variant.quality_label == label:
                return variant
    return muxed[0]


def select_variant(
    variants: Iterable[MediaVariant],
    fmt: str,
    quality: str | None = None,
    *,
    video_id: str = "",
) -> MediaVariant:
    """
    Pick exactly one rendition for an output format.

    Raises:
        NoSuitableFormatError: no rendition passes the capability filter.
    """
    variants = list(variants)
    if fmt == "mp3":
        chosen = select_audio_variant(variants)
    else:
        chosen = select_video_variant(variants, quality)
    if chosen is None:
        raise NoSuitableFormatError(video_id)
    return chosen


def check_output_format(fmt: str) -> str:
    """Return *fmt* lower-cased, or raise UnsupportedFormatError."""
    normalized = (fmt or "").lower()
    if normalized not in OUTPUT_FORMATS:
        raise UnsupportedFormatError(fmt)
    return normalized


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

def sanitize_title(title: str) -> str:
    """
    Make a video title safe to use as an attachment filename.

    Drops everything outside word characters, whitespace and hyphens,
    collapses runs of whitespace (newlines, tabs) to one space, trims, and
    caps the length at 60 characters.  An empty result becomes "video".
    """
    cleaned = _UNSAFE_TITLE_CHARS.sub("", title or "")
    cleaned = _WHITESPACE_RUN.sub(" ", cleaned).strip()
    cleaned = cleaned[:_MAX_FILENAME_CHARS].strip()
    return cleaned or "video"


def content_type_for(fmt: str) -> str:
    return CONTENT_TYPES.get(fmt, CONTENT_TYPES["mp4"])


def content_disposition(title: str, fmt: str) -> str:
    """
    Build the Content-Disposition header for a downloaded file.

    The plain filename is already ASCII-only; filename* repeats it
    percent-encoded for clients that prefer the RFC 6266 form.
    """
    filename = f"{sanitize_title(title)}.{fmt}"
    return f"attachment; filename=\"{filename}\"; filename*=UTF-8''{quote(filename)}"
