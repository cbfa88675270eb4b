"""
orchestrator.py — Provider fallback chains for the two user-facing operations.

DownloadService
    describe():   yt-dlp metadata  ->  noembed lookup (extraction disabled)
    fetch_file(): yt-dlp download  ->  redirect to a third-party downloader

TranscriptionService
    transcribe(): [OPENAI_API_KEY set] yt-dlp audio + Whisper
                  ->  YouTube captions (no key, extraction disabled, or no
                      audio-only rendition)

Providers are injected and expose probe(); each attempt is turned into a
Success / Unavailable / Failure outcome (see outcomes.py) and the services
branch on that, never on a caught ImportError or a None.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote

from ytflow.captions import CaptionTrack, YouTubeCaptions, choose_track
from ytflow.config import Settings
from ytflow.errors import (
    NoCaptionsAvailableError,
    ProviderFailureError,
    VideoTooLongError,
)
from ytflow.extraction import LookupResult, NoembedLookup, YtDlpExtractor
from ytflow.formats import (
    check_output_format,
    content_disposition,
    content_type_for,
    select_audio_variant,
    select_variant,
)
from ytflow.metadata import MediaVariant, VideoMetadata
from ytflow.outcomes import Failure, Success, Unavailable, attempt
from ytflow.responses import (
    CAPTIONS_NOTE,
    SOURCE_CAPTIONS,
    SOURCE_WHISPER,
    lightweight_payload,
    transcript_payload,
    video_payload,
)
from ytflow.tempfiles import scoped_temp_file
from ytflow.transcript import TranscriptSegment, join_text
from ytflow.urls import VideoReference, parse_video_ref
from ytflow.whisper import AUTO_LANGUAGE, TranscriptionOutput, WhisperTranscriber

logger = logging.getLogger(__name__)

_DEFAULT_TITLE = "YouTube Video"


# ---------------------------------------------------------------------------
# Provider interfaces
# ---------------------------------------------------------------------------

class MediaExtractor(Protocol):
    name: str

    def probe(self) -> bool: ...

    def fetch_metadata(self, ref: VideoReference) -> VideoMetadata: ...

    def download(self, ref: VideoReference, variant: MediaVariant, dest: Path) -> Path: ...


class TitleLookup(Protocol):
    name: str

    def probe(self) -> bool: ...

    def lookup(self, ref: VideoReference) -> LookupResult: ...


class Transcriber(Protocol):
    name: str

    def probe(self) -> bool: ...

    def transcribe(self, audio_path: Path, language: str = AUTO_LANGUAGE) -> TranscriptionOutput: ...


class CaptionSource(Protocol):
    name: str

    def probe(self) -> bool: ...

    def list_tracks(self, video_id: str) -> list[CaptionTrack]: ...

    def fetch_track(self, track: CaptionTrack) -> list[TranscriptSegment]: ...


# ---------------------------------------------------------------------------
# Download results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DownloadedFile:
    """A rendition read fully into memory, ready to be sent."""
    content: bytes
    title: str
    fmt: str

    @property
    def content_type(self) -> str:
        return content_type_for(self.fmt)

    @property
    def content_disposition(self) -> str:
        return content_disposition(self.title, self.fmt)


@dataclass(frozen=True)
class FallbackRedirect:
    """Send the caller to a third-party downloader instead of a dead end."""
    location: str
    reason: str


# ---------------------------------------------------------------------------
# Download / metadata
# ---------------------------------------------------------------------------

class DownloadService:
    """Metadata lookups and direct downloads."""

    def __init__(self, extractor: MediaExtractor, lookup: TitleLookup, settings: Settings) -> None:
        self.extractor = extractor
        self.lookup = lookup
        self.settings = settings

    @classmethod
    def from_settings(cls, settings: Settings) -> DownloadService:
        return cls(
            extractor=YtDlpExtractor(enabled=settings.extraction_enabled),
            lookup=NoembedLookup(settings.noembed_url, timeout=settings.http_timeout),
            settings=settings,
        )

    def _extract(self, ref: VideoReference):
        return attempt(
            self.extractor.name,
            self.extractor.probe(),
            lambda: self.extractor.fetch_metadata(ref),
            unavailable_reason="media extraction disabled",
        )

    def describe(self, url: str | None) -> dict[str, Any]:
        """
        Return the metadata envelope for a video.

        Raises:
            InvalidInputError:    missing or non-YouTube URL (400).
            ProviderFailureError: extraction, or the lookup used in its place,
                                  failed (500).
        """
        ref = parse_video_ref(url)
        outcome = self._extract(ref)

        if isinstance(outcome, Success):
            return video_payload(outcome.value)
        if isinstance(outcome, Unavailable):
            logger.info("Using %s lookup for %s", self.lookup.name, ref.video_id)
            result = self.lookup.lookup(ref)
            return lightweight_payload(ref.video_id, result.title, result.author)
        raise outcome.error

    def fallback_url(self, url: str) -> str:
        """Third-party downloader URL with *url* embedded as a parameter."""
        return self.settings.fallback_downloader_url.format(url=quote(url, safe=""))

    def _redirect(self, ref: VideoReference, reason: str) -> FallbackRedirect:
        logger.warning("Redirecting %s to fallback downloader: %s", ref.video_id, reason)
        return FallbackRedirect(location=self.fallback_url(ref.source_url), reason=reason)

    def fetch_file(
        self,
        url: str | None,
        fmt: str = "mp4",
        quality: str | None = "1080p",
    ) -> DownloadedFile | FallbackRedirect:
        """
        Download one rendition of a video into memory.

        Extraction being disabled or failing, and the download itself failing,
        all end in a FallbackRedirect rather than an error.

        Raises:
            InvalidInputError:     missing/invalid URL or unknown format (400).
            NoSuitableFormatError: no rendition fits the request (404).
        """
        ref = parse_video_ref(url)
        fmt = check_output_format(fmt)
        outcome = self._extract(ref)

        if isinstance(outcome, Unavailable):
            return self._redirect(ref, outcome.reason)
        if isinstance(outcome, Failure):
            return self._redirect(ref, outcome.error.message)

        meta = outcome.value
        variant = select_variant(meta.variants, fmt, quality, video_id=ref.video_id)

        with scoped_temp_file(self.settings.temp_dir, ref.video_id, variant.container) as path:
            try:
                self.extractor.download(ref, variant, path)
            except ProviderFailureError as exc:
                return self._redirect(ref, exc.message)
            content = path.read_bytes()

        return DownloadedFile(content=content, title=meta.title, fmt=fmt)


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------

class TranscriptionService:
    """Whisper transcription with a YouTube-captions fallback."""

    def __init__(
        self,
        extractor: MediaExtractor,
        transcriber: Transcriber,
        captions: CaptionSource,
        lookup: TitleLookup,
        settings: Settings,
    ) -> None:
        self.extractor = extractor
        self.transcriber = transcriber
        self.captions = captions
        self.lookup = lookup
        self.settings = settings

    @classmethod
    def from_settings(cls, settings: Settings) -> TranscriptionService:
        return cls(
            extractor=YtDlpExtractor(enabled=settings.extraction_enabled),
            transcriber=WhisperTranscriber(settings.openai_api_key, model=settings.whisper_model),
            captions=YouTubeCaptions(),
            lookup=NoembedLookup(settings.noembed_url, timeout=settings.http_timeout),
            settings=settings,
        )

    def transcribe(self, url: str | None, language: str | None = AUTO_LANGUAGE) -> dict[str, Any]:
        """
        Return the transcription envelope for a video.

        Raises:
            InvalidInputError:        missing or non-YouTube URL (400).
            VideoTooLongError:        over the duration ceiling (400).
            NoCaptionsAvailableError: caption path found nothing usable (404).
            ProviderFailureError:     any provider call failed (500).
        """
        ref = parse_video_ref(url)
        language = language or AUTO_LANGUAGE

        if not self.transcriber.probe():
            logger.info("No transcription credential; using captions for %s", ref.video_id)
            return self._caption_lookup(ref)

        outcome = attempt(
            self.extractor.name,
            self.extractor.probe(),
            lambda: self.extractor.fetch_metadata(ref),
            unavailable_reason="media extraction disabled",
        )
        if isinstance(outcome, Unavailable):
            return self._caption_lookup(ref)
        if isinstance(outcome, Failure):
            raise outcome.error

        meta = outcome.value
        limit = self.settings.max_transcribe_seconds
        if (meta.duration_secs or 0) > limit:
            raise VideoTooLongError(meta.duration_secs or 0, limit)

        audio = select_audio_variant(meta.variants)
        if audio is None:
            logger.info("No audio-only rendition for %s; using captions", ref.video_id)
            return self._caption_lookup(ref, meta)

        return self._whisper(ref, meta, audio, language)

    def _whisper(
        self,
        ref: VideoReference,
        meta: VideoMetadata,
        audio: MediaVariant,
        language: str,
    ) -> dict[str, Any]:
        with scoped_temp_file(self.settings.temp_dir, ref.video_id, audio.container) as path:
            self.extractor.download(ref, audio, path)
            output = self.transcriber.transcribe(path, language)

        return transcript_payload(
            title=meta.title,
            transcript=output.text or join_text(output.segments),
            segments=output.segments,
            language=output.language or language,
            duration=output.duration if output.duration is not None else meta.duration_secs,
            source=SOURCE_WHISPER,
        )

    def _resolve_title(self, ref: VideoReference) -> str:
        # Best effort: the caption provider does not know titles.
        for name, available, call in (
            (self.extractor.name, self.extractor.probe(), lambda: self.extractor.fetch_metadata(ref).title),
            (self.lookup.name, self.lookup.probe(), lambda: self.lookup.lookup(ref).title),
        ):
            outcome = attempt(name, available, call)
            if isinstance(outcome, Success):
                return outcome.value
        return _DEFAULT_TITLE

    def _caption_lookup(self, ref: VideoReference, meta: VideoMetadata | None = None) -> dict[str, Any]:
        track = choose_track(self.captions.list_tracks(ref.video_id))
        if track is None:
            raise NoCaptionsAvailableError(ref.video_id)

        segments = self.captions.fetch_track(track)
        if not segments:
            raise NoCaptionsAvailableError(ref.video_id)

        title = meta.title if meta is not None else self._resolve_title(ref)
        if meta is not None and meta.duration_secs:
            duration: float = meta.duration_secs
        else:
            duration = segments[-1].end

        logger.info(
            "Captions for %s: track %s, %d segments", ref.video_id, track.language_code, len(segments)
        )
        return transcript_payload(
            title=title,
            transcript=join_text(segments),
            segments=segments,
            language=track.language_code,
            duration=duration,
            source=SOURCE_CAPTIONS,
            note=CAPTIONS_NOTE,
        )
