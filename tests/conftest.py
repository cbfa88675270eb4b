"""
conftest.py — Fake providers and shared fixtures.

The orchestrator depends on provider objects with a probe() method, so tests
hand it these fakes instead of patching yt-dlp, OpenAI or YouTube.  Every
fake records how it was called.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ytflow.captions import CaptionTrack
from ytflow.config import Settings
from ytflow.errors import ProviderFailureError
from ytflow.extraction import LookupResult
from ytflow.metadata import MediaVariant, VideoMetadata
from ytflow.transcript import TranscriptSegment
from ytflow.whisper import TranscriptionOutput

# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

MUXED_360 = MediaVariant("18", "mp4", "360p", has_video=True, has_audio=True, filesize=1000)
MUXED_720 = MediaVariant("22", "mp4", "720p", has_video=True, has_audio=True, filesize=5000)
VIDEO_ONLY_1080 = MediaVariant("137", "mp4", "1080p", has_video=True, has_audio=False)
AUDIO_128 = MediaVariant("140", "m4a", "128kbps", has_video=False, has_audio=True, audio_bitrate=128.0)
AUDIO_160 = MediaVariant("251", "webm", "160kbps", has_video=False, has_audio=True, audio_bitrate=160.0)

SAMPLE_VARIANTS = (MUXED_360, MUXED_720, VIDEO_ONLY_1080, AUDIO_128, AUDIO_160)


def make_meta(**overrides) -> VideoMetadata:
    """Build a VideoMetadata with sensible defaults; any field can be overridden."""
    base = {
        "video_id": "abc123xyz",
        "title": "Test Video",
        "channel": "Test Channel",
        "duration_secs": 120,
        "view_count": 42,
        "thumbnail": "https://i.ytimg.com/vi/abc123xyz/maxresdefault.jpg",
        "variants": SAMPLE_VARIANTS,
    }
    base.update(overrides)
    return VideoMetadata(**base)


# ---------------------------------------------------------------------------
# Fake providers
# ---------------------------------------------------------------------------

class FakeExtractor:
    """Stands in for YtDlpExtractor."""

    name = "fake-extractor"

    def __init__(
        self,
        meta: VideoMetadata | None = None,
        available: bool = True,
        error: ProviderFailureError | None = None,
        download_error: ProviderFailureError | None = None,
        payload: bytes = b"media-bytes",
        partial: bytes | None = None,
    ) -> None:
        self.meta = meta or make_meta()
        self.available = available
        self.error = error
        self.download_error = download_error
        self.payload = payload
        self.partial = partial
        self.fetch_calls: list = []
        self.downloads: list[tuple[MediaVariant, Path]] = []

    def probe(self) -> bool:
        return self.available

    def fetch_metadata(self, ref):
        self.fetch_calls.append(ref)
        if self.error is not None:
            raise self.error
        return self.meta

    def download(self, ref, variant, dest):
        self.downloads.append((variant, dest))
        if self.partial is not None:
            # What an interrupted yt-dlp download leaves behind.
            dest.with_name(dest.name + ".part").write_bytes(self.partial)
        if self.download_error is not None:
            raise self.download_error
        dest.write_bytes(self.payload)
        return dest


class FakeTranscriber:
    """Stands in for WhisperTranscriber; remembers whether the audio file existed."""

    name = "fake-whisper"

    def __init__(
        self,
        output: TranscriptionOutput | None = None,
        available: bool = True,
        error: Exception | None = None,
    ) -> None:
        self.output = output or TranscriptionOutput(
            text="hello from whisper",
            segments=[TranscriptSegment(0.0, 1.5, "hello from whisper")],
            language="en",
            duration=1.5,
        )
        self.available = available
        self.error = error
        self.calls: list[tuple[Path, str]] = []
        self.file_existed: list[bool] = []

    def probe(self) -> bool:
        return self.available

    def transcribe(self, audio_path, language="auto"):
        self.calls.append((audio_path, language))
        self.file_existed.append(audio_path.exists())
        if self.error is not None:
            raise self.error
        return self.output


class FakeCaptions:
    """Stands in for YouTubeCaptions."""

    name = "fake-captions"

    def __init__(
        self,
        tracks: list[CaptionTrack] | None = None,
        segments: list[TranscriptSegment] | None = None,
        error: ProviderFailureError | None = None,
    ) -> None:
        self.tracks = tracks if tracks is not None else [CaptionTrack("en", "English")]
        self.segments = segments if segments is not None else [
            TranscriptSegment(0.0, 2.0, "first caption"),
            TranscriptSegment(2.0, 4.0, "second caption"),
        ]
        self.error = error
        self.list_calls: list[str] = []
        self.fetched: list[CaptionTrack] = []

    def probe(self) -> bool:
        return True

    def list_tracks(self, video_id):
        self.list_calls.append(video_id)
        if self.error is not None:
            raise self.error
        return list(self.tracks)

    def fetch_track(self, track):
        self.fetched.append(track)
        return list(self.segments)


class FakeLookup:
    """Stands in for NoembedLookup."""

    name = "fake-lookup"

    def __init__(self, title: str = "Looked Up", author: str = "Lookup Channel", error=None) -> None:
        self.result = LookupResult(title=title, author=author)
        self.error = error
        self.calls: list = []

    def probe(self) -> bool:
        return True

    def lookup(self, ref):
        self.calls.append(ref)
        if self.error is not None:
            raise self.error
        return self.result


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the environment, with a per-test temp dir."""
    return Settings(
        _env_file=None,
        openai_api_key=None,
        temp_dir=str(tmp_path / "scratch"),
    )


@pytest.fixture()
def scratch_files(settings: Settings):
    """Return a callable listing files left in the scratch directory."""
    def _list() -> list[Path]:
        scratch = Path(settings.temp_dir)
        return sorted(scratch.iterdir()) if scratch.exists() else []
    return _list
