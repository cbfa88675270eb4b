"""
test_formats.py — Tests for quality mapping and rendition selection.
"""

from __future__ import annotations

import pytest

from ytflow.errors import NoSuitableFormatError, UnsupportedFormatError
from ytflow.formats import (
    QUALITY_MAP,
    check_output_format,
    content_disposition,
    content_type_for,
    resolve_quality,
    sanitize_title,
    select_audio_variant,
    select_variant,
    select_video_variant,
)
from ytflow.metadata import MediaVariant

from conftest import AUDIO_128, AUDIO_160, MUXED_360, MUXED_720, SAMPLE_VARIANTS, VIDEO_ONLY_1080


def _muxed(format_id: str, label: str) -> MediaVariant:
    return MediaVariant(format_id, "mp4", label, has_video=True, has_audio=True)


def _audio(format_id: str, bitrate: float | None) -> MediaVariant:
    return MediaVariant(format_id, "m4a", None, has_video=False, has_audio=True, audio_bitrate=bitrate)


# ---------------------------------------------------------------------------
# resolve_quality
# ---------------------------------------------------------------------------

class TestResolveQuality:
    """The tier mapping is total."""

    @pytest.mark.parametrize("tier,label", [
        ("4K", "2160p"),
        ("2K", "1440p"),
        ("1080p", "1080p"),
        ("720p", "720p"),
        ("480p", "480p"),
        ("360p", "360p"),
    ])
    def test_documented_tiers(self, tier: str, label: str) -> None:
        assert resolve_quality(tier) == label

    @pytest.mark.parametrize("tier", ["8K", "", "720", "hd", None])
    def test_unknown_tier_defaults_to_1080p(self, tier) -> None:
        assert resolve_quality(tier) == "1080p"

    def test_map_covers_exactly_six_tiers(self) -> None:
        assert set(QUALITY_MAP) == {"4K", "2K", "1080p", "720p", "480p", "360p"}


# ---------------------------------------------------------------------------
# Audio selection
# ---------------------------------------------------------------------------

class TestSelectAudioVariant:
    """Audio-only requests pick the highest bitrate."""

    def test_highest_bitrate_wins(self) -> None:
        assert select_audio_variant(SAMPLE_VARIANTS) == AUDIO_160

    def test_never_returns_video(self) -> None:
        variants = [MUXED_360, MUXED_720, VIDEO_ONLY_1080]
        assert select_audio_variant(variants) is None

    def test_ties_keep_provider_order(self) -> None:
        first, second = _audio("a1", 128.0), _audio("a2", 128.0)
        assert select_audio_variant([first, second]) is first
        assert select_audio_variant([second, first]) is second

    def test_unknown_bitrate_sorts_last(self) -> None:
        unknown, known = _audio("u", None), _audio("k", 48.0)
        assert select_audio_variant([unknown, known]) is known

    def test_deterministic(self) -> None:
        variants = [_audio("a", 64.0), AUDIO_128, _audio("b", 128.0), AUDIO_160]
        assert select_audio_variant(variants) == select_audio_variant(list(variants))


# ---------------------------------------------------------------------------
# Video selection
# ---------------------------------------------------------------------------

class TestSelectVideoVariant:
    """Video requests: exact tier, then 720p, then first muxed rendition."""

    def test_exact_match(self) -> None:
        variants = [_muxed("a", "360p"), _muxed("b", "480p"), _muxed("c", "720p")]
        assert select_video_variant(variants, "480p").format_id == "b"

    def test_tier_alias(self) -> None:
        variants = [_muxed("a", "720p"), _muxed("b", "2160p")]
        assert select_video_variant(variants, "4K").format_id == "b"

    def test_falls_back_to_720p(self) -> None:
        variants = [_muxed("a", "360p"), _muxed("b", "720p")]
        assert select_video_variant(variants, "1080p").format_id == "b"

    def test_falls_back_to_first(self) -> None:
        variants = [_muxed("a", "360p"), _muxed("b", "240p")]
        assert select_video_variant(variants, "4K").format_id == "a"

    def test_first_exact_match_wins(self) -> None:
        variants = [_muxed("a", "720p"), _muxed("b", "720p")]
        assert select_video_variant(variants, "720p").format_id == "a"

    def test_ignores_video_only_and_audio_only(self) -> None:
        """A 1080p video-only rendition is never chosen for a 1080p request."""
        chosen = select_video_variant(SAMPLE_VARIANTS, "1080p")
        assert chosen == MUXED_720
        assert chosen.has_audio and chosen.has_video

    def test_unknown_tier_targets_1080p(self) -> None:
        variants = [_muxed("a", "720p"), _muxed("b", "1080p")]
        assert select_video_variant(variants, "potato").format_id == "b"

    def test_no_muxed_variants(self) -> None:
        assert select_video_variant([VIDEO_ONLY_1080, AUDIO_128], "720p") is None


class TestSelectVariant:
    """select_variant dispatches on the output format."""

    def test_mp3_uses_audio(self) -> None:
        assert select_variant(SAMPLE_VARIANTS, "mp3") == AUDIO_160

    @pytest.mark.parametrize("fmt", ["mp4", "webm"])
    def test_video_formats_use_muxed(self, fmt: str) -> None:
        assert select_variant(SAMPLE_VARIANTS, fmt, "360p") == MUXED_360

    def test_empty_raises_404(self) -> None:
        with pytest.raises(NoSuitableFormatError) as exc_info:
            select_variant([], "mp4", "720p", video_id="abc123xyz")
        assert exc_info.value.http_status == 404
        assert exc_info.value.message == "No suitable format found"

    def test_mp3_without_audio_raises(self) -> None:
        with pytest.raises(NoSuitableFormatError):
            select_variant([MUXED_720], "mp3")


class TestCheckOutputFormat:

    @pytest.mark.parametrize("fmt", ["mp4", "MP3", "webm"])
    def test_accepted(self, fmt: str) -> None:
        assert check_output_format(fmt) == fmt.lower()

    @pytest.mark.parametrize("fmt", ["avi", "", "flac"])
    def test_rejected(self, fmt: str) -> None:
        with pytest.raises(UnsupportedFormatError) as exc_info:
            check_output_format(fmt)
        assert exc_info.value.http_status == 400


# ---------------------------------------------------------------------------
# Filename / header helpers
# ---------------------------------------------------------------------------

class TestSanitizeTitle:

    def test_strips_punctuation(self) -> None:
        assert sanitize_title("Hello, World! (Live)") == "Hello World Live"

    def test_keeps_hyphens_and_underscores(self) -> None:
        assert sanitize_title("part_1 - intro") == "part_1 - intro"

    def test_trims(self) -> None:
        assert sanitize_title("  ?? title ??  ") == "title"

    def test_whitespace_runs_collapsed(self) -> None:
        assert sanitize_title("Episode\n\t 12  recap") == "Episode 12 recap"

    def test_truncates_to_60(self) -> None:
        assert len(sanitize_title("a" * 100)) == 60

    def test_non_ascii_dropped(self) -> None:
        assert sanitize_title("Café ☕") == "Caf"

    def test_empty_becomes_video(self) -> None:
        assert sanitize_title("!!!") == "video"


class TestHeaders:

    def test_content_types(self) -> None:
        assert content_type_for("mp4") == "video/mp4"
        assert content_type_for("webm") == "video/webm"
        assert content_type_for("mp3") == "audio/mpeg"

    def test_content_disposition_plain_and_encoded_names(self) -> None:
        header = content_disposition("My Video", "mp4")
        assert header == "attachment; filename=\"My Video.mp4\"; filename*=UTF-8''My%20Video.mp4"

    def test_content_disposition_has_no_control_characters(self) -> None:
        header = content_disposition("Line one\nLine\ttwo", "webm")
        assert 'filename="Line one Line two.webm"' in header
        assert "\n" not in header and "\t" not in header
