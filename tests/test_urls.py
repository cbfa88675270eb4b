"""
test_urls.py — Tests for YouTube URL validation and video-reference parsing.
"""

from __future__ import annotations

import pytest

from ytflow.errors import (
    IdExtractionFailedError,
    InvalidUrlError,
    MissingUrlError,
)
from ytflow.urls import VideoReference, parse_video_ref


class TestParseVideoRef:
    """Accepted URL shapes."""

    def test_standard_watch_url(self) -> None:
        ref = parse_video_ref("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
        assert ref.video_id == "dQw4w9WgXcQ"

    def test_watch_url_with_extra_params(self) -> None:
        """Trailing query parameters don't leak into the ID."""
        ref = parse_video_ref("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42")
        assert ref.video_id == "dQw4w9WgXcQ"

    def test_short_url(self) -> None:
        assert parse_video_ref("https://youtu.be/abc123xyz").video_id == "abc123xyz"

    def test_shorts_url(self) -> None:
        assert parse_video_ref("https://www.youtube.com/shorts/Ab_Cd-Ef").video_id == "Ab_Cd-Ef"

    def test_embed_url(self) -> None:
        """embed/ is accepted and extracted by the same pattern."""
        assert parse_video_ref("https://www.youtube.com/embed/dQw4w9WgXcQ").video_id == "dQw4w9WgXcQ"

    def test_scheme_and_www_optional(self) -> None:
        assert parse_video_ref("youtube.com/watch?v=dQw4w9WgXcQ").video_id == "dQw4w9WgXcQ"
        assert parse_video_ref("http://youtu.be/dQw4w9WgXcQ").video_id == "dQw4w9WgXcQ"

    def test_six_character_id_is_enough(self) -> None:
        assert parse_video_ref("https://youtu.be/abcdef").video_id == "abcdef"

    def test_surrounding_whitespace_trimmed(self) -> None:
        ref = parse_video_ref("  https://youtu.be/abc123xyz  ")
        assert ref.source_url == "https://youtu.be/abc123xyz"

    def test_canonical_url_built_from_id(self) -> None:
        ref = parse_video_ref("https://youtu.be/abc123xyz")
        assert ref.url == "https://www.youtube.com/watch?v=abc123xyz"


class TestParseVideoRefErrors:
    """Rejected input."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_url(self, value) -> None:
        with pytest.raises(MissingUrlError) as exc_info:
            parse_video_ref(value)
        assert exc_info.value.http_status == 400

    @pytest.mark.parametrize("value", [
        "not-a-youtube-url",
        "https://vimeo.com/123456789",
        "https://youtu.be/abc",                      # id too short
        "https://www.youtube.com/watch?list=PL123&v=dQw4w9WgXcQ",
        "https://www.youtube.com/v/dQw4w9WgXcQ",
        "https://example.com/?u=https://youtu.be/dQw4w9WgXcQ",
    ])
    def test_invalid_url(self, value: str) -> None:
        with pytest.raises(InvalidUrlError) as exc_info:
            parse_video_ref(value)
        assert exc_info.value.message == "Invalid YouTube URL"
        assert exc_info.value.http_status == 400


class TestVideoReference:
    """The identifier invariant is enforced on construction."""

    def test_bad_identifier_raises(self) -> None:
        with pytest.raises(IdExtractionFailedError) as exc_info:
            VideoReference(video_id="ab$", source_url="x")
        assert exc_info.value.message == "Could not extract video ID"

    def test_immutable(self) -> None:
        ref = VideoReference(video_id="abc123xyz", source_url="https://youtu.be/abc123xyz")
        with pytest.raises(AttributeError):
            ref.video_id = "other1"  # type: ignore[misc]
