"""
extraction.py — Media providers: yt-dlp for full extraction, noembed for a
lightweight title lookup.

YtDlpExtractor is the primary provider for both user-facing operations.  It
lists every rendition of a video and can download one of them to a local
path.  Its probe() reports whether extraction is enabled at all; operators
switch it off (YTFLOW_EXTRACTION_ENABLED=false) when YouTube blocks the host,
and ytflow then serves the noembed lookup and third-party redirects instead.

NoembedLookup only knows the title and author of a video, which is enough to
answer a metadata request in degraded mode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import httpx
import yt_dlp

from ytflow.errors import ProviderFailureError
from ytflow.metadata import MediaVariant, VideoMetadata, metadata_from_info
from ytflow.urls import VideoReference

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# yt-dlp
# ---------------------------------------------------------------------------

class YtDlpExtractor:
    """Metadata, rendition listing and downloads through yt-dlp."""

    name = "yt-dlp"

    # quiet and no_warnings keep yt-dlp off stdout; we only want the info_dict.
    _BASE_OPTS = {
        "quiet": True,
        "no_warnings": True,
        "noprogress": True,
    }

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def probe(self) -> bool:
        return self.enabled

    def fetch_metadata(self, ref: VideoReference) -> VideoMetadata:
        """
        Fetch metadata and the rendition list without downloading media.

        Raises:
            ProviderFailureError: yt-dlp could not extract the video (removed,
                private, age-restricted, network error...).
        """
        opts = {**self._BASE_OPTS, "skip_download": True}
        try:
            with yt_dlp.YoutubeDL(opts) as ydl:
                info = ydl.extract_info(ref.url, download=False)
        except yt_dlp.utils.DownloadError as exc:
            raise ProviderFailureError(self.name, str(exc)) from exc

        if info is None:
            raise ProviderFailureError(self.name, "yt-dlp returned no info")

        return metadata_from_info(ref.video_id, info)

    def download(self, ref: VideoReference, variant: MediaVariant, dest: Path) -> Path:
        """
        Download exactly one rendition to *dest*.

        The caller owns *dest* and is responsible for removing it.
        """
        opts = {
            **self._BASE_OPTS,
            "format": variant.format_id,
            "outtmpl": str(dest),
            "overwrites": True,
            "nopart": True,  # partial downloads land at dest itself
        }
        logger.info("Downloading %s format %s to %s", ref.video_id, variant.format_id, dest)
        try:
            with yt_dlp.YoutubeDL(opts) as ydl:
                ydl.download([ref.url])
        except yt_dlp.utils.DownloadError as exc:
            raise ProviderFailureError(self.name, str(exc)) from exc

        if not dest.exists():
            raise ProviderFailureError(self.name, f"yt-dlp wrote no file for format {variant.format_id}")
        return dest


# ---------------------------------------------------------------------------
# noembed
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LookupResult:
    """What the lightweight lookup knows about a video."""
    title: str
    author: str


class NoembedLookup:
    """oEmbed-style title/author lookup through noembed.com."""

    name = "noembed"

    def __init__(
        self,
        base_url: str = "https://noembed.com/embed",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def probe(self) -> bool:
        return True

    def lookup(self, ref: VideoReference) -> LookupResult:
        """
        Ask noembed for the title and author of a video.

        Raises:
            ProviderFailureError: network error, non-2xx status, non-JSON body,
                or an {"error": ...} payload.
        """
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(self.base_url, params={"url": ref.url})
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise ProviderFailureError(self.name, str(exc)) from exc
        except ValueError as exc:
            raise ProviderFailureError(self.name, f"Invalid response from noembed: {exc}") from exc

        if not isinstance(data, dict):
            raise ProviderFailureError(self.name, "Invalid response from noembed")
        if data.get("error"):
            raise ProviderFailureError(self.name, str(data["error"]))

        return LookupResult(
            title=data.get("title") or "YouTube Video",
            author=data.get("author_name") or "Unknown",
        )
