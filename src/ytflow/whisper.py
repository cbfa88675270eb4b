"""
whisper.py — Speech transcription through the OpenAI Whisper API.

Credential-gated: probe() is False when no OPENAI_API_KEY is configured, and
the orchestrator falls back to YouTube captions without ever building a
client.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from openai import OpenAI, OpenAIError

from ytflow.errors import ProviderFailureError
from ytflow.transcript import TranscriptSegment, normalize_segments

logger = logging.getLogger(__name__)

AUTO_LANGUAGE = "auto"


@dataclass
class TranscriptionOutput:
    """Normalized answer of the transcription provider."""
    text: str
    segments: list[TranscriptSegment] = field(default_factory=list)
    language: str | None = None
    duration: float | None = None


def _get(obj: Any, key: str, default: Any = None) -> Any:
    # The SDK returns pydantic models; extra verbose_json fields may arrive as dicts.
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def output_from_response(response: Any) -> TranscriptionOutput:
    """Convert a verbose_json transcription response into TranscriptionOutput."""
    raw_segments = [
        {
            "start": _get(s, "start", 0.0),
            "end": _get(s, "end"),
            "text": _get(s, "text", ""),
        }
        for s in (_get(response, "segments") or [])
    ]
    duration = _get(response, "duration")
    return TranscriptionOutput(
        text=(_get(response, "text") or "").strip(),
        segments=normalize_segments(raw_segments),
        language=_get(response, "language"),
        duration=float(duration) if duration is not None else None,
    )


class WhisperTranscriber:
    """Transcribes a local audio file with OpenAI's transcription endpoint."""

    name = "whisper"

    def __init__(
        self,
        api_key: str | None,
        model: str = "whisper-1",
        client: OpenAI | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self._client = client

    def probe(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def transcribe(self, audio_path: Path, language: str = AUTO_LANGUAGE) -> TranscriptionOutput:
        """
        Transcribe *audio_path*.

        *language* "auto" lets Whisper detect the language; any other value
        is passed through as a hint.

        Raises:
            ProviderFailureError: the API rejected the request or was unreachable.
        """
        kwargs: dict[str, Any] = {
            "model": self.model,
            "response_format": "verbose_json",
            "timestamp_granularities": ["segment"],
        }
        if language and language != AUTO_LANGUAGE:
            kwargs["language"] = language

        logger.info("Sending %s to Whisper (%s)", audio_path.name, self.model)
        try:
            with open(audio_path, "rb") as audio_file:
                response = self._get_client().audio.transcriptions.create(file=audio_file, **kwargs)
        except OpenAIError as exc:
            raise ProviderFailureError(self.name, str(exc)) from exc

        return output_from_response(response)
