"""
transcript.py — Timed transcript segments and their normalization.

Providers hand back segment lists of varying quality: Whisper occasionally
emits zero-length or slightly overlapping spans, caption tracks contain
empty "\\n" events.  normalize_segments() turns any such list into a clean,
monotonic sequence of TranscriptSegment without ever raising on bad data;
every correction it makes is logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

# Minimum length given to a segment whose end is not after its start.
_MIN_SEGMENT_SECS = 0.1


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TranscriptSegment:
    """
    One span of spoken text.

    Attributes:
        start: Offset of the first word, in seconds (>= 0).
        end:   Offset after the last word, in seconds (> start).
        text:  The words, trimmed, never empty.
    """
    start: float
    end: float
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end, "text": self.text}


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def normalize_segments(raw: Iterable[Mapping[str, Any]]) -> list[TranscriptSegment]:
    """
    Build a clean segment list from provider dicts with start/end/text keys.

    Rules, applied in order:
      - text is trimmed; segments with no text are dropped
      - a negative start is clamped to 0
      - a start earlier than the previous segment's start is clamped to it
      - an end that is missing or not after the start becomes start + 0.1s
    """
    segments: list[TranscriptSegment] = []
    previous_start = 0.0

    for index, item in enumerate(raw):
        text = str(item.get("text") or "").strip()
        if not text:
            continue

        start = float(item.get("start") or 0.0)
        end_value = item.get("end")
        end = float(end_value) if end_value is not None else start

        if start < 0:
            logger.warning("Segment %d starts at %.3fs; clamped to 0", index, start)
            start = 0.0
        if start < previous_start:
            logger.warning(
                "Segment %d starts at %.3fs before previous start %.3fs; clamped",
                index, start, previous_start,
            )
            start = previous_start
        if end <= start:
            logger.warning("Segment %d has end %.3fs <= start %.3fs; extended", index, end, start)
            end = start + _MIN_SEGMENT_SECS

        segments.append(TranscriptSegment(start=start, end=end, text=text))
        previous_start = start

    return segments


def join_text(segments: Iterable[TranscriptSegment]) -> str:
    """Space-join segment texts in order."""
    return " ".join(segment.text for segment in segments)


def word_count(text: str | None) -> int:
    """Count whitespace-delimited tokens."""
    return len(text.split()) if text else 0
