"""Voice entities and voice listing normalization.

The provider's /list-voices endpoint answers either with a bare list
of voices or with an envelope carrying the list under ``payload``.
normalize_voice_listing() turns both into a tagged result instead of
silently coercing whatever came back.
"""

import logging
from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Voice(BaseModel):
    """
    Synthesizable voice offered by the provider.

    Immutable once fetched; uniqueness is by ``id``.
    """

    id: int = Field(..., description="Provider voice identifier")
    display_name: str = Field(..., alias="voice_name", description="Human-readable voice name")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    def __str__(self) -> str:
        return f"{self.display_name} (ID: {self.id})"


@dataclass(frozen=True)
class Recognized:
    """Listing in a known shape; ``items`` are the raw voice entries."""

    items: tuple[Any, ...]


@dataclass(frozen=True)
class Unrecognized:
    """Listing in an unknown shape."""

    reason: str


VoiceListing = Union[Recognized, Unrecognized]


def normalize_voice_listing(data: Any) -> VoiceListing:
    """
    Normalize a /list-voices response body.

    Args:
        data: Decoded JSON body

    Returns:
        Recognized for a bare list or a ``payload`` list envelope,
        Unrecognized for anything else
    """
    if isinstance(data, list):
        return Recognized(tuple(data))
    if isinstance(data, dict) and isinstance(data.get("payload"), list):
        return Recognized(tuple(data["payload"]))
    return Unrecognized(f"unexpected voices response of type {type(data).__name__}")


def _coerce_voice_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def parse_voices(items: tuple[Any, ...] | list[Any]) -> tuple[Voice, ...]:
    """
    Build Voice objects from raw listing entries.

    Entries without an integer id are skipped; duplicates by id keep
    the first occurrence so the provider's order (and default) holds.

    Args:
        items: Raw entries from a Recognized listing

    Returns:
        Ordered tuple of unique voices
    """
    voices: list[Voice] = []
    seen: set[int] = set()

    for item in items:
        if not isinstance(item, dict):
            logger.warning(f"Skipping voice entry that is not an object: {item!r}")
            continue

        voice_id = _coerce_voice_id(item.get("id"))
        if voice_id is None:
            logger.warning(f"Skipping voice entry without a valid id: {item!r}")
            continue
        if voice_id in seen:
            continue

        name = item.get("voice_name") or item.get("name") or f"Voice {voice_id}"
        voices.append(Voice(id=voice_id, voice_name=str(name)))
        seen.add(voice_id)

    return tuple(voices)
