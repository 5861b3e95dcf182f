"""Voice catalog with a lazy, session-scoped cache."""

import logging
from typing import Optional

import httpx

from narrator.lib.exceptions import CatalogError, ErrorKind
from narrator.models.voice import (
    Recognized,
    Voice,
    VoiceListing,
    normalize_voice_listing,
    parse_voices,
)
from narrator.services.camb.client import CambClient

logger = logging.getLogger(__name__)


class VoiceCatalog:
    """
    Fetches and caches the voices the provider can synthesize.

    The cache is never expired on its own; it is replaced only by an
    explicit fetch()/refresh() or seed().

    Attributes:
        client: Camb.ai client bound to the session's API key
    """

    def __init__(self, client: CambClient):
        self.client = client
        self._voices: tuple[Voice, ...] = ()

    @property
    def cached(self) -> tuple[Voice, ...]:
        """Voices currently in cache (possibly empty)."""
        return self._voices

    async def fetch(self) -> tuple[Voice, ...]:
        """
        Fetch the voice listing and replace the cache.

        Returns:
            Ordered voices; may be empty (no voices available)

        Raises:
            CatalogError: FETCH_FAILED on transport/HTTP errors,
                FORMAT_ERROR on an unrecognized body
        """
        logger.info("Fetching available voices from Camb.ai...")

        try:
            response = await self.client.list_voices()
        except httpx.HTTPError as e:
            raise CatalogError(
                f"Failed to fetch voices: {e}",
                kind=ErrorKind.FETCH_FAILED,
                original_error=e,
            ) from e

        if not response.is_success:
            raise CatalogError(
                f"Failed to fetch voices: HTTP {response.status_code}",
                kind=ErrorKind.FETCH_FAILED,
                status=response.status_code,
                detail=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogError(
                "Voices response is not valid JSON",
                kind=ErrorKind.FORMAT_ERROR,
                status=response.status_code,
                original_error=e,
            ) from e

        listing = normalize_voice_listing(data)
        if not isinstance(listing, Recognized):
            raise CatalogError(
                f"Unexpected voices response format: {listing.reason}",
                kind=ErrorKind.FORMAT_ERROR,
                status=response.status_code,
            )

        return self.seed(listing)

    async def refresh(self) -> tuple[Voice, ...]:
        """Re-fetch the listing, discarding the cache."""
        return await self.fetch()

    def seed(self, listing: VoiceListing) -> tuple[Voice, ...]:
        """
        Populate the cache from an already-normalized listing.

        Args:
            listing: Result of normalize_voice_listing()

        Returns:
            Cached voices (unchanged cache for an Unrecognized listing)
        """
        if not isinstance(listing, Recognized):
            return self._voices

        self._voices = parse_voices(listing.items)
        if self._voices:
            logger.info(f"Fetched {len(self._voices)} voices")
        else:
            logger.warning("Voice listing is empty: no voices available")
        return self._voices

    async def get(self) -> tuple[Voice, ...]:
        """
        Get cached voices, fetching them on first use.

        Never raises; a failed fetch yields an empty tuple.
        """
        if self._voices:
            return self._voices

        try:
            return await self.fetch()
        except CatalogError as e:
            logger.error(f"Error fetching voices: {e}")
            return ()

    def resolve_default(
        self,
        preferred_id: Optional[int] = None,
        voices: Optional[tuple[Voice, ...]] = None,
    ) -> Voice:
        """
        Pick the voice to narrate with.

        Args:
            preferred_id: Voice to use if it is listed
            voices: Sequence to resolve against (defaults to the cache)

        Returns:
            The preferred voice when present, else the first voice

        Raises:
            CatalogError: NO_VOICES_AVAILABLE if there is nothing to pick
        """
        candidates = self._voices if voices is None else voices
        if not candidates:
            raise CatalogError("No voices available", kind=ErrorKind.NO_VOICES_AVAILABLE)

        if preferred_id is not None:
            for voice in candidates:
                if voice.id == preferred_id:
                    return voice
            logger.info(
                f"Selected voice ID {preferred_id} not found, "
                f"using first available voice: {candidates[0]}"
            )

        return candidates[0]

    def clear(self) -> None:
        """Drop cached voices."""
        self._voices = ()
