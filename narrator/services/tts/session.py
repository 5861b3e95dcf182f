"""Narrator session: the façade over the synthesis pipeline.

NarratorSession owns the API key, the selected voice and the voice
cache for its lifetime, and composes

    CredentialValidator → VoiceCatalog          (initialize)
    JobSubmitter → JobPoller → ResultFetcher    (synthesize)

A single asyncio.Lock serializes the session's network work; a call
that arrives while another is running is rejected with SESSION_BUSY.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from narrator.lib.config import NarratorConfig, get_narrator_config
from narrator.lib.exceptions import (
    CatalogError,
    ErrorKind,
    NarratorError,
    SessionError,
    SubmitError,
)
from narrator.models.audio import AudioResult
from narrator.models.job import coerce_voice_selector
from narrator.models.voice import Voice
from narrator.services.camb.client import CambClient
from narrator.services.tts.credential_validator import CredentialValidator
from narrator.services.tts.job_poller import JobPoller, Sleep
from narrator.services.tts.job_submitter import JobSubmitter
from narrator.services.tts.result_fetcher import ResultFetcher
from narrator.services.tts.voice_catalog import VoiceCatalog

logger = logging.getLogger(__name__)


class NarratorSession:
    """
    Session-scoped Camb.ai narrator.

    Example:
        >>> async with NarratorSession() as session:
        ...     if await session.initialize(api_key):
        ...         audio = await session.synthesize("Hello there.")
        ...         play(audio.locator)
        ...         session.release_result(audio)

    Attributes:
        config: Narrator configuration
        last_error: Most recent failure recorded by initialize()
    """

    def __init__(
        self,
        config: Optional[NarratorConfig] = None,
        http: Optional[httpx.AsyncClient] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize an empty, not-yet-ready session.

        Args:
            config: Narrator configuration (global config when None)
            http: httpx client to use; when None the session creates and
                closes its own
            sleep: Awaitable sleep used for poll backoff
        """
        self.config = config or get_narrator_config()
        self._http = http
        self._owns_http = http is None
        self._sleep = sleep
        self._lock = asyncio.Lock()
        # Bumped on every state reset; stale work must not commit
        self._generation = 0

        self._credential: Optional[str] = None
        self._voice_id: Optional[int] = None
        self._preferred_voice_id: Optional[int] = None
        self._catalog: Optional[VoiceCatalog] = None
        self._submitter: Optional[JobSubmitter] = None
        self._poller: Optional[JobPoller] = None
        self._fetcher: Optional[ResultFetcher] = None

        self.last_error: Optional[NarratorError] = None

    async def __aenter__(self) -> "NarratorSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def is_ready(self) -> bool:
        """True only when an API key and a voice are both in place."""
        return bool(self._credential) and self._voice_id is not None

    @property
    def selected_voice_id(self) -> Optional[int]:
        return self._voice_id

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.config.request_timeout_seconds)
            self._owns_http = True
        return self._http

    def _clear_state(self) -> None:
        self._generation += 1
        if self._catalog is not None:
            self._catalog.clear()
        self._credential = None
        self._voice_id = None
        self._preferred_voice_id = None
        self._catalog = None
        self._submitter = None
        self._poller = None
        self._fetcher = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self, credential: str, preferred_voice_id: Optional[int] = None) -> bool:
        """
        Validate the API key, load voices and pick the narration voice.

        Never raises; the failure is logged and kept in ``last_error``.

        Args:
            credential: Camb.ai API key
            preferred_voice_id: Voice to use if listed (config default when None)

        Returns:
            True if the session is ready to synthesize
        """
        if self._lock.locked():
            self.last_error = SessionError(
                "Another narrator operation is in progress", kind=ErrorKind.SESSION_BUSY
            )
            logger.error(self.last_error.message)
            return False

        async with self._lock:
            self._clear_state()
            self.last_error = None
            try:
                return await self._initialize(credential, preferred_voice_id)
            except NarratorError as e:
                self.last_error = e
                logger.error(f"Failed to initialize narrator: {e.kind.value}: {e.message}")
                self._clear_state()
                return False
            except Exception as e:
                self.last_error = NarratorError(f"Unexpected error: {e}", original_error=e)
                logger.exception(f"Unexpected error initializing narrator: {e}")
                self._clear_state()
                return False

    async def _initialize(self, credential: str, preferred_voice_id: Optional[int]) -> bool:
        generation = self._generation
        http = self._get_http()

        check = await CredentialValidator(http, self.config).validate(credential)
        if not check.valid:
            raise check.to_error()

        client = CambClient(
            http,
            credential,
            base_url=self.config.base_url,
            timeout=self.config.request_timeout_seconds,
        )
        catalog = VoiceCatalog(client)

        if check.listing is not None:
            voices = catalog.seed(check.listing)
        else:
            voices = await catalog.fetch()

        preferred = preferred_voice_id if preferred_voice_id is not None else self.config.voice_id
        voice = catalog.resolve_default(preferred, voices)

        if self._generation != generation:
            raise SessionError(
                "Session was released during initialization",
                kind=ErrorKind.NOT_INITIALIZED,
            )

        self._credential = credential
        self._catalog = catalog
        self._submitter = JobSubmitter(client)
        self._poller = JobPoller(
            client,
            max_attempts=self.config.poll_max_attempts,
            base_delay=self.config.poll_base_delay_seconds,
            max_delay=self.config.poll_max_delay_seconds,
            error_delay=self.config.poll_error_delay_seconds,
            sleep=self._sleep,
        )
        self._fetcher = ResultFetcher(client)
        self._preferred_voice_id = preferred
        self._voice_id = voice.id

        logger.info(f"Narrator ready with voice {voice}")
        return True

    async def release(self) -> None:
        """
        Forget the API key, voice and cache; close an owned HTTP client.

        Outstanding AudioResult handles stay the caller's responsibility.
        """
        self._clear_state()
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None
        logger.info("Narrator session released")

    # ------------------------------------------------------------------
    # Voices
    # ------------------------------------------------------------------

    async def list_voices(self) -> tuple[Voice, ...]:
        """Voices available to this session (empty when not initialized)."""
        if self._catalog is None:
            return ()
        if self._lock.locked():
            # No extra request while another call is in flight
            return self._catalog.cached
        return await self._catalog.get()

    async def refresh_voices(self) -> tuple[Voice, ...]:
        """
        Re-fetch the voice catalog.

        Keeps the selected voice when still listed, otherwise switches
        to the catalog default.

        Raises:
            SessionError: NOT_INITIALIZED / SESSION_BUSY
            CatalogError: If the listing cannot be fetched
        """
        self._ensure_idle()
        self._ensure_ready()

        async with self._lock:
            catalog = self._catalog
            generation = self._generation
            voices = await catalog.refresh()
            if voices and self._generation == generation:
                self._voice_id = catalog.resolve_default(self._voice_id, voices).id
            return voices

    def set_voice(self, voice_id: Any) -> bool:
        """
        Select the voice used by later syntheses.

        Returns:
            False if the session is not initialized or the id is not an integer
        """
        if not self.is_ready():
            logger.error("API key not set. Call initialize first.")
            return False
        try:
            self._voice_id = coerce_voice_selector(voice_id)
        except SubmitError as e:
            logger.error(e.message)
            return False
        return True

    # ------------------------------------------------------------------
    # Synthesis
    # ------------------------------------------------------------------

    async def synthesize(
        self,
        text: str,
        language: Optional[int] = None,
        gender: Optional[int] = None,
        voice_id: Optional[Any] = None,
    ) -> AudioResult:
        """
        Narrate ``text`` and return the playable audio.

        If the provider rejects the voice selector, the catalog is
        refreshed and the whole pipeline is retried once with the
        recovery voice; a second rejection is raised as-is.

        Args:
            text: Narration text
            language: Provider language code (config default when None)
            gender: Provider gender code (config default when None)
            voice_id: Voice override for this call only

        Returns:
            AudioResult owned by the caller

        Raises:
            SessionError: NOT_INITIALIZED / SESSION_BUSY
            SubmitError, PollError, ResultError, CatalogError: pipeline failures
        """
        self._ensure_idle()
        self._ensure_ready()

        async with self._lock:
            language = self.config.default_language if language is None else language
            gender = self.config.default_gender if gender is None else gender
            voice = self._voice_id if voice_id is None else voice_id
            catalog = self._catalog
            generation = self._generation
            stages = (self._submitter, self._poller, self._fetcher)

            try:
                return await self._run_pipeline(stages, text, voice, language, gender)
            except SubmitError as e:
                if not e.is_voice_rejected:
                    raise
                logger.warning(
                    f"Voice ID {voice} rejected, attempting to fetch and use a catalog voice..."
                )

            recovery = await self._resolve_recovery_voice(catalog)
            logger.info(f"Retrying with voice: {recovery}")

            def commit_voice() -> None:
                # Skip if the session was released or re-initialized meanwhile
                if self._generation == generation:
                    self._voice_id = recovery.id

            return await self._run_pipeline(
                stages, text, recovery.id, language, gender, on_accepted=commit_voice
            )

    def release_result(self, result: AudioResult) -> None:
        """Release an audio handle returned by synthesize()."""
        result.release()

    async def _run_pipeline(
        self,
        stages: tuple[JobSubmitter, JobPoller, ResultFetcher],
        text: str,
        voice_id: Any,
        language: Any,
        gender: Any,
        on_accepted=None,
    ) -> AudioResult:
        submitter, poller, fetcher = stages
        job = await submitter.submit(text, voice_id, language, gender)
        if on_accepted is not None:
            on_accepted()
        run_id = await poller.poll(job.job_id)
        return await fetcher.fetch(run_id)

    async def _resolve_recovery_voice(self, catalog: VoiceCatalog) -> Voice:
        voices = await catalog.refresh()
        preferred = (
            self._preferred_voice_id
            if self.config.recovery_voice_policy == "preferred"
            else None
        )
        try:
            return catalog.resolve_default(preferred, voices)
        except CatalogError:
            logger.error("No voices available to retry with")
            raise

    def _ensure_ready(self) -> None:
        if not self.is_ready():
            raise SessionError(
                "Camb.ai API key or voice ID not set. Call initialize first.",
                kind=ErrorKind.NOT_INITIALIZED,
            )

    def _ensure_idle(self) -> None:
        if self._lock.locked():
            raise SessionError(
                "Another narrator operation is in progress",
                kind=ErrorKind.SESSION_BUSY,
            )
