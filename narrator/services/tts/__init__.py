"""Camb.ai narration pipeline.

This package drives the provider's job-based text-to-speech API:
- CredentialValidator: confirms an API key before it is trusted
- VoiceCatalog: lazy, session-scoped voice cache
- JobSubmitter: POST /tts with voice rejection detection
- JobPoller: status polling with capped linear backoff
- ResultFetcher: binary / URL / base64 results into an AudioResult
- NarratorSession: the façade tying them together

Example:
    >>> from narrator.services.tts import NarratorSession
    >>>
    >>> async with NarratorSession() as session:
    ...     if await session.initialize(api_key):
    ...         audio = await session.synthesize("Soft cotton tee. This product costs $20.")
    ...         print(audio.media_type, audio.size_bytes)
    ...         session.release_result(audio)
"""

from narrator.services.tts.credential_validator import CredentialCheck, CredentialValidator
from narrator.services.tts.voice_catalog import VoiceCatalog
from narrator.services.tts.job_submitter import JobSubmitter
from narrator.services.tts.job_poller import JobPoller, poll_backoff
from narrator.services.tts.result_fetcher import ResultFetcher
from narrator.services.tts.session import NarratorSession
from narrator.services.tts.narration import format_product_narration

__all__ = [
    "CredentialCheck",
    "CredentialValidator",
    "VoiceCatalog",
    "JobSubmitter",
    "JobPoller",
    "poll_backoff",
    "ResultFetcher",
    "NarratorSession",
    "format_product_narration",
]
