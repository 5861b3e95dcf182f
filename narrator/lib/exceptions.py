"""Exception hierarchy for the narrator client.

All custom exceptions inherit from NarratorError to enable
selective catching at different levels. Every error carries a
machine-readable ``kind`` so callers can branch on it and render
a specific message (see narrator.lib.error_catalog).

Hierarchy:
    NarratorError (base)
    ├── ConfigError - Missing or invalid configuration
    ├── CredentialError - API key empty, rejected or unverifiable
    ├── CatalogError - Voice listing fetch/format failures
    ├── SubmitError - Synthesis job submission failures
    ├── PollError - Job failed or never finished
    ├── ResultError - Result payload missing or undecodable
    └── SessionError - Session not ready or already busy
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification of every failure the narrator can surface."""

    # Configuration
    CONFIG_MISSING = "config_missing"

    # Credential validation
    EMPTY_CREDENTIAL = "empty_credential"
    AUTH_REJECTED = "auth_rejected"
    BAD_REQUEST = "bad_request"
    ENDPOINT_MISMATCH = "endpoint_mismatch"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    UNKNOWN_PROVIDER_ERROR = "unknown_provider_error"
    UNEXPECTED_RESPONSE = "unexpected_response"

    # Voice catalog
    FETCH_FAILED = "fetch_failed"
    FORMAT_ERROR = "format_error"
    NO_VOICES_AVAILABLE = "no_voices_available"

    # Job submission
    INVALID_VOICE_SELECTOR = "invalid_voice_selector"
    INVALID_TEXT = "invalid_text"
    VOICE_REJECTED = "voice_rejected"
    PROVIDER_ERROR = "provider_error"
    MALFORMED_RESPONSE = "malformed_response"

    # Job polling
    JOB_FAILED = "job_failed"
    POLL_TIMEOUT = "poll_timeout"

    # Result retrieval
    EMPTY_AUDIO = "empty_audio"
    DECODE_ERROR = "decode_error"
    UNSUPPORTED_CONTENT_TYPE = "unsupported_content_type"
    RESULT_FETCH_FAILED = "result_fetch_failed"
    NO_AUDIO_DATA = "no_audio_data"

    # Session
    NOT_INITIALIZED = "not_initialized"
    SESSION_BUSY = "session_busy"


class NarratorError(Exception):
    """
    Base exception for all narrator errors.

    Catching this will catch all custom exceptions from this module.

    Attributes:
        message: Human-readable description
        kind: Machine-readable classification
        status: HTTP status returned by the provider, if any
        detail: Provider error detail, if any
        original_error: Original exception if wrapping
    """

    default_kind: ErrorKind = ErrorKind.UNKNOWN_PROVIDER_ERROR

    def __init__(
        self,
        message: str,
        kind: ErrorKind | None = None,
        status: int | None = None,
        detail: Any = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.kind = kind or self.default_kind
        self.status = status
        self.detail = detail
        self.original_error = original_error
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"status={self.status!r}, message={self.message!r})"
        )


class ConfigError(NarratorError):
    """
    Configuration error.

    Raised when required configuration is missing or invalid.
    Examples: missing API key.

    CLI Exit Code: 2
    """

    default_kind = ErrorKind.CONFIG_MISSING


class CredentialError(NarratorError):
    """
    Credential validation error.

    Raised when the API key is empty or the provider refuses it.

    CLI Exit Code: 3
    """

    default_kind = ErrorKind.AUTH_REJECTED


class CatalogError(NarratorError):
    """Voice listing could not be fetched, parsed, or was empty."""

    default_kind = ErrorKind.FETCH_FAILED


class SubmitError(NarratorError):
    """
    Synthesis job submission error.

    ``VOICE_REJECTED`` is the only recoverable kind: the session
    refreshes the voice catalog and retries once.
    """

    default_kind = ErrorKind.PROVIDER_ERROR

    @property
    def is_voice_rejected(self) -> bool:
        return self.kind == ErrorKind.VOICE_REJECTED


class PollError(NarratorError):
    """Job reported failure or did not finish within the attempt budget."""

    default_kind = ErrorKind.POLL_TIMEOUT


class ResultError(NarratorError):
    """Finished job's result could not be turned into playable audio."""

    default_kind = ErrorKind.RESULT_FETCH_FAILED


class SessionError(NarratorError):
    """Session used before initialize, after release, or while busy."""

    default_kind = ErrorKind.NOT_INITIALIZED
