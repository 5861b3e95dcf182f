"""Externalized error catalog for user-facing narrator messages.

Every ErrorKind raised by the narrator maps to one UserFacingError so
that the host application can show a specific message instead of a
stack trace. Messages are kept here rather than in the services.

Error Code Format: ERR_{DOMAIN}_{NUMBER}
- CONFIG: Missing configuration
- CREDENTIAL: API key validation
- CATALOG: Voice listing
- SUBMIT: Job submission
- POLL: Job status polling
- RESULT: Audio retrieval
- SESSION: Session lifecycle
- UNKNOWN: Unmapped exceptions
"""

from dataclasses import dataclass, field
from enum import Enum

from narrator.lib.exceptions import ErrorKind, NarratorError


class ErrorSeverity(str, Enum):
    """Severity level for user-facing errors."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class UserFacingError:
    """Structured error for humanized presentation.

    Attributes:
        error_code: Unique error identifier (e.g., "ERR_CREDENTIAL_002")
        message: User-friendly description (no technical jargon)
        suggestions: List of actionable recovery hints
        severity: Error severity level
    """

    error_code: str
    message: str
    suggestions: list[str] = field(default_factory=list)
    severity: ErrorSeverity = ErrorSeverity.ERROR


def _entry(code: str, message: str, suggestions: list[str], severity=ErrorSeverity.ERROR):
    return code, UserFacingError(
        error_code=code, message=message, suggestions=suggestions, severity=severity
    )


# =============================================================================
# Error Catalog
# =============================================================================

ERROR_CATALOG: dict[str, UserFacingError] = dict(
    [
        _entry(
            "ERR_CONFIG_001",
            "No Camb.ai API key is configured.",
            ["Set the CAMB_API_KEY environment variable or pass --api-key."],
            ErrorSeverity.CRITICAL,
        ),
        # ---------------------------------------------------------------------
        # Credential Errors (ERR_CREDENTIAL_xxx)
        # ---------------------------------------------------------------------
        _entry(
            "ERR_CREDENTIAL_001",
            "API key cannot be empty.",
            ["Enter your Camb.ai API key."],
            ErrorSeverity.WARNING,
        ),
        _entry(
            "ERR_CREDENTIAL_002",
            "Authentication failed: invalid Camb.ai API key or insufficient permissions.",
            ["Check the key in your Camb.ai dashboard and try again."],
        ),
        _entry(
            "ERR_CREDENTIAL_003",
            "Bad request: the API parameters are invalid.",
            ["Try again; if the problem persists the client may be outdated."],
        ),
        _entry(
            "ERR_CREDENTIAL_004",
            "Endpoint not found: the Camb.ai API URL may be incorrect.",
            ["Check the CAMB_BASE_URL setting."],
            ErrorSeverity.CRITICAL,
        ),
        _entry(
            "ERR_CREDENTIAL_005",
            "Rate limit exceeded: too many requests to the Camb.ai API.",
            ["Wait a moment before trying again."],
            ErrorSeverity.WARNING,
        ),
        _entry(
            "ERR_CREDENTIAL_006",
            "Unable to connect to the Camb.ai API.",
            ["Check your internet connection or firewall settings."],
        ),
        _entry(
            "ERR_CREDENTIAL_007",
            "The Camb.ai API returned an unexpected error.",
            ["Try again in a few moments."],
        ),
        _entry(
            "ERR_CREDENTIAL_008",
            "Invalid response format from the Camb.ai API.",
            ["Try again in a few moments."],
        ),
        # ---------------------------------------------------------------------
        # Catalog Errors (ERR_CATALOG_xxx)
        # ---------------------------------------------------------------------
        _entry(
            "ERR_CATALOG_001",
            "Failed to fetch the list of voices.",
            ["Try again in a few moments."],
        ),
        _entry(
            "ERR_CATALOG_002",
            "The list of voices came back in an unexpected format.",
            ["Try again in a few moments."],
        ),
        _entry(
            "ERR_CATALOG_003",
            "No voices are available for this account.",
            ["Create or enable a voice in your Camb.ai account."],
            ErrorSeverity.CRITICAL,
        ),
        # ---------------------------------------------------------------------
        # Submission Errors (ERR_SUBMIT_xxx)
        # ---------------------------------------------------------------------
        _entry(
            "ERR_SUBMIT_001",
            "The selected voice is not valid.",
            ["Pick a voice from the list of available voices."],
            ErrorSeverity.WARNING,
        ),
        _entry(
            "ERR_SUBMIT_002",
            "There is no text to narrate.",
            ["Provide some text and try again."],
            ErrorSeverity.WARNING,
        ),
        _entry(
            "ERR_SUBMIT_003",
            "The provider rejected the selected voice.",
            ["Refresh the list of voices and pick another one."],
        ),
        _entry(
            "ERR_SUBMIT_004",
            "Failed to call the Camb.ai API for narration.",
            ["Try again in a few moments."],
        ),
        _entry(
            "ERR_SUBMIT_005",
            "The narration job could not be started.",
            ["Try again in a few moments."],
        ),
        # ---------------------------------------------------------------------
        # Polling Errors (ERR_POLL_xxx)
        # ---------------------------------------------------------------------
        _entry(
            "ERR_POLL_001",
            "The narration job failed on the provider side.",
            ["Try again; shorter text may help."],
        ),
        _entry(
            "ERR_POLL_002",
            "Timed out waiting for the narration to complete.",
            ["Try again in a few moments."],
            ErrorSeverity.WARNING,
        ),
        # ---------------------------------------------------------------------
        # Result Errors (ERR_RESULT_xxx)
        # ---------------------------------------------------------------------
        _entry(
            "ERR_RESULT_001",
            "The narration audio was empty.",
            ["Try again in a few moments."],
        ),
        _entry(
            "ERR_RESULT_002",
            "The narration audio could not be decoded.",
            ["Try again in a few moments."],
        ),
        _entry(
            "ERR_RESULT_003",
            "The narration came back in an unsupported format.",
            ["Try again in a few moments."],
        ),
        _entry(
            "ERR_RESULT_004",
            "Failed to download the narration audio.",
            ["Try again in a few moments."],
        ),
        _entry(
            "ERR_RESULT_005",
            "No audio was found in the narration result.",
            ["Try again in a few moments."],
        ),
        # ---------------------------------------------------------------------
        # Session Errors (ERR_SESSION_xxx)
        # ---------------------------------------------------------------------
        _entry(
            "ERR_SESSION_001",
            "The narrator is not set up yet.",
            ["Enter your Camb.ai API key to enable narration."],
            ErrorSeverity.INFO,
        ),
        _entry(
            "ERR_SESSION_002",
            "A narration is already in progress.",
            ["Wait for the current narration to finish."],
            ErrorSeverity.INFO,
        ),
    ]
)

# =============================================================================
# Default Error (for unmapped exceptions)
# =============================================================================

DEFAULT_ERROR: UserFacingError = UserFacingError(
    error_code="ERR_UNKNOWN_001",
    message="Something unexpected happened while narrating.",
    suggestions=["Try again in a few moments."],
    severity=ErrorSeverity.ERROR,
)

# =============================================================================
# Kind / Exception to Error Code Mapping
# =============================================================================

KIND_MAPPING: dict[ErrorKind, str] = {
    ErrorKind.CONFIG_MISSING: "ERR_CONFIG_001",
    ErrorKind.EMPTY_CREDENTIAL: "ERR_CREDENTIAL_001",
    ErrorKind.AUTH_REJECTED: "ERR_CREDENTIAL_002",
    ErrorKind.BAD_REQUEST: "ERR_CREDENTIAL_003",
    ErrorKind.ENDPOINT_MISMATCH: "ERR_CREDENTIAL_004",
    ErrorKind.RATE_LIMITED: "ERR_CREDENTIAL_005",
    ErrorKind.NETWORK_ERROR: "ERR_CREDENTIAL_006",
    ErrorKind.UNKNOWN_PROVIDER_ERROR: "ERR_CREDENTIAL_007",
    ErrorKind.UNEXPECTED_RESPONSE: "ERR_CREDENTIAL_008",
    ErrorKind.FETCH_FAILED: "ERR_CATALOG_001",
    ErrorKind.FORMAT_ERROR: "ERR_CATALOG_002",
    ErrorKind.NO_VOICES_AVAILABLE: "ERR_CATALOG_003",
    ErrorKind.INVALID_VOICE_SELECTOR: "ERR_SUBMIT_001",
    ErrorKind.INVALID_TEXT: "ERR_SUBMIT_002",
    ErrorKind.VOICE_REJECTED: "ERR_SUBMIT_003",
    ErrorKind.PROVIDER_ERROR: "ERR_SUBMIT_004",
    ErrorKind.MALFORMED_RESPONSE: "ERR_SUBMIT_005",
    ErrorKind.JOB_FAILED: "ERR_POLL_001",
    ErrorKind.POLL_TIMEOUT: "ERR_POLL_002",
    ErrorKind.EMPTY_AUDIO: "ERR_RESULT_001",
    ErrorKind.DECODE_ERROR: "ERR_RESULT_002",
    ErrorKind.UNSUPPORTED_CONTENT_TYPE: "ERR_RESULT_003",
    ErrorKind.RESULT_FETCH_FAILED: "ERR_RESULT_004",
    ErrorKind.NO_AUDIO_DATA: "ERR_RESULT_005",
    ErrorKind.NOT_INITIALIZED: "ERR_SESSION_001",
    ErrorKind.SESSION_BUSY: "ERR_SESSION_002",
}

EXCEPTION_MAPPING: dict[type, str] = {
    # TimeoutError is a subclass of OSError, so it must be checked first
    TimeoutError: "ERR_POLL_002",
    ConnectionError: "ERR_CREDENTIAL_006",
}


def get_error_by_code(error_code: str) -> UserFacingError:
    """Get an error by its code.

    Args:
        error_code: The error code (e.g., "ERR_SUBMIT_003")

    Returns:
        UserFacingError from catalog, or DEFAULT_ERROR if not found
    """
    return ERROR_CATALOG.get(error_code, DEFAULT_ERROR)


def get_error_for_kind(kind: ErrorKind) -> UserFacingError:
    """Get the UserFacingError for an error classification."""
    return get_error_by_code(KIND_MAPPING.get(kind, DEFAULT_ERROR.error_code))


def get_error_for_exception(exc: Exception) -> UserFacingError:
    """Get the appropriate UserFacingError for an exception.

    Narrator errors are mapped by their kind; other exceptions fall
    back to a small type mapping.

    Args:
        exc: The exception to map

    Returns:
        UserFacingError from catalog, or DEFAULT_ERROR if unmapped
    """
    if isinstance(exc, NarratorError):
        return get_error_for_kind(exc.kind)
    for exc_type, error_code in EXCEPTION_MAPPING.items():
        if isinstance(exc, exc_type):
            return get_error_by_code(error_code)
    return DEFAULT_ERROR
