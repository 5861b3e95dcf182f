"""API key validation against the provider.

Confirms that a Camb.ai API key is usable before the session trusts
it, by issuing the cheapest read-only call available (voice listing)
and classifying the answer.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from narrator.lib.config import NarratorConfig
from narrator.lib.exceptions import CredentialError, ErrorKind
from narrator.models.voice import Recognized, VoiceListing, normalize_voice_listing
from narrator.services.camb.client import CambClient

logger = logging.getLogger(__name__)

STATUS_KINDS: dict[int, ErrorKind] = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.AUTH_REJECTED,
    403: ErrorKind.AUTH_REJECTED,
    404: ErrorKind.ENDPOINT_MISMATCH,
    429: ErrorKind.RATE_LIMITED,
}


@dataclass
class CredentialCheck:
    """
    Result of a credential validation.

    Attributes:
        valid: Whether the provider accepted the key
        reason: Failure classification (if invalid)
        message: Human-readable outcome
        status: HTTP status observed (if any)
        listing: Voice listing from the probe, reusable to seed the catalog
    """

    valid: bool
    reason: Optional[ErrorKind] = None
    message: str = ""
    status: Optional[int] = None
    listing: Optional[VoiceListing] = None

    def to_error(self) -> CredentialError:
        """Build the matching CredentialError for an invalid check."""
        return CredentialError(self.message, kind=self.reason, status=self.status)


class CredentialValidator:
    """
    Validates Camb.ai API keys.

    validate() never raises: every outcome, including network failures,
    is returned as a CredentialCheck.
    """

    def __init__(self, http: httpx.AsyncClient, config: NarratorConfig):
        """
        Initialize validator.

        Args:
            http: Shared httpx client
            config: Narrator configuration (base URL, validation timeout)
        """
        self._http = http
        self._config = config

    async def validate(self, credential: str) -> CredentialCheck:
        """
        Check that ``credential`` is accepted by the provider.

        Args:
            credential: API key to test

        Returns:
            CredentialCheck describing the outcome
        """
        if not credential or not credential.strip():
            return CredentialCheck(
                valid=False,
                reason=ErrorKind.EMPTY_CREDENTIAL,
                message="API key cannot be empty",
            )

        client = CambClient(self._http, credential, base_url=self._config.base_url)
        timeout = self._config.validation_timeout_seconds

        try:
            response = await client.list_voices(timeout=timeout)
        except httpx.TimeoutException:
            logger.warning(f"Credential validation timed out after {timeout}s")
            return CredentialCheck(
                valid=False,
                reason=ErrorKind.NETWORK_ERROR,
                message="Connection timeout: the Camb.ai API took too long to respond",
            )
        except httpx.HTTPError as e:
            logger.warning(f"Credential validation network error: {e}")
            return CredentialCheck(
                valid=False,
                reason=ErrorKind.NETWORK_ERROR,
                message=f"Network error: unable to connect to the Camb.ai API ({e})",
            )

        logger.info(f"Camb.ai API response status: {response.status_code}")

        if response.is_success:
            return self._classify_success(response)
        return self._classify_failure(response)

    def _classify_success(self, response: httpx.Response) -> CredentialCheck:
        try:
            data = response.json()
        except ValueError:
            data = None

        listing = normalize_voice_listing(data)
        if isinstance(listing, Recognized):
            return CredentialCheck(
                valid=True,
                message="API key is valid",
                status=response.status_code,
                listing=listing,
            )
        if isinstance(data, dict) and data.get("status_code") == 200:
            return CredentialCheck(
                valid=True, message="API key is valid", status=response.status_code
            )

        logger.error(f"Unexpected response format during validation: {listing.reason}")
        return CredentialCheck(
            valid=False,
            reason=ErrorKind.UNEXPECTED_RESPONSE,
            message="Invalid response format from the Camb.ai API",
            status=response.status_code,
        )

    def _classify_failure(self, response: httpx.Response) -> CredentialCheck:
        status = response.status_code
        kind = STATUS_KINDS.get(status, ErrorKind.UNKNOWN_PROVIDER_ERROR)

        message = f"Camb.ai API access error (HTTP {status})"
        if kind == ErrorKind.UNKNOWN_PROVIDER_ERROR:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                message = f"Camb.ai API error: {body['message']}"
        else:
            message = f"Camb.ai API rejected the key check: {kind.value} (HTTP {status})"

        return CredentialCheck(valid=False, reason=kind, message=message, status=status)
