"""Result retrieval and normalization into an AudioResult.

The finished job's result may come back as raw audio, or as JSON
carrying either a URL or base64-encoded audio, optionally wrapped in
a ``payload`` envelope. All three end up as the same AudioResult.
"""

import base64
import binascii
import logging
from typing import Any

import httpx

from narrator.lib.exceptions import ErrorKind, ResultError
from narrator.models.audio import DEFAULT_AUDIO_TYPE, AudioResult
from narrator.services.camb.client import CambClient

logger = logging.getLogger(__name__)

# Fields that may carry base64 audio, in lookup order
INLINE_AUDIO_FIELDS = ("audio_content", "audio", "data")


def media_type_of(response: httpx.Response) -> str:
    """Content-Type without parameters, lower-cased."""
    return response.headers.get("content-type", "").split(";", 1)[0].strip().lower()


def decode_inline_audio(encoded: Any) -> bytes:
    """
    Decode base64 audio from a JSON result.

    Raises:
        ResultError: DECODE_ERROR if the value is not valid base64
    """
    if not isinstance(encoded, str):
        raise ResultError(
            f"Inline audio must be a base64 string, got {type(encoded).__name__}",
            kind=ErrorKind.DECODE_ERROR,
        )
    try:
        return base64.b64decode("".join(encoded.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ResultError(
            f"Error processing base64 audio: {e}",
            kind=ErrorKind.DECODE_ERROR,
            original_error=e,
        ) from e


class ResultFetcher:
    """
    Fetches a finished job's audio.

    Attributes:
        client: Camb.ai client bound to the session's API key
    """

    def __init__(self, client: CambClient):
        self.client = client

    async def fetch(self, run_id: str) -> AudioResult:
        """
        Fetch and normalize the result of a finished job.

        Args:
            run_id: Run id reported by the poller

        Returns:
            AudioResult with inline bytes or a URL

        Raises:
            ResultError: RESULT_FETCH_FAILED, EMPTY_AUDIO, DECODE_ERROR,
                NO_AUDIO_DATA or UNSUPPORTED_CONTENT_TYPE
        """
        logger.info(f"Fetching TTS result for run ID: {run_id}")

        try:
            response = await self.client.get_tts_result(run_id)
        except httpx.HTTPError as e:
            raise ResultError(
                f"Failed to get TTS result: {e}",
                kind=ErrorKind.RESULT_FETCH_FAILED,
                original_error=e,
            ) from e

        if not response.is_success:
            logger.error(f"Failed to get TTS result: {response.status_code}")
            raise ResultError(
                f"Failed to get TTS result: HTTP {response.status_code}",
                kind=ErrorKind.RESULT_FETCH_FAILED,
                status=response.status_code,
                detail=response.text,
            )

        media_type = media_type_of(response)
        logger.debug(f"TTS result Content-Type: {media_type or '<none>'}")

        if media_type.startswith("audio/") or media_type == "application/octet-stream":
            return self._from_binary(response, media_type, run_id)
        if media_type == "application/json" or media_type.endswith("+json"):
            return self._from_json(response, run_id)

        logger.error(f"Unsupported content type from TTS result: {media_type}")
        raise ResultError(
            f"Unsupported content type: {media_type or 'none'}",
            kind=ErrorKind.UNSUPPORTED_CONTENT_TYPE,
            detail=media_type,
        )

    @staticmethod
    def _from_binary(response: httpx.Response, media_type: str, run_id: str) -> AudioResult:
        content = response.content
        if not content:
            raise ResultError("Received empty audio body", kind=ErrorKind.EMPTY_AUDIO)

        audio_type = media_type if media_type.startswith("audio/") else DEFAULT_AUDIO_TYPE
        logger.info(f"Received audio of type {audio_type}, size: {len(content)} bytes")
        return AudioResult.from_bytes(content, media_type=audio_type, run_id=run_id)

    @staticmethod
    def _from_json(response: httpx.Response, run_id: str) -> AudioResult:
        try:
            data = response.json()
        except ValueError as e:
            raise ResultError(
                "TTS result is not valid JSON",
                kind=ErrorKind.DECODE_ERROR,
                original_error=e,
            ) from e

        payload = (data.get("payload") or data) if isinstance(data, dict) else None
        if not isinstance(payload, dict):
            raise ResultError(
                "No audio data found in JSON response",
                kind=ErrorKind.NO_AUDIO_DATA,
                detail=data,
            )

        if payload.get("url"):
            logger.info(f"Found direct audio URL in response: {payload['url']}")
            return AudioResult.from_url(str(payload["url"]), run_id=run_id)

        for field_name in INLINE_AUDIO_FIELDS:
            if payload.get(field_name):
                content = decode_inline_audio(payload[field_name])
                if not content:
                    raise ResultError("Decoded audio is empty", kind=ErrorKind.EMPTY_AUDIO)
                logger.info(f"Created audio from base64 data, size: {len(content)} bytes")
                return AudioResult.from_bytes(content, run_id=run_id)

        logger.error(f"No audio data found in JSON response: {data!r}")
        raise ResultError(
            "No audio data found in JSON response",
            kind=ErrorKind.NO_AUDIO_DATA,
            detail=data,
        )
