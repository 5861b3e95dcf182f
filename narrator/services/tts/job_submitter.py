"""Synthesis job submission.

Turns narration text plus voice/language/gender selectors into a
POST /tts call and extracts the task id. Field-level 422 errors that
point at ``voice_id`` are classified as VOICE_REJECTED so the session
can refresh its catalog and retry.
"""

import logging
from typing import Any

import httpx

from narrator.lib.exceptions import ErrorKind, SubmitError
from narrator.models.job import Job, SynthesisRequest
from narrator.services.camb.client import CambClient

logger = logging.getLogger(__name__)

VOICE_FIELD = "voice_id"


def is_voice_rejection(status: int, body: Any) -> bool:
    """Check whether an error response blames the voice selector."""
    if status != 422 or not isinstance(body, dict):
        return False

    detail = body.get("detail")
    if isinstance(detail, list):
        return any(
            isinstance(item, dict)
            and isinstance(item.get("loc"), (list, tuple))
            and VOICE_FIELD in item["loc"]
            for item in detail
        )
    if isinstance(detail, str):
        return VOICE_FIELD in detail
    return False


def describe_error(status: int, body: Any) -> str:
    """Render a provider error body as a single line."""
    if not isinstance(body, dict):
        return f"HTTP {status}"

    detail = body.get("detail")
    if status == 422 and detail:
        items = detail if isinstance(detail, list) else [detail]
        parts = []
        for item in items:
            if isinstance(item, dict) and item.get("loc") and item.get("msg"):
                loc = ".".join(str(part) for part in item["loc"])
                parts.append(f"{loc}: {item['msg']}")
            else:
                parts.append(str(item))
        return "; ".join(parts)

    for key in ("message", "error", "details"):
        if body.get(key):
            return str(body[key])
    return f"HTTP {status}"


class JobSubmitter:
    """
    Submits synthesis jobs to the provider.

    Attributes:
        client: Camb.ai client bound to the session's API key
    """

    def __init__(self, client: CambClient):
        self.client = client

    async def submit(self, text: str, voice_id: Any, language: Any, gender: Any) -> Job:
        """
        Submit one synthesis job.

        Args:
            text: Narration text
            voice_id: Voice selector; must be an integer (validated locally)
            language: Provider language code
            gender: Provider gender code

        Returns:
            Job with the provider's task id

        Raises:
            SubmitError: INVALID_VOICE_SELECTOR / INVALID_TEXT before any call,
                VOICE_REJECTED on a voice_id 422, PROVIDER_ERROR on other
                failures, MALFORMED_RESPONSE when no task id comes back
        """
        request = SynthesisRequest(text=text, voice_id=voice_id, language=language, gender=gender)
        logger.info(f"Calling Camb.ai API with voice ID: {request.voice_id}")

        try:
            response = await self.client.create_tts(request.to_payload())
        except httpx.HTTPError as e:
            raise SubmitError(
                f"Failed to call Camb.ai API for narration: {e}",
                kind=ErrorKind.PROVIDER_ERROR,
                original_error=e,
            ) from e

        if not response.is_success:
            self._raise_for_error(response)

        try:
            data = response.json()
        except ValueError as e:
            raise SubmitError(
                "TTS response is not valid JSON",
                kind=ErrorKind.MALFORMED_RESPONSE,
                status=response.status_code,
                original_error=e,
            ) from e

        task_id = self._extract_task_id(data)
        if not task_id:
            logger.error(f"No task_id found in response: {data!r}")
            raise SubmitError(
                "No task_id found in TTS response",
                kind=ErrorKind.MALFORMED_RESPONSE,
                status=response.status_code,
                detail=data,
            )

        logger.info(f"Got task ID: {task_id}")
        return Job(job_id=task_id)

    @staticmethod
    def _extract_task_id(data: Any) -> str | None:
        if not isinstance(data, dict):
            return None
        task_id = data.get("task_id")
        if not task_id and isinstance(data.get("payload"), dict):
            task_id = data["payload"].get("task_id")
        return str(task_id) if task_id else None

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = None

        if is_voice_rejection(status, body):
            logger.warning(f"Provider rejected voice selector: {describe_error(status, body)}")
            raise SubmitError(
                "Voice ID was rejected by the provider",
                kind=ErrorKind.VOICE_REJECTED,
                status=status,
                detail=body.get("detail"),
            )

        message = describe_error(status, body)
        logger.error(f"Camb.ai API error status {status}: {message}")
        raise SubmitError(
            f"Failed to call Camb.ai API for narration: {message}",
            kind=ErrorKind.PROVIDER_ERROR,
            status=status,
            detail=body if body is not None else response.text,
        )
