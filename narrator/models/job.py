"""Synthesis job data models.

This module defines the data structures for:
- SynthesisRequest: Body of a POST /tts call
- Job: Handle returned by submission
- JobStatus / JobState: Parsed readings of GET /tts/{task_id}
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from narrator.lib.exceptions import ErrorKind, SubmitError

logger = logging.getLogger(__name__)

# Provider codes used when the caller passes something unusable
FALLBACK_LANGUAGE = 1  # English
FALLBACK_GENDER = 1  # Male


def coerce_voice_selector(value: Any) -> int:
    """
    Turn a voice selector into the integer the provider expects.

    Accepts ints, integral finite floats and numeric strings.

    Raises:
        SubmitError: INVALID_VOICE_SELECTOR for anything else
    """
    if isinstance(value, bool):
        pass
    elif isinstance(value, int):
        return value
    elif isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
    elif isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass

    raise SubmitError(
        f"Invalid voice ID: {value!r}",
        kind=ErrorKind.INVALID_VOICE_SELECTOR,
        detail=value,
    )


def _coerce_code(value: Any, fallback: int, name: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    logger.warning(f"Unusable {name} code {value!r}, falling back to {fallback}")
    return fallback


@dataclass
class SynthesisRequest:
    """Request for one synthesis job.

    Attributes:
        text: Narration text (must not be blank)
        voice_id: Provider voice identifier
        language: Provider language code
        gender: Provider gender code
    """

    text: str
    voice_id: int
    language: int = FALLBACK_LANGUAGE
    gender: int = FALLBACK_GENDER

    def __post_init__(self):
        """Validate and normalize request fields."""
        if not isinstance(self.text, str) or not self.text.strip():
            raise SubmitError("Text cannot be empty", kind=ErrorKind.INVALID_TEXT)
        self.voice_id = coerce_voice_selector(self.voice_id)
        self.language = _coerce_code(self.language, FALLBACK_LANGUAGE, "language")
        self.gender = _coerce_code(self.gender, FALLBACK_GENDER, "gender")

    def to_payload(self) -> dict[str, Any]:
        """Body for POST /tts."""
        return {
            "text": self.text,
            "voice_id": self.voice_id,
            "language": self.language,
            "gender": self.gender,
        }


@dataclass(frozen=True)
class Job:
    """Submitted synthesis job, identified by the provider's task id."""

    job_id: str


class JobStatus(str, Enum):
    """Job lifecycle: PENDING → PROCESSING → SUCCEEDED | FAILED."""

    PENDING = "pending"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED)

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    @classmethod
    def from_provider(cls, raw: Any) -> "JobStatus":
        """
        Map a provider status string onto the lifecycle.

        Unknown strings count as PROCESSING so polling continues.
        """
        key = str(raw).strip().upper() if raw is not None else ""
        return _PROVIDER_STATUS.get(key, cls.PROCESSING)


_STATUS_RANK = {
    JobStatus.PENDING: 0,
    JobStatus.PROCESSING: 1,
    JobStatus.SUCCEEDED: 2,
    JobStatus.FAILED: 2,
}

_PROVIDER_STATUS = {
    "PENDING": JobStatus.PENDING,
    "PROCESSING": JobStatus.PROCESSING,
    "SUCCESS": JobStatus.SUCCEEDED,
    "FAILED": JobStatus.FAILED,
    "ERROR": JobStatus.FAILED,
}


@dataclass(frozen=True)
class JobState:
    """One reading of a job's status.

    Attributes:
        status: Lifecycle state
        run_id: Result identifier, present once the job succeeded
        raw_status: Status string exactly as the provider sent it
    """

    status: JobStatus
    run_id: Optional[str] = None
    raw_status: Optional[str] = None

    @classmethod
    def from_response(cls, data: Any) -> "JobState":
        """
        Parse a status body, flat or wrapped in a ``payload`` envelope.

        Raises:
            ValueError: If the body is not a JSON object
        """
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected status response: {data!r}")

        payload = data.get("payload") if isinstance(data.get("payload"), dict) else data
        raw_status = payload.get("status")
        run_id = payload.get("run_id")

        return cls(
            status=JobStatus.from_provider(raw_status),
            run_id=str(run_id) if run_id not in (None, "") else None,
            raw_status=str(raw_status) if raw_status is not None else "UNKNOWN",
        )
