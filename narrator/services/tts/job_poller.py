"""Job status polling with capped linear backoff.

State machine: PENDING → PROCESSING → SUCCEEDED(run_id) | FAILED.
Status requests are strictly sequential: each wait suspends the
caller before the next probe, so at most one is ever in flight.
"""

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from narrator.lib.exceptions import ErrorKind, PollError
from narrator.models.job import JobState, JobStatus
from narrator.services.camb.client import CambClient

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_MAX_ATTEMPTS = 15
DEFAULT_BASE_DELAY = 1.5
DEFAULT_MAX_DELAY = 5.0
DEFAULT_ERROR_DELAY = 2.0


def poll_backoff(
    attempt: int,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
) -> float:
    """Wait before the next poll: min(base * (attempt + 1), max)."""
    return min(base_delay * (attempt + 1), max_delay)


class JobPoller:
    """
    Polls a job until it succeeds, fails, or the attempt budget runs out.

    Transport and HTTP errors are absorbed: they cost one attempt and a
    fixed penalty wait, and polling continues.

    Attributes:
        client: Camb.ai client bound to the session's API key
        max_attempts: Maximum number of status requests
        base_delay: Backoff step in seconds
        max_delay: Backoff cap in seconds
        error_delay: Penalty wait after a failed status request
    """

    def __init__(
        self,
        client: CambClient,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        error_delay: float = DEFAULT_ERROR_DELAY,
        sleep: Sleep = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.client = client
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.error_delay = error_delay
        self._sleep = sleep

    async def poll(self, job_id: str) -> str:
        """
        Wait for a job to finish.

        Args:
            job_id: Task id returned by submission

        Returns:
            Run id of the finished job

        Raises:
            PollError: JOB_FAILED as soon as the job reports failure,
                POLL_TIMEOUT when the budget is exhausted
        """
        current = JobStatus.PENDING

        for attempt in range(self.max_attempts):
            is_last = attempt == self.max_attempts - 1
            logger.info(
                f"Polling TTS status for task {job_id} "
                f"(attempt {attempt + 1}/{self.max_attempts})..."
            )

            state = await self._read_status(job_id)
            if state is None:
                if not is_last:
                    await self._sleep(self.error_delay)
                continue

            if state.status == JobStatus.SUCCEEDED and state.run_id:
                logger.info(f"TTS job completed successfully with run ID: {state.run_id}")
                return state.run_id

            if state.status == JobStatus.FAILED:
                logger.error(f"TTS job {job_id} failed with status {state.raw_status}")
                raise PollError(
                    f"TTS job failed with status {state.raw_status}",
                    kind=ErrorKind.JOB_FAILED,
                    detail=state.raw_status,
                )

            current = self._advance(current, state)

            if not is_last:
                wait = poll_backoff(attempt, self.base_delay, self.max_delay)
                logger.debug(f"Waiting {wait:.1f}s before next poll...")
                await self._sleep(wait)

        logger.error(f"Timed out waiting for TTS job {job_id} to complete")
        raise PollError(
            f"TTS job did not complete within {self.max_attempts} attempts",
            kind=ErrorKind.POLL_TIMEOUT,
            detail=current.value,
        )

    async def _read_status(self, job_id: str) -> JobState | None:
        """One status request; None when it failed and should be retried."""
        try:
            response = await self.client.get_tts_status(job_id)
        except httpx.HTTPError as e:
            logger.warning(f"Error checking TTS status: {e}")
            return None

        if not response.is_success:
            logger.warning(
                f"Failed to check TTS status: HTTP {response.status_code} {response.text[:200]}"
            )
            return None

        try:
            return JobState.from_response(response.json())
        except ValueError as e:
            logger.warning(f"Unreadable TTS status response: {e}")
            return None

    @staticmethod
    def _advance(current: JobStatus, state: JobState) -> JobStatus:
        if state.status == JobStatus.SUCCEEDED:
            # SUCCESS without a run id is not usable yet; keep polling
            logger.warning("TTS job reported success without a run ID. Continuing to poll...")
            return JobStatus.PROCESSING
        if state.status.rank < current.rank:
            logger.warning(
                f"TTS job status went back to {state.raw_status}; keeping {current.value}"
            )
            return current
        if state.raw_status and state.raw_status.upper() not in ("PENDING", "PROCESSING"):
            logger.info(f"Unknown TTS job status: {state.raw_status}. Continuing to poll...")
        else:
            logger.info(f"TTS job is {state.status.value}. Waiting...")
        return state.status
