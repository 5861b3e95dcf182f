"""Contract tests for JobPoller.

- Backoff is min(1.5 * (attempt + 1), 5.0) and never follows the last attempt
- Errors cost one attempt plus the fixed penalty wait
- Budget exhaustion raises POLL_TIMEOUT after exactly max_attempts requests
"""

import httpx
import pytest

from fakes import json_response, status_body
from narrator.lib.exceptions import ErrorKind, PollError
from narrator.services.tts import JobPoller, poll_backoff

STATUS_PATH = "/tts/task-1"


@pytest.fixture
def poller(camb_client, sleeper):
    return JobPoller(camb_client, sleep=sleeper)


class TestPollBackoff:
    """Backoff schedule."""

    @pytest.mark.parametrize(
        "attempt,expected",
        [(0, 1.5), (1, 3.0), (2, 4.5), (3, 5.0), (10, 5.0)],
    )
    def test_schedule(self, attempt, expected):
        assert poll_backoff(attempt) == pytest.approx(expected)

    def test_custom_base_and_cap(self):
        assert poll_backoff(0, base_delay=0.5, max_delay=1.0) == 0.5
        assert poll_backoff(4, base_delay=0.5, max_delay=1.0) == 1.0


class TestPollSuccess:
    """Happy path through PENDING and PROCESSING."""

    @pytest.mark.asyncio
    async def test_pending_processing_success(self, poller, provider, sleeper):
        provider.add(
            "GET",
            STATUS_PATH,
            json_response(200, status_body("PENDING")),
            json_response(200, status_body("PROCESSING")),
            json_response(200, status_body("SUCCESS", run_id="run-9")),
        )

        run_id = await poller.poll("task-1")

        assert run_id == "run-9"
        assert len(provider.calls("GET", STATUS_PATH)) == 3
        assert sleeper.waits == [1.5, 3.0]

    @pytest.mark.asyncio
    async def test_flat_status_body(self, poller, provider, sleeper):
        provider.add("GET", STATUS_PATH, json_response(200, {"status": "SUCCESS", "run_id": 12}))

        assert await poller.poll("task-1") == "12"
        assert sleeper.waits == []

    @pytest.mark.asyncio
    async def test_success_without_run_id_keeps_polling(self, poller, provider):
        provider.add(
            "GET",
            STATUS_PATH,
            json_response(200, status_body("SUCCESS")),
            json_response(200, status_body("SUCCESS", run_id="run-2")),
        )

        assert await poller.poll("task-1") == "run-2"
        assert len(provider.calls("GET", STATUS_PATH)) == 2

    @pytest.mark.asyncio
    async def test_unknown_status_is_treated_as_processing(self, poller, provider):
        provider.add(
            "GET",
            STATUS_PATH,
            json_response(200, status_body("QUEUED_SOMEWHERE")),
            json_response(200, status_body("SUCCESS", run_id="run-3")),
        )

        assert await poller.poll("task-1") == "run-3"


class TestPollFailure:
    """Terminal failure and budget exhaustion."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["FAILED", "ERROR"])
    async def test_failed_status_stops_immediately(self, poller, provider, sleeper, raw):
        provider.add(
            "GET",
            STATUS_PATH,
            json_response(200, status_body("PENDING")),
            json_response(200, status_body(raw)),
            json_response(200, status_body("SUCCESS", run_id="never")),
        )

        with pytest.raises(PollError) as exc_info:
            await poller.poll("task-1")

        assert exc_info.value.kind == ErrorKind.JOB_FAILED
        assert exc_info.value.detail == raw
        assert len(provider.calls("GET", STATUS_PATH)) == 2
        assert sleeper.waits == [1.5]

    @pytest.mark.asyncio
    async def test_timeout_after_exact_budget(self, poller, provider, sleeper):
        provider.add("GET", STATUS_PATH, json_response(200, status_body("PROCESSING")))

        with pytest.raises(PollError) as exc_info:
            await poller.poll("task-1")

        assert exc_info.value.kind == ErrorKind.POLL_TIMEOUT
        assert len(provider.calls("GET", STATUS_PATH)) == 15
        assert len(sleeper.waits) == 14
        assert sleeper.waits[:4] == [1.5, 3.0, 4.5, 5.0]
        assert max(sleeper.waits) == 5.0

    @pytest.mark.asyncio
    async def test_custom_budget(self, camb_client, provider, sleeper):
        poller = JobPoller(camb_client, max_attempts=3, sleep=sleeper)
        provider.add("GET", STATUS_PATH, json_response(200, status_body("PENDING")))

        with pytest.raises(PollError):
            await poller.poll("task-1")

        assert len(provider.calls("GET", STATUS_PATH)) == 3
        assert sleeper.waits == [1.5, 3.0]

    def test_zero_budget_is_rejected(self, camb_client):
        with pytest.raises(ValueError):
            JobPoller(camb_client, max_attempts=0)


class TestPollErrors:
    """Failed status requests are absorbed with a penalty wait."""

    @pytest.mark.asyncio
    async def test_http_error_costs_penalty_wait(self, poller, provider, sleeper):
        provider.add(
            "GET",
            STATUS_PATH,
            json_response(500, {"error": "busy"}),
            json_response(200, status_body("SUCCESS", run_id="run-4")),
        )

        assert await poller.poll("task-1") == "run-4"
        assert sleeper.waits == [2.0]

    @pytest.mark.asyncio
    async def test_transport_error_costs_penalty_wait(self, poller, provider, sleeper):
        provider.add(
            "GET",
            STATUS_PATH,
            httpx.ConnectError("reset"),
            json_response(200, status_body("SUCCESS", run_id="run-5")),
        )

        assert await poller.poll("task-1") == "run-5"
        assert sleeper.waits == [2.0]

    @pytest.mark.asyncio
    async def test_unreadable_body_costs_penalty_wait(self, poller, provider, sleeper):
        provider.add(
            "GET",
            STATUS_PATH,
            httpx.Response(200, text="not json"),
            json_response(200, ["not", "an", "object"]),
            json_response(200, status_body("SUCCESS", run_id="run-6")),
        )

        assert await poller.poll("task-1") == "run-6"
        assert sleeper.waits == [2.0, 2.0]

    @pytest.mark.asyncio
    async def test_errors_count_against_budget(self, camb_client, provider, sleeper):
        poller = JobPoller(camb_client, max_attempts=4, sleep=sleeper)
        provider.add("GET", STATUS_PATH, json_response(503, {}))

        with pytest.raises(PollError) as exc_info:
            await poller.poll("task-1")

        assert exc_info.value.kind == ErrorKind.POLL_TIMEOUT
        assert len(provider.calls("GET", STATUS_PATH)) == 4
        assert sleeper.waits == [2.0, 2.0, 2.0]
