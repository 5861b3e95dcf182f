"""Contract tests for JobSubmitter."""

import json

import httpx
import pytest

from fakes import json_response
from narrator.lib.exceptions import ErrorKind, SubmitError
from narrator.services.tts import JobSubmitter
from narrator.services.tts.job_submitter import describe_error, is_voice_rejection

VOICE_422 = {
    "detail": [
        {"loc": ["body", "voice_id"], "msg": "Voice not found", "type": "value_error"}
    ]
}


@pytest.fixture
def submitter(camb_client):
    return JobSubmitter(camb_client)


class TestSubmitSuccess:
    """Accepted submissions yield a Job."""

    @pytest.mark.asyncio
    async def test_flat_task_id(self, submitter, provider):
        provider.add("POST", "/tts", json_response(200, {"task_id": "task-1"}))

        job = await submitter.submit("Hello.", 20303, 1, 2)

        assert job.job_id == "task-1"
        body = json.loads(provider.calls("POST", "/tts")[0].content)
        assert body == {"text": "Hello.", "voice_id": 20303, "language": 1, "gender": 2}

    @pytest.mark.asyncio
    async def test_enveloped_task_id(self, submitter, provider):
        provider.add("POST", "/tts", json_response(200, {"payload": {"task_id": 77}}))

        job = await submitter.submit("Hello.", 1, 1, 1)

        assert job.job_id == "77"

    @pytest.mark.asyncio
    async def test_numeric_string_voice_is_sent_as_int(self, submitter, provider):
        provider.add("POST", "/tts", json_response(200, {"task_id": "t"}))

        await submitter.submit("Hello.", "42", 1, 1)

        body = json.loads(provider.calls("POST", "/tts")[0].content)
        assert body["voice_id"] == 42


class TestLocalValidation:
    """Bad input never reaches the provider."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("voice_id", ["abc", None, 1.5, True, [], float("nan")])
    async def test_invalid_voice_selector(self, submitter, provider, voice_id):
        with pytest.raises(SubmitError) as exc_info:
            await submitter.submit("Hello.", voice_id, 1, 1)

        assert exc_info.value.kind == ErrorKind.INVALID_VOICE_SELECTOR
        assert provider.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   "])
    async def test_blank_text(self, submitter, provider, text):
        with pytest.raises(SubmitError) as exc_info:
            await submitter.submit(text, 1, 1, 1)

        assert exc_info.value.kind == ErrorKind.INVALID_TEXT
        assert provider.requests == []


class TestSubmitErrors:
    """Provider failures are classified."""

    @pytest.mark.asyncio
    async def test_voice_rejection(self, submitter, provider):
        provider.add("POST", "/tts", json_response(422, VOICE_422))

        with pytest.raises(SubmitError) as exc_info:
            await submitter.submit("Hello.", 5, 1, 1)

        error = exc_info.value
        assert error.kind == ErrorKind.VOICE_REJECTED
        assert error.is_voice_rejected
        assert error.status == 422
        assert error.detail == VOICE_422["detail"]

    @pytest.mark.asyncio
    async def test_other_422_is_provider_error(self, submitter, provider):
        provider.add(
            "POST",
            "/tts",
            json_response(422, {"detail": [{"loc": ["body", "text"], "msg": "too long"}]}),
        )

        with pytest.raises(SubmitError) as exc_info:
            await submitter.submit("Hello.", 5, 1, 1)

        assert exc_info.value.kind == ErrorKind.PROVIDER_ERROR
        assert "body.text: too long" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_server_error(self, submitter, provider):
        provider.add("POST", "/tts", json_response(500, {"message": "internal"}))

        with pytest.raises(SubmitError) as exc_info:
            await submitter.submit("Hello.", 5, 1, 1)

        assert exc_info.value.kind == ErrorKind.PROVIDER_ERROR
        assert exc_info.value.status == 500

    @pytest.mark.asyncio
    async def test_transport_error(self, submitter, provider):
        provider.add("POST", "/tts", httpx.ConnectError("refused"))

        with pytest.raises(SubmitError) as exc_info:
            await submitter.submit("Hello.", 5, 1, 1)

        assert exc_info.value.kind == ErrorKind.PROVIDER_ERROR
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_missing_task_id(self, submitter, provider):
        provider.add("POST", "/tts", json_response(200, {"status": "ok"}))

        with pytest.raises(SubmitError) as exc_info:
            await submitter.submit("Hello.", 5, 1, 1)

        assert exc_info.value.kind == ErrorKind.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_non_json_success(self, submitter, provider):
        provider.add("POST", "/tts", httpx.Response(200, text="<html>"))

        with pytest.raises(SubmitError) as exc_info:
            await submitter.submit("Hello.", 5, 1, 1)

        assert exc_info.value.kind == ErrorKind.MALFORMED_RESPONSE


class TestErrorHelpers:
    """Error body classification helpers."""

    def test_string_detail_mentioning_voice(self):
        assert is_voice_rejection(422, {"detail": "voice_id is invalid"})

    def test_non_422_is_never_voice_rejection(self):
        assert not is_voice_rejection(400, VOICE_422)

    def test_non_dict_body(self):
        assert not is_voice_rejection(422, "voice_id")
        assert describe_error(502, None) == "HTTP 502"

    def test_describe_joins_items(self):
        body = {"detail": [{"loc": ["body", "a"], "msg": "x"}, {"loc": ["b"], "msg": "y"}]}

        assert describe_error(422, body) == "body.a: x; b: y"

    def test_describe_falls_back_to_error_field(self):
        assert describe_error(400, {"error": "bad input"}) == "bad input"
