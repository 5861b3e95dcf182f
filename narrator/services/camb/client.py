"""Camb.ai HTTP surface using httpx.

CambClient only knows URLs and headers. It returns raw responses and
lets httpx errors propagate; classifying them is the job of the
narration components that call it.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://client.camb.ai/apis"

JSON_ACCEPT = "application/json"
AUDIO_ACCEPT = "audio/wav, audio/mpeg, audio/mp3, audio/*, application/json"


class CambClient:
    """
    Async client for the Camb.ai text-to-speech endpoints.

    Endpoints:
        GET  /list-voices
        POST /tts
        GET  /tts/{task_id}
        GET  /tts-result/{run_id}

    Example:
        >>> async with httpx.AsyncClient() as http:
        ...     client = CambClient(http, api_key="...")
        ...     response = await client.list_voices()
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
    ):
        """
        Initialize the client.

        Args:
            http: Shared httpx client (owned by the caller)
            api_key: Camb.ai API key sent as x-api-key
            base_url: API base URL
            timeout: Per-request timeout in seconds (httpx default when None)
        """
        self._http = http
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self, accept: str = JSON_ACCEPT) -> dict[str, str]:
        return {"x-api-key": self._api_key, "Accept": accept}

    def _options(self, timeout: float | None = None, accept: str = JSON_ACCEPT) -> dict[str, Any]:
        options: dict[str, Any] = {"headers": self._headers(accept)}
        value = timeout if timeout is not None else self._timeout
        if value is not None:
            options["timeout"] = httpx.Timeout(value)
        return options

    async def list_voices(self, timeout: float | None = None) -> httpx.Response:
        """GET /list-voices."""
        url = f"{self._base_url}/list-voices"
        logger.debug(f"GET {url}")
        return await self._http.get(url, **self._options(timeout))

    async def create_tts(self, body: dict[str, Any]) -> httpx.Response:
        """POST /tts with a JSON synthesis request."""
        url = f"{self._base_url}/tts"
        logger.debug(f"POST {url} voice_id={body.get('voice_id')}")
        return await self._http.post(url, json=body, **self._options())

    async def get_tts_status(self, task_id: str) -> httpx.Response:
        """GET /tts/{task_id}."""
        url = f"{self._base_url}/tts/{task_id}"
        logger.debug(f"GET {url}")
        return await self._http.get(url, **self._options())

    async def get_tts_result(self, run_id: str) -> httpx.Response:
        """GET /tts-result/{run_id}, accepting audio or JSON."""
        url = f"{self._base_url}/tts-result/{run_id}"
        logger.debug(f"GET {url}")
        return await self._http.get(url, **self._options(accept=AUDIO_ACCEPT))
