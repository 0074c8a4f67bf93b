"""Google Gemini provider over the REST generateContent endpoint."""

import logging
from typing import Any, Dict, Optional

import httpx

from menu_planner.config import Settings, get_settings
from menu_planner.services.errors import (
    ConfigurationMissingError,
    MalformedResponseError,
    NetworkFailureError,
    RequestRejectedError,
    normalize_error,
    truncate,
)
from menu_planner.services.prompts import PromptRequest

logger = logging.getLogger(__name__)


class GeminiClient:
    """Sends one prompt to Gemini and returns the raw response text.

    A single call, no retries: ``call_with_retry`` decides whether to try
    again based on the error raised here.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        settings = settings or get_settings()
        self.api_key = settings.gemini_api_key
        self.model = settings.gemini_model
        self.api_base = settings.gemini_api_base.rstrip("/")
        self.timeout = settings.request_timeout
        self._http_client = http_client

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    def _payload(self, request: PromptRequest) -> Dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": request.instruction}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": request.schema,
            },
        }

    async def _post(self, request: PromptRequest) -> httpx.Response:
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        payload = self._payload(request)
        if self._http_client is not None:
            return await self._http_client.post(self.endpoint, headers=headers, json=payload)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.endpoint, headers=headers, json=payload)

    async def generate(self, request: PromptRequest) -> str:
        """Query Gemini API."""
        if not self.api_key:
            logger.error("GEMINI_API_KEY environment variable not set on the server.")
            raise ConfigurationMissingError()

        logger.debug("Sending %s request to %s", request.name, self.model)
        try:
            response = await self._post(request)
        except httpx.TransportError as e:
            logger.warning("Transport error calling Gemini (%s): %s", type(e).__name__, e)
            raise NetworkFailureError(detail=f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            error = normalize_error(response.status_code, response.text)
            logger.warning(
                "Gemini %s request failed with HTTP %d (%s): %s",
                request.name,
                response.status_code,
                error.kind.value,
                error.detail or error.user_message,
            )
            raise error

        return self._extract_text(response)

    @staticmethod
    def _extract_text(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(detail=truncate(response.text)) from e
        if not isinstance(data, dict):
            raise MalformedResponseError(detail=truncate(response.text))

        feedback = data.get("promptFeedback")
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        candidates = data.get("candidates") or []
        if not isinstance(candidates, list):
            raise MalformedResponseError(detail=truncate(response.text))
        if not candidates and block_reason:
            raise RequestRejectedError(
                f"The AI model refused the request ({block_reason}).",
                status_code=response.status_code,
            )

        parts = []
        for candidate in candidates[:1]:
            if not isinstance(candidate, dict):
                raise MalformedResponseError(detail=truncate(response.text))
            content = candidate.get("content") or {}
            if not isinstance(content, dict) or not isinstance(content.get("parts") or [], list):
                raise MalformedResponseError(detail=truncate(response.text))
            for part in content.get("parts") or []:
                if not isinstance(part, dict):
                    raise MalformedResponseError(detail=truncate(response.text))
                text = part.get("text")
                if isinstance(text, str):
                    parts.append(text)
        return "".join(parts)
