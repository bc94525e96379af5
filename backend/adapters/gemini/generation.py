"""GeminiGenerationAdapter — calls the Gemini generateContent REST endpoint.

One request per call, no retries. Audio chunks travel inline as base64;
structured output is requested via responseMimeType/responseSchema, but the
returned text is handed back unvalidated.
"""

import base64
import logging
from typing import Optional

import httpx

from domain.errors import TransmissionError, TransmissionTimeout
from domain.models import GenerationRequest
from ports.generation import GenerationPort

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 300.0


class GeminiGenerationAdapter(GenerationPort):
    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    def generate(self, request: GenerationRequest) -> str:
        if not self._api_key:
            raise TransmissionError("GEMINI_API_KEY is not set")

        url = f"{self._base_url}/models/{self._model}:generateContent"
        payload = self._build_payload(request)
        media_info = f", {len(request.media.data)} bytes {request.media.mime_type}" if request.media else ""
        logger.info(f"Calling {self._model}{media_info}")

        try:
            resp = self._client.post(url, json=payload, headers={"x-goog-api-key": self._api_key})
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"Gemini request timed out: {e}")
            raise TransmissionTimeout(f"Request to {self._model} timed out") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Gemini returned HTTP {status}: {e.response.text[:500]}")
            raise TransmissionError(f"Generation service error: HTTP {status}", status_code=status) from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e}")
            raise TransmissionError(f"Generation service unreachable: {e}") from e

        try:
            body = resp.json()
        except ValueError as e:
            raise TransmissionError(f"Invalid response envelope: {e}", status_code=resp.status_code) from e
        return self._extract_text(body)

    def close(self) -> None:
        self._client.close()

    def _build_payload(self, request: GenerationRequest) -> dict:
        parts = []
        if request.media is not None:
            parts.append({
                "inline_data": {
                    "mime_type": request.media.mime_type,
                    "data": base64.b64encode(request.media.data).decode("ascii"),
                }
            })
        parts.append({"text": request.prompt})

        return {
            "contents": [{"role": "user", "parts": parts}],
            "systemInstruction": {"parts": [{"text": request.system_instruction}]},
            "generationConfig": {
                "responseMimeType": request.response_mime_type,
                "responseSchema": request.response_schema,
            },
        }

    def _extract_text(self, body: dict) -> str:
        candidates = body.get("candidates") or []
        if not candidates:
            reason = (body.get("promptFeedback") or {}).get("blockReason", "no candidates")
            raise TransmissionError(f"Generation service returned no output ({reason})")

        candidate = candidates[0]
        finish_reason = candidate.get("finishReason")
        if finish_reason and finish_reason != "STOP":
            logger.warning(f"Generation finished with reason {finish_reason}; output may be truncated")

        parts = (candidate.get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)
