import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when the generative AI service cannot be reached or answers with an error."""
    pass


class GeminiClient:
    """
    Minimal client for the Gemini ``generateContent`` REST endpoint.

    The HTTP client is injected so the caller owns its lifetime and timeout.
    Calls are plain request/response: no streaming, no retries.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: Optional[str],
        base_url: str,
        text_model: str,
        image_model: str,
    ):
        self._client = http_client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self.text_model = text_model
        self.image_model = image_model

    def endpoint(self, model: str) -> str:
        return f"{self._base_url}/models/{model}:generateContent"

    async def _generate(self, model: str, body: Dict[str, Any]) -> Dict[str, Any]:
        if not self._api_key:
            raise GenerationError("GEMINI_API_KEY is not configured.")
        try:
            response = await self._client.post(
                self.endpoint(model),
                json=body,
                headers={"x-goog-api-key": self._api_key},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise GenerationError(f"Gemini error: {e.response.status_code} - {e.response.text}") from e
        except httpx.TimeoutException as e:
            raise GenerationError(f"Gemini request timed out: {e}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise GenerationError(f"Unexpected Gemini failure: {e}") from e

    @staticmethod
    def _parts(payload: Dict[str, Any]) -> list:
        candidates = payload.get("candidates") or []
        if not candidates:
            return []
        return (candidates[0].get("content") or {}).get("parts") or []

    async def generate_text(self, prompt: str) -> str:
        """Returns the generated text, or '' when the model answered with nothing."""
        payload = await self._generate(self.text_model, {"contents": [{"parts": [{"text": prompt}]}]})
        try:
            return "".join(part.get("text", "") for part in self._parts(payload))
        except (AttributeError, TypeError, KeyError, IndexError) as e:
            raise GenerationError(f"Unexpected Gemini response shape: {e}") from e

    async def generate_image(self, prompt: str) -> Optional[str]:
        """Returns the base64 image data of the first image part, or None."""
        payload = await self._generate(self.image_model, {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"responseModalities": ["IMAGE"]},
        })
        try:
            for part in self._parts(payload):
                inline = part.get("inlineData") or part.get("inline_data")
                if inline and inline.get("data"):
                    return inline["data"]
        except (AttributeError, TypeError, KeyError, IndexError) as e:
            raise GenerationError(f"Unexpected Gemini response shape: {e}") from e
        logger.warning("Gemini image response had no inline image data.")
        return None
