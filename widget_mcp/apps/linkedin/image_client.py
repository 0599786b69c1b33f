"""Image generation over the OpenAI images HTTP API."""
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

IMAGE_MODEL = "dall-e-3"


class ImageGenerationClient:
    """Thin async client for ``POST /images/generations``.

    Every failure is reported as ``{"success": False, "error": ...}``;
    nothing is raised to the caller.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def generate(
        self,
        prompt: str,
        style: str = "natural",
        size: str = "1024x1024",
        quality: str = "standard",
    ) -> Dict[str, Any]:
        if not self.api_key:
            return {
                "success": False,
                "error": "OpenAI API key not configured. Please set OPENAI_API_KEY.",
            }
        if not prompt or not prompt.strip():
            return {"success": False, "error": "Image prompt is required"}

        try:
            response = await self.client.post(
                f"{self.base_url}/images/generations",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "model": IMAGE_MODEL,
                    "prompt": prompt,
                    "n": 1,
                    "size": size,
                    "quality": quality,
                    "style": style,
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"Image generation request failed: {e}")
            return {
                "success": False,
                "error": str(e) or "Failed to generate image. Please try again.",
            }

        if response.status_code == 401:
            return {"success": False, "error": "Invalid OpenAI API key. Please check your configuration."}
        if response.status_code == 429:
            return {"success": False, "error": "Rate limit exceeded. Please try again in a moment."}

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            error = data.get("error") if isinstance(data, dict) else None
            error = error if isinstance(error, dict) else {}
            if error.get("code") == "content_policy_violation":
                return {
                    "success": False,
                    "error": "Image prompt violates content policy. Please try a different prompt.",
                }
            return {
                "success": False,
                "error": error.get("message") or f"Image generation failed: {response.reason_phrase}",
            }

        images = data.get("data") if isinstance(data, dict) else None
        if not images:
            return {"success": False, "error": "No image data returned from API"}

        first = images[0]
        result = {"success": True, "imageUrl": first.get("url")}
        if first.get("revised_prompt"):
            result["revisedPrompt"] = first["revised_prompt"]
        return result

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
