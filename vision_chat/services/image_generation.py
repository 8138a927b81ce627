"""
Image generation through an OpenAI-compatible images API, with key rotation.
"""
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

import httpx
import opik

from .key_rotator import RotationCursor
from .requester import KeyRotatingRequester, RotationResult
from ..config import settings

logger = logging.getLogger(__name__)


def _png(b64: str) -> str:
    return "data:image/png;base64," + b64


def _items(data: Dict[str, Any], field: str) -> List[Dict[str, Any]]:
    value = data.get(field)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]

def extract_image_sources(data: Any) -> List[str]:
    """
    Collect displayable image sources from a generation response.

    Providers disagree on the response shape, so every known field is
    checked in turn:

    - OpenAI: `data[].b64_json`, `data[].url`
    - Google: `imageUri`, `images[].imageUri`, `images[].url`, `images[].b64`
    - generic: `base64`, `output[].imageUri`, `output[].b64_json`
    - a bare string is taken as the source itself

    Base64 payloads come back as PNG data URLs.
    """
    if isinstance(data, str):
        return [data] if data else []
    if not isinstance(data, dict):
        return []

    images: List[str] = []

    for item in _items(data, "data"):
        if item.get("b64_json"):
            images.append(_png(item["b64_json"]))
        if item.get("url"):
            images.append(item["url"])

    if data.get("imageUri"):
        images.append(data["imageUri"])
    for item in _items(data, "images"):
        if item.get("imageUri"):
            images.append(item["imageUri"])
        if item.get("url"):
            images.append(item["url"])
        if item.get("b64"):
            images.append(_png(item["b64"]))

    if data.get("base64"):
        images.append(_png(data["base64"]))
    for item in _items(data, "output"):
        if item.get("imageUri"):
            images.append(item["imageUri"])
        if item.get("b64_json"):
            images.append(_png(item["b64_json"]))

    return images


class ImageGenerationClient:
    """Posts generation requests with the key as a bearer token."""

    def __init__(
        self,
        keys: list[str],
        endpoint: str = settings.image_endpoint,
        model: str = settings.image_model,
        timeout: float = settings.http_timeout,
        http_client: httpx.Client = None,
        cursor: RotationCursor = None,
    ):
        self.endpoint = endpoint
        self.model = model
        self._http = http_client or httpx.Client(timeout=timeout)
        self._requester = KeyRotatingRequester(keys, self._send, name="ImageGen", cursor=cursor)

    @property
    def key_count(self) -> int:
        return self._requester.key_count

    @property
    def cursor(self) -> RotationCursor:
        return self._requester.cursor

    def _send(self, key: str, payload: Dict[str, Any]) -> httpx.Response:
        request = self._http.build_request(
            "POST",
            self.endpoint,
            headers={"Authorization": f"Bearer {key}"},
            json=payload,
        )
        return self._http.send(request, stream=True)

    @opik.track(name="image_generate")
    def generate(
        self,
        prompt: str,
        size: str = settings.image_size,
        n: int = 1,
        model: Optional[str] = None,
    ) -> Tuple[List[str], RotationResult]:
        """Generate `n` images for `prompt`; returns the sources and the raw result."""
        payload = {"prompt": prompt, "size": size, "n": n, "model": model or self.model}
        result = self._requester.request(payload)
        images = extract_image_sources(result.data)
        if not images:
            logger.warning("ImageGen: response contained no recognizable image fields")
        return images, result

    def close(self) -> None:
        self._http.close()


@lru_cache()
def get_image_client() -> ImageGenerationClient:
    """Get the process-wide image generation client using all configured keys."""
    return ImageGenerationClient(settings.image_key_list)
