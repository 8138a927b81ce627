"""
Google Cloud Vision client with key rotation across the configured pool.
"""
import logging
from functools import lru_cache
from typing import Any, Dict, Tuple

import httpx
import opik

from .key_rotator import RotationCursor
from .requester import KeyRotatingRequester, RotationResult
from ..config import settings

logger = logging.getLogger(__name__)

FEATURES = [
    {"type": "LABEL_DETECTION", "maxResults": 10},
    {"type": "OBJECT_LOCALIZATION", "maxResults": 10},
    {"type": "TEXT_DETECTION", "maxResults": 5},
    {"type": "SAFE_SEARCH_DETECTION", "maxResults": 1},
]


def build_annotate_request(image_b64: str) -> Dict[str, Any]:
    """Request body asking for every feature in one call."""
    return {
        "requests": [
            {
                "image": {"content": image_b64},
                "features": FEATURES,
            }
        ]
    }


class VisionClient:
    """
    Calls `images:annotate` with the key passed as a query parameter.

    Owns one `httpx.Client` and one requester, so the round-robin position
    carries over between calls made through the same instance.
    """

    def __init__(
        self,
        keys: list[str],
        endpoint: str = settings.vision_endpoint,
        timeout: float = settings.http_timeout,
        http_client: httpx.Client = None,
        cursor: RotationCursor = None,
    ):
        self.endpoint = endpoint
        self._http = http_client or httpx.Client(timeout=timeout)
        self._requester = KeyRotatingRequester(keys, self._send, name="Vision", cursor=cursor)

    @property
    def key_count(self) -> int:
        return self._requester.key_count

    @property
    def cursor(self) -> RotationCursor:
        return self._requester.cursor

    def _send(self, key: str, payload: Dict[str, Any]) -> httpx.Response:
        request = self._http.build_request("POST", self.endpoint, params={"key": key}, json=payload)
        return self._http.send(request, stream=True)

    @opik.track(name="vision_annotate", capture_input=False)
    def annotate(self, image_b64: str) -> Tuple[Dict[str, Any], RotationResult]:
        """
        Analyze one base64-encoded image.

        Returns the first per-image response (empty dict when the provider
        returned none or an unexpected shape) together with the rotation result.
        """
        result = self._requester.request(build_annotate_request(image_b64))
        data = result.data if isinstance(result.data, dict) else {}
        responses = data.get("responses")
        if isinstance(responses, list) and responses and isinstance(responses[0], dict):
            return responses[0], result
        return {}, result

    def close(self) -> None:
        self._http.close()


@lru_cache()
def get_vision_client() -> VisionClient:
    """Get the process-wide vision client using all configured keys."""
    return VisionClient(settings.vision_key_list)
