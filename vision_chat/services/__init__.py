from .errors import ProviderError, NoKeysConfigured, UpstreamRejected, AllKeysFailed
from .key_rotator import KeyRotator, RotationCursor
from .requester import KeyRotatingRequester, AttemptRecord, RotationResult
from .vision_client import VisionClient, get_vision_client
from .image_generation import ImageGenerationClient, extract_image_sources, get_image_client
from .summary import build_summary
from .opik_setup import setup_opik

__all__ = [
    "ProviderError",
    "NoKeysConfigured",
    "UpstreamRejected",
    "AllKeysFailed",
    "KeyRotator",
    "RotationCursor",
    "KeyRotatingRequester",
    "AttemptRecord",
    "RotationResult",
    "VisionClient",
    "get_vision_client",
    "ImageGenerationClient",
    "extract_image_sources",
    "get_image_client",
    "build_summary",
    "setup_opik",
]
