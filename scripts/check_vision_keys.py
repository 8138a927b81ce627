#!/usr/bin/env python3
"""
Probe every configured Cloud Vision key individually.

Usage:
    python -m scripts.check_vision_keys

Reads VISION_API_KEYS / VISION_API_KEY from .env. Prints key indices only.
"""
import sys
import httpx
from dotenv import load_dotenv
load_dotenv()

from vision_chat.config import settings
from vision_chat.services.errors import ProviderError
from vision_chat.services.vision_client import VisionClient

# 1x1 transparent PNG
PROBE_IMAGE = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def check_keys(keys: list[str], http_client: httpx.Client = None) -> dict[int, str]:
    """Return a status line per key index. Each key gets its own client, so nothing rotates."""
    http = http_client or httpx.Client(timeout=settings.http_timeout)
    results = {}
    for index, key in enumerate(keys):
        client = VisionClient([key], http_client=http)
        try:
            client.annotate(PROBE_IMAGE)
            results[index] = "OK"
        except ProviderError as e:
            attempts = getattr(e, "attempts", [])
            detail = attempts[-1].to_dict() if attempts else {}
            results[index] = f"FAILED ({type(e).__name__}: {detail.get('status') or detail.get('error')})"
    if http_client is None:
        http.close()
    return results


def main() -> int:
    print("=" * 60)
    print("VISION KEY CHECK")
    print("=" * 60)

    keys = settings.vision_key_list
    print(f"\nConfigured keys: {len(keys)}")
    print(f"Endpoint: {settings.vision_endpoint}")
    if not keys:
        print("✗ No keys found. Set VISION_API_KEYS or VISION_API_KEY in .env")
        return 1

    results = check_keys(keys)
    for index, status in results.items():
        mark = "✓" if status == "OK" else "✗"
        print(f"{mark} key {index}: {status}")

    failed = sum(1 for s in results.values() if s != "OK")
    print("\n" + "=" * 60)
    print(f"CHECK COMPLETE: {len(keys) - failed}/{len(keys)} key(s) working")
    print("=" * 60)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
