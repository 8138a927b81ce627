"""
Best-effort POST with round-robin key rotation on transient failures.

Each call tries at most one attempt per configured key:

- 2xx: return the parsed body and the index of the key that worked
- 429 / 500 / 502 / 503: record the attempt and move to the next key
- any other status: record it and stop, since no other key will fix it
- network errors and unparseable bodies: record and move on
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx

from .errors import AllKeysFailed, NoKeysConfigured, UpstreamRejected
from .key_rotator import KeyRotator, RotationCursor

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({429, 500, 502, 503})

# Body recorded when a failed response's body cannot be read.
UNREADABLE_BODY = "error"

# Returns a response whose body may still be unread (`stream=True`)
SendFn = Callable[[str, Any], httpx.Response]


@dataclass
class AttemptRecord:
    """One failed attempt: an HTTP status and body, or a transport error."""

    key_index: int
    status: Optional[int] = None
    body: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"key_index": self.key_index, "error": self.error}
        return {"key_index": self.key_index, "status": self.status, "body": self.body}


@dataclass
class RotationResult:
    """Successful call: parsed body, key index used, earlier failed attempts."""

    data: Any
    key_index: int
    attempts: List[AttemptRecord] = field(default_factory=list)


def _read_body(response: httpx.Response) -> str:
    try:
        response.read()
    except (httpx.HTTPError, httpx.StreamError):
        return UNREADABLE_BODY
    return response.text


class KeyRotatingRequester:
    """
    Sends a payload through `send(key, payload)`, rotating keys on failure.

    The rotation cursor belongs to this instance. Pass one in to start from
    a known position or to share it between requesters.
    """

    def __init__(
        self,
        keys: list[str],
        send: SendFn,
        name: str = "",
        cursor: RotationCursor = None,
        retryable_statuses: frozenset = RETRYABLE_STATUSES,
    ):
        self._rotator = KeyRotator(keys, name=name, cursor=cursor)
        self._send = send
        self._retryable = frozenset(retryable_statuses)

    @property
    def cursor(self) -> RotationCursor:
        return self._rotator.cursor

    @property
    def key_count(self) -> int:
        return self._rotator.key_count

    def request(self, payload: Any) -> RotationResult:
        """Issue the call, trying each key at most once."""
        name = self._rotator.name
        if not self._rotator.key_count:
            raise NoKeysConfigured(name)

        attempts: List[AttemptRecord] = []
        for _ in range(self._rotator.key_count):
            index, key = self._rotator.next()

            try:
                response = self._send(key, payload)
            except httpx.HTTPError as e:
                logger.warning(f"{name}: key {index} transport error: {e!r}")
                attempts.append(AttemptRecord(key_index=index, error=repr(e)))
                continue

            try:
                if not response.is_success:
                    body = _read_body(response)
                    attempts.append(
                        AttemptRecord(key_index=index, status=response.status_code, body=body)
                    )
                    if response.status_code in self._retryable:
                        logger.warning(
                            f"{name}: key {index} returned HTTP {response.status_code}, rotating"
                        )
                        continue
                    logger.error(f"{name}: key {index} rejected with HTTP {response.status_code}")
                    raise UpstreamRejected(response.status_code, body, attempts)

                try:
                    response.read()
                    data = response.json()
                except (httpx.HTTPError, ValueError) as e:
                    logger.warning(f"{name}: key {index} returned an unreadable body: {e!r}")
                    attempts.append(AttemptRecord(key_index=index, error=repr(e)))
                    continue
            finally:
                response.close()

            if attempts:
                logger.info(f"{name}: succeeded with key {index} after {len(attempts)} failure(s)")
            return RotationResult(data=data, key_index=index, attempts=attempts)

        logger.error(f"{name}: all {len(attempts)} key(s) failed")
        raise AllKeysFailed(attempts)
