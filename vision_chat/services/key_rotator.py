"""
Round-robin API key rotation with an explicit, injectable cursor.
"""
import threading
import logging

from .errors import NoKeysConfigured

logger = logging.getLogger(__name__)


class RotationCursor:
    """
    Monotonically increasing attempt counter.

    - `advance()` returns the value before the increment
    - Thread-safe via a lock
    """

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def advance(self) -> int:
        with self._lock:
            current = self._value
            self._value += 1
            return current


class KeyRotator:
    """
    Round-robin API key rotator.

    - Every call to `next()` consumes one cursor step
    - The index used is the cursor value before the step, modulo pool size
    - Never logs key values, only indices
    """

    def __init__(self, keys: list[str], name: str = "", cursor: RotationCursor = None):
        self._keys = list(keys)
        self._name = name or "KeyRotator"
        self.cursor = cursor or RotationCursor()
        logger.info(f"{self._name}: initialized with {len(self._keys)} key(s)")

    @property
    def key_count(self) -> int:
        return len(self._keys)

    @property
    def name(self) -> str:
        return self._name

    def next(self) -> tuple[int, str]:
        """Return `(index, key)` for the next attempt and advance the cursor."""
        if not self._keys:
            raise NoKeysConfigured(self._name)
        index = self.cursor.advance() % len(self._keys)
        logger.debug(f"{self._name}: using key {index}")
        return index, self._keys[index]
