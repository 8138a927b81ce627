"""
Errors raised by the provider clients.
"""


class ProviderError(Exception):
    """Base class for failures talking to an external provider."""


class NoKeysConfigured(ProviderError):
    """The key pool is empty; no request was attempted."""

    def __init__(self, name: str = ""):
        self.name = name
        super().__init__(f"{name or 'provider'}: no API keys configured")


class UpstreamRejected(ProviderError):
    """The provider answered with a status that no other key will fix."""

    def __init__(self, status: int, body: str, attempts: list = None):
        self.status = status
        self.body = body
        self.attempts = attempts or []
        super().__init__(f"upstream rejected request with HTTP {status}")


class AllKeysFailed(ProviderError):
    """Every key in the pool was tried once and none succeeded."""

    def __init__(self, attempts: list):
        self.attempts = attempts
        super().__init__(f"all {len(attempts)} key(s) failed")
