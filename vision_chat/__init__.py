"""Vision chat backend: image analysis and generation with API key rotation."""

__version__ = "1.0.0"
