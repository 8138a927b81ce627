import logging

import opik

from ..config import settings

logger = logging.getLogger(__name__)


def setup_opik():
    """
    Initialize Opik configuration from settings.
    """
    if not settings.opik_api_key:
        logger.info("Opik API Key not found. Tracing will be disabled or local only.")
        return

    opik.configure(
        api_key=settings.opik_api_key,
        workspace=settings.opik_workspace_name or None,
    )
    logger.info(f"Opik configured for workspace: {settings.opik_workspace_name or 'default'}")
