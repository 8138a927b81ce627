"""
FastAPI application for the vision chat backend.

Run with:
    uvicorn vision_chat.api.main:app --reload --port 8000
"""
import asyncio
import logging
from typing import Union
from dotenv import load_dotenv
load_dotenv()  # Load .env before other imports

from fastapi import FastAPI, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from ..config import settings
from ..services.errors import NoKeysConfigured, UpstreamRejected, AllKeysFailed
from ..services.vision_client import VisionClient, get_vision_client
from ..services.image_generation import ImageGenerationClient, get_image_client
from ..services.summary import build_summary
from ..services.opik_setup import setup_opik
from .models import (
    AnalyzeImageRequest, AnalyzeImageResponse, GenerateImageRequest,
    GenerateImageResponse, ErrorResponse, HealthResponse,
)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report configuration on startup. Missing keys are reported per request."""
    if not settings.vision_key_list:
        logger.warning("VISION_API_KEYS (or VISION_API_KEY) is not set; /api/analyze_image will fail")
    if not settings.image_key_list:
        logger.warning("IMAGE_API_KEYS (or OPENAI_API_KEY) is not set; /api/generate_image will fail")

    setup_opik()
    logger.info(
        f"Vision chat backend started with {len(settings.vision_key_list)} vision key(s) "
        f"and {len(settings.image_key_list)} image key(s)"
    )
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Vision Chat",
    description="Image analysis and image generation backend for the chat UI",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, **fields) -> JSONResponse:
    """Serialize an ErrorResponse, dropping unset fields."""
    body = ErrorResponse(**fields).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def provider_error_response(
    exc: Union[NoKeysConfigured, AllKeysFailed, UpstreamRejected],
    provider: str,
    keys_hint: str,
) -> JSONResponse:
    """Map a provider failure to the JSON error returned to the UI."""
    if isinstance(exc, NoKeysConfigured):
        return error_response(
            500,
            error=f"Server not configured. Set {keys_hint} environment variable.",
        )
    if isinstance(exc, AllKeysFailed):
        return error_response(
            502,
            error=f"All {provider} keys failed",
            details=[a.to_dict() for a in exc.attempts],
        )
    # UpstreamRejected
    return error_response(
        500,
        error=f"{provider.capitalize()} request failed",
        status=exc.status,
        message=exc.body,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(
        400,
        error="Invalid request body",
        details=jsonable_encoder(exc.errors()),
    )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="ok", message="Vision chat backend is running")


@app.post("/api/analyze_image", response_model=AnalyzeImageResponse)
async def analyze_image(
    request: AnalyzeImageRequest,
    client: VisionClient = Depends(get_vision_client),
):
    """
    Analyze an uploaded or captured image.

    - **image**: base64 content of the image
    - **filename**: optional, echoed back
    - **prompt**: optional caption typed next to the preview
    """
    try:
        resp, result = await asyncio.to_thread(client.annotate, request.image)
    except (NoKeysConfigured, AllKeysFailed, UpstreamRejected) as e:
        logger.error(f"Vision API request failed: {e}")
        return provider_error_response(e, "vision", "VISION_API_KEYS or VISION_API_KEY")

    return AnalyzeImageResponse(
        filename=request.filename,
        summary=build_summary(resp),
        raw=resp,
        used_key_index=result.key_index,
    )


@app.post("/api/generate_image", response_model=GenerateImageResponse)
async def generate_image(
    request: GenerateImageRequest,
    client: ImageGenerationClient = Depends(get_image_client),
):
    """Generate images from a text prompt."""
    try:
        images, result = await asyncio.to_thread(
            client.generate,
            prompt=request.prompt,
            size=request.size or settings.image_size,
            n=request.n,
            model=request.model,
        )
    except (NoKeysConfigured, AllKeysFailed, UpstreamRejected) as e:
        logger.error(f"Image generation request failed: {e}")
        return provider_error_response(e, "image", "IMAGE_API_KEYS or OPENAI_API_KEY")

    return GenerateImageResponse(images=images, raw=result.data, used_key_index=result.key_index)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "vision_chat.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.app_env == "development",
    )
