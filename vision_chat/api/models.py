"""Pydantic models for API request/response."""
from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional


class AnalyzeImageRequest(BaseModel):
    """Request model for the image analysis endpoint."""

    image: str = Field(..., min_length=1, description="Base64-encoded image, without the data URL prefix")
    filename: Optional[str] = Field(default=None, description="Original file name, echoed back")
    prompt: Optional[str] = Field(default=None, description="Caption typed by the user")


class AnalyzeImageResponse(BaseModel):
    """Response model for the image analysis endpoint."""

    filename: Optional[str] = None
    summary: str
    raw: Dict[str, Any]
    used_key_index: int


class GenerateImageRequest(BaseModel):
    """Request model for the image generation endpoint."""

    prompt: str = Field(..., min_length=1)
    size: Optional[str] = Field(default=None, description="WIDTHxHEIGHT; server default when omitted")
    n: int = Field(default=1, ge=1, le=4)
    model: Optional[str] = Field(default=None, description="Provider model; server default when omitted")


class GenerateImageResponse(BaseModel):
    """Response model for the image generation endpoint."""

    images: List[str]
    raw: Any
    used_key_index: int


class ErrorResponse(BaseModel):
    """Error body returned by every endpoint."""

    error: str
    message: Optional[str] = None
    status: Optional[int] = None
    details: Optional[List[Any]] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    message: str
