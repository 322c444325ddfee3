"""Data models for the verification service."""

from datetime import datetime

from pydantic import BaseModel, Field


class VerifyRequest(BaseModel):
    """Certificate material to check, as PEM text."""

    certificate: str = Field(..., description="PEM-encoded server certificate")
    chain: str = Field(..., description="PEM-encoded intermediate certificate")
    private_key: str = Field(..., description="PEM-encoded unencrypted server private key")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")
    timestamp: datetime = Field(..., description="Current server time")


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str = Field(..., description="Error message")
