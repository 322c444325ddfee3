"""FastAPI verification service."""

from datetime import datetime, timezone
import logging

from fastapi import FastAPI, HTTPException, status

from certcheck import DecodeError, PreflightReport, run_preflight

from .models import ErrorResponse, HealthResponse, VerifyRequest

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "certcheck verification service"
SERVICE_VERSION = "1.0.0"

app = FastAPI(
    title="certcheck",
    description="Checks that a server certificate, its issuer and its private key belong together",
    version=SERVICE_VERSION,
)


@app.get("/", response_model=dict)
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "operational"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=SERVICE_VERSION,
        timestamp=datetime.now(timezone.utc)
    )


@app.post(
    "/verify",
    response_model=PreflightReport,
    responses={400: {"model": ErrorResponse}},
)
def verify(request: VerifyRequest):
    """
    Check a certificate set.

    Failed checks are reported in the body with verified=false. Input that
    cannot be decoded is rejected with 400.
    """
    try:
        report = run_preflight(
            request.certificate.encode(),
            request.chain.encode(),
            request.private_key.encode(),
        )
    except DecodeError as e:
        logger.error(f"Rejected verification request: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to decode {e}"
        )

    logger.info(f"Verification finished for {report.server.common_name}: verified={report.verified}")
    return report


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "certcheck_service.main:app",
        host="127.0.0.1",
        port=8000,
        log_level="info"
    )
