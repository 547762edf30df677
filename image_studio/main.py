"""FastAPI application entry point for the relay service."""

import logging
import sys

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config.settings import get_settings
from .api.routes import health_router, generate_router
from .api.routes.generate import error_response
from .api.dependencies import initialize_services

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Image Studio Relay",
    description="Relay between Image Studio clients and the Gemini image and text models",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health_router)
app.include_router(generate_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies in the relay's error shape."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in exc.errors()
    )
    logger.warning(f"Rejected malformed request to {request.url.path}: {details}")
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        f"Invalid request body: {details}" if details else "Invalid request body",
        "invalid_request",
    )


@app.on_event("startup")
async def startup_event() -> None:
    """Application startup event."""
    settings = get_settings()
    logger.info("=" * 50)
    logger.info("Image Studio Relay Starting")
    logger.info(f"Image Model: {settings.image_model}")
    logger.info(f"Text Model: {settings.text_model}")
    logger.info(f"Output MIME type: {settings.image_output_mime_type}")
    logger.info(f"Provider max retries: {settings.provider_max_retries}")
    logger.info("=" * 50)

    # Fails fast with MissingCredentialError when API_KEY is absent
    await initialize_services()


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Application shutdown event."""
    logger.info("Image Studio Relay Shutting Down")


def run() -> None:
    """Serve the relay with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "image_studio.main:app",
        host=settings.relay_service_host,
        port=settings.relay_service_port,
    )


if __name__ == "__main__":
    run()
