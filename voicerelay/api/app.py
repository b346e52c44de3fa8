"""
FastAPI application factory.

``create_app()`` assembles the relay with CORS, error handlers, the
transcription router and the health endpoint. ``main()`` is the
``voicerelay-server`` entry point: it loads settings (halting when the
upstream credential is missing), configures logging and runs uvicorn.
"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from voicerelay.api.middleware.error_handler import register_error_handlers
from voicerelay.api.routes import transcribe
from voicerelay.core.config import Settings, get_settings
from voicerelay.core.models import HealthResponse
from voicerelay.services.transcription import BaseTranscriber, create_transcriber

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Close the upstream connection pool on shutdown."""
    logger.info("Relay ready, forwarding to %s", app.state.settings.transcription_url)
    yield
    await app.state.transcriber.aclose()


def create_app(
    settings: Settings | None = None,
    transcriber: BaseTranscriber | None = None,
) -> FastAPI:
    """Build and return a fully configured FastAPI application.

    Args:
        settings: Immutable relay settings; loaded from the environment when omitted.
        transcriber: Upstream provider; built from settings when omitted.

    Returns:
        FastAPI: The configured application, ready for ``uvicorn``.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="VoiceRelay",
        description="Relay that forwards recorded audio to a speech-to-text service.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.transcriber = transcriber or create_transcriber(settings)

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(timestamp=datetime.now(UTC))

    app.include_router(transcribe.router)

    return app


def main() -> None:
    """Run the relay with uvicorn."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Invalid relay configuration (is OPENAI_API_KEY set?): %s", exc)
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(settings)
    logger.info("Server running on http://%s:%d", settings.app_host, settings.port)
    uvicorn.run(app, host=settings.app_host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
