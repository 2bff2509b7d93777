"""FastAPI application serving the debate arena."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from web.debate_manager import DebateManager
from web.endpoints.debates import router as debates_router, ws_router as debates_ws_router
from web.endpoints.system import router as system_router
from web.endpoints.transcripts import router as transcripts_router

logger: logging.Logger = logging.getLogger(__name__)

LOCAL_ORIGIN_PATTERN = r"https?://(localhost|127\.0\.0\.1)(:\d+)?"


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Debate arena API starting")
    try:
        yield
    finally:
        # Running debates are stopped so their transcripts get written.
        await debate_manager.shutdown()
        logger.info("Debate arena API stopped")


def get_allowed_origins() -> list[str] | None:
    """Comma separated ``ALLOWED_ORIGINS``, or None for local development."""
    raw = os.environ.get("ALLOWED_ORIGINS", "")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or None


def configure_cors(application: FastAPI) -> None:
    origins = get_allowed_origins()
    if origins:
        logger.info(f"CORS restricted to: {origins}")
        origin_options: dict[str, object] = {"allow_origins": origins}
    else:
        logger.info("ALLOWED_ORIGINS unset; accepting localhost origins only")
        origin_options = {"allow_origin_regex": LOCAL_ORIGIN_PATTERN}

    application.add_middleware(
        CORSMiddleware,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        **origin_options,
    )


app: FastAPI = FastAPI(
    title="AI Debate Arena",
    description="Time-boxed debates between two AI models with live scoring",
    version="1.0.0",
    lifespan=lifespan,
)
configure_cors(app)

debate_manager: DebateManager = DebateManager()

for router in (system_router, debates_router, debates_ws_router, transcripts_router):
    app.include_router(router)
