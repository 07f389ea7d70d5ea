"""AI Storyteller — FastAPI Application.

This module defines the FastAPI ``app`` instance, the REST API routes, and
the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application is stateless between requests:

- **Configuration** is a single :class:`~storyteller.core.config.StorytellerConfig`
  loaded at process start.  Missing API keys stop the process before it
  accepts traffic.
- **Upstream clients** (Gemini for text, Hugging Face Inference for images)
  are created once in the lifespan handler and wrapped in a
  :class:`~storyteller.core.orchestrator.StoryOrchestrator` stored on
  ``app.state``.
- **Nothing is persisted.**  Each story lives for the duration of one
  request.

Endpoints
---------
========  ================================  ====================================
Method    Path                              Purpose
========  ================================  ====================================
GET       ``/api/health``                   Liveness check
POST      ``/api/generate-story``           Story text only
POST      ``/api/generate-image``           One illustration for a prompt
POST      ``/api/generate-complete-story``  Story with one image per scene
========  ================================  ====================================

Error Responses
---------------
- 400 — required input missing or blank (no upstream call is made).
- 500 — upstream failure, with the upstream message, or a generic
  ``"Internal server error"`` for anything unexpected.

Usage
-----
CLI (installed entry point)::

    storyteller

Direct invocation::

    python -m storyteller.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from datetime import datetime, timezone

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from storyteller import __version__
from storyteller.api.models import (
    CompleteStoryRequest,
    HealthResponse,
    ImageRequest,
    ImageResponse,
    StoryRequest,
)
from storyteller.core.config import StorytellerConfig, config
from storyteller.core.exceptions import (
    ConfigurationError,
    ImageGenerationError,
    StoryValidationError,
    TextGenerationError,
)
from storyteller.core.image_generation import HuggingFaceImageClient
from storyteller.core.orchestrator import StoryOrchestrator
from storyteller.core.text_generation import GeminiTextClient

logger = logging.getLogger(__name__)

SERVICE_NAME = "AI Storyteller API"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

router = APIRouter(prefix="/api")


# ---------------------------------------------------------------------------
# Error translation.
# ---------------------------------------------------------------------------


@contextmanager
def _translate_errors(failure: str) -> Iterator[None]:
    """Map orchestrator exceptions onto HTTP responses.

    Args:
        failure: Prefix for upstream error messages, e.g.
            ``"Failed to generate story"``.

    Raises:
        HTTPException: 400 for validation errors, 500 otherwise.  Stack
            traces are logged, never returned.
    """
    try:
        yield
    except StoryValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (TextGenerationError, ImageGenerationError) as exc:
        logger.error("%s: %s", failure, exc)
        raise HTTPException(status_code=500, detail=f"{failure}: {exc}") from exc
    except Exception as exc:
        logger.exception("%s: unexpected error.", failure)
        raise HTTPException(status_code=500, detail="Internal server error") from exc


def _orchestrator(request: Request) -> StoryOrchestrator:
    return request.app.state.orchestrator


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report that the service is up.  Makes no upstream calls."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.post("/generate-story")
async def generate_story(req: StoryRequest, request: Request) -> dict:
    """Generate a four-scene story without illustrations.

    If the model reply cannot be parsed the response is still 200, carrying
    a single-scene document whose content is the raw reply.

    Args:
        req: Validated :class:`StoryRequest` payload.

    Returns:
        The story document.  Scenes carry no image fields.

    Raises:
        HTTPException: 400 for a missing story idea, 500 on failure.
    """
    with _translate_errors("Failed to generate story"):
        result = await _orchestrator(request).generate_story(
            req.story_idea,
            genre=req.genre,
            tone=req.tone,
            target_audience=req.target_audience,
        )
    return result.document.model_dump(exclude_unset=True)


@router.post("/generate-image", response_model=ImageResponse)
async def generate_image(req: ImageRequest, request: Request) -> ImageResponse:
    """Render one illustration for a free-form prompt.

    Args:
        req: Validated :class:`ImageRequest` payload.

    Returns:
        The base64 image and the enhanced prompt that produced it.

    Raises:
        HTTPException: 400 for a missing prompt, 500 if the image model
            fails.
    """
    with _translate_errors("Failed to generate image"):
        illustration = await _orchestrator(request).generate_image(req.image_prompt, req.art_style)
    return ImageResponse(image_data=illustration.image_data, prompt_used=illustration.prompt_used)


@router.post("/generate-complete-story")
async def generate_complete_story(req: CompleteStoryRequest, request: Request) -> dict:
    """Generate a story and illustrate each scene concurrently.

    Scenes whose illustration failed are returned with ``image_data`` and
    ``enhanced_prompt`` set to ``null``; they do not fail the request.

    Args:
        req: Validated :class:`CompleteStoryRequest` payload.

    Returns:
        The illustrated story document.

    Raises:
        HTTPException: 400 for a missing story idea, 500 if the text model
            fails.
    """
    with _translate_errors("Failed to generate complete story"):
        result = await _orchestrator(request).generate_complete_story(
            req.story_idea,
            genre=req.genre,
            tone=req.tone,
            target_audience=req.target_audience,
            art_style=req.art_style,
        )
    return result.document.model_dump(exclude_unset=True)


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    settings: StorytellerConfig | None = None,
    orchestrator: StoryOrchestrator | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration to use.  Defaults to the global ``config``.
        orchestrator: Pre-built orchestrator.  When given, the lifespan
            handler skips key validation and client construction; tests use
            this to inject fakes.

    Returns:
        The configured application.
    """
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Validate configuration and create upstream clients on startup.

        Raises:
            ConfigurationError: If an API key is missing.  The server does
                not start.
        """
        image_client: HuggingFaceImageClient | None = None
        if getattr(app.state, "orchestrator", None) is None:
            settings.require_api_keys()
            image_client = HuggingFaceImageClient(settings)
            app.state.orchestrator = StoryOrchestrator(
                settings, GeminiTextClient(settings), image_client
            )
            logger.info(
                "Upstream clients ready (text=%s, image=%s).",
                settings.text_model,
                settings.image_model,
            )

        yield

        if image_client is not None:
            await image_client.close()
            logger.info("Image client closed on shutdown.")

    app = FastAPI(
        title=SERVICE_NAME,
        description="Generates illustrated four-scene stories from a single idea.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.orchestrator = orchestrator

    # The frontend is served from a different origin during development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.include_router(router)
    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Configures logging, refuses to start without both API keys, then serves
    on ``config.server_host``:``config.server_port`` (defaults
    ``0.0.0.0:5000``).

    This function is registered as the ``storyteller`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT)

    try:
        config.require_api_keys()
    except ConfigurationError as exc:
        logger.critical("FATAL ERROR: %s", exc)
        raise SystemExit(1) from exc

    logger.info("%s starting on http://%s:%d", SERVICE_NAME, config.server_host, config.server_port)
    uvicorn.run(
        "storyteller.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
