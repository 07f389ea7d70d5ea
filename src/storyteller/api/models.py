"""Pydantic request and response models for the AI Storyteller API.

These models define the JSON schema for every API endpoint.  FastAPI uses
them for automatic request validation, serialisation, and OpenAPI
documentation generation.

Required text inputs (``story_idea``, ``image_prompt``) are declared
optional here and checked by the orchestrator, so that a missing or blank
value produces a 400 with a readable message rather than a 422.

Models
------
StoryRequest
    Payload for ``POST /api/generate-story``.
CompleteStoryRequest
    Payload for ``POST /api/generate-complete-story`` — a story request
    plus an art style.
ImageRequest
    Payload for ``POST /api/generate-image``.
ImageResponse
    Response of ``POST /api/generate-image``.
HealthResponse
    Response of ``GET /api/health``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from storyteller.core.prompt_builder import (
    DEFAULT_ART_STYLE,
    DEFAULT_GENRE,
    DEFAULT_TARGET_AUDIENCE,
    DEFAULT_TONE,
)


class StoryRequest(BaseModel):
    """Request body for the ``POST /api/generate-story`` endpoint.

    Attributes:
        story_idea: The premise of the story.  Required and non-blank.
        genre: Story genre.  Defaults to ``"fantasy"``.
        tone: Narrative tone.  Defaults to ``"lighthearted"``.
        target_audience: Intended readers.  Defaults to ``"general"``.
    """

    story_idea: str | None = Field(
        default=None,
        description="Premise of the story (required).",
    )
    genre: str = Field(default=DEFAULT_GENRE, description="Story genre.")
    tone: str = Field(default=DEFAULT_TONE, description="Narrative tone.")
    target_audience: str = Field(
        default=DEFAULT_TARGET_AUDIENCE,
        description="Intended readers.",
    )


class CompleteStoryRequest(StoryRequest):
    """Request body for the ``POST /api/generate-complete-story`` endpoint.

    Attributes:
        art_style: Style modifier applied to every scene illustration.
            Defaults to ``"realistic"``.
    """

    art_style: str = Field(
        default=DEFAULT_ART_STYLE,
        description="Illustration style, e.g. 'watercolor' or 'anime'.",
    )


class ImageRequest(BaseModel):
    """Request body for the ``POST /api/generate-image`` endpoint.

    Attributes:
        image_prompt: Description of the image.  Required and non-blank.
        art_style: Style modifier.  Defaults to ``"realistic"``.
    """

    image_prompt: str | None = Field(
        default=None,
        description="Description of the image (required).",
    )
    art_style: str = Field(
        default=DEFAULT_ART_STYLE,
        description="Illustration style, e.g. 'watercolor' or 'anime'.",
    )


class ImageResponse(BaseModel):
    """Response body for the ``POST /api/generate-image`` endpoint."""

    image_data: str = Field(..., description="Base64-encoded PNG image.")
    prompt_used: str = Field(..., description="Enhanced prompt sent to the image model.")


class HealthResponse(BaseModel):
    """Response body for the ``GET /api/health`` endpoint."""

    status: str
    service: str
    timestamp: str
