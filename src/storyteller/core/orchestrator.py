"""Request orchestration: narrative, extraction, illustration.

:class:`StoryOrchestrator` is the single entry point the HTTP layer calls.
It is built once at startup from the process configuration and the two
upstream clients, then shared by every request.  It holds no per-request
state.

Request Flow
------------
::

    AWAITING_NARRATIVE ──► EXTRACTING_DOCUMENT ──► ILLUSTRATING_SCENES ──► COMPLETE
            │                       │
            ▼                       └──► DEGRADED_COMPLETE (fallback document)
          FAILED

Validation happens before ``AWAITING_NARRATIVE``, so a rejected request
makes no upstream call.  Only the text model call can fail a request that
passed validation; image failures are absorbed per scene.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Protocol

from storyteller.core.config import StorytellerConfig
from storyteller.core.exceptions import StoryValidationError
from storyteller.core.extraction import extract_story
from storyteller.core.illustration import (
    ImageClient,
    Illustration,
    illustrate,
    illustrate_story,
)
from storyteller.core.models import StoryDocument
from storyteller.core.prompt_builder import (
    DEFAULT_ART_STYLE,
    DEFAULT_GENRE,
    DEFAULT_TARGET_AUDIENCE,
    DEFAULT_TONE,
    build_story_prompt,
)

logger = logging.getLogger(__name__)


class TextClient(Protocol):
    """Anything that can turn a prompt into reply text."""

    async def generate(self, prompt: str, *, temperature: float, max_output_tokens: int) -> str: ...


class RequestStage(str, enum.Enum):
    """Lifecycle stages of a single story request."""

    AWAITING_NARRATIVE = "awaiting_narrative"
    EXTRACTING_DOCUMENT = "extracting_document"
    ILLUSTRATING_SCENES = "illustrating_scenes"
    COMPLETE = "complete"
    DEGRADED_COMPLETE = "degraded_complete"
    FAILED = "failed"


@dataclass
class StoryResult:
    """Outcome of a story request.

    Attributes:
        document: The story, possibly the single-scene fallback.
        degraded: ``True`` when the model reply could not be parsed.
    """

    document: StoryDocument
    degraded: bool = False

    @property
    def stage(self) -> RequestStage:
        return RequestStage.DEGRADED_COMPLETE if self.degraded else RequestStage.COMPLETE


def require_text(value: str | None, message: str) -> str:
    """Return *value* stripped, or raise if it is missing or blank.

    Raises:
        StoryValidationError: With *message*, for ``None`` or whitespace.
    """
    if value is None or not value.strip():
        raise StoryValidationError(message)
    return value.strip()


class StoryOrchestrator:
    """Sequences text generation, extraction and illustration for a request."""

    def __init__(
        self,
        config: StorytellerConfig,
        text_client: TextClient,
        image_client: ImageClient,
    ) -> None:
        self._config = config
        self._text_client = text_client
        self._image_client = image_client

    async def generate_story(
        self,
        story_idea: str | None,
        *,
        genre: str = DEFAULT_GENRE,
        tone: str = DEFAULT_TONE,
        target_audience: str = DEFAULT_TARGET_AUDIENCE,
    ) -> StoryResult:
        """Generate a story document without illustrations.

        Args:
            story_idea: The user's idea.  Required, non-blank.
            genre: Story genre.
            tone: Narrative tone.
            target_audience: Intended readers.

        Returns:
            A :class:`StoryResult`; ``degraded`` is set when the model reply
            had to be replaced by the fallback document.

        Raises:
            StoryValidationError: If *story_idea* is missing or blank.
            TextGenerationError: If the text model call fails.
        """
        result = await self._narrate(
            story_idea, genre=genre, tone=tone, target_audience=target_audience
        )
        logger.info("Stage %s.", result.stage.value)
        return result

    async def _narrate(
        self, story_idea: str | None, *, genre: str, tone: str, target_audience: str
    ) -> StoryResult:
        # Validation, text call and extraction; the caller logs the terminal stage.
        idea = require_text(story_idea, "Story idea is required")
        prompt = build_story_prompt(idea, genre=genre, tone=tone, target_audience=target_audience)

        logger.info(
            "Stage %s (genre=%s, tone=%s).", RequestStage.AWAITING_NARRATIVE.value, genre, tone
        )
        try:
            raw = await self._text_client.generate(
                prompt,
                temperature=self._config.temperature,
                max_output_tokens=self._config.max_output_tokens,
            )
        except Exception:
            logger.info("Stage %s.", RequestStage.FAILED.value)
            raise

        logger.info("Stage %s.", RequestStage.EXTRACTING_DOCUMENT.value)
        extraction = extract_story(raw, idea)
        return StoryResult(document=extraction.document, degraded=extraction.degraded)

    async def generate_image(
        self,
        image_prompt: str | None,
        art_style: str = DEFAULT_ART_STYLE,
    ) -> Illustration:
        """Render a single image prompt.

        Raises:
            StoryValidationError: If *image_prompt* is missing or blank.
            ImageGenerationError: If the image model call fails.
        """
        prompt = require_text(image_prompt, "Image prompt is required")
        return await illustrate(
            self._image_client,
            prompt,
            art_style,
            width=self._config.image_width,
            height=self._config.image_height,
        )

    async def generate_complete_story(
        self,
        story_idea: str | None,
        *,
        genre: str = DEFAULT_GENRE,
        tone: str = DEFAULT_TONE,
        target_audience: str = DEFAULT_TARGET_AUDIENCE,
        art_style: str = DEFAULT_ART_STYLE,
    ) -> StoryResult:
        """Generate a story and illustrate every scene.

        Raises:
            StoryValidationError: If *story_idea* is missing or blank.
            TextGenerationError: If the text model call fails.
        """
        result = await self._narrate(
            story_idea, genre=genre, tone=tone, target_audience=target_audience
        )

        logger.info("Stage %s (art_style=%s).", RequestStage.ILLUSTRATING_SCENES.value, art_style)
        await illustrate_story(
            result.document,
            self._image_client,
            art_style,
            width=self._config.image_width,
            height=self._config.image_height,
        )

        logger.info("Stage %s.", result.stage.value)
        return result
