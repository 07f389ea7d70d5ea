"""Per-scene illustration with isolated failures.

:func:`illustrate_story` requests one image per scene concurrently and waits
for all of them.  Each scene task owns its own scene object, so no locking is
needed.  A failing image call nulls that scene's illustration fields and is
logged; it never cancels sibling tasks or reaches the caller.

After illustration every scene has both ``image_data`` and
``enhanced_prompt`` set, either to real values or to ``None``.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from storyteller.core.models import Scene, StoryDocument
from storyteller.core.prompt_builder import DEFAULT_ART_STYLE, build_image_prompt

logger = logging.getLogger(__name__)


class ImageClient(Protocol):
    """Anything that can render a prompt to image bytes."""

    async def generate(self, prompt: str, *, width: int, height: int) -> bytes: ...


@dataclass(frozen=True)
class Illustration:
    """A rendered image and the prompt that produced it.

    Attributes:
        image_data: Base64-encoded image bytes.
        prompt_used: The enhanced prompt sent to the image model.
    """

    image_data: str
    prompt_used: str


async def illustrate(
    image_client: ImageClient,
    image_prompt: str,
    art_style: str = DEFAULT_ART_STYLE,
    *,
    width: int = 1024,
    height: int = 1024,
) -> Illustration:
    """Render one enhanced prompt.  Errors from *image_client* propagate."""
    enhanced = build_image_prompt(image_prompt, art_style)
    image_bytes = await image_client.generate(enhanced, width=width, height=height)
    return Illustration(
        image_data=base64.b64encode(image_bytes).decode("ascii"),
        prompt_used=enhanced,
    )


async def _illustrate_scene(
    image_client: ImageClient,
    scene: Scene,
    art_style: str,
    width: int,
    height: int,
) -> None:
    if not scene.image_prompt or not scene.image_prompt.strip():
        scene.image_data = None
        scene.enhanced_prompt = None
        return

    logger.info("Generating image for scene %s.", scene.scene_number)
    try:
        illustration = await illustrate(
            image_client, scene.image_prompt, art_style, width=width, height=height
        )
    except Exception:
        logger.exception("Failed to generate image for scene %s.", scene.scene_number)
        scene.image_data = None
        scene.enhanced_prompt = None
        return

    scene.image_data = illustration.image_data
    scene.enhanced_prompt = illustration.prompt_used


async def illustrate_story(
    document: StoryDocument,
    image_client: ImageClient,
    art_style: str = DEFAULT_ART_STYLE,
    *,
    width: int = 1024,
    height: int = 1024,
) -> StoryDocument:
    """Attach an illustration to every scene of *document* that has a prompt.

    Args:
        document: The story to illustrate.  Its scenes are updated in place.
        image_client: Image generation collaborator.
        art_style: Style modifier appended to every scene prompt.
        width: Output width in pixels.
        height: Output height in pixels.

    Returns:
        The same *document*, once every scene task has settled.
    """
    await asyncio.gather(
        *(
            _illustrate_scene(image_client, scene, art_style, width, height)
            for scene in document.scenes
        )
    )

    illustrated = sum(1 for scene in document.scenes if scene.image_data is not None)
    logger.info("Illustrated %d of %d scenes.", illustrated, len(document.scenes))
    return document
