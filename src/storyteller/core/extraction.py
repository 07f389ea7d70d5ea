"""Best-effort extraction of a story document from a model reply.

The text model is asked for JSON but is free to wrap it in a markdown fence,
add commentary, or ignore the format entirely.  Extraction runs in two
stages:

1. Look for a fenced code block tagged ``json`` and decode its interior.
2. Otherwise decode the whole reply.

The decoded value is then validated into a
:class:`~storyteller.core.models.StoryDocument`.  Nothing in this module
raises on bad input.  :func:`extract_story` always returns a usable
document, tagged with the path that produced it:

- :class:`Parsed` — the reply contained a valid story.
- :class:`Degraded` — it did not; the document holds one synthetic scene
  whose content is the raw reply and whose image prompt is derived from the
  user's story idea.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from storyteller.core.models import Scene, StoryDocument
from storyteller.core.prompt_builder import build_fallback_image_prompt

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL)

FALLBACK_TITLE = "Generated Story"
FALLBACK_SCENE_TITLE = "Complete Story"
EMPTY_REPLY_CONTENT = "The storyteller returned an empty reply."


@dataclass(frozen=True)
class Parsed:
    """The reply decoded into a valid story."""

    document: StoryDocument

    @property
    def degraded(self) -> bool:
        return False


@dataclass(frozen=True)
class Degraded:
    """The reply could not be decoded; *document* is the fallback."""

    document: StoryDocument
    reason: str

    @property
    def degraded(self) -> bool:
        return True


ExtractionResult = Parsed | Degraded


class ExtractionFailed(ValueError):
    """Neither a fenced block nor the whole reply decoded as JSON."""


def extract_json(raw: str) -> Any:
    """Decode the JSON payload of a model reply.

    Args:
        raw: The reply text.

    Returns:
        The decoded value.

    Raises:
        ExtractionFailed: If neither a fenced block nor the whole reply
            decodes.
    """
    match = _FENCED_JSON.search(raw)
    candidate = match.group(1) if match else raw
    try:
        return json.loads(candidate)
    except (TypeError, ValueError, RecursionError) as exc:
        source = "fenced json block" if match else "reply"
        raise ExtractionFailed(f"could not decode {source}: {exc}") from exc


def _parse(raw: str) -> StoryDocument | str:
    # Returns the document, or a human-readable failure reason.
    try:
        payload = extract_json(raw)
    except ExtractionFailed as exc:
        return str(exc)
    try:
        return StoryDocument.model_validate(payload)
    except ValidationError as exc:
        return f"reply is not a story document: {exc.error_count()} validation error(s)"


def degraded_document(raw: str, story_idea: str) -> StoryDocument:
    """Build the single-scene fallback document.

    Args:
        raw: The unparsed reply; becomes the scene content verbatim.
        story_idea: The user's idea; seeds the scene's image prompt.
    """
    scene = Scene(
        scene_number=1,
        scene_title=FALLBACK_SCENE_TITLE,
        content=raw if raw.strip() else EMPTY_REPLY_CONTENT,
        image_prompt=build_fallback_image_prompt(story_idea),
    )
    return StoryDocument(title=FALLBACK_TITLE, scenes=[scene])


def extract_story(raw: str, story_idea: str) -> ExtractionResult:
    """Turn a model reply into a story document, never raising.

    Args:
        raw: The reply text from the text model.
        story_idea: The user's story idea, used only on the fallback path.

    Returns:
        :class:`Parsed` on success, otherwise :class:`Degraded`.
    """
    result = _parse(raw)
    if isinstance(result, StoryDocument):
        return Parsed(document=result)

    logger.warning("Story extraction failed, using fallback document: %s", result)
    return Degraded(document=degraded_document(raw, story_idea), reason=result)
