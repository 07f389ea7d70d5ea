"""Story document models shared by the extractor, illustrator and API.

A :class:`StoryDocument` is built fresh for every request and discarded once
the response is sent.  Fields that were never assigned are left out of
``model_dump(exclude_unset=True)``, which is how the story-only endpoint
returns scenes without illustration keys.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Scene(BaseModel):
    """One narrative beat of a story.

    Attributes:
        scene_number: 1-based position of the scene in the story.  Always
            reassigned from the position; numbers in the model reply are
            ignored.
        scene_title: Short heading, e.g. ``"Rising Action"``.
        content: Scene prose.  Never blank.
        image_prompt: Description handed to the image model, if any.
        image_data: Base64 PNG, or ``None`` when illustration was skipped or
            failed.
        enhanced_prompt: The exact prompt sent to the image model, or
            ``None`` alongside a missing ``image_data``.
    """

    model_config = ConfigDict(extra="ignore")

    scene_number: int | None = None
    scene_title: str = ""
    content: str
    image_prompt: str | None = None
    image_data: str | None = None
    enhanced_prompt: str | None = None

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("scene content must not be empty")
        return value


class StoryDocument(BaseModel):
    """A titled, ordered sequence of scenes."""

    model_config = ConfigDict(extra="ignore")

    title: str
    scenes: list[Scene] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _number_scenes(self) -> StoryDocument:
        for position, scene in enumerate(self.scenes, start=1):
            scene.scene_number = position
        return self
