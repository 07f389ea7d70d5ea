"""Prompt templates for story and illustration generation.

Two prompts are built here:

Story prompt
    Sent once per request to the text model.  It carries the user's story
    idea, genre, tone and audience, asks for exactly four scenes
    (Introduction, Rising Action, Climax, Resolution) and describes the JSON
    shape the reply should take.  The model is not guaranteed to honour the
    format; see :mod:`storyteller.core.extraction`.

Enhanced image prompt
    Sent once per illustrated scene::

        [Scene Image Prompt], [Art Style] style, [Fixed quality terms]

Usage
-----
::

    prompt = build_story_prompt("A dragon who is afraid of heights")
    enhanced = build_image_prompt("a cat", "anime")
    # "a cat, anime style, high quality, detailed, storybook illustration"
"""

from __future__ import annotations

import json

DEFAULT_GENRE = "fantasy"
DEFAULT_TONE = "lighthearted"
DEFAULT_TARGET_AUDIENCE = "general"
DEFAULT_ART_STYLE = "realistic"

SCENE_TITLES: tuple[str, ...] = ("Introduction", "Rising Action", "Climax", "Resolution")

# Appended to every scene image prompt after the art style.
_QUALITY_TERMS = "high quality, detailed, storybook illustration"

_STORY_TEMPLATE = """\
Create a cohesive narrative story based on this idea: "{story_idea}"

Requirements:
- Genre: {genre}
- Tone: {tone}
- Target audience: {target_audience}
- Structure the story into exactly 4 scenes: Introduction/Setting, Rising Action, Climax, Resolution
- Each scene should be 2-3 paragraphs long
- Make the story engaging and complete
- Ensure smooth transitions between scenes

Format your entire response as a single, valid JSON object. DO NOT include any other text, \
explanations, or markdown outside the JSON. The JSON structure must be exactly as follows:
{schema}"""


def _example_schema() -> str:
    """Render the JSON skeleton shown to the model."""
    example = {
        "title": "Story Title",
        "scenes": [
            {
                "scene_number": number,
                "scene_title": title,
                "content": "Scene content here...",
                "image_prompt": "Detailed description for image generation",
            }
            for number, title in enumerate(SCENE_TITLES, start=1)
        ],
    }
    return json.dumps(example, indent=4)


def build_story_prompt(
    story_idea: str,
    *,
    genre: str = DEFAULT_GENRE,
    tone: str = DEFAULT_TONE,
    target_audience: str = DEFAULT_TARGET_AUDIENCE,
) -> str:
    """Compile the narrative prompt for the text model.

    The "2-3 paragraphs" requirement is a hint to the model only; replies
    are not checked against it.

    Args:
        story_idea: The user's idea, already stripped and known non-empty.
        genre: Story genre, e.g. ``"science fiction"``.
        tone: Narrative tone, e.g. ``"dark"``.
        target_audience: Intended readers, e.g. ``"children"``.

    Returns:
        The full prompt text.
    """
    return _STORY_TEMPLATE.format(
        story_idea=story_idea,
        genre=genre,
        tone=tone,
        target_audience=target_audience,
        schema=_example_schema(),
    )


def build_image_prompt(image_prompt: str, art_style: str = DEFAULT_ART_STYLE) -> str:
    """Append the art style and fixed quality terms to a scene description.

    Args:
        image_prompt: The scene's base image description.
        art_style: Style modifier, e.g. ``"watercolor"``.

    Returns:
        The enhanced prompt, deterministic for a given input pair.
    """
    return f"{image_prompt}, {art_style} style, {_QUALITY_TERMS}"


def build_fallback_image_prompt(story_idea: str) -> str:
    """Image prompt for the single scene of a degraded document."""
    return f"Illustration of {story_idea}"
