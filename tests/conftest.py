"""Shared pytest fixtures for storyteller tests.

Upstream collaborators are replaced by in-memory fakes that record every
call, so tests can assert both on results and on how many external requests
were made.
"""

from __future__ import annotations

import json
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from storyteller.api.main import create_app
from storyteller.core.config import StorytellerConfig
from storyteller.core.exceptions import ImageGenerationError
from storyteller.core.image_generation import encode_png
from storyteller.core.orchestrator import StoryOrchestrator


class FakeTextClient:
    """Text client stand-in returning a canned reply.

    Attributes:
        reply: Text returned by every call.
        error: If set, raised instead of returning *reply*.
        calls: Keyword arguments of every call, in order.
    """

    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    async def generate(self, prompt: str, *, temperature: float, max_output_tokens: int) -> str:
        self.calls.append(
            {"prompt": prompt, "temperature": temperature, "max_output_tokens": max_output_tokens}
        )
        if self.error is not None:
            raise self.error
        return self.reply


class FakeImageClient:
    """Image client stand-in rendering a tiny PNG.

    Attributes:
        fail_when: Substrings; a prompt containing any of them raises.
        calls: ``(prompt, width, height)`` of every call, in order.
    """

    def __init__(self, fail_when: tuple[str, ...] = ()) -> None:
        self.fail_when = fail_when
        self.calls: list[tuple[str, int, int]] = []
        self.png = encode_png(Image.new("RGB", (4, 4), color=(200, 120, 40)))

    async def generate(self, prompt: str, *, width: int, height: int) -> bytes:
        self.calls.append((prompt, width, height))
        if any(marker in prompt for marker in self.fail_when):
            raise ImageGenerationError("model overloaded")
        return self.png


def make_story(scene_count: int = 4) -> dict:
    """Build a well-formed story payload as the text model would return it."""
    titles = ["Introduction", "Rising Action", "Climax", "Resolution"]
    return {
        "title": "The Lighthouse Keeper",
        "scenes": [
            {
                "scene_number": i,
                "scene_title": titles[(i - 1) % len(titles)],
                "content": f"Paragraph one of scene {i}.\n\nParagraph two of scene {i}.",
                "image_prompt": f"lighthouse scene {i}",
            }
            for i in range(1, scene_count + 1)
        ],
    }


def fenced(payload: dict) -> str:
    """Wrap *payload* in a markdown json fence, as models often do."""
    return f"Here is your story:\n```json\n{json.dumps(payload)}\n```\nEnjoy!"


@pytest.fixture
def test_config() -> StorytellerConfig:
    """Configuration with dummy keys and no .env lookup."""
    return StorytellerConfig(
        _env_file=None,
        gemini_api_key="test-gemini-key",
        hf_api_token="test-hf-token",
    )


@pytest.fixture
def story_payload() -> dict:
    return make_story()


@pytest.fixture
def text_client(story_payload: dict) -> FakeTextClient:
    return FakeTextClient(reply=fenced(story_payload))


@pytest.fixture
def image_client() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture
def orchestrator(
    test_config: StorytellerConfig,
    text_client: FakeTextClient,
    image_client: FakeImageClient,
) -> StoryOrchestrator:
    return StoryOrchestrator(test_config, text_client, image_client)


@pytest.fixture
def test_client(
    test_config: StorytellerConfig,
    orchestrator: StoryOrchestrator,
) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the fake collaborators."""
    app = create_app(test_config, orchestrator=orchestrator)
    with TestClient(app) as client:
        yield client
