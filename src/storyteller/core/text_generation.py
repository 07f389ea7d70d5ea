"""Gemini text generation for story narratives.

This module provides :class:`GeminiTextClient`, a thin async wrapper around
the ``google-genai`` SDK.  It sends one role-tagged user prompt with
generation options and returns the reply text.  The reply is treated as
free-form text; turning it into a story document is the job of
:mod:`storyteller.core.extraction`.

Usage
-----
::

    from storyteller.core.config import config
    from storyteller.core.text_generation import GeminiTextClient

    client = GeminiTextClient(config)
    text = await client.generate("Tell me a story", temperature=0.8, max_output_tokens=2000)
"""

from __future__ import annotations

import logging
from typing import Any

from google import genai
from google.genai import types

from storyteller.core.config import StorytellerConfig
from storyteller.core.exceptions import TextGenerationError

logger = logging.getLogger(__name__)


class GeminiTextClient:
    """Async text generation against a single Gemini model.

    Attributes:
        _model (str): Gemini model identifier from the configuration.
        _client: The ``google.genai.Client`` (or a compatible stand-in).
    """

    def __init__(self, config: StorytellerConfig, *, client: Any | None = None) -> None:
        """Create the underlying SDK client.

        Args:
            config: Application configuration; ``gemini_api_key`` and
                ``text_model`` are read from it.
            client: Optional pre-built SDK client, mainly for tests.
        """
        self._model = config.text_model
        if client is None:
            client = genai.Client(api_key=config.gemini_api_key)
        self._client = client

    @property
    def model(self) -> str:
        """Return the model identifier in use."""
        return self._model

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """Send *prompt* as a single user turn and return the reply text.

        Args:
            prompt: The full prompt text.
            temperature: Sampling temperature.
            max_output_tokens: Upper bound on reply length.

        Returns:
            The reply text, unmodified.

        Raises:
            TextGenerationError: If the SDK call fails or the reply carries
                no text.
        """
        logger.info("Requesting story text from '%s'.", self._model)

        # TODO: apply a timeout budget to this call; a hung upstream request
        # currently hangs the HTTP request with it.
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=[types.Content(role="user", parts=[types.Part(text=prompt)])],
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                ),
            )
        except Exception as exc:
            logger.error("Gemini request failed: %s", exc, exc_info=True)
            raise TextGenerationError(str(exc) or type(exc).__name__) from exc

        text = response.text
        if not text or not text.strip():
            raise TextGenerationError("Text model response did not contain any text content.")

        logger.info("Received %d characters of story text.", len(text))
        return text
