"""Hugging Face Inference text-to-image client.

This module provides :class:`HuggingFaceImageClient`, which asks the hosted
Inference API to render a prompt and hands back PNG bytes.  The Inference
client returns a PIL image; it is re-encoded to PNG here so callers only
ever deal with bytes.

Usage
-----
::

    from storyteller.core.config import config
    from storyteller.core.image_generation import HuggingFaceImageClient

    client = HuggingFaceImageClient(config)
    png = await client.generate("a lighthouse at dusk", width=1024, height=1024)
"""

from __future__ import annotations

import io
import logging
from typing import Any

from huggingface_hub import AsyncInferenceClient
from PIL import Image

from storyteller.core.config import StorytellerConfig
from storyteller.core.exceptions import ImageGenerationError

logger = logging.getLogger(__name__)


def encode_png(image: Image.Image) -> bytes:
    """Serialise a PIL image to PNG bytes.

    Args:
        image: Any PIL image.  Modes PNG cannot store are converted to RGB.

    Returns:
        The PNG-encoded image.
    """
    if image.mode not in ("1", "L", "LA", "I", "P", "RGB", "RGBA"):
        image = image.convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class HuggingFaceImageClient:
    """Async text-to-image generation against one hosted model.

    Attributes:
        _model (str): Hugging Face model ID from the configuration.
        _client: The ``AsyncInferenceClient`` (or a compatible stand-in).
    """

    def __init__(self, config: StorytellerConfig, *, client: Any | None = None) -> None:
        """Create the underlying Inference client.

        Args:
            config: Application configuration; ``hf_api_token`` and
                ``image_model`` are read from it.
            client: Optional pre-built Inference client, mainly for tests.
        """
        self._model = config.image_model
        if client is None:
            client = AsyncInferenceClient(token=config.hf_api_token)
        self._client = client

    @property
    def model(self) -> str:
        """Return the model identifier in use."""
        return self._model

    async def generate(self, prompt: str, *, width: int, height: int) -> bytes:
        """Render *prompt* and return the image as PNG bytes.

        Args:
            prompt: Fully composed image prompt.
            width: Output width in pixels.
            height: Output height in pixels.

        Returns:
            PNG-encoded image bytes.

        Raises:
            ImageGenerationError: If the Inference call fails or the result
                cannot be encoded.
        """
        # TODO: apply a timeout budget to this call; a hung upstream request
        # currently hangs the HTTP request with it.
        try:
            image = await self._client.text_to_image(
                prompt,
                model=self._model,
                width=width,
                height=height,
            )
            return encode_png(image)
        except Exception as exc:
            raise ImageGenerationError(str(exc) or type(exc).__name__) from exc

    async def close(self) -> None:
        """Release the HTTP session held by the Inference client."""
        close = getattr(self._client, "close", None)
        if close is not None:
            await close()
