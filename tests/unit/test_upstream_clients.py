"""Tests for the Gemini and Hugging Face client wrappers.

The SDK clients are replaced with ``MagicMock`` objects so no network
access occurs.  Tests cover:

- Request shape sent to each SDK.
- Reply handling (text extraction, PNG encoding).
- Error wrapping into the storyteller exception types.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from storyteller.core.exceptions import ImageGenerationError, TextGenerationError
from storyteller.core.image_generation import HuggingFaceImageClient, encode_png
from storyteller.core.text_generation import GeminiTextClient

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _mock_genai(reply_text: str | None = "story text", error: Exception | None = None) -> MagicMock:
    sdk = MagicMock()
    if error is not None:
        sdk.aio.models.generate_content = AsyncMock(side_effect=error)
    else:
        sdk.aio.models.generate_content = AsyncMock(
            return_value=SimpleNamespace(text=reply_text)
        )
    return sdk


class TestGeminiTextClient:
    def test_returns_reply_text(self, test_config):
        client = GeminiTextClient(test_config, client=_mock_genai("Once upon a time"))
        text = asyncio.run(client.generate("prompt", temperature=0.8, max_output_tokens=2000))
        assert text == "Once upon a time"

    def test_request_shape(self, test_config):
        sdk = _mock_genai()
        client = GeminiTextClient(test_config, client=sdk)
        asyncio.run(client.generate("Tell a story", temperature=0.5, max_output_tokens=123))

        kwargs = sdk.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-1.5-flash"
        content = kwargs["contents"][0]
        assert content.role == "user"
        assert content.parts[0].text == "Tell a story"
        assert kwargs["config"].temperature == 0.5
        assert kwargs["config"].max_output_tokens == 123

    def test_model_property(self, test_config):
        assert GeminiTextClient(test_config, client=_mock_genai()).model == "gemini-1.5-flash"

    def test_sdk_error_wrapped(self, test_config):
        client = GeminiTextClient(test_config, client=_mock_genai(error=RuntimeError("quota")))
        with pytest.raises(TextGenerationError, match="quota"):
            asyncio.run(client.generate("p", temperature=0.8, max_output_tokens=10))

    @pytest.mark.parametrize("reply", [None, "", "   "])
    def test_empty_reply_is_an_error(self, test_config, reply):
        client = GeminiTextClient(test_config, client=_mock_genai(reply))
        with pytest.raises(TextGenerationError, match="did not contain any text"):
            asyncio.run(client.generate("p", temperature=0.8, max_output_tokens=10))


class TestEncodePng:
    def test_rgb_image(self):
        data = encode_png(Image.new("RGB", (8, 8)))
        assert data.startswith(PNG_SIGNATURE)

    def test_cmyk_converted(self):
        data = encode_png(Image.new("CMYK", (8, 8)))
        assert data.startswith(PNG_SIGNATURE)


class TestHuggingFaceImageClient:
    def _sdk(self, *, image: Image.Image | None = None, error: Exception | None = None):
        sdk = MagicMock()
        if error is not None:
            sdk.text_to_image = AsyncMock(side_effect=error)
        else:
            sdk.text_to_image = AsyncMock(return_value=image or Image.new("RGB", (16, 16)))
        sdk.close = AsyncMock()
        return sdk

    def test_returns_png_bytes(self, test_config):
        client = HuggingFaceImageClient(test_config, client=self._sdk())
        data = asyncio.run(client.generate("a castle", width=1024, height=1024))
        assert data.startswith(PNG_SIGNATURE)

    def test_request_shape(self, test_config):
        sdk = self._sdk()
        client = HuggingFaceImageClient(test_config, client=sdk)
        asyncio.run(client.generate("a castle", width=512, height=768))

        sdk.text_to_image.assert_awaited_once_with(
            "a castle",
            model="stabilityai/stable-diffusion-xl-base-1.0",
            width=512,
            height=768,
        )

    def test_sdk_error_wrapped(self, test_config):
        client = HuggingFaceImageClient(test_config, client=self._sdk(error=TimeoutError()))
        with pytest.raises(ImageGenerationError, match="TimeoutError"):
            asyncio.run(client.generate("a castle", width=1024, height=1024))

    def test_unencodable_result_wrapped(self, test_config):
        sdk = self._sdk()
        sdk.text_to_image = AsyncMock(return_value="not an image")
        client = HuggingFaceImageClient(test_config, client=sdk)
        with pytest.raises(ImageGenerationError):
            asyncio.run(client.generate("a castle", width=1024, height=1024))

    def test_close(self, test_config):
        sdk = self._sdk()
        asyncio.run(HuggingFaceImageClient(test_config, client=sdk).close())
        sdk.close.assert_awaited_once()
