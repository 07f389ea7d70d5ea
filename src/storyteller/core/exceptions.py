"""Exception hierarchy for the AI Storyteller API.

Route handlers map these onto HTTP responses:

- :class:`StoryValidationError` → 400, message shown to the client.
- :class:`TextGenerationError` → 500, upstream message embedded.
- :class:`ImageGenerationError` → 500 on the single-image endpoint only.
  During scene illustration it is absorbed per scene.
- :class:`ConfigurationError` → raised at startup, never during a request.
"""


class StorytellerError(Exception):
    """Base class for all storyteller errors."""


class ConfigurationError(StorytellerError):
    """Required configuration is missing or invalid."""


class StoryValidationError(StorytellerError):
    """User-friendly validation error.

    The message is intended to be displayed directly to the user.
    """


class TextGenerationError(StorytellerError):
    """The text model call failed or returned no text."""


class ImageGenerationError(StorytellerError):
    """The image model call failed or returned an unusable image."""
