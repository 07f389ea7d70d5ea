"""Core story generation pipeline.

Layers, leaves first:

1. **Configuration** (config.py): Pydantic Settings, ``STORYTELLER_`` prefix.
2. **Upstream clients** (text_generation.py, image_generation.py): Gemini
   and Hugging Face Inference wrappers.
3. **Story logic**:
   - prompt_builder.py: narrative and image prompt templates
   - extraction.py: best-effort JSON extraction with a fallback document
   - illustration.py: concurrent per-scene image generation
4. **Orchestration** (orchestrator.py): one request, end to end.
"""

from storyteller.core.config import StorytellerConfig, config
from storyteller.core.exceptions import (
    ConfigurationError,
    ImageGenerationError,
    StorytellerError,
    StoryValidationError,
    TextGenerationError,
)
from storyteller.core.orchestrator import StoryOrchestrator

__all__ = [
    "ConfigurationError",
    "ImageGenerationError",
    "StorytellerConfig",
    "StorytellerError",
    "StoryOrchestrator",
    "StoryValidationError",
    "TextGenerationError",
    "config",
]
