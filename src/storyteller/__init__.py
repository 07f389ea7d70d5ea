"""AI Storyteller - illustrated four-scene stories from a single idea."""

__version__ = "1.0.0"

from storyteller.core.config import StorytellerConfig, config
from storyteller.core.models import Scene, StoryDocument
from storyteller.core.orchestrator import StoryOrchestrator

__all__ = [
    "Scene",
    "StoryDocument",
    "StoryOrchestrator",
    "StorytellerConfig",
    "config",
]
