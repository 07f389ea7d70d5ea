"""Configuration management for the AI Storyteller API.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the STORYTELLER_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (STORYTELLER_* prefix)
2. .env file in the project root
3. Default values defined in StorytellerConfig

The two API credentials additionally accept their bare names
(``GEMINI_API_KEY`` and ``HF_API_TOKEN``) so an existing ``.env`` keeps
working unchanged.

Example .env file:
    GEMINI_API_KEY=...
    HF_API_TOKEN=hf_...
    STORYTELLER_TEXT_MODEL=gemini-1.5-flash
    STORYTELLER_SERVER_PORT=5000

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
It is the single source of truth for configuration values and is handed to
the :class:`~storyteller.core.orchestrator.StoryOrchestrator` when the
application starts.

Missing API keys do not fail at import time.  Call
:meth:`StorytellerConfig.require_api_keys` before serving traffic; the
FastAPI lifespan and the ``main()`` entry point both do so.

Usage Example
-------------
    from storyteller.core.config import config

    config.require_api_keys()
    print(config.text_model)
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from storyteller.core.exceptions import ConfigurationError


class StorytellerConfig(BaseSettings):
    """Main configuration for the AI Storyteller API.

    Attributes
    ----------
    Credentials:
        gemini_api_key : str
            Google Gemini API key used for story text generation
        hf_api_token : str
            Hugging Face token used for image generation

    Text Generation:
        text_model : str
            Gemini model identifier
        temperature : float
            Sampling temperature for story generation
        max_output_tokens : int
            Upper bound on the length of the story reply

    Image Generation:
        image_model : str
            Hugging Face model ID served by the Inference API
        image_width : int
            Output width in pixels
        image_height : int
            Output height in pixels

    Server:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : str
            Root logging level configured by ``main()``

    Examples
    --------
        >>> custom_config = StorytellerConfig(
        ...     gemini_api_key="test",
        ...     hf_api_token="test",
        ...     temperature=0.2,
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STORYTELLER_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Credentials
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "gemini_api_key", "STORYTELLER_GEMINI_API_KEY", "GEMINI_API_KEY"
        ),
        description="Google Gemini API key",
    )
    hf_api_token: str = Field(
        default="",
        validation_alias=AliasChoices("hf_api_token", "STORYTELLER_HF_API_TOKEN", "HF_API_TOKEN"),
        description="Hugging Face Inference API token",
    )

    # Text generation
    text_model: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model used for story generation",
    )
    temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=2000, ge=1)

    # Image generation
    image_model: str = Field(
        default="stabilityai/stable-diffusion-xl-base-1.0",
        description="Hugging Face model ID for text-to-image",
    )
    image_width: int = Field(default=1024, ge=256, le=2048)
    image_height: int = Field(default=1024, ge=256, le=2048)

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=5000,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: str = Field(default="INFO")

    def missing_api_keys(self) -> list[str]:
        """Return the environment names of credentials that are not set."""
        missing = []
        if not self.gemini_api_key.strip():
            missing.append("GEMINI_API_KEY")
        if not self.hf_api_token.strip():
            missing.append("HF_API_TOKEN")
        return missing

    def require_api_keys(self) -> None:
        """Fail fast when either upstream credential is absent.

        Raises:
            ConfigurationError: If ``GEMINI_API_KEY`` or ``HF_API_TOKEN`` is
                missing or blank.
        """
        missing = self.missing_api_keys()
        if missing:
            raise ConfigurationError(f"API keys are not configured: {', '.join(missing)}")


# Global configuration instance
# Loaded from environment variables and .env once per process.
config = StorytellerConfig()
