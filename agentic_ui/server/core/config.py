"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.

Provider credentials are read through a fresh ``Settings()`` on every chat
request (see ``agentic_ui.server.services.deps``), so editing ``.env`` or the
process environment takes effect without a restart. The module-level
``settings`` instance is used for process-wide values such as host, port and
log level.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# LLM Provider Configuration Models
# =====================================================================


class OpenAIConfig(BaseModel):
    """OpenAI API configuration."""

    api_key: Optional[str] = Field(
        default=None, alias="OPENAI_API_KEY", description="OpenAI API key for authentication"
    )
    model: str = Field(default="gpt-4o", alias="OPENAI_MODEL", description="Default OpenAI model to use")

    model_config = {"populate_by_name": True}


class AnthropicConfig(BaseModel):
    """Anthropic API configuration."""

    api_key: Optional[str] = Field(
        default=None, alias="ANTHROPIC_API_KEY", description="Anthropic API key for authentication"
    )
    model: str = Field(
        default="claude-3-5-sonnet-latest", alias="ANTHROPIC_MODEL", description="Default Anthropic model to use"
    )

    model_config = {"populate_by_name": True}


class GroqConfig(BaseModel):
    """Groq API configuration."""

    api_key: Optional[str] = Field(default=None, alias="GROQ_API_KEY", description="Groq API key for authentication")
    model: str = Field(
        default="llama-3.3-70b-versatile", alias="GROQ_MODEL", description="Default Groq model to use"
    )

    model_config = {"populate_by_name": True}


class GoogleConfig(BaseModel):
    """Google API configuration.

    Google is the one backend configured with a structured object rather than
    a bare key, so this model is handed to the adapter factory as-is.
    """

    api_key: Optional[str] = Field(
        default=None, alias="GOOGLE_API_KEY", description="Google API key for authentication"
    )
    model: str = Field(default="gemini-2.0-flash", alias="GOOGLE_MODEL", description="Default Google model to use")

    model_config = {"populate_by_name": True}


class GatewayConfig(BaseModel):
    """Request gateway configuration."""

    request_timeout: float = Field(
        default=60.0,
        gt=0,
        alias="GATEWAY_REQUEST_TIMEOUT",
        description="Seconds a whole chat request may wait on the backend before it is failed",
    )
    max_action_roundtrips: int = Field(
        default=5,
        ge=1,
        alias="GATEWAY_MAX_ACTION_ROUNDTRIPS",
        description="Maximum number of backend turns that may end in server-side action calls",
    )
    readable_token_budget: Optional[int] = Field(
        default=None,
        ge=1,
        alias="READABLE_TOKEN_BUDGET",
        description="Token budget for the readable context document (unset means unlimited)",
    )
    instructions: Optional[str] = Field(
        default=None,
        alias="COPILOT_INSTRUCTIONS",
        description="System instructions prepended to every conversation",
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    # =====================================================================
    # Agentic UI Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="Agentic UI server host address to bind to",
        alias="AGENTIC_UI_SERVER_HOST",
    )
    server_port: int = Field(
        default=8000,
        description="Agentic UI server port number",
        alias="AGENTIC_UI_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="Agentic UI server logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="AGENTIC_UI_LOG_LEVEL",
    )

    # =====================================================================
    # LLM Provider Credentials
    # =====================================================================
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o", alias="OPENAI_MODEL")
    anthropic_api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")
    anthropic_model: str = Field(default="claude-3-5-sonnet-latest", alias="ANTHROPIC_MODEL")
    groq_api_key: Optional[str] = Field(default=None, alias="GROQ_API_KEY")
    groq_model: str = Field(default="llama-3.3-70b-versatile", alias="GROQ_MODEL")
    google_api_key: Optional[str] = Field(default=None, alias="GOOGLE_API_KEY")
    google_model: str = Field(default="gemini-2.0-flash", alias="GOOGLE_MODEL")

    # =====================================================================
    # Gateway Configuration
    # =====================================================================
    gateway_request_timeout: float = Field(default=60.0, alias="GATEWAY_REQUEST_TIMEOUT")
    gateway_max_action_roundtrips: int = Field(default=5, alias="GATEWAY_MAX_ACTION_ROUNDTRIPS")
    readable_token_budget: Optional[int] = Field(default=None, alias="READABLE_TOKEN_BUDGET")
    copilot_instructions: Optional[str] = Field(default=None, alias="COPILOT_INSTRUCTIONS")

    # =====================================================================
    # CORS Configuration
    # =====================================================================
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def openai(self) -> OpenAIConfig:
        """Get OpenAI configuration from environment variables."""
        return OpenAIConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def anthropic(self) -> AnthropicConfig:
        """Get Anthropic configuration from environment variables."""
        return AnthropicConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def groq(self) -> GroqConfig:
        """Get Groq configuration from environment variables."""
        return GroqConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def google(self) -> GoogleConfig:
        """Get Google configuration from environment variables."""
        return GoogleConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def gateway(self) -> GatewayConfig:
        """Get request gateway configuration from environment variables."""
        return GatewayConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
