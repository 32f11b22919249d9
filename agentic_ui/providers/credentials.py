"""Provider credentials.

This module defines the supported LLM providers, the environment variables
their API keys are read from, and the priority-ordered credential set the
router selects from.

Priority is fixed: OpenAI, then Anthropic, then Groq, then Google. The first
provider with a non-empty key wins; if none has one the request is
unconfigured.
"""

from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

from pydantic import BaseModel, Field, SecretStr

from agentic_ui.core.logging_config import get_logger

if TYPE_CHECKING:
    from agentic_ui.server.core.config import Settings

logger = get_logger(__name__)


class AIModelProvider(str, Enum):
    """Enumeration of supported AI model providers, in selection priority order."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GROQ = "groq"
    GOOGLE = "google"

    def __str__(self) -> str:
        """Return the string value of the provider."""
        return self.value


# Mapping of AI model providers to their environment variable names
PROVIDER_API_KEY_MAPPING: Dict[AIModelProvider, str] = {
    AIModelProvider.OPENAI: "OPENAI_API_KEY",
    AIModelProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    AIModelProvider.GROQ: "GROQ_API_KEY",
    AIModelProvider.GOOGLE: "GOOGLE_API_KEY",
}

PROVIDER_PRIORITY: List[AIModelProvider] = list(AIModelProvider)

NO_CREDENTIALS_MESSAGE = (
    "No API key configured. Add OPENAI_API_KEY, ANTHROPIC_API_KEY, GROQ_API_KEY, or GOOGLE_API_KEY to .env"
)


class ProviderCredential(BaseModel):
    """A named credential for one provider.

    Attributes:
        provider: Provider the key belongs to
        env_var: Environment variable the key is read from
        api_key: The secret, if set
        model: Model name to use with this provider
    """

    provider: AIModelProvider = Field(..., description="Provider the key belongs to")
    env_var: str = Field(..., description="Environment variable the key is read from")
    api_key: Optional[SecretStr] = Field(default=None, description="The API key, if set")
    model: str = Field(..., description="Model name to use with this provider")

    @property
    def present(self) -> bool:
        return self.api_key is not None and bool(self.api_key.get_secret_value().strip())

    def secret(self) -> str:
        """Return the raw key.

        Raises:
            ValueError: If the credential is not present.
        """
        if not self.present:
            raise ValueError(f"{self.env_var} is not set")
        return self.api_key.get_secret_value().strip()


class AdapterCredentialSet(BaseModel):
    """Priority-ordered credentials, one per supported provider."""

    credentials: List[ProviderCredential] = Field(default_factory=list)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "AdapterCredentialSet":
        """Build the credential set from a settings snapshot.

        Args:
            settings: Settings instance to read keys and models from.

        Returns:
            Credentials in provider priority order.
        """
        groups = {
            AIModelProvider.OPENAI: settings.openai,
            AIModelProvider.ANTHROPIC: settings.anthropic,
            AIModelProvider.GROQ: settings.groq,
            AIModelProvider.GOOGLE: settings.google,
        }
        credentials = []
        for provider in PROVIDER_PRIORITY:
            group = groups[provider]
            credentials.append(
                ProviderCredential(
                    provider=provider,
                    env_var=PROVIDER_API_KEY_MAPPING[provider],
                    api_key=group.api_key or None,
                    model=group.model,
                )
            )
        return cls(credentials=credentials)

    def first_present(self) -> Optional[ProviderCredential]:
        """Return the highest-priority credential with a key, or None."""
        for credential in self.credentials:
            if credential.present:
                return credential
        return None

    def configured(self) -> List[AIModelProvider]:
        """Providers that have a key, in priority order."""
        return [credential.provider for credential in self.credentials if credential.present]

    def missing_env_vars(self) -> List[str]:
        return [credential.env_var for credential in self.credentials if not credential.present]

    def get(self, provider: AIModelProvider) -> Optional[ProviderCredential]:
        return next((c for c in self.credentials if c.provider == provider), None)
