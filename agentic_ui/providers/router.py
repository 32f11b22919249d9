"""Provider adapter router.

Picks exactly one backend per request from the credential set. Selection is
a pure function of the credentials handed in, so re-reading credentials on
each request is enough for key changes to take effect.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Union

from agentic_ui.core.logging_config import get_logger

from .adapters.base import ServiceAdapter
from .credentials import (
    NO_CREDENTIALS_MESSAGE,
    AdapterCredentialSet,
    AIModelProvider,
    ProviderCredential,
)

logger = get_logger(__name__)

AdapterFactory = Callable[[ProviderCredential], ServiceAdapter]


@dataclass(frozen=True)
class AdapterHandle:
    """The backend chosen for a request."""

    provider: AIModelProvider
    credential: ProviderCredential
    adapter: ServiceAdapter


@dataclass(frozen=True)
class Unconfigured:
    """Terminal state: no provider has a key."""

    missing_env_vars: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return NO_CREDENTIALS_MESSAGE


class ProviderAdapterRouter:
    """
    Select a service adapter by fixed provider priority.

    Args:
        factories: Adapter factory per provider. Defaults to the Pydantic AI
            factories; tests pass scripted adapters here.
    """

    def __init__(self, factories: Optional[Mapping[AIModelProvider, AdapterFactory]] = None) -> None:
        if factories is None:
            from .adapters.pydantic_ai_adapter import DEFAULT_ADAPTER_FACTORIES

            factories = DEFAULT_ADAPTER_FACTORIES
        self._factories: Dict[AIModelProvider, AdapterFactory] = dict(factories)

    def select(self, credentials: AdapterCredentialSet) -> Union[AdapterHandle, Unconfigured]:
        """
        Resolve the adapter for one request.

        Returns:
            An ``AdapterHandle`` for the highest-priority provider with a key,
            or ``Unconfigured`` if there is none.

        Raises:
            LookupError: If the selected provider has no registered factory.
        """
        credential = credentials.first_present()
        if credential is None:
            logger.warning("No provider credentials configured")
            return Unconfigured(missing_env_vars=credentials.missing_env_vars())

        factory = self._factories.get(credential.provider)
        if factory is None:
            raise LookupError(f"No adapter factory registered for provider: {credential.provider}")

        adapter = factory(credential)
        logger.info(f"Selected provider {credential.provider} with model {credential.model}")
        return AdapterHandle(provider=credential.provider, credential=credential, adapter=adapter)

    def available(self, credentials: AdapterCredentialSet) -> List[AIModelProvider]:
        """Providers that could serve a request, in priority order."""
        return credentials.configured()
