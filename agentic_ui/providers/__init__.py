"""LLM provider selection.

Credentials are read from settings into a priority-ordered set, and the
router turns the first present credential into a service adapter.
"""

from .credentials import (
    NO_CREDENTIALS_MESSAGE,
    PROVIDER_API_KEY_MAPPING,
    AdapterCredentialSet,
    AIModelProvider,
    ProviderCredential,
)
from .router import AdapterFactory, AdapterHandle, ProviderAdapterRouter, Unconfigured

__all__ = [
    "NO_CREDENTIALS_MESSAGE",
    "PROVIDER_API_KEY_MAPPING",
    "AdapterCredentialSet",
    "AdapterFactory",
    "AdapterHandle",
    "AIModelProvider",
    "ProviderAdapterRouter",
    "ProviderCredential",
    "Unconfigured",
]
