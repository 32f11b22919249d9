"""Unit tests for provider credentials."""

import pytest
from pydantic import SecretStr

from agentic_ui.providers import (
    NO_CREDENTIALS_MESSAGE,
    PROVIDER_API_KEY_MAPPING,
    AdapterCredentialSet,
    AIModelProvider,
    ProviderCredential,
)
from agentic_ui.providers.credentials import PROVIDER_PRIORITY
from agentic_ui.server.core.config import Settings


class TestAIModelProvider:
    def test_priority_order(self):
        assert PROVIDER_PRIORITY == [
            AIModelProvider.OPENAI,
            AIModelProvider.ANTHROPIC,
            AIModelProvider.GROQ,
            AIModelProvider.GOOGLE,
        ]

    def test_str_is_value(self):
        assert str(AIModelProvider.GROQ) == "groq"

    def test_every_provider_has_an_env_var(self):
        assert set(PROVIDER_API_KEY_MAPPING) == set(AIModelProvider)

    def test_no_credentials_message_names_every_key(self):
        for env_var in PROVIDER_API_KEY_MAPPING.values():
            assert env_var in NO_CREDENTIALS_MESSAGE


class TestProviderCredential:
    def test_present_with_key(self):
        credential = ProviderCredential(
            provider=AIModelProvider.OPENAI, env_var="OPENAI_API_KEY", api_key=SecretStr("sk-1"), model="gpt-4o"
        )
        assert credential.present
        assert credential.secret() == "sk-1"

    @pytest.mark.parametrize("key", [None, "", "   "])
    def test_absent_or_blank_key(self, key):
        credential = ProviderCredential(
            provider=AIModelProvider.GROQ,
            env_var="GROQ_API_KEY",
            api_key=SecretStr(key) if key is not None else None,
            model="m",
        )
        assert not credential.present
        with pytest.raises(ValueError, match="GROQ_API_KEY is not set"):
            credential.secret()

    def test_key_is_not_leaked_in_repr(self):
        credential = ProviderCredential(
            provider=AIModelProvider.OPENAI, env_var="OPENAI_API_KEY", api_key=SecretStr("sk-secret"), model="m"
        )
        assert "sk-secret" not in repr(credential)


class TestAdapterCredentialSet:
    """Test reading credentials from settings."""

    def test_no_keys(self):
        credentials = AdapterCredentialSet.from_settings(Settings())

        assert credentials.first_present() is None
        assert credentials.configured() == []
        assert credentials.missing_env_vars() == list(PROVIDER_API_KEY_MAPPING.values())

    def test_reads_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GROQ_API_KEY", "gsk-1")
        monkeypatch.setenv("GROQ_MODEL", "llama-custom")

        credentials = AdapterCredentialSet.from_settings(Settings())
        credential = credentials.first_present()

        assert credential.provider == AIModelProvider.GROQ
        assert credential.model == "llama-custom"
        assert credential.secret() == "gsk-1"

    def test_highest_priority_wins(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "g-1")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "a-1")

        credentials = AdapterCredentialSet.from_settings(Settings())

        assert credentials.first_present().provider == AIModelProvider.ANTHROPIC
        assert credentials.configured() == [AIModelProvider.ANTHROPIC, AIModelProvider.GOOGLE]

    def test_blank_key_does_not_count(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("OPENAI_API_KEY", "")
        monkeypatch.setenv("GOOGLE_API_KEY", "g-1")

        credentials = AdapterCredentialSet.from_settings(Settings())
        assert credentials.first_present().provider == AIModelProvider.GOOGLE

    def test_reads_dotenv_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch):
        (tmp_path / ".env").write_text("OPENAI_API_KEY=sk-from-file\n")
        monkeypatch.chdir(tmp_path)

        credentials = AdapterCredentialSet.from_settings(Settings())
        assert credentials.first_present().provider == AIModelProvider.OPENAI

    def test_get(self, monkeypatch: pytest.MonkeyPatch):
        credentials = AdapterCredentialSet.from_settings(Settings())
        assert credentials.get(AIModelProvider.GOOGLE).env_var == "GOOGLE_API_KEY"
        assert credentials.get(AIModelProvider.GOOGLE).model == "gemini-2.0-flash"
