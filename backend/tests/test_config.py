"""Settings loading: required vector index settings and defaults."""

import pytest
from pydantic import ValidationError

from lesson_tutor.config import Settings


@pytest.mark.parametrize("missing", ["VECTOR_INDEX_HOST", "VECTOR_INDEX_NAME"])
def test_missing_index_setting_is_fatal(monkeypatch, missing):
    monkeypatch.delenv(missing, raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_defaults_match_tutor_setup():
    settings = Settings(_env_file=None)
    assert settings.VECTOR_NAMESPACE == "ns1"
    assert settings.RETRIEVAL_TOP_K == 3
    assert settings.CHAT_HISTORY_LIMIT == 10
    assert settings.LLM_MODEL == "gpt-4o-mini"
    assert settings.LLM_TEMPERATURE == 0.0


def test_cors_origins_split(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    assert Settings(_env_file=None).cors_origins == ["http://a.test", "http://b.test"]


@pytest.mark.parametrize("factory, field", [
    ("create_llm", "LLM_PROVIDER"),
    ("create_embeddings", "EMBEDDING_PROVIDER"),
])
def test_unknown_model_provider_rejected(monkeypatch, factory, field):
    from lesson_tutor.core import llm_provider

    settings = Settings(_env_file=None, **{field: "bogus"})
    monkeypatch.setattr(llm_provider, "get_settings", lambda: settings)

    with pytest.raises(ValueError, match="bogus"):
        getattr(llm_provider, factory)()
