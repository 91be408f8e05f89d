import pytest
from pydantic import ValidationError

from config.config import ApiDocsSettings, Settings


def test_api_docs_defaults():
    docs = ApiDocsSettings()

    assert docs.url == "/api/v1/swagger_doc"
    assert docs.app_url == "/"
    assert docs.app_name == "Script Generation API"
    assert docs.doc_expansion == "list"
    assert docs.hide_url_input is False
    assert docs.docs_url == "/docs"


def test_swagger_ui_parameters():
    docs = ApiDocsSettings(app_url="/admin/", doc_expansion="none", hide_url_input=True)

    assert docs.docs_url == "/admin/docs"
    assert docs.swagger_ui_parameters() == {"docExpansion": "none", "queryConfigEnabled": False}


def test_doc_expansion_is_validated():
    with pytest.raises(ValidationError):
        ApiDocsSettings(doc_expansion="everything")


def test_nested_environment_overrides(monkeypatch):
    monkeypatch.setenv("API_DOCS__HIDE_URL_INPUT", "true")
    monkeypatch.setenv("API_DOCS__APP_NAME", "Writers Room")
    monkeypatch.setenv("SEARCH_IGNORE_UNKNOWN_CONDITIONS", "true")

    settings = Settings(_env_file=None)

    assert settings.api_docs.hide_url_input is True
    assert settings.api_docs.app_name == "Writers Room"
    assert settings.search_ignore_unknown_conditions is True


def test_supabase_configuration_check(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_KEY", raising=False)

    assert Settings(_env_file=None).is_supabase_configured() is False
    assert Settings(_env_file=None, supabase_url="https://x.supabase.co", supabase_key="k").is_supabase_configured()
