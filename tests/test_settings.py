from __future__ import annotations

from versa_data.core.settings import get_app_settings
from versa_data.db.config import get_settings
from versa_data.integrations.org_secrets import OrganizationSecrets


def test_defaults(monkeypatch):
    for name in ("TABLE_NAME", "AWS_REGION", "LOCAL_DYNAMODB_ENDPOINT", "DEFAULT_PAGE_SIZE", "SECRET_NAME_PREFIX"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()
    app = get_app_settings()

    assert settings.TABLE_NAME == "versa-table"
    assert settings.dynamodb_endpoint_url is None
    assert app.DEFAULT_PAGE_SIZE == 20
    assert app.MAX_PAGE_SIZE == 1000
    assert app.SECRETS_MAX_WRITE_ATTEMPTS == 3


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TABLE_NAME", "versa-dev")
    monkeypatch.setenv("LOCAL_DYNAMODB_ENDPOINT", "http://localhost:8000")
    monkeypatch.setenv("SECRET_NAME_PREFIX", "dev/org/")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert get_settings().TABLE_NAME == "versa-dev"
    assert get_settings().dynamodb_endpoint_url == "http://localhost:8000"
    app = get_app_settings()
    assert app.LOG_LEVEL == "DEBUG"
    assert OrganizationSecrets(client=object(), settings=app).secret_name("org-1") == "dev/org/org-1/secrets"
