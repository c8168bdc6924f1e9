"""
Test configuration and fixtures.

Provides:
- anyio backend selection (asyncio)
- In-memory DynamoDB table and a SingleTableStore bound to it
- In-memory Secrets Manager client and an OrganizationSecrets adapter
"""
from __future__ import annotations

import pytest

from versa_data.core.settings import AppSettings
from versa_data.db.store import SingleTableStore
from versa_data.integrations.org_secrets import OrganizationSecrets

from .fakes import FakeSecretsManager, FakeTable


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(DEFAULT_PAGE_SIZE=20, MAX_PAGE_SIZE=1000, SECRETS_MAX_WRITE_ATTEMPTS=3)


@pytest.fixture
def table() -> FakeTable:
    return FakeTable()


@pytest.fixture
def store(table: FakeTable, app_settings: AppSettings) -> SingleTableStore:
    return SingleTableStore(table=table, settings=app_settings)


@pytest.fixture
def secrets_client() -> FakeSecretsManager:
    return FakeSecretsManager()


@pytest.fixture
def org_secrets(secrets_client: FakeSecretsManager, app_settings: AppSettings) -> OrganizationSecrets:
    return OrganizationSecrets(client=secrets_client, settings=app_settings)
