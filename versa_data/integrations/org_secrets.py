from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

import anyio
import boto3
from botocore.exceptions import ClientError

from versa_data.core.errors import DataIntegrityError, SecretNotFound, SecretWriteConflict
from versa_data.core.logging import log_context
from versa_data.core.settings import AppSettings, get_app_settings
from versa_data.db.config import get_settings

logger = logging.getLogger(__name__)

CURRENT_STAGE = "AWSCURRENT"
# Label for a written-but-not-yet-current version. Promotion moves AWSCURRENT to it.
PENDING_STAGE = "VERSA_PENDING"

_LOCAL = threading.local()


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


# PUBLIC_INTERFACE
def get_secretsmanager_client(settings: Optional[AppSettings] = None) -> Any:
    """Return a Secrets Manager client for the calling thread, created on first use."""
    client = getattr(_LOCAL, "client", None)
    if client is None:
        settings = settings or get_app_settings()
        session = boto3.session.Session(region_name=get_settings().AWS_REGION)
        client = session.client("secretsmanager", endpoint_url=settings.SECRETS_MANAGER_ENDPOINT or None)
        _LOCAL.client = client
    return client


class _StaleRead(Exception):
    """The bundle changed between our read and our write."""


class OrganizationSecrets:
    """
    Per-organization secret bundle: one Secrets Manager secret holding a JSON
    object of string keys to string values, named
    "<SECRET_NAME_PREFIX><organization_id><SECRET_NAME_SUFFIX>".

    Writes are read-merge-write. The new version is staged under a private label
    and only promoted to AWSCURRENT if AWSCURRENT is still on the version that
    was read, so concurrent writers cannot silently drop each other's keys; the
    loser re-reads and merges again.
    """

    def __init__(self, client: Any = None, settings: Optional[AppSettings] = None) -> None:
        self._client = client
        self.settings = settings or get_app_settings()

    # PUBLIC_INTERFACE
    def secret_name(self, organization_id: str) -> str:
        """Name of the organization's secret bundle, e.g. versa/org/org-1/secrets."""
        if not organization_id:
            raise ValueError("organization_id is required")
        return f"{self.settings.SECRET_NAME_PREFIX}{organization_id}{self.settings.SECRET_NAME_SUFFIX}"

    async def _call(self, operation: str, **kwargs: Any) -> Dict[str, Any]:
        def _run() -> Dict[str, Any]:
            client = self._client if self._client is not None else get_secretsmanager_client(self.settings)
            return getattr(client, operation)(**kwargs)

        return await anyio.to_thread.run_sync(_run)

    async def _read(self, organization_id: str) -> Tuple[Dict[str, str], str]:
        """Return the current bundle and its VersionId; SecretNotFound if there is none."""
        name = self.secret_name(organization_id)
        try:
            response = await self._call("get_secret_value", SecretId=name)
        except ClientError as exc:
            if _error_code(exc) == "ResourceNotFoundException":
                raise SecretNotFound(name) from exc
            logger.error(
                "Failed to read secrets for organization %s", organization_id, exc_info=True
            )
            raise

        raw = response.get("SecretString")
        if not raw:
            return {}, response["VersionId"]
        try:
            bundle = json.loads(raw)
        except ValueError as exc:
            logger.error("Secret bundle %s is not valid JSON", name)
            raise DataIntegrityError("secretBundle", [{"msg": "not valid JSON"}], None) from exc
        if not isinstance(bundle, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in bundle.items()
        ):
            logger.error("Secret bundle %s is not a JSON object of strings", name)
            raise DataIntegrityError("secretBundle", [{"msg": "expected an object of string values"}], None)
        return bundle, response["VersionId"]

    # PUBLIC_INTERFACE
    async def get_secrets(self, organization_id: str) -> Dict[str, str]:
        """Return the whole bundle; {} if the organization has none yet."""
        with log_context(organization_id=organization_id):
            try:
                bundle, _ = await self._read(organization_id)
            except SecretNotFound:
                return {}
        return bundle

    # PUBLIC_INTERFACE
    async def get_secret(self, organization_id: str, key: str) -> Optional[str]:
        """Return one secret value, or None if the bundle or key is missing."""
        return (await self.get_secrets(organization_id)).get(key)

    # PUBLIC_INTERFACE
    async def set_secret(self, organization_id: str, key: str, value: str) -> None:
        """
        Insert or replace one key of the bundle, creating the bundle if needed.

        Raises:
          SecretWriteConflict: the bundle kept changing concurrently
        """
        if not isinstance(value, str):
            raise TypeError("secret values must be strings")

        def _merge(bundle: Dict[str, str]) -> bool:
            if bundle.get(key) == value:
                return False
            bundle[key] = value
            return True

        with log_context(organization_id=organization_id):
            await self._write(organization_id, key, _merge, create_missing=True)

    # PUBLIC_INTERFACE
    async def delete_secret(self, organization_id: str, key: str) -> None:
        """Remove one key; nothing is written if the bundle or the key is missing."""

        def _merge(bundle: Dict[str, str]) -> bool:
            if key not in bundle:
                return False
            del bundle[key]
            return True

        with log_context(organization_id=organization_id):
            await self._write(organization_id, key, _merge, create_missing=False)

    async def _write(
        self,
        organization_id: str,
        key: str,
        merge: Callable[[Dict[str, str]], bool],
        *,
        create_missing: bool,
    ) -> None:
        name = self.secret_name(organization_id)
        attempts = self.settings.SECRETS_MAX_WRITE_ATTEMPTS
        for attempt in range(1, attempts + 1):
            try:
                bundle, version_id = await self._read(organization_id)
            except SecretNotFound:
                if not create_missing:
                    return
                bundle, version_id = {}, None
            if not merge(bundle):
                return

            payload = json.dumps(bundle, sort_keys=True)
            try:
                if version_id is None:
                    await self._create(name, payload)
                else:
                    try:
                        await self._replace(name, payload, version_id)
                    except SecretNotFound:
                        # Deleted between read and write.
                        if not create_missing:
                            return
                        await self._create(name, payload)
                return
            except _StaleRead:
                logger.info(
                    "Secret %s changed during write of key %s (attempt %d/%d); retrying",
                    name,
                    key,
                    attempt,
                    attempts,
                )
            except ClientError:
                logger.error(
                    "Failed to write secret key %s for organization %s", key, organization_id, exc_info=True
                )
                raise
        raise SecretWriteConflict(name, attempts)

    async def _create(self, name: str, payload: str) -> None:
        try:
            await self._call("create_secret", Name=name, SecretString=payload)
        except ClientError as exc:
            if _error_code(exc) == "ResourceExistsException":
                raise _StaleRead() from exc
            raise

    async def _replace(self, name: str, payload: str, read_version_id: str) -> None:
        """Stage a new version, then move AWSCURRENT to it only from the version we read."""
        try:
            staged = await self._call(
                "put_secret_value", SecretId=name, SecretString=payload, VersionStages=[PENDING_STAGE]
            )
        except ClientError as exc:
            if _error_code(exc) == "ResourceNotFoundException":
                raise SecretNotFound(name) from exc
            raise
        try:
            await self._call(
                "update_secret_version_stage",
                SecretId=name,
                VersionStage=CURRENT_STAGE,
                MoveToVersionId=staged["VersionId"],
                RemoveFromVersionId=read_version_id,
            )
        except ClientError as exc:
            # Rejected when AWSCURRENT is no longer on read_version_id.
            if _error_code(exc) == "InvalidParameterException":
                raise _StaleRead() from exc
            raise
