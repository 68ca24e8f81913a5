import threading
from typing import Any, Callable, Dict, Optional

import httpx
import hvac
import requests
from hvac.exceptions import VaultError
from loguru import logger

from vault_fetcher.core.config import Settings
from vault_fetcher.core.control_api import ControlApiClient
from vault_fetcher.core.errors import (
    AppRoleAuthError,
    AppRoleLoginError,
    SecretReadError,
    VaultClientInitError,
)
from vault_fetcher.core.models import AppRoleCredential

VaultClientFactory = Callable[..., hvac.Client]


class SecretFetcher:
    """Reads KV v2 secrets after a fresh AppRole login derived from the caller's token.

    Every call to ``get`` mints a new secret ID, logs in and reads the secret;
    nothing is cached between calls. Calls on one instance are serialized.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http_client: Optional[httpx.Client] = None,
        vault_client_factory: VaultClientFactory = hvac.Client,
    ):
        self.settings = settings or Settings()
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(
            timeout=self.settings.request_timeout, verify=self.settings.verify_tls
        )
        self._control = ControlApiClient(self.settings, self._http)
        self._vault_client_factory = vault_client_factory
        self._lock = threading.Lock()

    def __enter__(self) -> "SecretFetcher":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _new_vault_client(self) -> hvac.Client:
        try:
            return self._vault_client_factory(
                url=self.settings.addr,
                timeout=self.settings.request_timeout,
                verify=self.settings.verify_tls,
                namespace=self.settings.namespace,
            )
        except Exception as e:
            logger.error(f"[VAULT] unable to create client for {self.settings.addr}: {e}")
            raise VaultClientInitError(f"Vault exception: {e}") from e

    def _login(self, client: hvac.Client, credential: AppRoleCredential) -> Dict[str, Any]:
        try:
            resp = client.auth.approle.login(
                role_id=credential.role_id,
                secret_id=credential.secret_id.from_string,
            )
        except (VaultError, requests.RequestException) as e:
            logger.error(f"[VAULT] AppRole login failed for role={self.settings.role_name}: {e}")
            raise AppRoleLoginError(f"Unable to login to AppRole auth method: {e}") from e

        if not resp or not resp.get("auth"):
            logger.error(f"[VAULT] AppRole login for role={self.settings.role_name} returned no auth info")
            raise AppRoleLoginError("No auth info was returned after login")
        return resp

    def _read(self, client: hvac.Client, engine_name: str, secret_name: str) -> Dict[str, Any]:
        try:
            resp = client.secrets.kv.v2.read_secret_version(
                path=secret_name,
                mount_point=engine_name,
                raise_on_deleted_version=True,
            )
        except (VaultError, requests.RequestException) as e:
            logger.error(f"[VAULT] unable to read secret {engine_name}/{secret_name}: {e}")
            raise SecretReadError(f"Unable to read secret: {e}") from e

        data = (resp or {}).get("data") or {}
        if not isinstance(data.get("data"), dict):
            logger.error(f"[VAULT] secret {engine_name}/{secret_name} has no data block")
            raise SecretReadError(f"Unable to read secret: no data at {engine_name}/{secret_name}")
        return data["data"]

    def get(self, token: str, engine_name: str, secret_name: str) -> Dict[str, Any]:
        with self._lock:
            logger.info(f"[VAULT] fetching secret {engine_name}/{secret_name}")
            client = self._new_vault_client()

            role_id = self._control.get_role_id(token)
            secret_id = self._control.get_secret_id(token)

            try:
                credential = AppRoleCredential(role_id=role_id, secret_id=secret_id)
            except ValueError as e:
                logger.error(f"[VAULT] unable to initialize AppRole auth method: {e}")
                raise AppRoleAuthError(f"Unable to initialize AppRole auth method: {e}") from e

            self._login(client, credential)
            secret = self._read(client, engine_name, secret_name)
            logger.info(f"[VAULT] fetched secret {engine_name}/{secret_name}")
            return secret
