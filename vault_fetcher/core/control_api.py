from typing import Dict, Type, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from vault_fetcher.core.config import Settings
from vault_fetcher.core.errors import ControlApiError
from vault_fetcher.core.models import RoleContainer, SecretContainer, SecretID

T = TypeVar("T", bound=BaseModel)


class ControlApiClient:
    """Talks to the AppRole endpoints of the Vault control API on behalf of a caller token."""

    def __init__(self, settings: Settings, http: httpx.Client):
        self.settings = settings
        self.http = http

    def _headers(self, token: str) -> Dict[str, str]:
        headers = {"X-Vault-Token": token}
        if self.settings.namespace:
            headers["X-Vault-Namespace"] = self.settings.namespace
        return headers

    def _send(self, method: str, suffix: str, token: str, model: Type[T]) -> T:
        url = self.settings.control_api_url(suffix)
        logger.debug(f"[VAULT] {method} {url}")
        try:
            r = self.http.request(method, url, headers=self._headers(token))
        except httpx.HTTPError as e:
            logger.error(f"[VAULT] {method} {url} failed: {e}")
            raise ControlApiError(f"Vault exception: {e}") from e

        if r.is_error:
            logger.error(f"[VAULT] {method} {url} returned HTTP {r.status_code}")
            raise ControlApiError(
                f"Vault exception: HTTP {r.status_code} for {url}", status_code=r.status_code
            )

        try:
            return model.model_validate(r.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"[VAULT] {method} {url} returned an unexpected body")
            raise ControlApiError(
                f"Vault exception: unexpected response body from {url}", status_code=r.status_code
            ) from e

    def get_role_id(self, token: str) -> str:
        container = self._send("GET", "role-id", token, RoleContainer)
        return container.data.id

    def get_secret_id(self, token: str) -> SecretID:
        container = self._send("POST", "secret-id", token, SecretContainer)
        return SecretID(from_string=container.data.id)
