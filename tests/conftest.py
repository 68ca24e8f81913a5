import json
from types import SimpleNamespace

import httpx
import pytest

from vault_fetcher.core.config import Settings

ADDR = "http://vault.test:8200"
ROLE = "app-reader"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("VAULT_ADDR", "VAULT_ROLE_NAME", "VAULT_REQUEST_TIMEOUT", "VAULT_VERIFY_TLS", "VAULT_NAMESPACE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    return Settings(addr=ADDR, role_name=ROLE, _env_file=None)


class FakeVault:
    """Stands in for the AppRole control API, the login call and the KV v2 read."""

    def __init__(self, secret=None):
        self.calls = []
        self.requests = []
        self.role_body = {"data": {"id": "role-abc"}}
        self.secret_id_body = {"data": {"id": "secret-xyz"}}
        self.role_status = 200
        self.secret_id_status = 200
        self.role_exc = None
        self.secret_id_exc = None
        self.login_response = {"auth": {"client_token": "s.session", "lease_duration": 60}}
        self.login_exc = None
        self.read_response = {"data": {"data": secret if secret is not None else {"username": "u", "password": "p"}}}
        self.read_exc = None
        self.client_kwargs = []
        self.login_args = []
        self.read_args = []
        self.on_call = None

    def _record(self, name):
        self.calls.append(name)
        if self.on_call:
            self.on_call(name)

    # control API
    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/role-id"):
            self._record("role-id")
            if self.role_exc:
                raise self.role_exc
            return httpx.Response(self.role_status, content=json.dumps(self.role_body))
        if request.url.path.endswith("/secret-id"):
            self._record("secret-id")
            if self.secret_id_exc:
                raise self.secret_id_exc
            return httpx.Response(self.secret_id_status, content=json.dumps(self.secret_id_body))
        return httpx.Response(404)

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    # hvac
    def client_factory(self, **kwargs):
        self.client_kwargs.append(kwargs)
        return SimpleNamespace(
            auth=SimpleNamespace(approle=SimpleNamespace(login=self._login)),
            secrets=SimpleNamespace(kv=SimpleNamespace(v2=SimpleNamespace(read_secret_version=self._read))),
        )

    def _login(self, role_id, secret_id, **kwargs):
        self._record("login")
        self.login_args.append((role_id, secret_id))
        if self.login_exc:
            raise self.login_exc
        return self.login_response

    def _read(self, path, mount_point, **kwargs):
        self._record("read")
        self.read_args.append((mount_point, path, kwargs))
        if self.read_exc:
            raise self.read_exc
        return self.read_response


@pytest.fixture
def fake_vault():
    return FakeVault()
