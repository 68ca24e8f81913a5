from typing import Optional


class VaultFetchError(Exception):
    """Base class for every failure while fetching a secret from Vault."""


class VaultClientInitError(VaultFetchError):
    pass


class ControlApiError(VaultFetchError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AppRoleAuthError(VaultFetchError):
    pass


class AppRoleLoginError(VaultFetchError):
    pass


class SecretReadError(VaultFetchError):
    pass
