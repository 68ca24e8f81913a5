# vault_fetcher/secrets.py
import threading
from typing import Any, Dict, Optional

from loguru import logger

from vault_fetcher.core.errors import VaultFetchError
from vault_fetcher.core.vault import SecretFetcher

_fetcher: Optional[SecretFetcher] = None
_fetcher_lock = threading.Lock()


def get_fetcher() -> SecretFetcher:
    global _fetcher
    with _fetcher_lock:
        if _fetcher is None:
            _fetcher = SecretFetcher()
        return _fetcher


def reset_fetcher() -> None:
    global _fetcher
    with _fetcher_lock:
        if _fetcher is not None:
            _fetcher.close()
        _fetcher = None


def get_secret(token: str, engine_name: str, secret_name: str) -> Dict[str, Any]:
    """Fetch a secret or terminate the process; for services that cannot start without it."""
    try:
        return get_fetcher().get(token, engine_name, secret_name)
    except VaultFetchError as e:
        logger.critical(f"[VAULT] cannot continue without secret {engine_name}/{secret_name}: {e}")
        raise SystemExit(1) from e
