from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Optional

class Settings(BaseSettings):
    addr: str = "http://127.0.0.1:8200"
    role_name: str
    request_timeout: float = 10.0
    verify_tls: bool = True
    namespace: Optional[str] = None

    @field_validator("addr")
    @classmethod
    def _normalize_addr(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Vault address must be an http(s) URL, got {v!r}")
        return v

    @field_validator("role_name")
    @classmethod
    def _strip_role(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("role_name must not be empty")
        return v

    @field_validator("namespace")
    @classmethod
    def _empty_namespace(cls, v: Optional[str]) -> Optional[str]:
        return (v.strip() or None) if v else None

    def control_api_url(self, suffix: str) -> str:
        return f"{self.addr}/v1/auth/approle/role/{self.role_name}/{suffix}"

    class Config:
        env_prefix = "VAULT_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"
