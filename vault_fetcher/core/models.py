from dataclasses import dataclass
from pydantic import AliasChoices, BaseModel, Field


class RoleData(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "role_id"))


class RoleContainer(BaseModel):
    data: RoleData


class SecretData(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "secret_id"))


class SecretContainer(BaseModel):
    data: SecretData


@dataclass(frozen=True)
class SecretID:
    from_string: str

    def __repr__(self) -> str:
        return "SecretID(from_string='***')"


@dataclass(frozen=True)
class AppRoleCredential:
    role_id: str
    secret_id: SecretID

    def __post_init__(self):
        if not self.role_id:
            raise ValueError("no role ID provided for login")
        if self.secret_id is None or not self.secret_id.from_string:
            raise ValueError("no secret ID provided for login")

    def __repr__(self) -> str:
        return f"AppRoleCredential(role_id={self.role_id!r}, secret_id=***)"
