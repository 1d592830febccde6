from __future__ import annotations

from typing import Annotated

from pydantic import AliasChoices, BaseModel, Field, StringConstraints, field_validator
from pydantic_core import PydanticCustomError

from bizcard.application.services.password_hashing import MAX_PASSWORD_BYTES

# Web clients post ``email``; ``identifier`` is the canonical key.
_IDENTIFIER_ALIASES = AliasChoices("identifier", "email")

Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class RegisterRequestDTO(BaseModel):
    identifier: Identifier = Field(validation_alias=_IDENTIFIER_ALIASES)
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise PydanticCustomError(
                "password_too_long",
                "Password must not exceed {max_bytes} bytes",
                {"max_bytes": MAX_PASSWORD_BYTES},
            )
        return value


class LoginRequestDTO(BaseModel):
    identifier: Identifier = Field(validation_alias=_IDENTIFIER_ALIASES)
    password: str = Field(min_length=1, max_length=1024)


class MessageDTO(BaseModel):
    message: str


class LoginSuccessDTO(MessageDTO):
    token: str


class ProtectedDTO(MessageDTO):
    identity: str
