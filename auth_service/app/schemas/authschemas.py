from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from shared.wrappers.api_model_wrapper import ApiModel


# -------- Register --------

class RegisterRequest(ApiModel):
    raw_fields = frozenset({"password", "confirm_password"})

    user_name: str = Field(..., max_length=150)
    email: EmailStr
    password: str = Field(..., min_length=8)
    confirm_password: Optional[str] = Field(None, min_length=8)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


# -------- Login --------

class LoginRequest(ApiModel):
    raw_fields = frozenset({"password"})

    email: EmailStr
    password: str


# -------Common----------

class AuthUserOut(ApiModel):
    id: UUID
    user_name: str
    email: str


class RegisterResponse(ApiModel):
    user: AuthUserOut


class LoginResponse(ApiModel):
    user: AuthUserOut
    token: str
    token_type: str = "bearer"
