from typing import Optional

from pydantic import BaseModel, EmailStr, Field, model_validator


class ResetPasswordRequest(BaseModel):
    email: EmailStr


class NewPasswordRequest(BaseModel):
    password: str = Field(min_length=6)


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    confirm: str = Field(min_length=6)
    name: str = Field(min_length=1)

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm:
            raise ValueError("Passwords don't match!")
        return self


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class ChangeEmailRequest(BaseModel):
    """Credentials of the current account plus the address to move to."""

    email: EmailStr
    password: str = Field(min_length=1)
    new_email: EmailStr


class NewVerificationRequest(BaseModel):
    token: str


class FlowResponse(BaseModel):
    success: Optional[str] = None
    error: Optional[str] = None
