from typing import Literal

from pydantic import BaseModel, Field, field_validator

SignupRole = Literal["provider", "family"]


class SignupRequest(BaseModel):
    role: SignupRole = Field(
        default="provider",
        description="'provider' to apply for listing, 'family' for area updates",
    )
    email: str = Field(description="Contact email address")
    location: str = Field(description="City, State or region")

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        value = value.strip()
        local, sep, domain = value.partition("@")
        if not sep or not local or "." not in domain:
            raise ValueError("email must be a valid email address")
        return value

    @field_validator("location")
    @classmethod
    def validate_location(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("location cannot be empty")
        return value


class SignupResponse(BaseModel):
    received: bool
    role: SignupRole
    message: str
