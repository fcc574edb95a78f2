from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from invoicer.models import is_valid_email, is_valid_phone


class Client(BaseModel):
    id: str = ""
    client_name: str = Field(min_length=2)
    client_address: str = Field(min_length=5)
    contact_number: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not is_valid_email(value):
            raise ValueError("Invalid email address")
        return value

    @field_validator("contact_number")
    @classmethod
    def _check_phone(cls, value: str) -> str:
        if not is_valid_phone(value):
            raise ValueError("Invalid phone number")
        return value
