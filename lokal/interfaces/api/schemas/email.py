"""Schemas for the internal email sink."""

from pydantic import BaseModel, EmailStr, Field


class EmailSendRequest(BaseModel):
    to: EmailStr
    subject: str = Field(min_length=1, max_length=255)
    html: str = Field(min_length=1)


class EmailSendRead(BaseModel):
    message: str
    status_code: int | None = None


__all__ = ["EmailSendRead", "EmailSendRequest"]
