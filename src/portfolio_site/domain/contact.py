"""Models for contact form submissions."""

from dataclasses import dataclass
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, StringConstraints

FIELD_MESSAGES: dict[str, str] = {
    "name": "Name is required",
    "email": "Valid email is required",
    "subject": "Subject is required",
    "message": "Message is required",
}


class ContactMessage(BaseModel):
    """A single contact form submission."""

    model_config = ConfigDict(frozen=True)

    name: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)
    ]
    email: EmailStr
    subject: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=2, max_length=150)
    ]
    message: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=5, max_length=5000)
    ]


@dataclass(frozen=True)
class FieldError:
    """One failed field validation."""

    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ContactReceipt:
    """Acknowledgement that a message was handed to the mail transport."""

    ok: bool = True
    message: str = "Sent"
