import re
from typing import List, Optional

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

NAME_MAX_LENGTH = 25
PHONE_NUMBER_RE = re.compile(r"^\d{10}$")


def normalize_phone_number(value: str) -> str:
    """Strip every non-digit character from a phone number."""
    return re.sub(r"\D", "", value)


def validation_messages(exc: ValidationError) -> List[str]:
    """Flatten a pydantic ``ValidationError`` into user-facing messages."""
    return [error["msg"] for error in exc.errors()]


def _check_name(value: str, label: str, required: bool) -> Optional[str]:
    value = value.strip()
    if not value and not required:
        return None
    if not 1 <= len(value) <= NAME_MAX_LENGTH:
        raise PydanticCustomError(
            "name_length",
            f"{label} must be between 1 and {NAME_MAX_LENGTH} characters.",
        )
    return value


def _check_phone_number(value: str) -> str:
    digits = normalize_phone_number(value)
    if not PHONE_NUMBER_RE.match(digits):
        raise PydanticCustomError(
            "phone_number", "Please enter a valid phone number."
        )
    return digits


class ContactOut(BaseModel):
    """A contact together with the names of its groups."""

    id: int
    first_name: str
    last_name: str
    phone_number: str
    group_name: List[str] = []

    class Config:
        from_attributes = True


class GroupOut(BaseModel):
    """A contact group."""

    id: int
    group_name: str

    class Config:
        from_attributes = True


class ContactCreate(BaseModel):
    """Form payload for a new contact.

    Names are trimmed and must be 1-25 characters long. The phone number
    may contain punctuation (at most 14 characters in total) and is stored
    as its 10 digits.
    """

    first_name: str
    last_name: str
    phone_number: str

    @field_validator("first_name")
    @classmethod
    def check_first_name(cls, value: str) -> str:
        return _check_name(value, "First name", required=True)

    @field_validator("last_name")
    @classmethod
    def check_last_name(cls, value: str) -> str:
        return _check_name(value, "Last name", required=True)

    @field_validator("phone_number")
    @classmethod
    def check_phone_number(cls, value: str) -> str:
        if not 10 <= len(value) <= 14:
            raise PydanticCustomError(
                "phone_number", "Please enter a valid phone number."
            )
        return _check_phone_number(value)


class ContactUpdate(BaseModel):
    """Form payload for editing a contact.

    Every field is optional; a blank value leaves the stored one unchanged.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None

    @field_validator("first_name")
    @classmethod
    def check_first_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _check_name(value, "First name", required=False)

    @field_validator("last_name")
    @classmethod
    def check_last_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _check_name(value, "Last name", required=False)

    @field_validator("phone_number")
    @classmethod
    def check_phone_number(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if len(value) > 14:
            raise PydanticCustomError(
                "phone_number", "Phone number length exceeded."
            )
        return _check_phone_number(value)


class GroupCreate(BaseModel):
    """Form payload for a new group."""

    group_name: str

    @field_validator("group_name")
    @classmethod
    def check_group_name(cls, value: str) -> str:
        if not 1 <= len(value) <= NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "name_length",
                f"Group name must be between 1 and {NAME_MAX_LENGTH} characters.",
            )
        return value
