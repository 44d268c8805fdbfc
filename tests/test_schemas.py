import pytest
from pydantic import ValidationError

from contactbook.schemas import (
    ContactCreate,
    ContactUpdate,
    GroupCreate,
    normalize_phone_number,
    validation_messages,
)


def messages(model, **fields):
    with pytest.raises(ValidationError) as exc_info:
        model(**fields)
    return validation_messages(exc_info.value)


def test_normalize_phone_number():
    assert normalize_phone_number("(555) 123-4567") == "5551234567"


def test_contact_create_trims_and_normalizes():
    contact = ContactCreate(
        first_name="  Ada ", last_name="Lovelace", phone_number="555-123-4567"
    )
    assert contact.first_name == "Ada"
    assert contact.phone_number == "5551234567"


def test_contact_create_name_bounds():
    assert messages(
        ContactCreate, first_name=" ", last_name="x" * 26, phone_number="5551234567"
    ) == [
        "First name must be between 1 and 25 characters.",
        "Last name must be between 1 and 25 characters.",
    ]


@pytest.mark.parametrize("phone", ["555123456", "555-123-456x", "(555) 123-4567 89"])
def test_contact_create_rejects_invalid_phone(phone):
    assert messages(
        ContactCreate, first_name="Ada", last_name="Lovelace", phone_number=phone
    ) == ["Please enter a valid phone number."]


def test_contact_update_blank_fields_mean_unchanged():
    changes = ContactUpdate(first_name="", last_name="   ", phone_number="")
    assert changes.first_name is None
    assert changes.last_name is None
    assert changes.phone_number is None


def test_contact_update_phone_rules():
    assert ContactUpdate(phone_number="555.987.6543").phone_number == "5559876543"
    assert messages(ContactUpdate, phone_number="+1 (555) 987-6543") == [
        "Phone number length exceeded."
    ]
    assert messages(ContactUpdate, phone_number="12345") == [
        "Please enter a valid phone number."
    ]


def test_group_name_bounds():
    assert GroupCreate(group_name="Friends").group_name == "Friends"
    assert messages(GroupCreate, group_name="") == [
        "Group name must be between 1 and 25 characters."
    ]
