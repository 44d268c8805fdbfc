"""Contact and group pages for the contact book."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from . import schemas, crud
from .auth import get_current_user
from .database import get_db
from .models import User
from .views import flash, render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["contacts"])


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _edit_page(contact_id: int) -> str:
    return f"/contacts/edit-contact/{contact_id}"


def sort_contacts(
    contacts: List[schemas.ContactOut], sort_by: str
) -> List[schemas.ContactOut]:
    """
    Order or filter contacts for the sorted view.

    ``last_name`` sorts by last name ignoring case, ``phone_number`` sorts
    numerically, and any other value is treated as a group name: only
    contacts in that group are kept, in their original order.
    """
    if sort_by == "last_name":
        return sorted(contacts, key=lambda contact: contact.last_name.lower())
    if sort_by == "phone_number":
        return sorted(contacts, key=lambda contact: int(contact.phone_number))
    return [contact for contact in contacts if sort_by in contact.group_name]


@router.get("")
def list_contacts(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Show every contact of the current user."""
    contacts = crud.list_contacts(db, current_user.id)
    groups = crud.list_groups(db, current_user.id)
    return render(request, "contacts.html", {"contacts": contacts, "groups": groups})


@router.get("/sorted/{sort_by:path}")
def sorted_contacts(
    sort_by: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Show contacts sorted by last name or phone number, or filtered by group.

    Args:
        sort_by (str): ``last_name``, ``phone_number`` or a group name,
            which may itself contain ``/``.
    """
    contacts = sort_contacts(crud.list_contacts(db, current_user.id), sort_by)
    groups = crud.list_groups(db, current_user.id)
    return render(
        request,
        "contacts.html",
        {"contacts": contacts, "groups": groups, "sort_by": sort_by},
    )


@router.get("/new")
def new_contact_page(request: Request, current_user: User = Depends(get_current_user)):
    """Render the new contact form."""
    return render(request, "new_contact.html")


@router.post("/new")
def create_contact(
    request: Request,
    first_name: str = Form(""),
    last_name: str = Form(""),
    phone_number: str = Form(""),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Add a contact for the current user.

    On invalid input the form is shown again with the submitted values
    and one flash message per problem.
    """
    errors: List[str] = []
    contact_in = None
    try:
        contact_in = schemas.ContactCreate(
            first_name=first_name, last_name=last_name, phone_number=phone_number
        )
    except ValidationError as exc:
        errors.extend(schemas.validation_messages(exc))

    digits = schemas.normalize_phone_number(phone_number)
    contacts = crud.list_contacts(db, current_user.id)
    if any(contact.phone_number == digits for contact in contacts):
        errors.append("Phone number already in contacts.")

    if errors:
        for message in errors:
            flash(request, "error", message)
        return render(
            request,
            "new_contact.html",
            {
                "first_name": first_name,
                "last_name": last_name,
                "phone_number": phone_number,
            },
        )

    added = crud.add_contact(
        db,
        contact_in.first_name,
        contact_in.last_name,
        contact_in.phone_number,
        current_user.id,
    )
    if not added:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found.")

    flash(request, "success", "New contact added!")
    return _redirect("/contacts")


@router.get("/edit-contact/{contact_id}")
def edit_contact_page(
    contact_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Show a contact with its groups and every group it could join."""
    contact = crud.get_contact(db, contact_id, current_user.id)
    if contact is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found.")
    all_groups = crud.list_groups(db, current_user.id)
    return render(
        request,
        "edit_contact.html",
        {"contact": contact, "all_groups": all_groups, "contact_id": contact_id},
    )


@router.post("/edit-contact/{contact_id}")
def update_contact(
    contact_id: int,
    request: Request,
    first_name: str = Form(""),
    last_name: str = Form(""),
    phone_number: str = Form(""),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update the fields of a contact that were filled in and changed.

    Blank fields are left untouched. Problems are flashed and the
    edit page is shown again.
    """
    contact = crud.get_contact(db, contact_id, current_user.id)
    if contact is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found.")

    errors: List[str] = []
    changes = None
    try:
        changes = schemas.ContactUpdate(
            first_name=first_name, last_name=last_name, phone_number=phone_number
        )
    except ValidationError as exc:
        errors.extend(schemas.validation_messages(exc))

    digits = schemas.normalize_phone_number(phone_number)
    if digits:
        contacts = crud.list_contacts(db, current_user.id)
        if any(
            other.phone_number == digits and other.id != contact_id
            for other in contacts
        ):
            errors.append("Phone number already in contacts.")

    if errors:
        for message in errors:
            flash(request, "error", message)
        return _redirect(_edit_page(contact_id))

    if changes.first_name and changes.first_name != contact.first_name:
        if not crud.update_first_name(db, changes.first_name, contact_id, current_user.id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="First name not updated."
            )
    if changes.last_name and changes.last_name != contact.last_name:
        if not crud.update_last_name(db, changes.last_name, contact_id, current_user.id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Last name not updated."
            )
    if changes.phone_number and changes.phone_number != contact.phone_number:
        if not crud.update_phone_number(
            db, changes.phone_number, contact_id, current_user.id
        ):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Phone number not updated.",
            )

    return _redirect(_edit_page(contact_id))


@router.post("/edit-contact/{contact_id}/{group_id}")
def toggle_group(
    contact_id: int,
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add the contact to the group, or remove it if already a member."""
    toggled = crud.toggle_group_membership(db, contact_id, group_id, current_user.id)
    if not toggled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found.")
    return _redirect(_edit_page(contact_id))


@router.post("/create_group/{contact_id}")
def create_group(
    contact_id: int,
    request: Request,
    group_name: str = Form(""),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a group for the current user and return to the edit page."""
    errors: List[str] = []
    group_in = None
    try:
        group_in = schemas.GroupCreate(group_name=group_name)
    except ValidationError as exc:
        errors.extend(schemas.validation_messages(exc))

    groups = crud.list_groups(db, current_user.id)
    if any(group.group_name == group_name for group in groups):
        errors.append("Group already exists.")

    if errors:
        for message in errors:
            flash(request, "error", message)
        return _redirect(_edit_page(contact_id))

    if not crud.create_group(db, group_in.group_name, current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found.")

    flash(request, "success", "New group created!")
    return _redirect(_edit_page(contact_id))


@router.post("/delete_group/{contact_id}/{group_id}")
def delete_group(
    contact_id: int,
    group_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a group of the current user."""
    if not crud.delete_group(db, group_id, current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found.")
    flash(request, "success", "Group deleted!")
    return _redirect(_edit_page(contact_id))


@router.post("/delete_contact/{contact_id}")
def delete_contact(
    contact_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a contact of the current user."""
    if not crud.delete_contact(db, contact_id, current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found.")
    logger.info("User %s deleted contact %s", current_user.id, contact_id)
    return _redirect("/contacts")
