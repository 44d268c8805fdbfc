"""CRUD operations for users, contacts and groups.

This module contains database interaction logic for the contact book,
isolated from FastAPI route handlers. Every contact and group operation
takes the owner's user id explicitly and only touches that owner's rows.
Mutations report success as a boolean: ``False`` means no matching row
was affected.
"""

import logging

from sqlalchemy import select, insert, update, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models, schemas

logger = logging.getLogger(__name__)


def get_user_by_username(db: Session, username: str) -> models.User | None:
    """
    Retrieve a user by username.

    Args:
        db (Session): Database session.
        username (str): Login name.

    Returns:
        User | None: User if found, otherwise ``None``.
    """
    return db.execute(
        select(models.User).where(models.User.username == username)
    ).scalar_one_or_none()


def create_user(db: Session, username: str, password_hash: str) -> models.User:
    """
    Create and persist a new user.

    Args:
        db (Session): Database session.
        username (str): Login name.
        password_hash (str): Securely hashed password.

    Returns:
        User: Newly created user instance.
    """
    user = models.User(username=username, password_hash=password_hash)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _sorted_group_names(names) -> list[str]:
    return sorted(names, key=lambda name: (name.lower(), name))


def _contacts_with_groups(db: Session, owner_id: int, contact_id: int | None = None):
    stmt = (
        select(
            models.Contact.id,
            models.Contact.first_name,
            models.Contact.last_name,
            models.Contact.phone_number,
            models.Group.group_name,
        )
        .outerjoin(
            models.contacts_groups,
            models.contacts_groups.c.contact_id == models.Contact.id,
        )
        .outerjoin(models.Group, models.Group.id == models.contacts_groups.c.group_id)
        .where(models.Contact.owner_id == owner_id)
        .order_by(models.Contact.id)
    )
    if contact_id is not None:
        stmt = stmt.where(models.Contact.id == contact_id)

    contacts: dict[int, dict] = {}
    for row in db.execute(stmt):
        contact = contacts.setdefault(
            row.id,
            {
                "id": row.id,
                "first_name": row.first_name,
                "last_name": row.last_name,
                "phone_number": row.phone_number,
                "group_name": [],
            },
        )
        if row.group_name is not None:
            contact["group_name"].append(row.group_name)

    return [
        schemas.ContactOut(
            **{**data, "group_name": _sorted_group_names(data["group_name"])}
        )
        for data in contacts.values()
    ]


def list_contacts(db: Session, owner_id: int) -> list[schemas.ContactOut]:
    """
    Retrieve every contact of the owner with its group names.

    Group names are sorted case-insensitively; a contact without
    groups gets an empty list.

    Args:
        db (Session): Database session.
        owner_id (int): Contact owner.

    Returns:
        list[ContactOut]: Contacts in creation order.
    """
    return _contacts_with_groups(db, owner_id)


def get_contact(
    db: Session, contact_id: int, owner_id: int
) -> schemas.ContactOut | None:
    """
    Retrieve a single contact of the owner with its group names.

    Args:
        db (Session): Database session.
        contact_id (int): Contact identifier.
        owner_id (int): Contact owner.

    Returns:
        ContactOut | None: Contact if found, otherwise ``None``.
    """
    found = _contacts_with_groups(db, owner_id, contact_id=contact_id)
    return found[0] if found else None


def add_contact(
    db: Session, first_name: str, last_name: str, phone_number: str, owner_id: int
) -> bool:
    """
    Create a new contact owned by the given user.

    Callers check the phone number against the owner's contacts first;
    a concurrent insert of the same number is caught by the storage
    constraint and reported as a failure.

    Returns:
        bool: ``True`` if the contact was inserted.
    """
    contact = models.Contact(
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
        owner_id=owner_id,
    )
    db.add(contact)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(
            "Contact with phone number %s already exists for owner %s",
            phone_number,
            owner_id,
        )
        return False
    return True


def list_groups(db: Session, owner_id: int) -> list[schemas.GroupOut]:
    """
    Retrieve every group of the owner.

    Args:
        db (Session): Database session.
        owner_id (int): Group owner.

    Returns:
        list[GroupOut]: Groups in creation order.
    """
    groups = db.scalars(
        select(models.Group)
        .where(models.Group.owner_id == owner_id)
        .order_by(models.Group.id)
    ).all()
    return [schemas.GroupOut.model_validate(group) for group in groups]


def _owns(db: Session, model, row_id: int, owner_id: int) -> bool:
    count = db.scalar(
        select(func.count())
        .select_from(model)
        .where(model.id == row_id, model.owner_id == owner_id)
    )
    return count == 1


def toggle_group_membership(
    db: Session, contact_id: int, group_id: int, owner_id: int
) -> bool:
    """
    Add the contact to the group, or remove it if it is already a member.

    Both the contact and the group must belong to the owner.

    Args:
        db (Session): Database session.
        contact_id (int): Contact identifier.
        group_id (int): Group identifier.
        owner_id (int): Owner of both rows.

    Returns:
        bool: ``True`` if exactly one membership row was inserted or deleted.
    """
    if not (
        _owns(db, models.Contact, contact_id, owner_id)
        and _owns(db, models.Group, group_id, owner_id)
    ):
        return False

    link = models.contacts_groups
    is_member = db.execute(
        select(link).where(
            link.c.contact_id == contact_id, link.c.group_id == group_id
        )
    ).first()

    if is_member is None:
        result = db.execute(insert(link).values(contact_id=contact_id, group_id=group_id))
    else:
        result = db.execute(
            delete(link).where(
                link.c.contact_id == contact_id, link.c.group_id == group_id
            )
        )
    db.commit()
    return result.rowcount == 1


def create_group(db: Session, group_name: str, owner_id: int) -> bool:
    """
    Create a new group owned by the given user.

    Callers check the name against the owner's groups first; a
    concurrent insert of the same name is reported as a failure.

    Returns:
        bool: ``True`` if the group was inserted.
    """
    db.add(models.Group(group_name=group_name, owner_id=owner_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Group %r already exists for owner %s", group_name, owner_id)
        return False
    return True


def delete_group(db: Session, group_id: int, owner_id: int) -> bool:
    """
    Delete a group and its memberships.

    Returns:
        bool: ``True`` if the group row was deleted.
    """
    owned = select(models.Group.id).where(
        models.Group.id == group_id, models.Group.owner_id == owner_id
    )
    db.execute(
        delete(models.contacts_groups).where(
            models.contacts_groups.c.group_id.in_(owned)
        )
    )
    result = db.execute(
        delete(models.Group).where(
            models.Group.id == group_id, models.Group.owner_id == owner_id
        )
    )
    db.commit()
    return result.rowcount == 1


def delete_contact(db: Session, contact_id: int, owner_id: int) -> bool:
    """
    Delete a contact and its memberships.

    A contact that belongs to no group is deleted just the same.

    Returns:
        bool: ``True`` if the contact row was deleted.
    """
    owned = select(models.Contact.id).where(
        models.Contact.id == contact_id, models.Contact.owner_id == owner_id
    )
    db.execute(
        delete(models.contacts_groups).where(
            models.contacts_groups.c.contact_id.in_(owned)
        )
    )
    result = db.execute(
        delete(models.Contact).where(
            models.Contact.id == contact_id, models.Contact.owner_id == owner_id
        )
    )
    db.commit()
    return result.rowcount == 1


def _update_contact_field(
    db: Session, field: str, value: str, contact_id: int, owner_id: int
) -> bool:
    stmt = (
        update(models.Contact)
        .where(models.Contact.id == contact_id, models.Contact.owner_id == owner_id)
        .values({field: value})
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(
            "Updating %s of contact %s violates a uniqueness constraint",
            field,
            contact_id,
        )
        return False
    return result.rowcount == 1


def update_first_name(db: Session, first_name: str, contact_id: int, owner_id: int) -> bool:
    """Set a contact's first name. Returns ``True`` if one row changed."""
    return _update_contact_field(db, "first_name", first_name, contact_id, owner_id)


def update_last_name(db: Session, last_name: str, contact_id: int, owner_id: int) -> bool:
    """Set a contact's last name. Returns ``True`` if one row changed."""
    return _update_contact_field(db, "last_name", last_name, contact_id, owner_id)


def update_phone_number(
    db: Session, phone_number: str, contact_id: int, owner_id: int
) -> bool:
    """Set a contact's phone number. Returns ``True`` if one row changed."""
    return _update_contact_field(db, "phone_number", phone_number, contact_id, owner_id)
