"""Database models for the contact book.

This module defines SQLAlchemy ORM models used by the application.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    Table,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base


#: Many-to-many link between contacts and groups
contacts_groups = Table(
    "contacts_groups",
    Base.metadata,
    Column(
        "contact_id",
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "group_id",
        Integer,
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(Base):
    """
    SQLAlchemy model representing an application user.

    A user signs in with a username and password and owns
    the contacts and groups created under that account.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    #: Contacts owned by the user
    contacts = relationship(
        "Contact",
        back_populates="owner",
        cascade="all, delete",
    )

    #: Groups owned by the user
    groups = relationship(
        "Group",
        back_populates="owner",
        cascade="all, delete",
    )


class Contact(Base):
    """
    SQLAlchemy model representing a contact entry.

    Each contact belongs to exactly one user and its phone number
    is unique among that user's contacts.
    """

    __tablename__ = "contacts"
    __table_args__ = (
        UniqueConstraint("owner_id", "phone_number", name="uq_owner_phone_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(25), nullable=False)
    last_name = Column(String(25), nullable=False, index=True)
    phone_number = Column(String(10), nullable=False)

    #: Identifier of the owning user
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    owner = relationship("User", back_populates="contacts")
    groups = relationship(
        "Group", secondary=contacts_groups, back_populates="contacts"
    )


class Group(Base):
    """
    SQLAlchemy model representing a named group of contacts.

    Group names are unique per owner.
    """

    __tablename__ = "groups"
    __table_args__ = (
        UniqueConstraint("owner_id", "group_name", name="uq_owner_group_name"),
    )

    id = Column(Integer, primary_key=True, index=True)
    group_name = Column(String(25), nullable=False)

    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    owner = relationship("User", back_populates="groups")
    contacts = relationship(
        "Contact", secondary=contacts_groups, back_populates="groups"
    )
