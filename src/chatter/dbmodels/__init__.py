"""
Database models for Chatter (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    DateTime,
    ForeignKeyConstraint,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text as sql_text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("email", name="users_email_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, server_default=sql_text("uuid_generate_v4()"))
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    # Bumped to invalidate every token issued before the change
    version: Mapped[int] = mapped_column(Integer, nullable=False, server_default=sql_text("1"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=sql_text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=sql_text("CURRENT_TIMESTAMP")
    )

    groups: Mapped[list["Groups"]] = relationship(
        "Groups", secondary="group_users", uselist=True, back_populates="users"
    )
    friends: Mapped[list["Users"]] = relationship(
        "Users",
        secondary="friends",
        primaryjoin="Users.id == Friends.user_id",
        secondaryjoin="Users.id == Friends.friend_id",
        uselist=True,
    )
    messages: Mapped[list["Messages"]] = relationship(
        "Messages", uselist=True, back_populates="user"
    )
    last_read: Mapped[list["Messages"]] = relationship(
        "Messages", secondary="last_read", uselist=True, viewonly=True
    )


class Groups(Base):
    __tablename__ = "groups"
    __table_args__ = (PrimaryKeyConstraint("id", name="groups_pkey"),)

    id: Mapped[UUID] = mapped_column(Uuid, server_default=sql_text("uuid_generate_v4()"))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=sql_text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=sql_text("CURRENT_TIMESTAMP")
    )

    users: Mapped[list["Users"]] = relationship(
        "Users", secondary="group_users", uselist=True, back_populates="groups"
    )
    messages: Mapped[list["Messages"]] = relationship(
        "Messages", uselist=True, back_populates="group"
    )


class GroupUsers(Base):
    __tablename__ = "group_users"
    __table_args__ = (
        ForeignKeyConstraint(
            ["group_id"], ["groups.id"], ondelete="CASCADE", name="group_users_group_id_fkey"
        ),
        ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="group_users_user_id_fkey"
        ),
        PrimaryKeyConstraint("group_id", "user_id", name="group_users_pkey"),
        Index("idx_group_users_user", "user_id"),
    )

    group_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)


class Friends(Base):
    __tablename__ = "friends"
    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="friends_user_id_fkey"
        ),
        ForeignKeyConstraint(
            ["friend_id"], ["users.id"], ondelete="CASCADE", name="friends_friend_id_fkey"
        ),
        PrimaryKeyConstraint("user_id", "friend_id", name="friends_pkey"),
    )

    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    friend_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)


class Messages(Base):
    __tablename__ = "messages"
    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="messages_user_id_fkey"
        ),
        ForeignKeyConstraint(
            ["group_id"], ["groups.id"], ondelete="CASCADE", name="messages_group_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="messages_pkey"),
        Index("idx_messages_group_created", "group_id", "created_at"),
        Index("idx_messages_user", "user_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, server_default=sql_text("uuid_generate_v4()"))
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    group_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=sql_text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=sql_text("CURRENT_TIMESTAMP")
    )

    user: Mapped["Users"] = relationship("Users", back_populates="messages")
    group: Mapped["Groups"] = relationship("Groups", back_populates="messages")


class LastRead(Base):
    __tablename__ = "last_read"
    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="last_read_user_id_fkey"
        ),
        ForeignKeyConstraint(
            ["message_id"],
            ["messages.id"],
            ondelete="CASCADE",
            name="last_read_message_id_fkey",
        ),
        PrimaryKeyConstraint("user_id", "message_id", name="last_read_pkey"),
    )

    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    message_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)


# Expose for Alembic
target_metadata = Base.metadata
