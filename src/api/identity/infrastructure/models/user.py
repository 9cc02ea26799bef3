"""SQLAlchemy ORM model for the users table.

The User aggregate is stored as one row: scalar account fields in
columns, and each child collection as a JSON document list.
"""

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class UserModel(Base, TimestampMixin):
    """ORM model for users table (whole aggregate per row).

    Note: id is VARCHAR(255) to hold ULID strings and any legacy ids.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    credential_hash: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    roles: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    contexts: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    attributes: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    consents: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    connections: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<UserModel(id={self.id}, username={self.username})>"
