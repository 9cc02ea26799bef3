"""SQLAlchemy ORM models for the identity bounded context.

These models map to database tables and are used by repository implementations.
"""

from identity.infrastructure.models.user import UserModel

__all__ = [
    "UserModel",
]
