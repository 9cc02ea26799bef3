"""Ports (interfaces) for the identity bounded context.

Ports define the contracts for repositories without specifying
implementation details. This allows for dependency inversion and makes
the domain layer independent of infrastructure.
"""

from identity.ports.repositories import IUserRepository

__all__ = [
    "IUserRepository",
]
