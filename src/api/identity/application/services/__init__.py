"""Application services for the identity bounded context.

Application services orchestrate the User aggregate, its repository and
observability to fulfill use cases. They are the "front door" to the
identity context.
"""

from identity.application.services.attribute_service import AttributeService
from identity.application.services.connection_service import ConnectionService
from identity.application.services.consent_service import ConsentService
from identity.application.services.context_service import ContextService
from identity.application.services.user_service import UserService

__all__ = [
    "AttributeService",
    "ConnectionService",
    "ConsentService",
    "ContextService",
    "UserService",
]
