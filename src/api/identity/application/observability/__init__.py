"""Domain-Oriented Observability for the identity application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from identity.application.observability.attribute_service_probe import (
    AttributeServiceProbe,
    DefaultAttributeServiceProbe,
)
from identity.application.observability.connection_service_probe import (
    ConnectionServiceProbe,
    DefaultConnectionServiceProbe,
)
from identity.application.observability.consent_service_probe import (
    ConsentServiceProbe,
    DefaultConsentServiceProbe,
)
from identity.application.observability.context_service_probe import (
    ContextServiceProbe,
    DefaultContextServiceProbe,
)
from identity.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "AttributeServiceProbe",
    "DefaultAttributeServiceProbe",
    "ConnectionServiceProbe",
    "DefaultConnectionServiceProbe",
    "ConsentServiceProbe",
    "DefaultConsentServiceProbe",
    "ContextServiceProbe",
    "DefaultContextServiceProbe",
    "UserServiceProbe",
    "DefaultUserServiceProbe",
]
