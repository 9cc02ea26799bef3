"""Domain exceptions for the identity bounded context.

Lookups that find nothing are not errors here: they come back as None
or False. Only broken uniqueness rules and preconditions raise.
"""


class AttributeNameConflictError(Exception):
    """Raised when an attribute name is already used by the same user.

    Attribute names are unique per user, compared case-insensitively.
    The offending name is kept on ``name`` so the application layer can
    report it back.
    """

    def __init__(self, name: str):
        super().__init__(f"An attribute with the name '{name}' already exists.")
        self.name = name


class PreconditionViolationError(Exception):
    """Raised when an operation is invoked on data that cannot support it.

    Raised before any mutation, so no partial write ever happens.
    """

    pass


class MissingPersonalContextError(PreconditionViolationError):
    """Raised when provider attributes are mapped for a user lacking a Personal context."""

    pass


class UsernameTakenError(Exception):
    """Raised when registering a username that already belongs to a user."""

    def __init__(self, username: str):
        super().__init__(f"Username '{username}' is already taken.")
        self.username = username
