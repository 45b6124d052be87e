"""Domain exceptions raised by the store, loaders and mutation pipelines.

Every exception here is raised inside a resolver and rendered by the GraphQL
executor into the response ``errors`` list using its message.
"""


class EventbookError(Exception):
    """Base exception for Eventbook domain failures."""

    pass


class ValidationError(EventbookError):
    """Malformed or missing input field."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(EventbookError):
    """A referenced record does not exist."""

    def __init__(self, kind: str, key: object) -> None:
        super().__init__(f"{kind} {key} does not exist")
        self.kind = kind
        self.key = key


class DuplicateError(EventbookError):
    """A record with the same unique value already exists."""

    def __init__(self, message: str = "User exists already.") -> None:
        super().__init__(message)


class StorageError(EventbookError):
    """The underlying persistence operation failed."""

    pass


class AuthorizationError(EventbookError):
    """The request carries no caller identity allowed to perform the operation."""

    pass
