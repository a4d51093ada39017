from __future__ import annotations


class DomainError(Exception):
    """Base for errors the UI is expected to show to the user."""


class ValidationError(DomainError):
    pass


class NotFoundError(DomainError):
    pass


class PersistenceFailure(DomainError):
    """A call to the persistence collaborator failed; nothing was committed by it."""

    def __init__(self, message: str, operation: str = "") -> None:
        super().__init__(message)
        self.operation = operation


class NotAuthenticatedError(DomainError):
    pass
