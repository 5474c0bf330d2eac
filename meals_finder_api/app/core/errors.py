"""
Error kinds raised by the service layer.

Every failure of a ``UserService`` operation is one of the classes
below.  Low level exceptions (``sqlite3.Error``, hashing or signing
problems) are logged where they happen and re-raised as one of these
kinds, so handlers only ever need to map this closed set to HTTP
responses.
"""

from typing import List, Optional


class ServiceError(Exception):
    """Base class for all service-level failures."""

    message = "Service error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)


class UnauthorizedError(ServiceError):
    """Bad credentials, or a missing, invalid or expired token."""

    message = "Invalid credentials"


class InvalidInputError(ServiceError):
    """The request failed field validation.

    ``problems`` lists one human readable entry per rejected field.
    """

    message = "Invalid input"

    def __init__(self, problems: List[str]) -> None:
        self.problems = problems
        super().__init__("; ".join(problems) or self.message)


class NotFoundError(ServiceError):
    """The requested user does not exist."""

    message = "User not found"


class InternalFailureError(ServiceError):
    """Hashing, signing or store failure.  Details stay in the server log."""

    message = "Internal failure"
