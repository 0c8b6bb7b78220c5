"""Errors raised by the portal services and stores.

Every error carries the HTTP status it maps to and a ``message`` that is safe
to show to a caller. 500-class errors only ever expose a generic message;
their detail goes to the log.
"""

from __future__ import annotations


class PortalError(Exception):
    """Base class for all expected failures of a portal operation."""

    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(PortalError):
    """A required field is missing or empty."""

    status_code = 400
    message = "All fields are required"


class DuplicateAccount(PortalError):
    """An account with this email already exists."""

    status_code = 400
    message = "Email already exists"


class UnknownAccount(PortalError):
    """No account is registered under this email."""

    status_code = 400
    message = "User does not exist."


class BadCredential(PortalError):
    """The password does not match the stored digest."""

    status_code = 401
    message = "Incorrect password."


class NoFilesProvided(PortalError):
    """A submission arrived without any uploaded file."""

    status_code = 400
    message = "No files uploaded"


class SubmissionsNotFound(PortalError):
    """A listing matched no submissions."""

    status_code = 404
    message = "No files found"


class StorageError(PortalError):
    """The backing store failed."""

    status_code = 500
    message = "Database Error"


class ConstraintViolation(StorageError):
    """The store rejected a row because of a uniqueness constraint."""


class HashingError(PortalError):
    """The password hashing engine failed or a digest is malformed."""

    status_code = 500
    message = "Internal Server Error"
