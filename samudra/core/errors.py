"""
Registry error taxonomy.

Every error raised by a handler carries the HTTP status it maps to; the
application-level exception handlers in ``main.py`` turn them into
``{"error": message}`` responses.
"""


class RegistryError(Exception):
    """Base class for all registry errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(RegistryError):
    """Missing or invalid bearer token."""
    status_code = 401


class AuthorizationError(RegistryError):
    """Caller role or ownership does not permit the operation."""
    status_code = 403


class ValidationError(RegistryError):
    """Missing or malformed input."""
    status_code = 400


class NotFoundError(RegistryError):
    status_code = 404


class StateConflictError(RegistryError):
    """Entity is not in a state that allows the transition."""
    status_code = 409


class PaymentError(RegistryError):
    status_code = 402


class UpstreamError(RegistryError):
    """A collaborator (auth, file store, chain) failed."""
    status_code = 502
