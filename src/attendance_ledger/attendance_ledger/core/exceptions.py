class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is the numeric abort code exposed to clients; ``status`` is the
    HTTP status the API layer answers with.
    """

    code = 0
    status = 500

    @property
    def name(self) -> str:
        return type(self).__name__


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = 9
    status = 400


class AuthenticationError(DomainError):
    """Raised when the caller identity is missing."""

    code = 10
    status = 401


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""

    code = 2
    status = 403


class NotFoundError(DomainError):
    status = 404


class ConflictError(DomainError):
    status = 409


class AlreadyInitialized(ConflictError):
    code = 1


class NotAuthorized(AuthorizationError):
    code = 2


class UserNotFound(NotFoundError):
    code = 3


class AlreadyRegistered(ConflictError):
    code = 4


class InvalidRole(ValidationError):
    code = 5


class AlreadyMarked(ConflictError):
    code = 6


class RecordNotFound(NotFoundError):
    code = 7


class NotInitialized(ConflictError):
    code = 8


class WalletNotConnected(AuthenticationError):
    pass
