"""
Domain errors.

Services raise these; the API layer rolls back the session and
lets a single exception handler turn them into a response of the
form {"success": false, "error": <kind>, "message": <text>}.

Callers branch on the kind, never on the message text.
"""

import enum

from sqlalchemy.exc import IntegrityError, SQLAlchemyError


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    MISSING_FIELDS = "MISSING_FIELDS"
    SAME_ACCOUNT = "SAME_ACCOUNT"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INACTIVE_ACCOUNT = "INACTIVE_ACCOUNT"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"


class BankAdminError(Exception):
    """Base class for every error a service reports to its caller."""

    kind: ErrorKind = ErrorKind.CONFLICT
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(BankAdminError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class ConflictError(BankAdminError):
    """A uniqueness rule or a reference from another row blocks the change."""
    kind = ErrorKind.CONFLICT
    status_code = 409


# --- Money movement rejections ---
# Raised by transfers and service payments. All are caller-fixable,
# leave no state behind and are never retried automatically.

class MissingFieldsError(BankAdminError):
    kind = ErrorKind.MISSING_FIELDS
    status_code = 400


class SameAccountError(BankAdminError):
    kind = ErrorKind.SAME_ACCOUNT
    status_code = 400


class AccountNotFoundError(NotFoundError):
    kind = ErrorKind.ACCOUNT_NOT_FOUND


class InvalidAmountError(BankAdminError):
    kind = ErrorKind.INVALID_AMOUNT
    status_code = 400


class InactiveAccountError(BankAdminError):
    kind = ErrorKind.INACTIVE_ACCOUNT
    status_code = 409


class InsufficientFundsError(BankAdminError):
    kind = ErrorKind.INSUFFICIENT_FUNDS
    status_code = 409


class InvalidCredentialsError(BankAdminError):
    kind = ErrorKind.INVALID_CREDENTIALS
    status_code = 401


class PersistenceError(BankAdminError):
    """
    The database rejected or could not complete the unit of work.

    Everything in the unit has been rolled back; the caller may
    resubmit the whole request.
    """
    kind = ErrorKind.PERSISTENCE_ERROR
    status_code = 503

    @classmethod
    def from_db_error(cls, message: str, error: SQLAlchemyError) -> "PersistenceError":
        """
        Wrap a database error.

        A constraint violation, such as a reference to a user that
        does not exist, fails the same way on every retry and is
        reported as 409. Other failures stay 503.
        """
        wrapped = cls(message)
        if isinstance(error, IntegrityError):
            wrapped.status_code = 409
        return wrapped
