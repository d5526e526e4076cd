"""
Shared API dependencies.
"""

import logging
from contextlib import contextmanager

from fastapi import Header
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bank_admin.errors import BankAdminError, PersistenceError

logger = logging.getLogger(__name__)


def get_acting_user_id(
    x_user_id: int | None = Header(default=None),
) -> int | None:
    """
    The staff user performing the request, from the X-User-Id header.

    It is recorded on every audit entry the request produces.
    Requests without the header are audited with no user.
    """
    return x_user_id


@contextmanager
def unit_of_work(db: Session):
    """
    Commit the request's changes, or roll all of them back.

    Domain errors are re-raised unchanged for the exception
    handler. Database errors, including a failing commit, become
    PersistenceError.
    """
    try:
        yield
        db.commit()
    except BankAdminError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Unit of work rolled back")
        raise PersistenceError.from_db_error(
            "The change could not be saved", e
        ) from e
