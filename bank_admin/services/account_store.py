"""
Account store: keyed lookup and balance changes.

The only code that writes Account.balance. Transfers and
service payments go through it so the row-locking rule lives
in one place.
"""

from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from bank_admin.errors import PersistenceError
from bank_admin.models.account import Account


def lock_statement(account_ids: list[int]):
    """SELECT ... ORDER BY id FOR UPDATE for the given accounts."""
    return (
        select(Account)
        .where(Account.id.in_(account_ids))
        .order_by(Account.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


class AccountStore:

    def __init__(self, db: Session):
        self.db = db

    def find(self, account_id: int) -> Account | None:
        return self.db.get(Account, account_id)

    def lock(self, account_ids: list[int]) -> dict[int, Account]:
        """
        Load accounts with row locks held until the transaction ends.

        Rows are locked in ascending id order so two requests that
        touch the same pair of accounts cannot deadlock. Missing ids
        are simply absent from the result. populate_existing makes
        the returned objects reflect the locked row, not a stale copy
        from the identity map.
        """
        accounts = self.db.execute(lock_statement(account_ids)).scalars().all()
        return {account.id: account for account in accounts}

    def apply_delta(self, account_id: int, amount: Decimal) -> None:
        """
        Add a signed amount to an account balance.

        Executed as a single UPDATE ... SET balance = balance + :amount
        so the arithmetic happens in the database.
        """
        result = self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(balance=Account.balance + amount)
        )
        if result.rowcount != 1:
            raise PersistenceError(
                f"Balance update for account {account_id} affected "
                f"{result.rowcount} rows"
            )
