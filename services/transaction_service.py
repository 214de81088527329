from models.cashback_models import Transaction
from repositories.transactions_repository import (
    get_all_transactions as repo_get_all_transactions,
    insert_transaction as repo_insert_transaction,
)
from services.cashback_service import process_transaction_cashback
from utils.dates import parse_timestamp


def get_all_transactions(store):
    """Return every stored transaction, oldest first."""
    with store.transaction() as conn:
        return repo_get_all_transactions(conn)


def add_transaction(store, *, id, customer_id, date, payload=None):
    """Store a transaction and compute its cashback in one unit of work.

    ``payload`` is the request body as received; it is stored and echoed
    back untouched. Cashback processing runs synchronously; if it fails the
    transaction is rolled back with it.

    Returns ``(transaction, cashback_or_none)``.
    """
    transaction = Transaction(
        id=id,
        customer_id=customer_id,
        date=parse_timestamp(date),
        payload=dict(payload or {}),
    )

    with store.transaction() as conn:
        saved = repo_insert_transaction(conn, transaction)
        cashback = process_transaction_cashback(conn, saved)

    return saved, cashback
