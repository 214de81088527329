import json

from models.cashback_models import Transaction

# -----------------------------
# Transactions Repository
# -----------------------------

def _row_to_transaction(row):
    return Transaction(
        id=json.loads(row[0]) if row[0] is not None else None,
        customer_id=json.loads(row[1]),
        date=row[2],
        payload=json.loads(row[3]),
    )


def insert_transaction(conn, transaction: Transaction) -> Transaction:
    """
    Appends a transaction. The caller-supplied id is not required to be unique.
    - conn: DuckDB connection (from Store.transaction())
    """
    conn.execute(
        """
        INSERT INTO transactions (id, customer_id, date, payload)
        VALUES (?, ?, ?, ?)
        """,
        (
            json.dumps(transaction.id),
            json.dumps(transaction.customer_id),
            transaction.date,
            json.dumps(transaction.payload, default=str),
        )
    )
    return transaction


def get_all_transactions(conn):
    """
    Returns every stored transaction in insertion order.
    """
    rows = conn.execute("""
        SELECT id, customer_id, date, payload
        FROM transactions
        ORDER BY seq
    """).fetchall()
    return [_row_to_transaction(r) for r in rows]


def count_transactions_for_customer(conn, customer_id) -> int:
    """
    Counts all transactions of a customer, including one inserted earlier in
    the same unit of work.
    """
    row = conn.execute(
        "SELECT COUNT(*) FROM transactions WHERE customer_id = ?",
        (json.dumps(customer_id),)
    ).fetchone()
    return row[0]
