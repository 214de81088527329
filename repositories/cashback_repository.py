import json

from models.cashback_models import Cashback, CashbackCandidate
from utils.ids import cashback_id

# -----------------------------
# Cashback Repository
# -----------------------------

def insert_cashback(conn, candidate: CashbackCandidate) -> Cashback:
    """
    Persists an award under a freshly generated ``CB-`` id.
    The (ruleset_id, customer_id) pair is unique at the table level.
    """
    cashback = Cashback(
        id=cashback_id(),
        ruleset_id=candidate.ruleset_id,
        customer_id=candidate.customer_id,
        transaction_id=candidate.transaction_id,
        amount=candidate.amount,
    )
    conn.execute(
        """
        INSERT INTO cashbacks (id, ruleset_id, customer_id, transaction_id, amount)
        VALUES (?, ?, ?, ?, ?)
        """,
        (
            cashback.id,
            cashback.ruleset_id,
            json.dumps(cashback.customer_id),
            json.dumps(cashback.transaction_id),
            cashback.amount,
        )
    )
    return cashback


def get_all_cashback(conn):
    """
    Returns every award projected to ``{"transactionId", "amount"}``.
    Customer and ruleset references are never exposed.
    """
    rows = conn.execute("""
        SELECT transaction_id, amount
        FROM cashbacks
        ORDER BY seq
    """).fetchall()
    return [
        {"transactionId": json.loads(r[0]), "amount": r[1]}
        for r in rows
    ]


def has_cashback_for(conn, ruleset_id, customer_id) -> bool:
    row = conn.execute(
        "SELECT 1 FROM cashbacks WHERE ruleset_id = ? AND customer_id = ? LIMIT 1",
        (ruleset_id, json.dumps(customer_id))
    ).fetchone()
    return bool(row)
