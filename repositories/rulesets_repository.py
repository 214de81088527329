import json
from dataclasses import replace

from models.cashback_models import RuleSet
from utils.ids import ruleset_id

RULESET_COLUMNS = """
    id, start_date, end_date, budget, pending_budget,
    redemption_limit, pending_redemption_limit, min_transactions, amount, extra
"""


def _row_to_ruleset(row):
    return RuleSet(
        id=row[0],
        start_date=row[1],
        end_date=row[2],
        budget=row[3],
        pending_budget=row[4],
        redemption_limit=row[5],
        pending_redemption_limit=row[6],
        min_transactions=row[7],
        amount=row[8],
        extra=json.loads(row[9]) if row[9] else {},
    )


def insert_ruleset(conn, ruleset: RuleSet) -> RuleSet:
    """
    Insert a new ruleset under a freshly generated ``RS-`` id.

    Args:
        conn: Database connection.
        ruleset: Ruleset to store; its ``id`` is ignored.

    Returns:
        The stored ruleset carrying its generated id.
    """
    saved = replace(ruleset, id=ruleset_id())
    conn.execute(
        f"INSERT INTO rulesets ({RULESET_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        (
            saved.id,
            saved.start_date,
            saved.end_date,
            saved.budget,
            saved.pending_budget,
            saved.redemption_limit,
            saved.pending_redemption_limit,
            saved.min_transactions,
            saved.amount,
            json.dumps(saved.extra, default=str),
        )
    )
    return saved


def get_all_rulesets(conn):
    """
    Return all rulesets in insertion order.
    """
    rows = conn.execute(
        f"SELECT {RULESET_COLUMNS} FROM rulesets ORDER BY seq"
    ).fetchall()
    return [_row_to_ruleset(r) for r in rows]


def get_ruleset_by_id(conn, ruleset_id):
    """
    Return a single ruleset by ID, or None if not found.
    """
    row = conn.execute(
        f"SELECT {RULESET_COLUMNS} FROM rulesets WHERE id = ?",
        (ruleset_id,)
    ).fetchone()
    return _row_to_ruleset(row) if row else None


def get_rulesets_active_on(conn, when):
    """
    Return rulesets whose [start_date, end_date] window contains ``when``,
    both ends inclusive, in insertion order.
    """
    rows = conn.execute(
        f"""
        SELECT {RULESET_COLUMNS}
        FROM rulesets
        WHERE start_date <= ? AND end_date >= ?
        ORDER BY seq
        """,
        (when, when)
    ).fetchall()
    return [_row_to_ruleset(r) for r in rows]


def apply_ruleset_decrement(conn, ruleset_id, budget_delta=0, redemption_delta=0):
    """
    Subtract from a ruleset's pending budget and pending redemption limit.

    Unknown ids are a no-op. Uncapped (NULL) counters stay uncapped and
    capped counters never drop below zero.
    """
    conn.execute(
        """
        UPDATE rulesets
        SET pending_budget = CASE
                WHEN pending_budget IS NULL THEN NULL
                ELSE GREATEST(pending_budget - ?, 0)
            END,
            pending_redemption_limit = CASE
                WHEN pending_redemption_limit IS NULL THEN NULL
                ELSE GREATEST(pending_redemption_limit - ?, 0)
            END
        WHERE id = ?
        """,
        (budget_delta, redemption_delta, ruleset_id)
    )
