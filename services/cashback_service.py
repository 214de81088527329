from db import log_info
from repositories.cashback_repository import (
    get_all_cashback as repo_get_all_cashback,
    has_cashback_for,
    insert_cashback,
)
from repositories.rulesets_repository import (
    apply_ruleset_decrement,
    get_ruleset_by_id,
    get_rulesets_active_on,
)
from repositories.transactions_repository import count_transactions_for_customer
from services.cashback_rule_engine import (
    build_candidates,
    filter_eligible_rulesets,
    prior_transaction_count,
    select_best_candidate,
)


def record_cashback(conn, candidate):
    """Persist the winning award and consume one redemption of its ruleset.

    The decrement is keyed by the candidate's ruleset id, not the award id.
    """
    cashback = insert_cashback(conn, candidate)
    apply_ruleset_decrement(
        conn,
        candidate.ruleset_id,
        budget_delta=cashback.amount,
        redemption_delta=1,
    )
    return cashback


def process_transaction_cashback(conn, transaction):
    """Evaluate and record at most one cashback for a stored transaction.

    Must run inside the same ``Store.transaction()`` that inserted the
    transaction so the count and ruleset snapshot cannot change underneath.

    Returns the stored Cashback, or None when no ruleset applies.
    """
    active = get_rulesets_active_on(conn, transaction.date)
    prior_count = prior_transaction_count(
        count_transactions_for_customer(conn, transaction.customer_id)
    )

    eligible = filter_eligible_rulesets(
        active,
        transaction.customer_id,
        prior_count,
        lambda ruleset_id, customer_id: has_cashback_for(conn, ruleset_id, customer_id),
    )
    winner = select_best_candidate(build_candidates(eligible, transaction))

    if winner is None:
        log_info(
            f"No cashback for transaction {transaction.id!r} "
            f"(active={len(active)}, eligible={len(eligible)})"
        )
        return None

    cashback = record_cashback(conn, winner)
    remaining = get_ruleset_by_id(conn, cashback.ruleset_id)
    log_info(
        f"Cashback {cashback.id} of {cashback.amount} from {cashback.ruleset_id} "
        f"for transaction {transaction.id!r} "
        f"(pendingBudget={remaining.pending_budget}, "
        f"pendingRedemptionLimit={remaining.pending_redemption_limit})"
    )
    return cashback


def get_all_cashback(store):
    with store.transaction() as conn:
        return repo_get_all_cashback(conn)
