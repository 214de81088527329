"""
Cashback Rule Engine: Deterministic Ruleset Eligibility and Award Selection

Pure functions over rulesets already filtered to the transaction's date.
No database access; no side effects.
"""
from typing import Any, Callable, Iterable, List, Optional

from models.cashback_models import CashbackCandidate, RuleSet, Transaction


def prior_transaction_count(total_for_customer: int) -> int:
    """
    Number of transactions a customer made before the current one.

    ``total_for_customer`` already includes the transaction being evaluated.
    """
    return total_for_customer - 1


def is_ruleset_eligible(ruleset: RuleSet, prior_count: int, already_awarded: bool) -> bool:
    return (
        not already_awarded
        and prior_count >= ruleset.min_transactions
        and ruleset.has_redemptions_left()
    )


def filter_eligible_rulesets(
    rulesets: Iterable[RuleSet],
    customer_id: Any,
    prior_count: int,
    has_cashback: Callable[[str, Any], bool],
) -> List[RuleSet]:
    """
    Keep the rulesets a customer can still be awarded under.

    Args:
        rulesets: Rulesets active on the transaction date, in store order.
        customer_id: Customer making the transaction.
        prior_count: Result of ``prior_transaction_count``.
        has_cashback: ``(ruleset_id, customer_id) -> bool`` lookup of
                      existing awards.

    Returns:
        Eligible rulesets, order preserved.
    """
    return [
        ruleset
        for ruleset in rulesets
        if is_ruleset_eligible(ruleset, prior_count, has_cashback(ruleset.id, customer_id))
    ]


def candidate_amount(ruleset: RuleSet) -> int:
    """Nominal amount capped by the remaining budget; uncapped budgets don't cap."""
    if ruleset.pending_budget is None:
        return ruleset.amount
    return min(ruleset.pending_budget, ruleset.amount)


def build_candidates(rulesets: Iterable[RuleSet], transaction: Transaction) -> List[CashbackCandidate]:
    # zero amounts are kept: an exhausted budget with redemptions left still awards 0
    return [
        CashbackCandidate(
            ruleset_id=ruleset.id,
            customer_id=transaction.customer_id,
            transaction_id=transaction.id,
            amount=candidate_amount(ruleset),
        )
        for ruleset in rulesets
    ]


def select_best_candidate(candidates: List[CashbackCandidate]) -> Optional[CashbackCandidate]:
    """
    Pick the largest award.

    Ties go to the earliest candidate, so the result is stable with respect
    to the eligibility order.
    """
    if not candidates:
        return None
    return max(candidates, key=lambda candidate: candidate.amount)
