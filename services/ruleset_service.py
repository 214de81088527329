from models.cashback_models import RuleSet
from repositories.rulesets_repository import (
    get_all_rulesets as repo_get_all_rulesets,
    insert_ruleset as repo_insert_ruleset,
)
from db import log_info
from utils.dates import parse_timestamp


def create_ruleset(store, *, start_date, end_date, amount,
                   budget=None, redemption_limit=None,
                   min_transactions=0, extra=None):
    """Service wrapper around repository insert.

    Pending counters start equal to their originals. A missing budget or
    redemption limit leaves that axis uncapped.
    """
    start = parse_timestamp(start_date)
    end = parse_timestamp(end_date)
    if end < start:
        raise ValueError("endDate must not be before startDate")

    for name, value in (("budget", budget), ("redemptionLimit", redemption_limit), ("amount", amount)):
        if value is not None and value < 0:
            raise ValueError(f"{name} must not be negative")

    ruleset = RuleSet(
        id=None,
        start_date=start,
        end_date=end,
        budget=budget,
        pending_budget=budget,
        redemption_limit=redemption_limit,
        pending_redemption_limit=redemption_limit,
        min_transactions=min_transactions,
        amount=amount,
        extra=dict(extra or {}),
    )

    with store.transaction() as conn:
        saved = repo_insert_ruleset(conn, ruleset)

    log_info(f"Ruleset {saved.id} created ({start.date()} to {end.date()}, amount={amount})")
    return saved


def get_all_rulesets(store):
    with store.transaction() as conn:
        return repo_get_all_rulesets(conn)
