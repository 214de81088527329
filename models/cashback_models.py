from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class Transaction:
    id: Any
    customer_id: Any
    date: datetime
    # the body exactly as submitted, echoed back to the caller
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RuleSet:
    """A time-bounded cashback rule with budget and redemption capacity.

    ``None`` for a budget or redemption limit (and its pending counter)
    means the ruleset is uncapped on that axis.
    """
    id: Optional[str]
    start_date: datetime
    end_date: datetime
    budget: Optional[int]
    pending_budget: Optional[int]
    redemption_limit: Optional[int]
    pending_redemption_limit: Optional[int]
    min_transactions: int
    amount: int
    extra: Dict[str, Any] = field(default_factory=dict)

    def has_redemptions_left(self) -> bool:
        if self.pending_redemption_limit is None:
            return True
        return self.pending_redemption_limit > 0


@dataclass
class CashbackCandidate:
    """An award a ruleset could grant, before one is chosen."""
    ruleset_id: str
    customer_id: Any
    transaction_id: Any
    amount: int


@dataclass
class Cashback:
    id: str
    ruleset_id: str
    customer_id: Any
    transaction_id: Any
    amount: int
