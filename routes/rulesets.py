from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, field_validator

from db import Store, log_error
from routes.dependencies import failed_response, get_store
from services.ruleset_service import create_ruleset, get_all_rulesets
from utils.dates import format_timestamp
from utils.money import parse_whole_amount

router = APIRouter()


class RuleSetCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    startDate: str
    endDate: str
    amount: int
    budget: Optional[int] = None
    redemptionLimit: Optional[int] = None
    minTransactions: int = 0

    @field_validator("amount", "budget", "redemptionLimit", "minTransactions", mode="before")
    @classmethod
    def truncate_to_int(cls, value):
        if value is None:
            return value
        return parse_whole_amount(value)


def ruleset_to_dict(ruleset):
    return {
        "id": ruleset.id,
        "startDate": format_timestamp(ruleset.start_date),
        "endDate": format_timestamp(ruleset.end_date),
        "cashback": ruleset.extra.get("cashback"),
        "amount": ruleset.amount,
        "budget": ruleset.budget,
        "pendingBudget": ruleset.pending_budget,
        "redemptionLimit": ruleset.redemption_limit,
        "pendingRedemptionLimit": ruleset.pending_redemption_limit,
        "minTransactions": ruleset.min_transactions,
    }


# -------------------------
# CREATE RULESET
# -------------------------

@router.post("/ruleset")
def add_ruleset(rule: RuleSetCreate, store: Store = Depends(get_store)):
    try:
        saved = create_ruleset(
            store,
            start_date=rule.startDate,
            end_date=rule.endDate,
            amount=rule.amount,
            budget=rule.budget,
            redemption_limit=rule.redemptionLimit,
            min_transactions=rule.minTransactions,
            extra=rule.model_extra,
        )
    except Exception as e:
        log_error(f"POST /ruleset failed: {e}")
        return failed_response()

    return {
        "success": True,
        "ruleSet": {
            # dates are echoed as submitted
            "startDate": rule.startDate,
            "endDate": rule.endDate,
            "cashback": saved.extra.get("cashback"),
            "redemptionLimit": saved.redemption_limit,
            "minTransactions": saved.min_transactions,
            "budget": saved.budget,
            "id": saved.id,
        }
    }


# -------------------------
# READ RULESETS
# -------------------------

@router.get("/ruleset")
def list_rulesets(store: Store = Depends(get_store)):
    try:
        rulesets = get_all_rulesets(store)
    except Exception as e:
        log_error(f"GET /ruleset failed: {e}")
        return failed_response()

    return {
        "success": True,
        "ruleSets": [ruleset_to_dict(r) for r in rulesets]
    }
