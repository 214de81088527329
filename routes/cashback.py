from fastapi import APIRouter, Depends

from db import Store, log_error
from routes.dependencies import failed_response, get_store
from services.cashback_service import get_all_cashback

router = APIRouter()


@router.get("/cashback")
def list_cashback(store: Store = Depends(get_store)):
    """Every award as ``{transactionId, amount}``."""
    try:
        cashback = get_all_cashback(store)
    except Exception as e:
        log_error(f"GET /cashback failed: {e}")
        return failed_response()

    return {
        "success": True,
        "cashback": cashback
    }
