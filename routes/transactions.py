from typing import Any, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict

from db import Store, log_error
from routes.dependencies import failed_response, get_store
from services.transaction_service import add_transaction as service_add_transaction
from services.transaction_service import get_all_transactions

router = APIRouter()


class TransactionCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Any
    customerId: Union[int, str]
    date: str


# -------------------------
# TRANSACTION INGESTION
# -------------------------

@router.post("/transaction")
def add_transaction(transaction: TransactionCreate, store: Store = Depends(get_store)):
    """
    Stores the transaction and synchronously awards at most one cashback.
    """
    try:
        saved, _ = service_add_transaction(
            store,
            id=transaction.id,
            customer_id=transaction.customerId,
            date=transaction.date,
            payload=transaction.model_dump(),
        )
    except Exception as e:
        log_error(f"POST /transaction failed: {e}")
        return failed_response()

    return {
        "success": True,
        "transaction": saved.payload
    }


# -------------------------
# READ TRANSACTIONS
# -------------------------

@router.get("/transaction")
def list_transactions(store: Store = Depends(get_store)):
    try:
        transactions = get_all_transactions(store)
    except Exception as e:
        log_error(f"GET /transaction failed: {e}")
        return failed_response()

    return {
        "success": True,
        "transactions": [t.payload for t in transactions]
    }
