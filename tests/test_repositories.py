from datetime import datetime

import pytest

from models.cashback_models import CashbackCandidate, RuleSet, Transaction
from repositories.cashback_repository import get_all_cashback, has_cashback_for, insert_cashback
from repositories.rulesets_repository import (
    apply_ruleset_decrement,
    get_all_rulesets,
    get_ruleset_by_id,
    get_rulesets_active_on,
    insert_ruleset,
)
from repositories.transactions_repository import (
    count_transactions_for_customer,
    get_all_transactions,
    insert_transaction,
)
from services.transaction_service import add_transaction
from utils.dates import parse_timestamp
from utils.ids import generate_id
from utils.money import parse_whole_amount


def new_ruleset(start="2024-01-01", end="2024-12-31", budget=100, limit=5, amount=10):
    return RuleSet(
        id=None,
        start_date=parse_timestamp(start),
        end_date=parse_timestamp(end),
        budget=budget,
        pending_budget=budget,
        redemption_limit=limit,
        pending_redemption_limit=limit,
        min_transactions=0,
        amount=amount,
    )


def test_insert_ruleset_assigns_prefixed_id(store):
    with store.transaction() as conn:
        first = insert_ruleset(conn, new_ruleset())
        second = insert_ruleset(conn, new_ruleset())

    assert first.id.startswith("RS-")
    assert first.id != second.id
    with store.transaction() as conn:
        assert [r.id for r in get_all_rulesets(conn)] == [first.id, second.id]


@pytest.mark.parametrize("when,expected", [
    ("2023-12-31", False),
    ("2024-01-01", True),
    ("2024-06-15T13:45:00", True),
    ("2024-12-31", True),
    ("2025-01-01", False),
])
def test_active_on_window_boundaries(store, when, expected):
    with store.transaction() as conn:
        saved = insert_ruleset(conn, new_ruleset())
        active = get_rulesets_active_on(conn, parse_timestamp(when))

    assert (saved.id in [r.id for r in active]) is expected


def test_transaction_count_per_customer(store):
    with store.transaction() as conn:
        for tx_id, customer in [("T1", "C1"), ("T2", "C2"), ("T3", "C1")]:
            insert_transaction(conn, Transaction(id=tx_id, customer_id=customer, date=datetime(2024, 6, 1)))

        assert count_transactions_for_customer(conn, "C1") == 2
        assert count_transactions_for_customer(conn, "C2") == 1
        assert count_transactions_for_customer(conn, "nobody") == 0
        assert [t.id for t in get_all_transactions(conn)] == ["T1", "T2", "T3"]


def test_transaction_payload_keeps_caller_types(store):
    payload = {"id": 7, "customerId": "C1", "date": "2024-06-01", "note": {"channel": "web"}}
    with store.transaction() as conn:
        insert_transaction(conn, Transaction(id=7, customer_id="C1", date=datetime(2024, 6, 1), payload=payload))
        stored = get_all_transactions(conn)[0]

    assert stored.id == 7
    assert stored.payload == payload


def test_cashback_lookup_and_projection(store):
    with store.transaction() as conn:
        award = insert_cashback(conn, CashbackCandidate(ruleset_id="RS-1", customer_id="C1", transaction_id="T1", amount=10))

        assert award.id.startswith("CB-")
        assert has_cashback_for(conn, "RS-1", "C1")
        assert not has_cashback_for(conn, "RS-1", "C2")
        assert not has_cashback_for(conn, "RS-2", "C1")
        assert get_all_cashback(conn) == [{"transactionId": "T1", "amount": 10}]


def test_cashback_pair_is_unique(store):
    candidate = CashbackCandidate(ruleset_id="RS-1", customer_id="C1", transaction_id="T1", amount=10)
    with store.transaction() as conn:
        insert_cashback(conn, candidate)

    with pytest.raises(Exception):
        with store.transaction() as conn:
            insert_cashback(conn, candidate)

    with store.transaction() as conn:
        assert len(get_all_cashback(conn)) == 1


def test_decrement_updates_only_matching_ruleset(store):
    with store.transaction() as conn:
        target = insert_ruleset(conn, new_ruleset())
        other = insert_ruleset(conn, new_ruleset())
        apply_ruleset_decrement(conn, target.id, budget_delta=30, redemption_delta=1)

        updated = get_ruleset_by_id(conn, target.id)
        untouched = get_ruleset_by_id(conn, other.id)

    assert (updated.pending_budget, updated.pending_redemption_limit) == (70, 4)
    assert (updated.budget, updated.redemption_limit) == (100, 5)
    assert (untouched.pending_budget, untouched.pending_redemption_limit) == (100, 5)


def test_decrement_unknown_ruleset_is_noop(store):
    with store.transaction() as conn:
        saved = insert_ruleset(conn, new_ruleset())
        apply_ruleset_decrement(conn, "RS-missing", budget_delta=10, redemption_delta=1)
        assert get_ruleset_by_id(conn, saved.id).pending_budget == 100


def test_decrement_clamps_at_zero_and_keeps_uncapped(store):
    with store.transaction() as conn:
        capped = insert_ruleset(conn, new_ruleset(budget=5, limit=1))
        uncapped = insert_ruleset(conn, new_ruleset(budget=None, limit=None))
        apply_ruleset_decrement(conn, capped.id, budget_delta=50, redemption_delta=3)
        apply_ruleset_decrement(conn, uncapped.id, budget_delta=50, redemption_delta=3)

        capped = get_ruleset_by_id(conn, capped.id)
        uncapped = get_ruleset_by_id(conn, uncapped.id)

    assert (capped.pending_budget, capped.pending_redemption_limit) == (0, 0)
    assert (uncapped.pending_budget, uncapped.pending_redemption_limit) == (None, None)


def test_failed_cashback_rolls_back_transaction(store, monkeypatch):
    def boom(conn, transaction):
        raise RuntimeError("cashback failed")

    monkeypatch.setattr("services.transaction_service.process_transaction_cashback", boom)

    with pytest.raises(RuntimeError):
        add_transaction(store, id="T1", customer_id="C1", date="2024-06-01")

    with store.transaction() as conn:
        assert get_all_transactions(conn) == []


def test_generated_ids_strictly_increase():
    tokens = [int(generate_id("X-")[2:]) for _ in range(50)]
    assert tokens == sorted(set(tokens))


@pytest.mark.parametrize("raw,expected", [
    ("2024-06-01", datetime(2024, 6, 1)),
    ("06/01/2024", datetime(2024, 6, 1)),
    ("2024-06-01T10:30:00Z", datetime(2024, 6, 1, 10, 30)),
    ("2024-06-01T12:30:00+02:00", datetime(2024, 6, 1, 10, 30)),
])
def test_parse_timestamp_formats(raw, expected):
    assert parse_timestamp(raw) == expected


def test_parse_timestamp_rejects_garbage():
    with pytest.raises(ValueError):
        parse_timestamp("yesterday")


@pytest.mark.parametrize("raw,expected", [(10, 10), ("10.9", 10), (10.9, 10), ("-3.5", -3), ("1,000", 1000)])
def test_parse_whole_amount_truncates(raw, expected):
    assert parse_whole_amount(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "ten", True])
def test_parse_whole_amount_rejects(raw):
    with pytest.raises(ValueError):
        parse_whole_amount(raw)


def test_customer_lookups_respect_id_type(store):
    with store.transaction() as conn:
        insert_transaction(conn, Transaction(id="T1", customer_id=42, date=datetime(2024, 6, 1)))
        insert_cashback(conn, CashbackCandidate(ruleset_id="RS-1", customer_id=42, transaction_id="T1", amount=10))

        assert count_transactions_for_customer(conn, 42) == 1
        assert count_transactions_for_customer(conn, "42") == 0
        assert has_cashback_for(conn, "RS-1", 42)
        assert not has_cashback_for(conn, "RS-1", "42")
        assert get_all_transactions(conn)[0].customer_id == 42
