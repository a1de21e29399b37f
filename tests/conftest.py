"""Shared fixtures: YNAB-shaped payloads and a fake HTTP transport."""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from ynab_client import YnabClient


def make_account(**overrides) -> Dict[str, Any]:
    account = {
        "id": "acct-1",
        "name": "Checking",
        "type": "checking",
        "on_budget": True,
        "closed": False,
        "note": None,
        "balance": 0,
        "cleared_balance": 0,
        "uncleared_balance": 0,
        "transfer_payee_id": "payee-transfer-1",
        "direct_import_linked": False,
        "direct_import_in_error": False,
        "last_reconciled_at": None,
        "deleted": False,
    }
    account.update(overrides)
    return account


def make_month_category(**overrides) -> Dict[str, Any]:
    category = {
        "id": "cat-1",
        "category_group_id": "group-1",
        "category_group_name": "Bills",
        "name": "Rent",
        "hidden": False,
        "original_category_group_id": None,
        "note": None,
        "budgeted": 0,
        "activity": 0,
        "balance": 0,
        "goal_type": None,
        "goal_target": None,
        "goal_target_month": None,
        "goal_percentage_complete": None,
        "goal_under_funded": None,
        "goal_overall_funded": None,
        "goal_overall_left": None,
        "deleted": False,
    }
    category.update(overrides)
    return category


def make_transaction(**overrides) -> Dict[str, Any]:
    transaction = {
        "id": "txn-1",
        "date": "2025-01-15",
        "amount": -25000,
        "memo": None,
        "cleared": "cleared",
        "approved": True,
        "flag_color": None,
        "account_id": "acct-1",
        "account_name": "Checking",
        "payee_id": "payee-1",
        "payee_name": "Grocery Store",
        "category_id": "cat-1",
        "category_name": "Groceries",
        "transfer_account_id": None,
        "transfer_transaction_id": None,
        "matched_transaction_id": None,
        "import_id": None,
        "import_payee_name": None,
        "import_payee_name_original": None,
        "debt_transaction_type": None,
        "subtransactions": [],
        "deleted": False,
    }
    transaction.update(overrides)
    return transaction


def make_payee(**overrides) -> Dict[str, Any]:
    payee = {
        "id": "payee-1",
        "name": "Grocery Store",
        "transfer_account_id": None,
        "deleted": False,
    }
    payee.update(overrides)
    return payee


def make_scheduled_transaction(**overrides) -> Dict[str, Any]:
    scheduled = {
        "id": "sched-1",
        "date_first": "2024-01-01",
        "date_next": "2025-02-01",
        "frequency": "monthly",
        "amount": -1500000,
        "memo": "Rent",
        "flag_color": None,
        "account_id": "acct-1",
        "account_name": "Checking",
        "payee_id": "payee-2",
        "payee_name": "Landlord",
        "category_id": "cat-1",
        "category_name": "Rent",
        "transfer_account_id": None,
        "subtransactions": [],
        "deleted": False,
    }
    scheduled.update(overrides)
    return scheduled


@pytest.fixture
def categories_payload() -> Dict[str, Any]:
    return {
        "category_groups": [
            {
                "id": "group-1",
                "name": "Bills",
                "hidden": False,
                "deleted": False,
                "categories": [
                    {"id": "cat-1", "name": "Rent", "hidden": False, "deleted": False,
                     "goal_type": "NEED"},
                    {"id": "cat-2", "name": "Old Phone", "hidden": True, "deleted": False,
                     "goal_type": None},
                    {"id": "cat-3", "name": "Utilities", "hidden": False, "deleted": False,
                     "goal_type": None},
                ],
            },
            {
                "id": "group-2",
                "name": "Archived",
                "hidden": True,
                "deleted": False,
                "categories": [
                    {"id": "cat-4", "name": "Gym", "hidden": False, "deleted": False,
                     "goal_type": None},
                ],
            },
            {
                "id": "group-3",
                "name": "Gone",
                "hidden": False,
                "deleted": True,
                "categories": [],
            },
            {
                "id": "group-4",
                "name": "Fun",
                "hidden": False,
                "deleted": False,
                "categories": [
                    {"id": "cat-5", "name": "Dining", "hidden": False, "deleted": True,
                     "goal_type": None},
                    {"id": "cat-6", "name": "Games", "hidden": False, "deleted": False,
                     "goal_type": "TB"},
                ],
            },
        ]
    }


@pytest.fixture
def month_payload() -> Dict[str, Any]:
    return {
        "month": {
            "month": "2025-01-01",
            "note": None,
            "income": 5000000,
            "budgeted": 4200000,
            "activity": -3100500,
            "to_be_budgeted": 800000,
            "age_of_money": 42,
            "deleted": False,
            "categories": [
                make_month_category(id="cat-1", name="Rent", budgeted=100000,
                                    activity=-100000, balance=0),
                make_month_category(id="cat-2", name="Utilities", budgeted=50000,
                                    activity=-42500, balance=7500,
                                    goal_type="NEED", goal_under_funded=2500),
                make_month_category(id="cat-3", name="Old Phone", budgeted=30000,
                                    hidden=True),
                make_month_category(id="cat-4", name="Dining", category_group_name="Fun",
                                    budgeted=20000, activity=-35000, balance=-15000),
                make_month_category(id="cat-5", name="Removed", category_group_name="Fun",
                                    budgeted=99000, deleted=True),
            ],
        }
    }


class FakeYnab:
    """Route ``httpx.MockTransport`` requests to canned YNAB responses."""

    def __init__(self):
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, path: str, data: Any = None, status: int = 200, error: Any = None):
        def respond(request: httpx.Request) -> httpx.Response:
            if status >= 400:
                return httpx.Response(status, json={"error": error or {}})
            return httpx.Response(status, json={"data": data})

        self.routes[path] = respond

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(
                404,
                json={"error": {"id": "404.2", "name": "resource_not_found",
                                "detail": "Resource not found"}},
            )
        return handler(request)

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)


@pytest.fixture
def fake_ynab() -> FakeYnab:
    return FakeYnab()


@pytest.fixture
def make_client(fake_ynab):
    def factory(**kwargs) -> YnabClient:
        kwargs.setdefault("retry_delay", 0)
        return YnabClient(
            "test-token",
            transport=httpx.MockTransport(fake_ynab),
            **kwargs,
        )

    return factory
