"""Shrink large YNAB payloads into bounded, agent-friendly summaries.

A full budget export can run to tens of megabytes, well past what a
tool result may carry. Every summarizer here is a pure function of the
decoded ``data`` payload: deleted entities are dropped, hidden
categories are dropped, collections are either capped or reduced to
counts, and amounts are rendered with ``format_currency``.
"""

import json
from typing import Any, Dict, Iterable, List, Mapping

from money import format_currency

# Well under the ~1MB tool result limit, leaving room for formatting.
SUMMARY_THRESHOLD = 100_000

DEFAULT_TRANSACTION_LIMIT = 50
DEFAULT_PAYEE_LIMIT = 100


class InputShapeError(ValueError):
    """Upstream payload is missing the collection a summarizer expects."""

    def __init__(self, resource: str, field: str):
        self.resource = resource
        self.field = field
        super().__init__(
            f"{resource} summary failed: upstream response is missing '{field}'"
        )


def should_summarize(payload: Any, threshold: int = SUMMARY_THRESHOLD) -> bool:
    """Return True when the compact JSON form of ``payload`` exceeds ``threshold``."""
    return len(json.dumps(payload, separators=(",", ":"))) > threshold


def _require(payload: Any, field: str, resource: str) -> Any:
    if not isinstance(payload, Mapping) or payload.get(field) is None:
        raise InputShapeError(resource, field)
    return payload[field]


def _live(items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [item for item in items or [] if not item.get("deleted")]


def _visible(items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [item for item in _live(items) if not item.get("hidden")]


def summarize_budget(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Project a full budget export down to identity fields and collection counts."""
    budget = _require(payload, "budget", "budget")

    return {
        "budget": {
            "id": budget.get("id"),
            "name": budget.get("name"),
            "last_modified_on": budget.get("last_modified_on"),
            "first_month": budget.get("first_month"),
            "last_month": budget.get("last_month"),
            "currency_format": budget.get("currency_format"),
            "accounts_count": len(_live(budget.get("accounts"))),
            "categories_count": len(_visible(budget.get("categories"))),
            "category_groups_count": len(_visible(budget.get("category_groups"))),
            "payees_count": len(_live(budget.get("payees"))),
            "note": (
                "Counts exclude deleted and hidden entries. Use get_accounts, "
                "get_categories, get_payees, etc. to get detailed information."
            ),
        }
    }


def summarize_accounts(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Split accounts into on-budget, off-budget and closed, with balance totals."""
    accounts = _live(_require(payload, "accounts", "accounts"))

    on_budget = [a for a in accounts if a.get("on_budget") and not a.get("closed")]
    off_budget = [a for a in accounts if not a.get("on_budget") and not a.get("closed")]
    closed = [a for a in accounts if a.get("closed")]

    return {
        "summary": {
            "total_accounts": len(accounts),
            "on_budget_count": len(on_budget),
            "off_budget_count": len(off_budget),
            "closed_count": len(closed),
            "total_on_budget_balance": format_currency(
                sum(a.get("balance") or 0 for a in on_budget)
            ),
            "total_off_budget_balance": format_currency(
                sum(a.get("balance") or 0 for a in off_budget)
            ),
        },
        "on_budget_accounts": [
            {
                "id": a.get("id"),
                "name": a.get("name"),
                "type": a.get("type"),
                "balance": format_currency(a.get("balance")),
                "cleared_balance": format_currency(a.get("cleared_balance")),
                "uncleared_balance": format_currency(a.get("uncleared_balance")),
                "direct_import_linked": a.get("direct_import_linked"),
            }
            for a in on_budget
        ],
        "off_budget_accounts": [
            {
                "id": a.get("id"),
                "name": a.get("name"),
                "type": a.get("type"),
                "balance": format_currency(a.get("balance")),
                "direct_import_linked": a.get("direct_import_linked"),
            }
            for a in off_budget
        ],
        "note": (
            "Closed accounts are counted but not listed. "
            "Use get_account for a specific account."
        ),
    }


def summarize_categories(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """List visible category groups with their visible categories."""
    groups = _visible(_require(payload, "category_groups", "categories"))

    category_groups = []
    for group in groups:
        categories = _visible(group.get("categories"))
        category_groups.append({
            "id": group.get("id"),
            "name": group.get("name"),
            "hidden": group.get("hidden"),
            "categories": [
                {
                    "id": c.get("id"),
                    "name": c.get("name"),
                    "hidden": c.get("hidden"),
                    "goal_type": c.get("goal_type"),
                }
                for c in categories
            ],
        })

    return {
        "summary": {
            "total_groups": len(category_groups),
            "total_categories": sum(len(g["categories"]) for g in category_groups),
        },
        "category_groups": category_groups,
        "note": (
            "Hidden and deleted categories not shown. "
            "Use get_category_for_month for budget details."
        ),
    }


def summarize_month(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Group a month's categories by group name with per-group totals."""
    month = _require(payload, "month", "month")
    categories = _visible(_require(month, "categories", "month"))

    grouped: Dict[str, Dict[str, Any]] = {}
    for c in categories:
        group = grouped.setdefault(c.get("category_group_name"), {
            "categories": [],
            "total_budgeted": 0,
            "total_activity": 0,
            "total_balance": 0,
        })
        group["categories"].append({
            "id": c.get("id"),
            "name": c.get("name"),
            "budgeted": format_currency(c.get("budgeted")),
            "activity": format_currency(c.get("activity")),
            "balance": format_currency(c.get("balance")),
            "goal_type": c.get("goal_type"),
            "goal_under_funded": format_currency(c.get("goal_under_funded")),
        })
        group["total_budgeted"] += c.get("budgeted") or 0
        group["total_activity"] += c.get("activity") or 0
        group["total_balance"] += c.get("balance") or 0

    # Totals are summed as milliunits above; format once at the end.
    for group in grouped.values():
        for key in ("total_budgeted", "total_activity", "total_balance"):
            group[key] = format_currency(group[key])

    return {
        "month": month.get("month"),
        "summary": {
            "income": format_currency(month.get("income")),
            "budgeted": format_currency(month.get("budgeted")),
            "activity": format_currency(month.get("activity")),
            "to_be_budgeted": format_currency(month.get("to_be_budgeted")),
            "age_of_money": month.get("age_of_money"),
        },
        "category_groups": grouped,
        "note": (
            "Hidden and deleted categories not shown. Categories grouped by "
            "category group; all amounts formatted as currency."
        ),
    }


def summarize_transactions(
    payload: Mapping[str, Any],
    limit: int = DEFAULT_TRANSACTION_LIMIT,
) -> Dict[str, Any]:
    """Return the ``limit`` most recent transactions, newest first."""
    transactions = _live(_require(payload, "transactions", "transactions"))

    # sorted() is stable, so same-day transactions keep their upstream order
    recent = sorted(transactions, key=lambda t: t.get("date") or "", reverse=True)
    shown = recent[:limit]
    limited = len(transactions) > limit

    if limited:
        note = (
            f"Showing most recent {limit} of {len(transactions)} transactions. "
            "Use the since_date parameter to filter by date range."
        )
    else:
        note = "Showing all transactions matching criteria."

    return {
        "summary": {
            "total_count": len(transactions),
            "showing_count": len(shown),
            "limited": limited,
        },
        "transactions": [
            {
                "id": t.get("id"),
                "date": t.get("date"),
                "amount": format_currency(t.get("amount")),
                "payee_name": t.get("payee_name"),
                "category_name": t.get("category_name"),
                "memo": t.get("memo"),
                "approved": t.get("approved"),
                "cleared": t.get("cleared"),
                "flag_color": t.get("flag_color"),
            }
            for t in shown
        ],
        "note": note,
    }


def summarize_payees(
    payload: Mapping[str, Any],
    limit: int = DEFAULT_PAYEE_LIMIT,
) -> Dict[str, Any]:
    """Return the first ``limit`` payees in upstream order."""
    payees = _live(_require(payload, "payees", "payees"))
    shown = payees[:limit]
    limited = len(payees) > limit

    if limited:
        note = (
            f"Showing first {limit} of {len(payees)} payees. "
            "Use get_payee to get details for a specific payee."
        )
    else:
        note = "Showing all payees."

    return {
        "summary": {
            "total_count": len(payees),
            "showing_count": len(shown),
            "limited": limited,
        },
        "payees": [
            {
                "id": p.get("id"),
                "name": p.get("name"),
                "transfer_account_id": p.get("transfer_account_id"),
            }
            for p in shown
        ],
        "note": note,
    }


def summarize_scheduled_transactions(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """List every live scheduled transaction without truncation."""
    scheduled = _live(
        _require(payload, "scheduled_transactions", "scheduled transactions")
    )

    return {
        "summary": {
            "total_count": len(scheduled),
            "showing_count": len(scheduled),
            "limited": False,
        },
        "scheduled_transactions": [
            {
                "id": st.get("id"),
                "date_first": st.get("date_first"),
                "date_next": st.get("date_next"),
                "frequency": st.get("frequency"),
                "amount": format_currency(st.get("amount")),
                "payee_name": st.get("payee_name"),
                "category_name": st.get("category_name"),
                "memo": st.get("memo"),
            }
            for st in scheduled
        ],
        "note": (
            "Deleted scheduled transactions not shown. "
            "Use get_scheduled_transaction for full details."
        ),
    }
