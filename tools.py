"""Tool catalogue: MCP tool definitions mapped to YNAB operations and summarizers."""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from mcp.types import Tool

from arguments import MAX_LIMIT
from summaries import (
    DEFAULT_PAYEE_LIMIT,
    DEFAULT_TRANSACTION_LIMIT,
    summarize_accounts,
    summarize_budget,
    summarize_categories,
    summarize_month,
    summarize_payees,
    summarize_scheduled_transactions,
    summarize_transactions,
)
from ynab_client import YnabClient

Operation = Callable[[YnabClient, Dict[str, Any]], Awaitable[Any]]
Summarizer = Callable[[Any, Dict[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class ToolBinding:
    """One tool: its MCP definition, the YNAB call, and an optional summarizer."""

    tool: Tool
    call: Operation
    summarize: Optional[Summarizer] = None

    @property
    def name(self) -> str:
        return self.tool.name

    @property
    def required(self) -> Tuple[str, ...]:
        return tuple(self.tool.inputSchema.get("required", []))


ACCOUNT_TYPES = [
    "checking", "savings", "creditCard", "cash", "lineOfCredit", "otherAsset",
    "otherLiability", "mortgage", "autoLoan", "studentLoan", "personalLoan",
    "medicalDebt", "otherDebt",
]
CLEARED_STATUSES = ["cleared", "uncleared", "reconciled"]
FLAG_COLORS = ["red", "orange", "yellow", "green", "blue", "purple"]

BUDGET_ID = {
    "type": "string",
    "description": (
        "The budget ID. Defaults to the configured budget ('last-used' unless "
        "YNAB_DEFAULT_BUDGET_ID is set)."
    ),
}
MONTH = {
    "type": "string",
    "description": (
        "The month in ISO format (YYYY-MM-DD), e.g. '2025-01-01' for January 2025, "
        "or 'current' for the current month."
    ),
}
SINCE_DATE = {
    "type": "string",
    "description": "Only return transactions on or after this date (YYYY-MM-DD).",
}
MILLIUNITS_NOTE = "in milliunits (1000 milliunits = $1)"


def _id(kind: str) -> Dict[str, Any]:
    return {"type": "string", "description": f"The {kind} ID"}


def _limit(noun: str, default: int) -> Dict[str, Any]:
    return {
        "type": "integer",
        "description": (
            f"Maximum number of {noun} to list. The summary always reports the full count."
        ),
        "minimum": 1,
        "maximum": MAX_LIMIT,
        "default": default,
    }


def _schema(properties: Dict[str, Any], required: Iterable[str] = ()) -> Dict[str, Any]:
    schema: Dict[str, Any] = {
        "type": "object",
        "properties": {"budget_id": BUDGET_ID, **properties},
        "additionalProperties": False,
    }
    if required:
        schema["required"] = list(required)
    return schema


def _pick(arguments: Dict[str, Any], fields: List[str]) -> Dict[str, Any]:
    """Copy only the fields the caller actually sent, keeping explicit nulls."""
    return {field: arguments[field] for field in fields if field in arguments}


TRANSACTION_FIELDS = [
    "account_id", "date", "amount", "payee_id", "payee_name", "category_id",
    "memo", "cleared", "approved", "flag_color",
]


async def _create_transaction(client: YnabClient, args: Dict[str, Any]) -> Any:
    transaction = _pick(args, TRANSACTION_FIELDS)
    transaction.setdefault("approved", False)
    return await client.create_transaction(args["budget_id"], transaction)


async def _update_transaction(client: YnabClient, args: Dict[str, Any]) -> Any:
    return await client.update_transaction(
        args["budget_id"],
        args["transaction_id"],
        _pick(args, [f for f in TRANSACTION_FIELDS if f != "payee_name"]),
    )


def _transaction_summary(data: Any, args: Dict[str, Any]) -> Dict[str, Any]:
    return summarize_transactions(data, args.get("limit", DEFAULT_TRANSACTION_LIMIT))


def _payee_summary(data: Any, args: Dict[str, Any]) -> Dict[str, Any]:
    return summarize_payees(data, args.get("limit", DEFAULT_PAYEE_LIMIT))


def _whole(summarizer: Callable[[Any], Dict[str, Any]]) -> Summarizer:
    return lambda data, args: summarizer(data)


TOOL_BINDINGS: List[ToolBinding] = [
    # Budgets
    ToolBinding(
        Tool(
            name="get_budgets",
            description="List all budgets accessible to the user, with their IDs.",
            inputSchema={"type": "object", "properties": {}, "additionalProperties": False},
        ),
        lambda client, args: client.get_budgets(),
    ),
    ToolBinding(
        Tool(
            name="get_budget",
            description=(
                "Get a budget's identity, date range, currency format and counts of its "
                "accounts, categories and payees. Use the other tools for the contents."
            ),
            inputSchema=_schema({}),
        ),
        lambda client, args: client.get_budget(args["budget_id"]),
        _whole(summarize_budget),
    ),
    ToolBinding(
        Tool(
            name="get_budget_settings",
            description="Get date and currency format settings for a budget.",
            inputSchema=_schema({}),
        ),
        lambda client, args: client.get_budget_settings(args["budget_id"]),
    ),
    # Accounts
    ToolBinding(
        Tool(
            name="get_accounts",
            description=(
                "List open accounts split into on-budget and off-budget, with balance totals. "
                "Closed accounts are counted only."
            ),
            inputSchema=_schema({}),
        ),
        lambda client, args: client.get_accounts(args["budget_id"]),
        _whole(summarize_accounts),
    ),
    ToolBinding(
        Tool(
            name="get_account",
            description="Get a single account by ID.",
            inputSchema=_schema({"account_id": _id("account")}, ["account_id"]),
        ),
        lambda client, args: client.get_account(args["budget_id"], args["account_id"]),
    ),
    ToolBinding(
        Tool(
            name="create_account",
            description="Create a new account.",
            inputSchema=_schema(
                {
                    "name": {"type": "string", "description": "The name of the account"},
                    "type": {
                        "type": "string",
                        "description": "The type of account",
                        "enum": ACCOUNT_TYPES,
                    },
                    "balance": {
                        "type": "number",
                        "description": f"The current balance {MILLIUNITS_NOTE}",
                    },
                },
                ["name", "type", "balance"],
            ),
        ),
        lambda client, args: client.create_account(
            args["budget_id"], _pick(args, ["name", "type", "balance"])
        ),
    ),
    # Categories
    ToolBinding(
        Tool(
            name="get_categories",
            description=(
                "List visible category groups and their categories with IDs and goal types. "
                "Use these IDs for category filters."
            ),
            inputSchema=_schema({}),
        ),
        lambda client, args: client.get_categories(args["budget_id"]),
        _whole(summarize_categories),
    ),
    ToolBinding(
        Tool(
            name="get_category",
            description="Get a single category by ID for the current month.",
            inputSchema=_schema({"category_id": _id("category")}, ["category_id"]),
        ),
        lambda client, args: client.get_category(args["budget_id"], args["category_id"]),
    ),
    ToolBinding(
        Tool(
            name="get_category_for_month",
            description="Get a category's budgeted, activity and balance for a specific month.",
            inputSchema=_schema(
                {"month": MONTH, "category_id": _id("category")},
                ["month", "category_id"],
            ),
        ),
        lambda client, args: client.get_category_for_month(
            args["budget_id"], args["month"], args["category_id"]
        ),
    ),
    ToolBinding(
        Tool(
            name="update_category_for_month",
            description="Set the budgeted amount of a category for a specific month.",
            inputSchema=_schema(
                {
                    "month": MONTH,
                    "category_id": _id("category"),
                    "budgeted": {
                        "type": "number",
                        "description": f"The budgeted amount {MILLIUNITS_NOTE}",
                    },
                },
                ["month", "category_id", "budgeted"],
            ),
        ),
        lambda client, args: client.update_category_for_month(
            args["budget_id"], args["month"], args["category_id"],
            {"budgeted": args["budgeted"]},
        ),
    ),
    # Transactions
    ToolBinding(
        Tool(
            name="get_transactions",
            description=(
                "List the most recent transactions for a budget, newest first. "
                "Narrow with since_date when the summary reports limited=true."
            ),
            inputSchema=_schema({
                "since_date": SINCE_DATE,
                "type": {
                    "type": "string",
                    "description": "Only return uncategorized or unapproved transactions.",
                    "enum": ["uncategorized", "unapproved"],
                },
                "limit": _limit("transactions", DEFAULT_TRANSACTION_LIMIT),
            }),
        ),
        lambda client, args: client.get_transactions(
            args["budget_id"], since_date=args.get("since_date"), type=args.get("type")
        ),
        _transaction_summary,
    ),
    ToolBinding(
        Tool(
            name="get_transaction",
            description="Get a single transaction by ID, including subtransactions.",
            inputSchema=_schema({"transaction_id": _id("transaction")}, ["transaction_id"]),
        ),
        lambda client, args: client.get_transaction(args["budget_id"], args["transaction_id"]),
    ),
    ToolBinding(
        Tool(
            name="get_transactions_by_account",
            description="List the most recent transactions for one account, newest first.",
            inputSchema=_schema(
                {
                    "account_id": _id("account"),
                    "since_date": SINCE_DATE,
                    "limit": _limit("transactions", DEFAULT_TRANSACTION_LIMIT),
                },
                ["account_id"],
            ),
        ),
        lambda client, args: client.get_transactions_by_account(
            args["budget_id"], args["account_id"], since_date=args.get("since_date")
        ),
        _transaction_summary,
    ),
    ToolBinding(
        Tool(
            name="get_transactions_by_category",
            description="List the most recent transactions for one category, newest first.",
            inputSchema=_schema(
                {
                    "category_id": _id("category"),
                    "since_date": SINCE_DATE,
                    "limit": _limit("transactions", DEFAULT_TRANSACTION_LIMIT),
                },
                ["category_id"],
            ),
        ),
        lambda client, args: client.get_transactions_by_category(
            args["budget_id"], args["category_id"], since_date=args.get("since_date")
        ),
        _transaction_summary,
    ),
    ToolBinding(
        Tool(
            name="get_transactions_by_payee",
            description="List the most recent transactions for one payee, newest first.",
            inputSchema=_schema(
                {
                    "payee_id": _id("payee"),
                    "since_date": SINCE_DATE,
                    "limit": _limit("transactions", DEFAULT_TRANSACTION_LIMIT),
                },
                ["payee_id"],
            ),
        ),
        lambda client, args: client.get_transactions_by_payee(
            args["budget_id"], args["payee_id"], since_date=args.get("since_date")
        ),
        _transaction_summary,
    ),
    ToolBinding(
        Tool(
            name="create_transaction",
            description=(
                "Create a transaction. Amounts are milliunits: inflows positive, "
                "outflows negative."
            ),
            inputSchema=_schema(
                {
                    "account_id": _id("account"),
                    "date": {"type": "string", "description": "The transaction date (YYYY-MM-DD)"},
                    "amount": {
                        "type": "number",
                        "description": f"The transaction amount {MILLIUNITS_NOTE}",
                    },
                    "payee_id": _id("payee"),
                    "payee_name": {
                        "type": "string",
                        "description": "The payee name, used when payee_id is not provided",
                    },
                    "category_id": _id("category"),
                    "memo": {"type": "string", "description": "A memo for the transaction"},
                    "cleared": {"type": "string", "enum": CLEARED_STATUSES},
                    "approved": {
                        "type": "boolean",
                        "description": "Whether the transaction is approved (default: false)",
                    },
                    "flag_color": {"type": "string", "enum": FLAG_COLORS},
                },
                ["account_id", "date", "amount"],
            ),
        ),
        _create_transaction,
    ),
    ToolBinding(
        Tool(
            name="update_transaction",
            description="Update fields of an existing transaction. Only the fields sent are changed.",
            inputSchema=_schema(
                {
                    "transaction_id": _id("transaction"),
                    "account_id": _id("account"),
                    "date": {"type": "string", "description": "The transaction date (YYYY-MM-DD)"},
                    "amount": {
                        "type": "number",
                        "description": f"The transaction amount {MILLIUNITS_NOTE}",
                    },
                    "payee_id": _id("payee"),
                    "category_id": _id("category"),
                    "memo": {"type": "string", "description": "A memo for the transaction"},
                    "cleared": {"type": "string", "enum": CLEARED_STATUSES},
                    "approved": {"type": "boolean"},
                    "flag_color": {
                        "type": ["string", "null"],
                        "description": "Flag color, or null to remove the flag",
                        "enum": FLAG_COLORS + [None],
                    },
                },
                ["transaction_id"],
            ),
        ),
        _update_transaction,
    ),
    ToolBinding(
        Tool(
            name="delete_transaction",
            description="Delete a transaction.",
            inputSchema=_schema({"transaction_id": _id("transaction")}, ["transaction_id"]),
        ),
        lambda client, args: client.delete_transaction(args["budget_id"], args["transaction_id"]),
    ),
    # Scheduled transactions
    ToolBinding(
        Tool(
            name="get_scheduled_transactions",
            description="List scheduled (recurring) transactions with their next dates.",
            inputSchema=_schema({}),
        ),
        lambda client, args: client.get_scheduled_transactions(args["budget_id"]),
        _whole(summarize_scheduled_transactions),
    ),
    ToolBinding(
        Tool(
            name="get_scheduled_transaction",
            description="Get a single scheduled transaction by ID.",
            inputSchema=_schema(
                {"scheduled_transaction_id": _id("scheduled transaction")},
                ["scheduled_transaction_id"],
            ),
        ),
        lambda client, args: client.get_scheduled_transaction(
            args["budget_id"], args["scheduled_transaction_id"]
        ),
    ),
    # Payees
    ToolBinding(
        Tool(
            name="get_payees",
            description="List payees with their IDs, in the order YNAB returns them.",
            inputSchema=_schema({"limit": _limit("payees", DEFAULT_PAYEE_LIMIT)}),
        ),
        lambda client, args: client.get_payees(args["budget_id"]),
        _payee_summary,
    ),
    ToolBinding(
        Tool(
            name="get_payee",
            description="Get a single payee by ID.",
            inputSchema=_schema({"payee_id": _id("payee")}, ["payee_id"]),
        ),
        lambda client, args: client.get_payee(args["budget_id"], args["payee_id"]),
    ),
    # Months
    ToolBinding(
        Tool(
            name="get_months",
            description="List budget months with income, budgeted, activity and age of money.",
            inputSchema=_schema({}),
        ),
        lambda client, args: client.get_months(args["budget_id"]),
    ),
    ToolBinding(
        Tool(
            name="get_month",
            description=(
                "Get one month's totals and its categories grouped by category group, "
                "with per-group budgeted, activity and balance totals."
            ),
            inputSchema=_schema({"month": MONTH}, ["month"]),
        ),
        lambda client, args: client.get_month(args["budget_id"], args["month"]),
        _whole(summarize_month),
    ),
]

TOOLS_BY_NAME: Dict[str, ToolBinding] = {binding.name: binding for binding in TOOL_BINDINGS}
