"""Thin async client for the YNAB REST API."""

import asyncio
import logging
import time
from typing import Any, Dict, Optional

import httpx

DEFAULT_BASE_URL = "https://api.ynab.com/v1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3

logger = logging.getLogger(__name__)


class YnabApiError(Exception):
    """A YNAB request failed, either upstream (HTTP status) or in transport."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


def _error_detail(response: httpx.Response) -> Optional[str]:
    """Pull ``error.detail`` out of a YNAB error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("detail") or error.get("name")
    return None


def _is_retryable(exc: YnabApiError) -> bool:
    return exc.status_code is None or exc.status_code >= 500


class YnabClient:
    """Issue authenticated requests against the YNAB API.

    Every call returns the ``data`` member of the YNAB response envelope.
    GET requests are retried on transport errors and 5xx responses;
    writes are sent exactly once.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not token:
            raise ValueError(
                "YNAB API token is required. Set the YNAB_API_TOKEN environment variable."
            )
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
        )

    async def __aenter__(self) -> "YnabClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send one request, retrying idempotent reads on transient failures."""
        attempts = 1 + (self.max_retries if method == "GET" else 0)

        for attempt in range(1, attempts + 1):
            try:
                return await self._send(method, path, body, params)
            except YnabApiError as e:
                if attempt == attempts or not _is_retryable(e):
                    raise
                logger.warning(
                    "Retrying %s %s after attempt %d/%d failed: %s",
                    method, path, attempt, attempts, e,
                )
                await asyncio.sleep(self.retry_delay * attempt)

    async def _send(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]],
        params: Optional[Dict[str, Any]],
    ) -> Any:
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        started = time.monotonic()
        logger.debug("YNAB API request: %s %s", method, path)

        try:
            response = await self._http.request(method, path, json=body, params=params or None)
        except httpx.TimeoutException:
            logger.error("YNAB API timeout: %s %s after %.1fs", method, path, self.timeout)
            raise YnabApiError(f"YNAB API request timed out after {self.timeout:g}s") from None
        except httpx.HTTPError as e:
            logger.error("YNAB API request failed: %s %s: %s", method, path, e)
            raise YnabApiError(f"YNAB API request failed: {e}") from e

        duration_ms = (time.monotonic() - started) * 1000

        if response.is_error:
            detail = _error_detail(response)
            logger.error(
                "YNAB API error %d on %s %s (%.0fms): %s",
                response.status_code, method, path, duration_ms, detail,
            )
            raise YnabApiError(
                f"YNAB API error ({response.status_code}): {detail or response.reason_phrase}",
                status_code=response.status_code,
                detail=detail,
            )

        logger.debug(
            "YNAB API response: %s %s (%.0fms, %d bytes)",
            method, path, duration_ms, len(response.content),
        )
        if not response.content:
            return None
        payload = response.json()
        return payload.get("data") if isinstance(payload, dict) else payload

    # Budgets

    async def get_budgets(self) -> Any:
        return await self.request("GET", "/budgets")

    async def get_budget(self, budget_id: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}")

    async def get_budget_settings(self, budget_id: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}/settings")

    # Accounts

    async def get_accounts(self, budget_id: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}/accounts")

    async def get_account(self, budget_id: str, account_id: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}/accounts/{account_id}")

    async def create_account(self, budget_id: str, account: Dict[str, Any]) -> Any:
        return await self.request("POST", f"/budgets/{budget_id}/accounts", {"account": account})

    # Categories

    async def get_categories(self, budget_id: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}/categories")

    async def get_category(self, budget_id: str, category_id: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}/categories/{category_id}")

    async def get_category_for_month(self, budget_id: str, month: str, category_id: str) -> Any:
        return await self.request(
            "GET", f"/budgets/{budget_id}/months/{month}/categories/{category_id}"
        )

    async def update_category_for_month(
        self, budget_id: str, month: str, category_id: str, category: Dict[str, Any]
    ) -> Any:
        return await self.request(
            "PATCH",
            f"/budgets/{budget_id}/months/{month}/categories/{category_id}",
            {"category": category},
        )

    # Transactions

    async def get_transactions(
        self,
        budget_id: str,
        since_date: Optional[str] = None,
        type: Optional[str] = None,
    ) -> Any:
        return await self.request(
            "GET",
            f"/budgets/{budget_id}/transactions",
            params={"since_date": since_date, "type": type},
        )

    async def get_transaction(self, budget_id: str, transaction_id: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}/transactions/{transaction_id}")

    async def get_transactions_by_account(
        self, budget_id: str, account_id: str, since_date: Optional[str] = None
    ) -> Any:
        return await self.request(
            "GET",
            f"/budgets/{budget_id}/accounts/{account_id}/transactions",
            params={"since_date": since_date},
        )

    async def get_transactions_by_category(
        self, budget_id: str, category_id: str, since_date: Optional[str] = None
    ) -> Any:
        return await self.request(
            "GET",
            f"/budgets/{budget_id}/categories/{category_id}/transactions",
            params={"since_date": since_date},
        )

    async def get_transactions_by_payee(
        self, budget_id: str, payee_id: str, since_date: Optional[str] = None
    ) -> Any:
        return await self.request(
            "GET",
            f"/budgets/{budget_id}/payees/{payee_id}/transactions",
            params={"since_date": since_date},
        )

    async def create_transaction(self, budget_id: str, transaction: Dict[str, Any]) -> Any:
        return await self.request(
            "POST", f"/budgets/{budget_id}/transactions", {"transaction": transaction}
        )

    async def update_transaction(
        self, budget_id: str, transaction_id: str, transaction: Dict[str, Any]
    ) -> Any:
        return await self.request(
            "PUT",
            f"/budgets/{budget_id}/transactions/{transaction_id}",
            {"transaction": transaction},
        )

    async def delete_transaction(self, budget_id: str, transaction_id: str) -> Any:
        return await self.request("DELETE", f"/budgets/{budget_id}/transactions/{transaction_id}")

    # Scheduled transactions

    async def get_scheduled_transactions(self, budget_id: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}/scheduled_transactions")

    async def get_scheduled_transaction(self, budget_id: str, scheduled_transaction_id: str) -> Any:
        return await self.request(
            "GET", f"/budgets/{budget_id}/scheduled_transactions/{scheduled_transaction_id}"
        )

    # Payees

    async def get_payees(self, budget_id: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}/payees")

    async def get_payee(self, budget_id: str, payee_id: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}/payees/{payee_id}")

    # Months

    async def get_months(self, budget_id: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}/months")

    async def get_month(self, budget_id: str, month: str) -> Any:
        return await self.request("GET", f"/budgets/{budget_id}/months/{month}")
