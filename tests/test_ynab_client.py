"""Tests for the YNAB HTTP client using httpx.MockTransport."""

import httpx
import pytest

from tests.conftest import FakeYnab
from ynab_client import YnabApiError, YnabClient


class TestYnabClientConstruction:
    def test_requires_token(self):
        with pytest.raises(ValueError, match="YNAB_API_TOKEN"):
            YnabClient("")

    def test_strips_trailing_slash(self):
        client = YnabClient("token", base_url="https://example.test/v1/")
        assert client.base_url == "https://example.test/v1"


class TestYnabClientRequests:
    @pytest.mark.asyncio
    async def test_unwraps_data_and_sends_bearer_token(self, fake_ynab, make_client):
        fake_ynab.add("/v1/budgets", {"budgets": [{"id": "b1"}]})

        async with make_client() as client:
            result = await client.get_budgets()

        assert result == {"budgets": [{"id": "b1"}]}
        request = fake_ynab.requests[0]
        assert request.method == "GET"
        assert request.headers["Authorization"] == "Bearer test-token"
        assert str(request.url) == "https://api.ynab.com/v1/budgets"

    @pytest.mark.asyncio
    async def test_query_params_skip_none(self, fake_ynab, make_client):
        fake_ynab.add("/v1/budgets/b1/transactions", {"transactions": []})

        async with make_client() as client:
            await client.get_transactions("b1", since_date="2025-01-01")

        request = fake_ynab.requests[0]
        assert request.url.params["since_date"] == "2025-01-01"
        assert "type" not in request.url.params

    @pytest.mark.asyncio
    async def test_filtered_transaction_paths(self, fake_ynab, make_client):
        for path in (
            "/v1/budgets/b1/accounts/a1/transactions",
            "/v1/budgets/b1/categories/c1/transactions",
            "/v1/budgets/b1/payees/p1/transactions",
        ):
            fake_ynab.add(path, {"transactions": []})

        async with make_client() as client:
            await client.get_transactions_by_account("b1", "a1")
            await client.get_transactions_by_category("b1", "c1", since_date="2025-01-01")
            await client.get_transactions_by_payee("b1", "p1")

        assert [r.url.path for r in fake_ynab.requests] == [
            "/v1/budgets/b1/accounts/a1/transactions",
            "/v1/budgets/b1/categories/c1/transactions",
            "/v1/budgets/b1/payees/p1/transactions",
        ]

    @pytest.mark.asyncio
    async def test_write_bodies_are_wrapped(self, fake_ynab, make_client):
        fake_ynab.add("/v1/budgets/b1/transactions", {"transaction": {"id": "t1"}}, status=201)
        fake_ynab.add("/v1/budgets/b1/months/2025-01-01/categories/c1", {"category": {}})

        async with make_client() as client:
            await client.create_transaction("b1", {"amount": -1000})
            await client.update_category_for_month("b1", "2025-01-01", "c1", {"budgeted": 5000})

        create, patch = fake_ynab.requests
        assert create.method == "POST"
        assert FakeYnab.body(create) == {"transaction": {"amount": -1000}}
        assert patch.method == "PATCH"
        assert FakeYnab.body(patch) == {"category": {"budgeted": 5000}}


class TestYnabClientErrors:
    @pytest.mark.asyncio
    async def test_upstream_error_detail(self, fake_ynab, make_client):
        async with make_client() as client:
            with pytest.raises(YnabApiError) as excinfo:
                await client.get_budget("missing")

        assert excinfo.value.status_code == 404
        assert excinfo.value.detail == "Resource not found"
        assert str(excinfo.value) == "YNAB API error (404): Resource not found"

    @pytest.mark.asyncio
    async def test_error_without_body_uses_reason(self, make_client):
        def handler(request):
            return httpx.Response(401, text="")

        client = YnabClient("t", transport=httpx.MockTransport(handler), retry_delay=0)
        with pytest.raises(YnabApiError, match=r"\(401\): Unauthorized"):
            await client.get_budgets()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_client_errors_not_retried(self, fake_ynab, make_client):
        fake_ynab.add("/v1/budgets", status=429, error={"detail": "Too many requests"})

        async with make_client(max_retries=3) as client:
            with pytest.raises(YnabApiError, match="429"):
                await client.get_budgets()

        assert len(fake_ynab.requests) == 1

    @pytest.mark.asyncio
    async def test_server_errors_retried_for_reads(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503, json={"error": {"detail": "Service unavailable"}})
            return httpx.Response(200, json={"data": {"budgets": []}})

        client = YnabClient("t", transport=httpx.MockTransport(handler), retry_delay=0)
        assert await client.get_budgets() == {"budgets": []}
        assert len(calls) == 3
        await client.aclose()

    @pytest.mark.asyncio
    async def test_retries_exhausted(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, json={"error": {"detail": "boom"}})

        client = YnabClient(
            "t", transport=httpx.MockTransport(handler), max_retries=2, retry_delay=0
        )
        with pytest.raises(YnabApiError, match=r"\(500\): boom"):
            await client.get_budgets()
        assert len(calls) == 3
        await client.aclose()

    @pytest.mark.asyncio
    async def test_writes_never_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, json={"error": {"detail": "boom"}})

        client = YnabClient("t", transport=httpx.MockTransport(handler), retry_delay=0)
        with pytest.raises(YnabApiError):
            await client.delete_transaction("b1", "t1")
        assert len(calls) == 1
        await client.aclose()

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        client = YnabClient(
            "t", transport=httpx.MockTransport(handler), timeout=5, max_retries=0
        )
        with pytest.raises(YnabApiError, match="timed out after 5s") as excinfo:
            await client.get_budgets()
        assert excinfo.value.status_code is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = YnabClient(
            "t", transport=httpx.MockTransport(handler), max_retries=1, retry_delay=0
        )
        with pytest.raises(YnabApiError, match="request failed: refused"):
            await client.get_budgets()
        await client.aclose()
