"""Tests for the credits endpoint and CreditService."""

import asyncio
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from wearly.modules.credits.service import CreditService


def set_balance_row(supabase: MagicMock, data):
    query = supabase.table.return_value.select.return_value.eq.return_value.maybe_single.return_value
    query.execute.return_value = MagicMock(data=data)
    return query


class TestGetCredits:
    """GET /api/credits"""

    def test_returns_balance(self, client: TestClient, service_supabase, test_user_id):
        set_balance_row(service_supabase, {"credits": 7})

        response = client.get("/api/credits")

        assert response.status_code == 200
        assert response.json() == {"credits": 7}
        service_supabase.table.assert_called_with("user_credits")
        service_supabase.table.return_value.select.return_value.eq.assert_called_with("user_id", test_user_id)

    def test_zero_when_no_row(self, client: TestClient, service_supabase):
        set_balance_row(service_supabase, None)

        response = client.get("/api/credits")

        assert response.status_code == 200
        assert response.json() == {"credits": 0}

    def test_zero_when_query_returns_nothing(self, client: TestClient, service_supabase):
        query = service_supabase.table.return_value.select.return_value.eq.return_value.maybe_single.return_value
        query.execute.return_value = None

        response = client.get("/api/credits")

        assert response.json() == {"credits": 0}

    def test_runs_monthly_topup_first(self, client: TestClient, service_supabase, rpc_calls, test_user_id):
        set_balance_row(service_supabase, {"credits": 3})

        client.get("/api/credits")

        assert rpc_calls[0] == ("ensure_monthly_topup", {"p_user_id": test_user_id})

    def test_topup_failure_is_not_fatal(self, client: TestClient, service_supabase, rpc_results):
        rpc_results["ensure_monthly_topup"] = RuntimeError("function does not exist")
        set_balance_row(service_supabase, {"credits": 5})

        response = client.get("/api/credits")

        assert response.status_code == 200
        assert response.json() == {"credits": 5}

    def test_requires_authentication(self, anon_client: TestClient):
        response = anon_client.get("/api/credits")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}


class TestCreditService:
    def test_consume_passes_amount(self, service_supabase, rpc_calls):
        assert CreditService(service_supabase).consume("u1", 2) is True
        assert rpc_calls == [("consume_credits", {"p_user_id": "u1", "p_amount": 2})]

    def test_consume_false_when_insufficient(self, service_supabase, rpc_results):
        rpc_results["consume_credits"] = False
        assert CreditService(service_supabase).consume("u1") is False

    def test_mark_payment_processed_detects_duplicates(self, service_supabase, rpc_results):
        service = CreditService(service_supabase)
        assert service.mark_payment_processed("pay_1") is True
        rpc_results["mark_payment_processed"] = False
        assert service.mark_payment_processed("pay_1") is False

    def test_rpc_failure_raises_500(self, service_supabase, rpc_results):
        rpc_results["increment_credits"] = RuntimeError("boom")
        with pytest.raises(HTTPException) as exc_info:
            CreditService(service_supabase).increment("u1", 10)
        assert exc_info.value.status_code == 500


class TestCreditsOffLoop:
    def test_supabase_calls_run_in_worker_thread(self, client: TestClient, service_supabase):
        seen = []
        record_rpc = service_supabase.rpc.side_effect

        def rpc(name, params):
            try:
                asyncio.get_running_loop()
                seen.append("loop")
            except RuntimeError:
                seen.append("worker")
            return record_rpc(name, params)

        service_supabase.rpc.side_effect = rpc
        set_balance_row(service_supabase, {"credits": 1})

        response = client.get("/api/credits")

        assert response.json() == {"credits": 1}
        assert seen == ["worker"]
