"""Tests for Razorpay order creation, checkout verification and webhooks."""

import asyncio
import hashlib
import hmac
import json

import pytest
from fastapi.testclient import TestClient

from wearly.config import settings
from wearly.modules.razorpay.client import RazorpayError
from wearly.modules.razorpay.service import verify_signature

WEBHOOK_SECRET = "whsec_test"


def sign(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def captured_event(payment_id="pay_123", notes=None) -> bytes:
    notes = {"user_id": "user-9", "credits": "50"} if notes is None else notes
    return json.dumps({
        "event": "payment.captured",
        "payload": {"payment": {"entity": {"id": payment_id, "notes": notes}}},
    }).encode()


@pytest.fixture
def webhook_secret(monkeypatch) -> str:
    monkeypatch.setattr(settings, "razorpay_webhook_secret", WEBHOOK_SECRET)
    return WEBHOOK_SECRET


def post_webhook(client: TestClient, body: bytes, signature: str):
    return client.post(
        "/api/razorpay/webhook",
        content=body,
        headers={"Content-Type": "application/json", "X-Razorpay-Signature": signature},
    )


class TestSignature:
    def test_matches(self):
        assert verify_signature("k", b"msg", sign("k", b"msg"))

    def test_mismatch(self):
        assert not verify_signature("k", b"msg", sign("other", b"msg"))

    def test_no_secret_never_verifies(self):
        assert not verify_signature("", b"msg", sign("", b"msg"))


class TestWebhook:
    """POST /api/razorpay/webhook"""

    def test_rejects_bad_signature(self, anon_client: TestClient, webhook_secret, rpc_calls):
        body = captured_event()

        response = post_webhook(anon_client, body, sign("wrong-secret", body))

        assert response.status_code == 401
        assert rpc_calls == []

    def test_rejects_missing_signature(self, anon_client: TestClient, webhook_secret, rpc_calls):
        response = anon_client.post("/api/razorpay/webhook", content=captured_event())

        assert response.status_code == 401
        assert rpc_calls == []

    def test_rejects_modified_body(self, anon_client: TestClient, webhook_secret, rpc_calls):
        signature = sign(webhook_secret, captured_event(notes={"user_id": "user-9", "credits": "5"}))

        response = post_webhook(anon_client, captured_event(notes={"user_id": "user-9", "credits": "5000"}), signature)

        assert response.status_code == 401
        assert rpc_calls == []

    def test_credits_captured_payment(self, anon_client: TestClient, webhook_secret, rpc_calls):
        body = captured_event()

        response = post_webhook(anon_client, body, sign(webhook_secret, body))

        assert response.status_code == 200
        assert response.json() == {"ok": True, "data": 42}
        assert rpc_calls == [
            ("mark_payment_processed", {"p_payment_id": "pay_123"}),
            ("increment_credits", {"p_user_id": "user-9", "p_delta": 50}),
        ]

    def test_duplicate_delivery_is_skipped(self, anon_client: TestClient, webhook_secret, rpc_results, rpc_calls):
        rpc_results["mark_payment_processed"] = False
        body = captured_event()

        response = post_webhook(anon_client, body, sign(webhook_secret, body))

        assert response.json() == {"ok": True, "skipped": True}
        assert [name for name, _ in rpc_calls] == ["mark_payment_processed"]

    def test_ignores_other_events(self, anon_client: TestClient, webhook_secret, rpc_calls):
        body = json.dumps({"event": "payment.failed", "payload": {}}).encode()

        response = post_webhook(anon_client, body, sign(webhook_secret, body))

        assert response.json() == {"ok": True}
        assert rpc_calls == []

    def test_missing_metadata(self, anon_client: TestClient, webhook_secret, rpc_calls):
        body = captured_event(notes={"credits": "50"})

        response = post_webhook(anon_client, body, sign(webhook_secret, body))

        assert response.status_code == 400
        assert response.json() == {"error": "Missing metadata"}
        assert rpc_calls == []

    def test_invalid_json(self, anon_client: TestClient, webhook_secret):
        body = b"{not json"

        response = post_webhook(anon_client, body, sign(webhook_secret, body))

        assert response.status_code == 400

    @pytest.mark.parametrize("body", [b"[1, 2, 3]", b'"payment.captured"', b"null"])
    def test_non_object_json(self, anon_client: TestClient, webhook_secret, rpc_calls, body):
        response = post_webhook(anon_client, body, sign(webhook_secret, body))

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON"}
        assert rpc_calls == []

    @pytest.mark.parametrize("payload", [[], {"payment": "pay_1"}, {"payment": {"entity": []}}])
    def test_malformed_payment_entity(self, anon_client: TestClient, webhook_secret, rpc_calls, payload):
        body = json.dumps({"event": "payment.captured", "payload": payload}).encode()

        response = post_webhook(anon_client, body, sign(webhook_secret, body))

        assert response.status_code == 400
        assert response.json() == {"error": "Missing metadata"}
        assert rpc_calls == []

    def test_unconfigured_secret_rejects_everything(self, anon_client: TestClient, monkeypatch):
        monkeypatch.setattr(settings, "razorpay_webhook_secret", "")
        body = captured_event()

        response = post_webhook(anon_client, body, sign("", body))

        assert response.status_code == 401


class TestCreateOrder:
    """POST /api/razorpay/create-order"""

    def test_creates_order(self, anon_client: TestClient, razorpay):
        razorpay.create_order.return_value = {"id": "order_1", "amount": 49900, "currency": "INR"}

        response = anon_client.post(
            "/api/razorpay/create-order",
            json={"amount": 49900.7, "metadata": {"user_id": "user-9", "credits": 50}},
        )

        assert response.status_code == 200
        assert response.json() == {
            "order": {"id": "order_1", "amount": 49900, "currency": "INR"},
            "key": "rzp_test_key",
        }
        payload = razorpay.create_order.call_args.args[0]
        assert payload["amount"] == 49900
        assert payload["currency"] == "INR"
        assert payload["receipt"].startswith("rcpt_")
        assert payload["notes"] == {"user_id": "user-9", "credits": 50}

    def test_requires_json_content_type(self, anon_client: TestClient, razorpay):
        response = anon_client.post(
            "/api/razorpay/create-order",
            content="amount=100",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 400
        razorpay.create_order.assert_not_called()

    @pytest.mark.parametrize("body", [{}, {"amount": "100"}, {"amount": 0}, {"amount": True}])
    def test_requires_numeric_amount(self, anon_client: TestClient, razorpay, body):
        response = anon_client.post("/api/razorpay/create-order", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Amount required"}

    def test_upstream_failure(self, anon_client: TestClient, razorpay):
        razorpay.create_order.side_effect = RazorpayError(401, '{"error":{"code":"BAD_REQUEST_ERROR"}}')

        response = anon_client.post("/api/razorpay/create-order", json={"amount": 100})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to create order"


class TestVerifyPayment:
    """POST /api/razorpay/verify"""

    def checkout_body(self, razorpay, order_id="order_1", payment_id="pay_1"):
        return {
            "razorpay_order_id": order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": sign(razorpay.key_secret, f"{order_id}|{payment_id}".encode()),
        }

    def test_credits_from_order_notes(self, anon_client: TestClient, razorpay, rpc_calls):
        razorpay.fetch_order.return_value = {"id": "order_1", "notes": {"user_id": "user-9", "credits": 20}}

        response = anon_client.post("/api/razorpay/verify", json=self.checkout_body(razorpay))

        assert response.status_code == 200
        assert response.json()["ok"] is True
        razorpay.fetch_order.assert_called_once_with("order_1")
        assert ("increment_credits", {"p_user_id": "user-9", "p_delta": 20}) in rpc_calls

    def test_bad_signature(self, anon_client: TestClient, razorpay, rpc_calls):
        body = self.checkout_body(razorpay)
        body["razorpay_signature"] = "0" * 64

        response = anon_client.post("/api/razorpay/verify", json=body)

        assert response.status_code == 401
        razorpay.fetch_order.assert_not_called()
        assert rpc_calls == []

    def test_missing_fields(self, anon_client: TestClient):
        response = anon_client.post("/api/razorpay/verify", json={"razorpay_order_id": "order_1"})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing fields"}

    def test_order_without_metadata(self, anon_client: TestClient, razorpay):
        razorpay.fetch_order.return_value = {"id": "order_1", "notes": []}

        response = anon_client.post("/api/razorpay/verify", json=self.checkout_body(razorpay))

        assert response.status_code == 400


class TestCheckoutJs:
    def test_gone(self, anon_client: TestClient):
        response = anon_client.get("/api/razorpay/checkout-js")
        assert response.status_code == 410


def running_on_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class TestBlockingCallsOffLoop:
    """Razorpay HTTP calls and RPCs run in worker threads"""

    def test_create_order(self, anon_client: TestClient, razorpay):
        seen = []

        def create_order(payload):
            seen.append(running_on_event_loop())
            return {"id": "order_1"}

        razorpay.create_order.side_effect = create_order

        anon_client.post("/api/razorpay/create-order", json={"amount": 100})

        assert seen == [False]

    def test_webhook_rpcs(self, anon_client: TestClient, webhook_secret, service_supabase):
        seen = []
        record_rpc = service_supabase.rpc.side_effect

        def rpc(name, params):
            seen.append(running_on_event_loop())
            return record_rpc(name, params)

        service_supabase.rpc.side_effect = rpc
        body = captured_event()

        response = post_webhook(anon_client, body, sign(webhook_secret, body))

        assert response.status_code == 200
        assert seen == [False, False]
