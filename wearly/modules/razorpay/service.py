import hashlib
import hmac
import json
import logging
import time
from typing import Any, Dict, Optional
from fastapi import HTTPException
from wearly.config import settings
from wearly.modules.credits.service import CreditService
from wearly.modules.razorpay.client import RazorpayClient, RazorpayError
from wearly.modules.razorpay.schemas import CreateOrderResponse, VerifyPaymentRequest

logger = logging.getLogger(__name__)

CAPTURED_EVENT = "payment.captured"


def compute_signature(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def verify_signature(secret: str, message: bytes, signature: Optional[str]) -> bool:
    """Constant-time HMAC-SHA256 hex comparison. Always False without a configured secret."""
    if not secret or not signature:
        return False
    return hmac.compare_digest(compute_signature(secret, message), signature.strip())


def _field(obj: Any, key: str) -> Dict[str, Any]:
    """Nested JSON object at key; {} when absent or not an object"""
    value = obj.get(key) if isinstance(obj, dict) else None
    return value if isinstance(value, dict) else {}


def parse_credit_notes(notes: Optional[Dict[str, Any]]) -> tuple:
    """(user_id, credits) from order/payment notes; 400 when either is missing"""
    notes = notes if isinstance(notes, dict) else {}
    user_id = notes.get("user_id")
    try:
        credits = int(float(notes.get("credits") or 0))
    except (TypeError, ValueError):
        credits = 0
    if not user_id or credits <= 0:
        raise HTTPException(status_code=400, detail="Missing metadata")
    return user_id, credits


class PaymentService:
    def __init__(self, credits: CreditService, razorpay: RazorpayClient):
        self.credits = credits
        self.razorpay = razorpay

    def create_order(self, amount: float, currency: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None) -> CreateOrderResponse:
        """Create a Razorpay order; amount is in the smallest currency unit (paise for INR)"""
        payload = {
            "amount": int(amount // 1),
            "currency": currency or "INR",
            "receipt": f"rcpt_{int(time.time() * 1000)}",
            "notes": metadata or {},
        }
        try:
            order = self.razorpay.create_order(payload)
        except RazorpayError as e:
            raise HTTPException(status_code=500, detail={"error": "Failed to create order", "detail": e.body})
        except Exception as e:
            logger.error(f"Order creation failed: {e}")
            raise HTTPException(status_code=500, detail={"error": "Unexpected error", "detail": str(e)})
        logger.info(f"Created Razorpay order {order.get('id')} for {payload['amount']} {payload['currency']}")
        return CreateOrderResponse(order=order, key=self.razorpay.key_id)

    def verify_checkout(self, body: VerifyPaymentRequest) -> Dict[str, Any]:
        """Verify a Checkout handler signature and credit the purchase"""
        if not body.razorpay_payment_id or not body.razorpay_order_id or not body.razorpay_signature:
            raise HTTPException(status_code=400, detail="Missing fields")

        message = f"{body.razorpay_order_id}|{body.razorpay_payment_id}".encode()
        if not verify_signature(self.razorpay.key_secret, message, body.razorpay_signature):
            logger.warning(f"Invalid checkout signature for order {body.razorpay_order_id}")
            raise HTTPException(status_code=401, detail="Invalid signature")

        try:
            order = self.razorpay.fetch_order(body.razorpay_order_id)
        except RazorpayError as e:
            raise HTTPException(status_code=502, detail={"error": "Failed to fetch order", "detail": e.body})
        except Exception as e:
            logger.error(f"Order lookup failed: {e}")
            raise HTTPException(status_code=502, detail={"error": "Failed to fetch order", "detail": str(e)})

        user_id, credits = parse_credit_notes(_field(order, "notes"))
        return self._credit(body.razorpay_payment_id, user_id, credits)

    def handle_webhook(self, raw_body: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """Process a Razorpay webhook delivery; the signature covers the raw body"""
        if not verify_signature(settings.razorpay_webhook_secret, raw_body, signature):
            logger.warning("Rejected webhook with invalid signature")
            raise HTTPException(status_code=401, detail="Invalid signature")

        try:
            event = json.loads(raw_body)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON")

        if not isinstance(event, dict):
            raise HTTPException(status_code=400, detail="Invalid JSON")

        if event.get("event") != CAPTURED_EVENT:
            return {"ok": True}

        payment = _field(_field(_field(event, "payload"), "payment"), "entity")
        user_id, credits = parse_credit_notes(payment.get("notes"))
        return self._credit(payment.get("id"), user_id, credits)

    def _credit(self, payment_id: str, user_id: str, credits: int) -> Dict[str, Any]:
        if not self.credits.mark_payment_processed(payment_id):
            logger.info(f"Payment {payment_id} already processed, skipping")
            return {"ok": True, "skipped": True}
        data = self.credits.increment(user_id, credits)
        logger.info(f"Credited {credits} to {user_id} for payment {payment_id}")
        return {"ok": True, "data": data}
