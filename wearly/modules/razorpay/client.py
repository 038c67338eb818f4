"""Minimal Razorpay REST client (orders API)."""
import logging
from typing import Any, Dict, Optional

import httpx

from wearly.config import settings

logger = logging.getLogger(__name__)


class RazorpayError(Exception):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"Razorpay API error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class RazorpayClient:
    def __init__(
        self,
        key_id: Optional[str] = None,
        key_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.key_id = key_id if key_id is not None else settings.razorpay_key_id
        self.key_secret = key_secret if key_secret is not None else settings.razorpay_key_secret
        self.base_url = (base_url or settings.razorpay_api_base).rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        with httpx.Client(
            base_url=self.base_url,
            auth=(self.key_id, self.key_secret),
            timeout=self.timeout,
        ) as client:
            response = client.request(method, path, json=json)
        if response.is_error:
            logger.error(f"Razorpay {method} {path} failed: {response.status_code}")
            raise RazorpayError(response.status_code, response.text)
        return response.json()

    def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/orders", json=payload)

    def fetch_order(self, order_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/orders/{order_id}")


def get_razorpay_client() -> RazorpayClient:
    return RazorpayClient()
