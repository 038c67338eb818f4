import logging
from supabase import Client
from fastapi import HTTPException
from typing import Any

logger = logging.getLogger(__name__)


class CreditService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_balance(self, user_id: str) -> int:
        """Current credit balance; 0 when the user has no row yet"""
        try:
            result = self.supabase.table("user_credits")\
                .select("credits")\
                .eq("user_id", user_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error reading credits for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        row = result.data if result is not None else None
        if not row:
            return 0
        return row.get("credits") or 0

    def current_balance(self, user_id: str) -> int:
        """Balance after any pending monthly top-up; a failed top-up is logged and skipped"""
        try:
            self.ensure_monthly_topup(user_id)
        except HTTPException as e:
            logger.warning(f"Monthly top-up skipped for {user_id}: {e.detail}")
        return self.get_balance(user_id)

    def ensure_monthly_topup(self, user_id: str) -> None:
        self._rpc("ensure_monthly_topup", {"p_user_id": user_id})

    def consume(self, user_id: str, amount: int = 1) -> bool:
        """Debit credits. False when the balance does not cover the amount."""
        return bool(self._rpc("consume_credits", {"p_user_id": user_id, "p_amount": amount}))

    def increment(self, user_id: str, delta: int) -> Any:
        return self._rpc("increment_credits", {"p_user_id": user_id, "p_delta": delta})

    def mark_payment_processed(self, payment_id: str) -> bool:
        """Record a payment id. False when it had already been recorded."""
        return self._rpc("mark_payment_processed", {"p_payment_id": payment_id}) is not False

    def _rpc(self, name: str, params: dict) -> Any:
        try:
            result = self.supabase.rpc(name, params).execute()
        except Exception as e:
            logger.error(f"RPC {name} failed: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return result.data
