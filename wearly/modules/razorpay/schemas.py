from pydantic import BaseModel
from typing import Optional, Dict, Any


class VerifyPaymentRequest(BaseModel):
    razorpay_payment_id: Optional[str] = None
    razorpay_order_id: Optional[str] = None
    razorpay_signature: Optional[str] = None


class CreateOrderResponse(BaseModel):
    order: Dict[str, Any]
    key: str
