import asyncio
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from wearly.core.rate_limit import limiter
from wearly.modules.credits.routes import get_credit_service
from wearly.modules.credits.service import CreditService
from wearly.modules.razorpay.client import RazorpayClient, get_razorpay_client
from wearly.modules.razorpay.schemas import CreateOrderResponse, VerifyPaymentRequest
from wearly.modules.razorpay.service import PaymentService

router = APIRouter(prefix="/razorpay", tags=["razorpay"])


def get_payment_service(
    credits: CreditService = Depends(get_credit_service),
    razorpay: RazorpayClient = Depends(get_razorpay_client)
) -> PaymentService:
    return PaymentService(credits, razorpay)


@router.post("/create-order", response_model=CreateOrderResponse)
async def create_order(
    request: Request,
    service: PaymentService = Depends(get_payment_service)
):
    """Create an order for Razorpay Checkout"""
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("application/json"):
        raise HTTPException(status_code=400, detail="Invalid content-type")
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON")

    amount = body.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not amount:
        raise HTTPException(status_code=400, detail="Amount required")
    return await asyncio.to_thread(service.create_order, amount, body.get("currency"), body.get("metadata"))


@router.post("/verify")
async def verify_payment(
    body: VerifyPaymentRequest,
    service: PaymentService = Depends(get_payment_service)
):
    """Verify a Checkout payment signature and credit the user"""
    return await asyncio.to_thread(service.verify_checkout, body)


@router.post("/webhook")
@limiter.exempt
async def razorpay_webhook(
    request: Request,
    service: PaymentService = Depends(get_payment_service)
):
    """Razorpay webhook receiver (payment.captured)"""
    raw_body = await request.body()
    return await asyncio.to_thread(service.handle_webhook, raw_body, request.headers.get("x-razorpay-signature"))


@router.get("/checkout-js")
async def checkout_js():
    """Former SDK proxy, kept so stale clients get a pointer instead of a 404"""
    return JSONResponse(
        status_code=410,
        content={"message": "Razorpay SDK proxy removed. Load https://checkout.razorpay.com/v1/checkout.js directly."},
    )
