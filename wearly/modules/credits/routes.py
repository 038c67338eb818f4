import asyncio
from fastapi import APIRouter, Depends
from wearly.database.supabase_client import get_service_supabase
from wearly.modules.credits.schemas import CreditsResponse
from wearly.modules.credits.service import CreditService
from wearly.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/credits", tags=["credits"])


def get_credit_service(supabase: Client = Depends(get_service_supabase)) -> CreditService:
    return CreditService(supabase)


@router.get("", response_model=CreditsResponse)
async def get_credits(
    current_user: Dict = Depends(get_current_user),
    service: CreditService = Depends(get_credit_service)
):
    """Credit balance for the signed-in user, applying any pending monthly top-up first"""
    credits = await asyncio.to_thread(service.current_balance, current_user["id"])
    return CreditsResponse(credits=credits)
