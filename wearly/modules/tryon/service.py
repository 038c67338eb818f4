import logging
from typing import Optional
from fastapi import HTTPException
from wearly.config import settings
from wearly.core.gemini import GeminiImageClient, InlineImage, SafetyBlockedError
from wearly.core.images import load_image, optimize_jpeg
from wearly.modules.credits.service import CreditService
from wearly.modules.product.schemas import ProductType
from wearly.modules.product.service import IsolationService, utc_timestamp
from wearly.modules.tryon.prompts import PRODUCT_HANDOFF_TEXT, build_tryon_prompt
from wearly.modules.tryon.schemas import TryOnResponse

logger = logging.getLogger(__name__)

USER_IMAGE_MAX_SIDE = 800
PRODUCT_IMAGE_MAX_SIDE = 600
TRYON_TEMPERATURE = 0.4


class TryOnService:
    def __init__(
        self,
        credits: CreditService,
        generator: GeminiImageClient,
        isolation: Optional[IsolationService] = None,
    ):
        self.credits = credits
        self.generator = generator
        self.isolation = isolation or IsolationService(generator)

    def charge(self, user_id: str) -> None:
        """Apply any pending monthly top-up, then debit one try-on. 402 when the balance is short."""
        try:
            self.credits.ensure_monthly_topup(user_id)
        except HTTPException as e:
            logger.warning(f"Monthly top-up failed for {user_id}: {e.detail}")
        if not self.credits.consume(user_id, settings.tryon_credit_cost):
            logger.info(f"Insufficient credits for {user_id}")
            raise HTTPException(status_code=402, detail={"ok": False, "error": "Insufficient credits"})

    def apply(
        self,
        user_id: str,
        user_image_url: str,
        product_image_url: str,
        product_type: ProductType,
        fit_instructions: Optional[str] = None,
    ) -> TryOnResponse:
        """Render the person in user_image_url wearing the product"""
        self.charge(user_id)
        logger.info(f"Starting virtual try-on ({product_type.value}) for {user_id}")
        try:
            user_image = optimize_jpeg(load_image(user_image_url), USER_IMAGE_MAX_SIDE)
            product_image = optimize_jpeg(load_image(product_image_url), PRODUCT_IMAGE_MAX_SIDE)
            prompt = build_tryon_prompt(product_type.value, fit_instructions)
            generated = self.generator.generate_image(
                [prompt, InlineImage(user_image), PRODUCT_HANDOFF_TEXT, InlineImage(product_image)],
                temperature=TRYON_TEMPERATURE,
            )
        except SafetyBlockedError:
            logger.info("Try-on blocked by safety filters")
            raise HTTPException(status_code=422, detail={
                "ok": False,
                "error": "Content blocked by safety filters. Please try different images.",
                "method": "safety_blocked",
            })
        except Exception as e:
            logger.error(f"Virtual try-on error: {e}")
            raise HTTPException(status_code=500, detail={
                "ok": False,
                "error": str(e) or "Failed to process virtual try-on",
                "timestamp": utc_timestamp(),
            })

        if generated is None:
            raise HTTPException(status_code=502, detail={
                "ok": False,
                "error": "Failed to generate try-on image. Please try again with different images.",
                "method": "no_generation",
            })

        return TryOnResponse(
            try_on_image=generated,
            product_type=product_type,
            timestamp=utc_timestamp(),
        )

    def perform(
        self,
        user_id: str,
        user_image_url: str,
        product_image_url: str,
        product_type: ProductType,
        fit_instructions: Optional[str] = None,
    ) -> TryOnResponse:
        """Isolate the product, then apply it in one call"""
        isolated = self.isolation.isolate(product_image_url, product_type)
        return self.apply(user_id, user_image_url, isolated.isolated_image, product_type, fit_instructions)
