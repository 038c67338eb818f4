import logging
from datetime import datetime, timezone
from fastapi import HTTPException
from wearly.core.gemini import GeminiImageClient, InlineImage, SafetyBlockedError
from wearly.core.images import load_image, optimize_jpeg, to_data_url
from wearly.modules.product.prompts import build_isolation_prompt
from wearly.modules.product.schemas import ProductType, ProductIsolateResponse

logger = logging.getLogger(__name__)

ISOLATION_MAX_SIDE = 800
ISOLATION_TEMPERATURE = 0.3


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class IsolationService:
    def __init__(self, generator: GeminiImageClient):
        self.generator = generator

    def isolate(self, image_url: str, product_type: ProductType) -> ProductIsolateResponse:
        """Extract the garment in image_url onto a white background"""
        logger.info(f"Isolating {product_type.value} product image")
        try:
            raw = load_image(image_url)
            try:
                image = InlineImage(optimize_jpeg(raw, ISOLATION_MAX_SIDE))
            except Exception as e:
                logger.warning(f"Could not re-encode product image, sending original: {e}")
                image = InlineImage(raw)

            prompt = build_isolation_prompt(product_type.value)
            generated = self.generator.generate_image([prompt, image], temperature=ISOLATION_TEMPERATURE)
        except SafetyBlockedError:
            logger.info("Product isolation blocked by safety filters")
            raise HTTPException(status_code=422, detail={
                "ok": False,
                "error": "Content blocked by safety filters. Please try a different image.",
                "method": "safety_blocked",
            })
        except Exception as e:
            logger.error(f"Product isolation error: {e}")
            raise HTTPException(status_code=500, detail={
                "ok": False,
                "error": str(e) or "Failed to isolate product",
                "timestamp": utc_timestamp(),
            })

        if generated is None:
            logger.info("No isolated image generated, returning optimized original")
            return ProductIsolateResponse(
                isolated_image=to_data_url(image.data, image.mime_type),
                method="fallback_original",
                note="Used optimized original image - Gemini did not generate isolated version",
            )

        return ProductIsolateResponse(
            isolated_image=generated,
            method="gemini_isolation",
            product_type=product_type,
            timestamp=utc_timestamp(),
        )
