"""Style replicator: copy an outfit from a reference photo onto the user's photo."""
import asyncio
import logging
from typing import List, Optional, Tuple
from fastapi import HTTPException
from wearly.modules.product.schemas import ProductType
from wearly.modules.replicate.schemas import ReplicateRequest, ReplicateResponse, IsolatedParts
from wearly.modules.tryon.service import TryOnService

logger = logging.getLogger(__name__)

# (slot, placement type for apply, kinds isolated for the slot in preference order).
# Applied in this order: each step dresses the output of the previous one
SLOTS: List[Tuple[str, ProductType, Tuple[ProductType, ...]]] = [
    ("top", ProductType.TSHIRT, (ProductType.TSHIRT,)),
    ("bottom", ProductType.PANTS, (ProductType.PANTS,)),
    ("shoes_accessories", ProductType.SHOES, (ProductType.SHOES, ProductType.ACCESSORIES)),
]


class ReplicateService:
    def __init__(self, tryon: TryOnService):
        self.tryon = tryon

    def _isolate_or_none(self, image_url: str, product_type: ProductType) -> Optional[str]:
        try:
            return self.tryon.isolation.isolate(image_url, product_type).isolated_image
        except HTTPException as e:
            logger.warning(f"Isolation of {product_type.value} failed, skipping: {e.detail}")
            return None

    async def perform(self, user_id: str, request: ReplicateRequest) -> ReplicateResponse:
        include = request.include
        wanted = [entry for entry in SLOTS if getattr(include, entry[0])]
        kinds = [kind for _, _, slot_kinds in wanted for kind in slot_kinds]

        results = await asyncio.gather(*(
            asyncio.to_thread(self._isolate_or_none, request.reference_image_url, kind)
            for kind in kinds
        ))
        by_kind = dict(zip(kinds, results))

        # First successful isolation wins (shoes, else accessories)
        isolated = {
            slot: next((by_kind[k] for k in slot_kinds if by_kind.get(k)), None)
            for slot, _, slot_kinds in wanted
        }

        current = request.user_image_url
        for slot, placement, _ in wanted:
            product_image = isolated.get(slot)
            if not product_image:
                continue
            result = await asyncio.to_thread(
                self.tryon.apply, user_id, current, product_image, placement, request.fit_instructions
            )
            current = result.try_on_image

        return ReplicateResponse(final_image=current, isolated=IsolatedParts(**isolated))
