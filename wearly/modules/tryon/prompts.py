TRYON_BASE_PROMPT = (
    "Create a realistic virtual try-on image showing the person wearing the provided product. "
    "Maintain the person's pose, lighting, and background while naturally applying the product to them."
)

TRYON_INSTRUCTIONS = {
    "tshirt": "Apply the t-shirt/shirt to the person. Make sure it fits naturally on their body, matching their pose and body shape. Keep the original colors and design of the garment.",
    "shoes": "Place the shoes on the person's feet. Ensure they look natural and properly sized for their feet. Maintain the shoe's original design and colors.",
    "pants": "Apply the pants/trousers to the person. Make sure they fit naturally on their legs and waist. Keep the original style and color of the pants.",
    "dress": "Apply the dress to the person. Ensure it fits naturally on their body shape and pose. Maintain the dress's original design, color, and style.",
    "jacket": "Apply the jacket/outerwear to the person. Make sure it fits over their existing clothing naturally. Keep the jacket's original design and color.",
    "accessories": "Apply the accessory (watch, jewelry, bag, etc.) to the appropriate part of the person's body. Make it look natural and properly positioned.",
}

PRODUCT_HANDOFF_TEXT = "Now apply this product to the person:"


def build_tryon_prompt(product_type: str, fit_instructions: str = None) -> str:
    instruction = TRYON_INSTRUCTIONS.get(product_type, TRYON_INSTRUCTIONS["tshirt"])
    if fit_instructions:
        return f"{TRYON_BASE_PROMPT} {instruction} Additional instructions: {fit_instructions}"
    return f"{TRYON_BASE_PROMPT} {instruction}"
