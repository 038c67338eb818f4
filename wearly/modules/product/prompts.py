ISOLATION_BASE_PROMPT = (
    "Remove the background and isolate only the product on a clean white background. "
    "Keep the product exactly as it is - same colors, textures, and details. "
    "Make sure the product is centered and well-lit."
)

ISOLATION_INSTRUCTIONS = {
    "tshirt": "Focus on the t-shirt/shirt. Remove any person wearing it and place just the garment on white background as if laid flat or on a mannequin.",
    "shoes": "Isolate the shoes/footwear only. Remove any background, floor, or other objects. Place shoes on white background.",
    "pants": "Extract the pants/trousers only. Remove the person and background. Show the garment on white background.",
    "dress": "Isolate the dress/garment only. Remove the person wearing it and place the dress on white background.",
    "jacket": "Extract the jacket/outerwear only. Remove the person and background. Show the jacket on white background.",
    "accessories": "Isolate the accessory (watch, jewelry, bag, etc.) only. Remove all background and place on clean white background.",
}


def build_isolation_prompt(product_type: str) -> str:
    instruction = ISOLATION_INSTRUCTIONS.get(product_type, ISOLATION_INSTRUCTIONS["tshirt"])
    return f"{ISOLATION_BASE_PROMPT} {instruction}"
