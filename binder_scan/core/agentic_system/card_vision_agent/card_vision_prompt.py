"""
Card vision agent prompts.

Defines the system prompt and the per-variant instructions sent with the
photo. Variants:
- binder: a binder page with several pockets, read in order
- single: a photo of one card

Dependencies: langchain_core.messages
System role: Prompt templates for card identification
"""

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from binder_scan.core.exceptions import UnsupportedPromptVariantError

SYSTEM_PROMPT = """You are an expert cataloguer for the Pokémon Trading Card Game.
You identify cards from photos precisely and never report a card you cannot see."""

OUTPUT_FORMAT = """## Output
Reply with JSON only, without prose or code fences:
{"cards": [{"name": "Pikachu", "set": "151", "number": "025/165", "confidence": 0.92}]}
- name: the English card name exactly as printed, including suffixes such as ex, GX, V, VMAX or VSTAR
- set: the expansion name, or null if you are not sure
- number: the collector number as printed at the bottom of the card, or null if unreadable
- confidence: a number between 0 and 1 for how certain you are about the name
If no card is visible reply {"cards": []}."""

BINDER_INSTRUCTIONS = f"""The photo shows a page of a collector's binder with card pockets, usually a 3x3 grid.

## Instructions
1. Examine every pocket in reading order: left to right, top to bottom
2. Skip empty pockets and cards showing their back
3. Report each visible card once, in that order, even if the same card appears twice
4. Use the set symbol, set code and artwork to identify the expansion
5. Read the collector number even when the sleeve reflects light; prefer null over a guess

{OUTPUT_FORMAT}"""

SINGLE_INSTRUCTIONS = f"""The photo shows a single Pokémon card.

## Instructions
1. Identify the card in the photo; ignore sleeves, toploaders and background objects
2. Use the set symbol, set code and artwork to identify the expansion
3. Read the collector number at the bottom of the card; prefer null over a guess

{OUTPUT_FORMAT}"""

PROMPT_VARIANTS: dict[str, str] = {
    "binder": BINDER_INSTRUCTIONS,
    "single": SINGLE_INSTRUCTIONS,
}


def get_variant_instructions(variant: str) -> str:
    """
    Instructions for a prompt variant.

    Raises:
        UnsupportedPromptVariantError: If the variant is unknown
    """
    try:
        return PROMPT_VARIANTS[variant]
    except KeyError:
        raise UnsupportedPromptVariantError(variant, sorted(PROMPT_VARIANTS)) from None


def build_scan_messages(
    image_data_url: str,
    variant: str = "binder",
    detail: str = "high",
) -> list[BaseMessage]:
    """
    Build the chat messages for one scan.

    Args:
        image_data_url: data:image/...;base64, URL of the photo
        variant: Prompt variant name
        detail: Image detail hint (low, high, auto)

    Returns:
        list[BaseMessage]: System message and a human message carrying the
            instructions and the image
    """
    instructions = get_variant_instructions(variant)
    return [
        SystemMessage(content=SYSTEM_PROMPT),
        HumanMessage(
            content=[
                {"type": "text", "text": instructions},
                {"type": "image_url", "image_url": {"url": image_data_url, "detail": detail}},
            ]
        ),
    ]
