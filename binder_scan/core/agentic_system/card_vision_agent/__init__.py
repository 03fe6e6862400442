"""Card vision agent package."""

from .card_vision_agent import CardVisionAgent, create_chat_model, parse_detection_reply
from .card_vision_prompt import PROMPT_VARIANTS, build_scan_messages
from .card_vision_schema import DetectedCard

__all__ = [
    "PROMPT_VARIANTS",
    "CardVisionAgent",
    "DetectedCard",
    "build_scan_messages",
    "create_chat_model",
    "parse_detection_reply",
]
