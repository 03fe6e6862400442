"""Card vision agent.

Sends a binder photo to a vision-capable chat model and turns its JSON reply
into DetectedCard records.

Main agent class that:
1. Builds the chat model for the configured provider (OpenAI or Google)
2. Formats the prompt variant and image into chat messages
3. Parses the reply tolerantly (code fences, bare lists, key aliases)

Dependencies: langchain_core, langchain_openai, langchain_google_genai
System role: Vision model orchestration for card identification
"""

import logging
from typing import Any

from langchain_core.exceptions import OutputParserException
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.output_parsers import JsonOutputParser
from pydantic import ValidationError

from binder_scan.configs.vision import VisionSettings
from binder_scan.core.agentic_system.card_vision_agent.card_vision_prompt import (
    build_scan_messages,
)
from binder_scan.core.agentic_system.card_vision_agent.card_vision_schema import (
    DetectedCard,
)
from binder_scan.core.exceptions import ConfigurationError, VisionModelError
from binder_scan.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)

_API_KEY_SETTINGS = {"openai": "OPENAI_API_KEY", "google": "GOOGLE_API_KEY"}


def create_chat_model(settings: VisionSettings) -> BaseChatModel:
    """
    Build the chat model for the configured provider.

    Provider packages are imported lazily so only the one in use is loaded.

    Args:
        settings: Vision settings

    Returns:
        BaseChatModel: Configured chat model

    Raises:
        ConfigurationError: If the provider API key is missing
    """
    api_key = settings.api_key
    if not api_key:
        raise ConfigurationError(
            "Vision API key not configured",
            setting=_API_KEY_SETTINGS[settings.provider],
        )

    if settings.provider == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI

        return ChatGoogleGenerativeAI(
            model=settings.model,
            google_api_key=api_key,
            temperature=settings.temperature,
            max_output_tokens=settings.max_tokens,
            timeout=settings.timeout_seconds,
        )

    from langchain_openai import ChatOpenAI

    return ChatOpenAI(
        model=settings.model,
        api_key=api_key,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        timeout=settings.timeout_seconds,
    )


def message_text(message: BaseMessage) -> str:
    """Text of a chat reply whose content may be a string or a list of blocks."""
    content: Any = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(str(block.get("text", "")))
    return "".join(parts)


def parse_detection_reply(text: str, max_cards: int = 20) -> list[DetectedCard]:
    """
    Parse a vision model reply into detected cards.

    Accepts {"cards": [...]}, a bare list, or a single card object, with or
    without markdown code fences. Entries that do not validate or have no
    name are dropped.

    Args:
        text: Raw reply text
        max_cards: Maximum number of cards kept

    Returns:
        list[DetectedCard]: Cards in reply order

    Raises:
        VisionModelError: If the reply is not JSON or has no card list
    """
    try:
        payload = JsonOutputParser().parse(text)
    except OutputParserException as e:
        raise VisionModelError(
            "Vision model reply is not valid JSON",
            details={"reply": safe_log_value(text)},
        ) from e

    if isinstance(payload, list):
        entries = payload
    elif isinstance(payload, dict) and isinstance(payload.get("cards"), list):
        entries = payload["cards"]
    elif isinstance(payload, dict) and "name" in payload:
        entries = [payload]
    else:
        raise VisionModelError(
            "Vision model reply has no card list",
            details={"reply": safe_log_value(text)},
        )

    cards: list[DetectedCard] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            card = DetectedCard.model_validate(entry)
        except ValidationError as e:
            logger.debug(f"{__name__}:parse_detection_reply - dropping entry: {e.error_count()} errors")
            continue
        if card.name:
            cards.append(card)

    if len(cards) > max_cards:
        logger.warning(
            f"{__name__}:parse_detection_reply - truncating {len(cards)} cards to {max_cards}"
        )
    return cards[:max_cards]


class CardVisionAgent:
    """Identifies cards in a photo with a vision-capable chat model."""

    def __init__(
        self,
        settings: VisionSettings,
        model: BaseChatModel | None = None,
    ) -> None:
        """
        Initialize agent.

        The chat model is created on first use so a missing API key only
        fails scans, not application startup.

        Args:
            settings: Vision settings
            model: Pre-built chat model (tests, custom providers)
        """
        self._settings = settings
        self._model = model

    @property
    def model_name(self) -> str:
        """Configured model identifier."""
        return self._settings.model

    def _get_model(self) -> BaseChatModel:
        if self._model is None:
            logger.info(
                f"{__name__}:_get_model - creating {self._settings.provider} model "
                f"{self._settings.model}"
            )
            self._model = create_chat_model(self._settings)
        return self._model

    async def adetect(self, image_data_url: str, variant: str = "binder") -> list[DetectedCard]:
        """
        Identify the cards in a photo.

        Args:
            image_data_url: data:image/...;base64, URL of the photo
            variant: Prompt variant name

        Returns:
            list[DetectedCard]: Cards in reading order

        Raises:
            UnsupportedPromptVariantError: If the variant is unknown
            ConfigurationError: If the provider API key is missing
            VisionModelError: If the model call fails or the reply is unusable
        """
        messages = build_scan_messages(
            image_data_url,
            variant=variant,
            detail=self._settings.image_detail,
        )
        model = self._get_model()

        logger.info(f"{__name__}:adetect - START model={self.model_name} variant={variant}")
        try:
            reply = await model.ainvoke(messages)
        except Exception as e:
            logger.error(f"{__name__}:adetect - model call failed - {type(e).__name__}: {e}")
            raise VisionModelError(
                f"Vision model request failed: {type(e).__name__}",
                model=self.model_name,
                details={"error": safe_log_value(str(e))},
            ) from e

        cards = parse_detection_reply(message_text(reply), self._settings.max_cards)
        logger.info(f"{__name__}:adetect - END cards={len(cards)}")
        return cards
