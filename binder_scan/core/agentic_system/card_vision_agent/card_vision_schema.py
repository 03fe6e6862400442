"""Card vision agent schemas.

Defines DetectedCard, one card as reported by the vision model.

The model is asked for fixed keys but replies drift between revisions and
providers, so common aliases are accepted and values are coerced leniently.

Dependencies: pydantic
System role: Data schemas for vision model output
"""

import re
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONFIDENCE = 0.5

_UNKNOWN_VALUES = frozenset({"", "unknown", "n/a", "na", "none", "null", "?", "-"})
_PERCENT = re.compile(r"^\s*([0-9]+(?:\.[0-9]+)?)\s*%\s*$")


class DetectedCard(BaseModel):
    """A card identified by the vision model."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(
        validation_alias=AliasChoices("name", "card_name", "cardName"),
        description="Card name as printed, including suffixes such as ex or VMAX",
    )
    set_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("set", "set_name", "setName", "expansion"),
        description="Expansion set name, null when unknown",
    )
    number: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "number", "collector_number", "collectorNumber", "card_number", "cardNumber"
        ),
        description="Collector number as printed, e.g. 025/198",
    )
    confidence: float = Field(
        default=DEFAULT_CONFIDENCE,
        ge=0.0,
        le=1.0,
        description="Certainty about the name (0.0-1.0)",
    )

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("set_name", "number", mode="before")
    @classmethod
    def _blank_unknown(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value)) if float(value).is_integer() else str(value)
        if isinstance(value, str):
            text = value.strip()
            return None if text.lower() in _UNKNOWN_VALUES else text
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> float:
        if value is None or isinstance(value, bool):
            return DEFAULT_CONFIDENCE
        if isinstance(value, str):
            percent = _PERCENT.match(value)
            try:
                value = float(percent.group(1)) / 100 if percent else float(value)
            except ValueError:
                return DEFAULT_CONFIDENCE
        if not isinstance(value, (int, float)):
            return DEFAULT_CONFIDENCE
        value = float(value)
        if value > 1.0:
            value /= 100
        return min(max(value, 0.0), 1.0)
