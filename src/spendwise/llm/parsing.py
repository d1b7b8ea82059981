"""Repair and validation of completion service replies."""
import json
import math
import re
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, field_validator

from .models import INSIGHT_TYPES
from spendwise.utils.logger import get_logger
from spendwise.utils.exceptions import ReplyFormatError

logger = get_logger()

DEFAULT_CONFIDENCE = 0.8

_FENCE_JSON = re.compile(r"```json\n?")
_FENCE = re.compile(r"```\n?")
_TRAILING_COMMA = re.compile(r",\s*([\]}])")

_BOLD = re.compile(r"\*\*")
_HEADING = re.compile(r"#{1,6}\s")
_NUMBERED = re.compile(r"^\d+\.\s", re.MULTILINE)
_BULLET = re.compile(r"^[-*+]\s", re.MULTILINE)
_BLANK_RUNS = re.compile(r"\n{2,}")


class InsightSchema(BaseModel):
    """Pydantic schema for one insight element of the reply.

    Every field falls back to a default instead of failing validation, so
    one bad field never discards the element.
    """
    model_config = ConfigDict(extra="ignore")

    type: str = "info"
    title: str = "Insight"
    message: str = ""
    action: str = ""
    confidence: float = DEFAULT_CONFIDENCE

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip().lower() in INSIGHT_TYPES:
            return value.strip().lower()
        return "info"

    @field_validator("title", mode="before")
    @classmethod
    def coerce_title(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return "Insight"

    @field_validator("message", "action", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return str(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def coerce_confidence(cls, value: Any) -> float:
        if isinstance(value, bool) or value is None:
            return DEFAULT_CONFIDENCE
        try:
            number = float(value)
        except (TypeError, ValueError):
            return DEFAULT_CONFIDENCE
        if math.isnan(number):
            return DEFAULT_CONFIDENCE
        return min(max(number, 0.0), 1.0)


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers and surrounding whitespace."""
    cleaned = text.strip()
    cleaned = _FENCE_JSON.sub("", cleaned)
    cleaned = _FENCE.sub("", cleaned)
    return cleaned.strip()


def parse_insight_array(text: str) -> List[Dict[str, Any]]:
    """
    Parse a completion reply into validated insight fields.

    Args:
        text: Raw reply text

    Returns:
        One dict per usable array element, in reply order

    Raises:
        ReplyFormatError: Reply is not a JSON array of insights
    """
    cleaned = strip_code_fences(text or "") or "[]"

    # Remove common trailing commas before closing brackets/braces
    cleaned = _TRAILING_COMMA.sub(r"\1", cleaned)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.debug(f"Unparseable reply: {text[:500]}")
        raise ReplyFormatError(f"Invalid JSON reply: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("insights"), list):
        data = data["insights"]
    if not isinstance(data, list):
        raise ReplyFormatError(f"Expected a JSON array, got {type(data).__name__}")

    items = []
    for index, element in enumerate(data):
        if not isinstance(element, dict):
            logger.warning(f"Skipping insight element {index}: not an object")
            continue
        items.append(InsightSchema.model_validate(element).model_dump())
    return items


def sanitize_answer(text: str, max_lines: int = 7) -> str:
    """Flatten markdown in a narrative reply and cap its length."""
    answer = text.replace("\r\n", "\n")
    answer = _BOLD.sub("", answer)
    answer = _HEADING.sub("", answer)
    answer = _NUMBERED.sub("", answer)
    answer = _BULLET.sub("", answer)
    answer = _BLANK_RUNS.sub("\n", answer)
    answer = answer.strip()

    lines = answer.split("\n")
    if len(lines) > max_lines:
        answer = " ".join(lines[:max_lines]).strip()
    return answer
