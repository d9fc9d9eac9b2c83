"""
Typed parsing of JSON objects returned by LLMs.

Models wrap their JSON in markdown fences or surround it with prose, so the
object is located first and then validated against a pydantic model.
"""

import json
import re
from typing import Any, Optional, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if present."""
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_RE.sub("", text).strip()
    return text


def extract_json_object(text: Optional[str]) -> Optional[dict[str, Any]]:
    """
    Find and decode the first JSON object in an LLM reply.

    Returns:
        The decoded dict, or None when no object can be decoded
    """
    if not text:
        return None

    text = strip_code_fences(text)

    candidates = [text]
    match = re.search(r"\{.*\}", text, re.DOTALL)
    if match and match.group(0) != text:
        candidates.append(match.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    logger.warning(f"No JSON object found in LLM reply: {text[:200]}")
    return None


def parse_llm_json(text: Optional[str], model: type[T]) -> Optional[T]:
    """
    Decode an LLM reply into ``model``.

    Returns:
        A validated model instance, or None so callers can fall back explicitly
    """
    data = extract_json_object(text)
    if data is None:
        return None

    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning(f"LLM reply does not match {model.__name__}: {e.error_count()} error(s)")
        return None
