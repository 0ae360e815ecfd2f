from __future__ import annotations

import json
import logging
import math
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from .errors import CacheDecodeError

logger = logging.getLogger("RedisSerde")

# Compact separators keep values byte-compatible with other services
# reading the same keys.
_SEPARATORS = (",", ":")


def _default_handler(obj: Any) -> Any:
    """Handle non-JSON-native values during serialization"""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    if isinstance(obj, datetime | date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, Decimal):
        return float(obj)
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def dumps(obj: Any) -> str:
    """Serialize a JSON-compatible payload (or pydantic model) to a cache value"""
    if isinstance(obj, BaseModel):
        obj = obj.model_dump(mode="json", by_alias=True)
    return json.dumps(
        obj, ensure_ascii=False, separators=_SEPARATORS, default=_default_handler
    )


def loads(raw: str | bytes | None, model: type[BaseModel] | None = None) -> Any:
    """
    Deserialize a cache value.

    Args:
        raw: Value as returned by Redis; None means the key was absent
        model: Optional BaseModel class to validate the decoded payload into

    Raises:
        CacheDecodeError: If ``raw`` is not valid JSON or does not fit ``model``
    """
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError, UnicodeDecodeError) as e:
        raise CacheDecodeError(f"Malformed cached value: {e}") from e

    if model is None or data is None:
        return data
    try:
        return model.model_validate(data)
    except ValueError as e:
        # pydantic.ValidationError subclasses ValueError
        raise CacheDecodeError(f"Cached value does not match {model.__name__}: {e}") from e


def parse_count(value: Any, *, strict: bool = False) -> int | None:
    """
    Interpret a cached count.

    Counts are stored as their decimal string. Returns None when ``value``
    is None (not cached). A value that is present but not a number becomes
    0, or None when ``strict`` is set so the caller falls back to the source
    of truth instead of trusting a zero.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        logger.debug(f"Cached count {value!r} is not numeric")
        return None if strict else 0
    if not math.isfinite(number):
        return None if strict else 0
    return int(number)
