from __future__ import annotations

from typing import Any, Optional

import numpy as np
import structlog

logger = structlog.get_logger()


def to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def clamp_money(value: Any) -> float:
    """Return a finite, non-negative amount; anything else collapses to 0."""
    val = to_float(value)
    if not np.isfinite(val):
        logger.debug("non_finite_value_clamped", value=repr(value))
        return 0.0
    return max(val, 0.0)


def optional_amount(value: Any) -> Optional[float]:
    """Optional cost term: negative, NaN or infinite values count as absent."""
    if value is None or isinstance(value, bool):
        return None
    val = to_float(value)
    if not np.isfinite(val) or val < 0:
        return None
    return val


def optional_percentage(value: Any) -> Optional[float]:
    val = optional_amount(value)
    if val is None or val > 100:
        return None
    return val


__all__ = ["to_float", "clamp_money", "optional_amount", "optional_percentage"]
