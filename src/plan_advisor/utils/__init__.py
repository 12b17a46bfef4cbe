"""Numeric helpers shared by both engines."""

from .numeric import clamp_money, optional_amount, optional_percentage, to_float

__all__ = ["clamp_money", "optional_amount", "optional_percentage", "to_float"]
