"""
YAML-backed lookup tables: ease multipliers, plausibility ranges,
instruction templates and terminology.
"""

from .registry import (
    ALLOWED_PLACEHOLDERS,
    REQUIRED_SHAPING_KEYS,
    TableRegistry,
    get_registry,
    shaping_key,
)
from .types import CraftTemplates, EaseMultipliers, PlausibleRange

__all__ = [
    "EaseMultipliers",
    "PlausibleRange",
    "CraftTemplates",
    "ALLOWED_PLACEHOLDERS",
    "REQUIRED_SHAPING_KEYS",
    "TableRegistry",
    "get_registry",
    "shaping_key",
]
