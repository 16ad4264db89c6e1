"""Canonical enums for finding attributes.

StrEnum values compare equal to their string values (Confidence.HIGH == "high"),
so findings serialize to plain JSON without conversion.
"""

from __future__ import annotations

import enum


class Confidence(enum.StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Tier(enum.IntEnum):
    AUTO_FIX = 1
    QUICK_FIX = 2
    JUDGMENT = 3
    MAJOR_REFACTOR = 4
