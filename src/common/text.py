"""Small text helpers shared by the API and the submission client."""

from __future__ import annotations

import math
import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")
_NON_SLUG = re.compile(r"[^a-z0-9-]")


def slugify(text: str) -> str:
    """Lower-case, turn whitespace runs into hyphens, drop anything else."""

    return _NON_SLUG.sub("", _WHITESPACE.sub("-", text.lower()))


def parse_price(raw: Optional[str]) -> float:
    """Parse a price field; blank or unparsable input counts as 0."""

    if raw is None or not raw.strip():
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        return 0.0
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return value
