from __future__ import annotations

import logging
import re
from typing import Iterable, List

from .errors import ParseError

log = logging.getLogger(__name__)

STEAMID64_BASE = 76561197960265728

_DIGITS = re.compile(r"[0-9]+")


def steam_id64(legacy_id: str) -> str:
    """STEAM_X:Y:Z -> 64-bit id as a decimal string (X is ignored)."""
    parts = legacy_id.strip().split(":")
    if len(parts) != 3 or not parts[0].upper().startswith("STEAM_"):
        raise ParseError(f"not a legacy steam id: {legacy_id!r}")
    _, y, z = parts
    if not _DIGITS.fullmatch(y) or not _DIGITS.fullmatch(z):
        raise ParseError(f"non-numeric segment in {legacy_id!r}")
    parity = int(y)
    if parity not in (0, 1):
        raise ParseError(f"parity must be 0 or 1 in {legacy_id!r}")
    return str(STEAMID64_BASE + int(z) * 2 + parity)


def steam_ids64(legacy_ids: Iterable[str]) -> List[str]:
    """Convert a parsed batch, skipping malformed ids."""
    out: List[str] = []
    for legacy in legacy_ids:
        try:
            out.append(steam_id64(legacy))
        except ParseError as e:
            log.warning("skipping %s", e)
    return out
