from __future__ import annotations

import re
from pathlib import Path
from typing import List, Union

from .errors import InputReadError

# "# 2 "name" STEAM_1:0:12345 ..." as printed by the `status` console command
_PLAYER_LINE = re.compile(r"# .*?(STEAM_[0-9]+:[0-9]+:[0-9]+)")


def parse_status(text: str) -> List[str]:
    """Legacy ids from a status dump, in file order, duplicates kept."""
    ids: List[str] = []
    # only "\n" ends a line; names may contain other unicode line breaks
    for line in text.split("\n"):
        m = _PLAYER_LINE.search(line)
        if m:
            ids.append(m.group(1))
    return ids


def read_status(path: Union[str, Path]) -> str:
    p = Path(path)
    try:
        return p.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise InputReadError(f"cannot read status file {p}: {e}") from e
