from __future__ import annotations

import os
import platform
import subprocess
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import timeago


def stamp() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def since(unix_time: int, now: Optional[float] = None) -> str:
    """Time between `unix_time` and now, without the "ago": "3 days", "1 year"."""
    if now is None:
        now = time.time()
    earlier, later = sorted((unix_time, now))
    text = timeago.format(
        datetime.fromtimestamp(earlier, tz=timezone.utc),
        datetime.fromtimestamp(later, tz=timezone.utc),
    )
    return text[: -len(" ago")] if text.endswith(" ago") else text


def open_path(path: Path) -> None:
    try:
        if platform.system() == "Windows":
            os.startfile(str(path))  # type: ignore[attr-defined]
        elif platform.system() == "Darwin":
            subprocess.run(["open", str(path)], check=False)
        else:
            subprocess.run(["xdg-open", str(path)], check=False)
    except OSError:
        pass
