from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, List, Tuple, Union

from .errors import FileWriteError
from .models import FriendPair, Player

PLACEHOLDER = "-"


def fmt_decimal(d: Decimal) -> str:
    """2.00 -> "2", 40.50 -> "40.5"; never exponent notation."""
    return format(d.normalize(), "f")


def _percent(value: Any) -> Any:
    return None if value is None else f"{fmt_decimal(value)}%"


COLUMNS: List[Tuple[str, Callable[[Player], Any]]] = [
    ("Avatar", lambda p: p.avatar),
    ("Handle", lambda p: p.handle),
    ("Country", lambda p: p.country),
    ("Account age", lambda p: p.account_age),
    ("Recent playtime (hours)", lambda p: p.recent_playtime_hours),
    ("Total playtime (hours)", lambda p: p.total_playtime_hours),
    ("KDR", lambda p: p.kill_death_ratio),
    ("HSP", lambda p: _percent(p.headshot_percent)),
    ("Accuracy", lambda p: _percent(p.accuracy_percent)),
    ("Win Rate", lambda p: _percent(p.win_rate_percent)),
    ("VAC", lambda p: p.vac_banned),
]


def cell(value: Any) -> str:
    if value is None:
        return PLACEHOLDER
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, Decimal):
        return fmt_decimal(value)
    return str(value).replace("|", "\\|")


def _row(cells: List[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def render_table(players: List[Player]) -> str:
    lines = [
        _row([title for title, _ in COLUMNS]),
        _row(["---"] * len(COLUMNS)),
    ]
    for p in players:
        lines.append(_row([cell(get(p)) for _, get in COLUMNS]))
    return "\n".join(lines) + "\n"


def render_report(players: List[Player], pairs: List[FriendPair]) -> str:
    out = render_table(players) + "\n"
    for a, b, duration in pairs:
        out += f"{a} has been friends with {b} for {duration}\n\n"
    return out


def write_report(path: Union[str, Path], text: str) -> Path:
    p = Path(path)
    try:
        p.write_text(text, encoding="utf-8")
    except OSError as e:
        raise FileWriteError(f"cannot write report to {p}: {e}") from e
    return p
