from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, NamedTuple, Optional


@dataclass(frozen=True)
class Friend:
    steam_id: str
    friend_since: int

    @classmethod
    def from_api(cls, entry: Dict) -> "Friend":
        return cls(steam_id=str(entry["steamid"]), friend_since=int(entry.get("friend_since", 0)))


@dataclass
class Player:
    """One server occupant. Optional fields stay None until their stage runs."""

    steam_id64: str
    display_name: str = ""
    profile_url: str = ""
    avatar_url: str = ""
    country: Optional[str] = None
    is_public: bool = False
    account_age: Optional[str] = None
    vac_banned: Optional[bool] = None

    # statistics round
    kill_death_ratio: Optional[Decimal] = None
    headshot_percent: Optional[Decimal] = None
    accuracy_percent: Optional[Decimal] = None
    win_rate_percent: Optional[Decimal] = None

    # playtime round
    recent_playtime_hours: Optional[Decimal] = None
    total_playtime_hours: Optional[Decimal] = None

    # friends round
    friends: Optional[List[Friend]] = field(default=None, repr=False)

    @property
    def handle(self) -> str:
        return f"[{self.display_name}]({self.profile_url})"

    @property
    def avatar(self) -> str:
        return f"![{self.display_name}]({self.avatar_url})"


class FriendPair(NamedTuple):
    handle_a: str
    handle_b: str
    duration: str
