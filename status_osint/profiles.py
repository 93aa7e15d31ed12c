from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .models import Player
from .steam_api import SteamAPI
from .utils import since

log = logging.getLogger(__name__)

PUBLIC_VISIBILITY = 3


def player_from_summary(summary: Dict, now: Optional[float] = None) -> Player:
    is_public = summary.get("communityvisibilitystate") == PUBLIC_VISIBILITY
    created = summary.get("timecreated")
    return Player(
        steam_id64=str(summary["steamid"]),
        display_name=summary.get("personaname", ""),
        profile_url=summary.get("profileurl", ""),
        avatar_url=summary.get("avatar", ""),
        country=summary.get("loccountrycode"),
        is_public=is_public,
        account_age=since(created, now) if is_public and created else None,
    )


def apply_bans(players: List[Player], bans: Dict[str, Dict]) -> List[Player]:
    for p in players:
        b = bans.get(p.steam_id64)
        if b is not None and "VACBanned" in b:
            p.vac_banned = bool(b["VACBanned"])
    return players


def fetch_players(
    api: SteamAPI, ids64: List[str], now: Optional[float] = None
) -> List[Player]:
    """Summaries then ban records for one batch of 64-bit ids."""
    if not ids64:
        return []
    players = [player_from_summary(s, now) for s in api.get_player_summaries(ids64)]
    log.info("%d profiles (%d public)", len(players), sum(p.is_public for p in players))
    bans = api.get_player_bans(ids64)
    return apply_bans(players, bans)
