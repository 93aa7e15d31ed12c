from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .enrich import enrich_players
from .friends import correlate_friends
from .models import FriendPair, Player
from .parser import parse_status
from .profiles import fetch_players
from .report import render_report
from .steam_api import SteamAPI
from .steamid import steam_ids64

log = logging.getLogger(__name__)


@dataclass
class ScanResult:
    legacy_ids: List[str] = field(default_factory=list)
    players: List[Player] = field(default_factory=list)
    pairs: List[FriendPair] = field(default_factory=list)

    def render(self) -> str:
        return render_report(self.players, self.pairs)


def scan_server(
    api: SteamAPI,
    status_text: str,
    cfg: Dict[str, Any],
    now: Optional[float] = None,
) -> ScanResult:
    """parse -> convert -> fetch -> enrich -> correlate, each stage completing
    before the next one starts."""
    legacy = parse_status(status_text)
    log.info("found %d players in status dump", len(legacy))

    ids64 = steam_ids64(legacy)
    players = fetch_players(api, ids64, now=now)
    players = enrich_players(
        api,
        players,
        app_id=cfg["app_id"],
        playtime_source=cfg["playtime_source"],
        max_workers=cfg["max_workers"],
        isolate=cfg["isolate_player_failures"],
    )
    pairs = correlate_friends(players, now=now)
    log.info("%d friendships on the server", len(pairs))
    return ScanResult(legacy_ids=legacy, players=players, pairs=pairs)
