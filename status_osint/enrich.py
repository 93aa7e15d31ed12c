from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, List, Optional

from tqdm import tqdm

from .errors import StatLookupError, StatusOsintError
from .models import Friend, Player
from .steam_api import CSGO_APP_ID, SteamAPI

log = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")

STAT_NAMES = (
    "total_kills_headshot",
    "total_kills",
    "total_shots_hit",
    "total_shots_fired",
    "total_matches_won",
    "total_matches_played",
    "total_deaths",
)


def round2(value) -> Decimal:
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def ratio(num: float, den: float, scale: int = 1) -> Optional[Decimal]:
    """num/den (times scale) rounded half-up to 2 places; None when den is 0."""
    if not den:
        return None
    return round2(Decimal(str(num / den)) * scale)


def stat_values(stats: List[Dict], names=STAT_NAMES) -> Dict[str, float]:
    by_name = {s.get("name"): s.get("value") for s in stats}
    out: Dict[str, float] = {}
    for name in names:
        value = by_name.get(name)
        if value is None:
            raise StatLookupError(f"stat {name!r} missing")
        out[name] = value
    return out


def apply_stats(player: Player, stats: List[Dict]) -> Player:
    v = stat_values(stats)
    player.kill_death_ratio = ratio(v["total_kills"], v["total_deaths"])
    player.headshot_percent = ratio(v["total_kills_headshot"], v["total_kills"], 100)
    player.accuracy_percent = ratio(v["total_shots_hit"], v["total_shots_fired"], 100)
    player.win_rate_percent = ratio(
        v["total_matches_won"], v["total_matches_played"], 100
    )
    return player


def find_game(games: List[Dict], app_id: int = CSGO_APP_ID) -> Dict:
    for g in games:
        if g.get("appid") == app_id:
            return g
    raise StatLookupError(f"app {app_id} not in games list")


def apply_playtime(
    player: Player, games: List[Dict], app_id: int = CSGO_APP_ID
) -> Player:
    game = find_game(games, app_id)
    if "playtime_forever" not in game:
        raise StatLookupError(f"app {app_id} has no playtime_forever")
    # owned-games entries omit playtime_2weeks when not played recently
    recent = game.get("playtime_2weeks", 0)
    player.recent_playtime_hours = round2(Decimal(str(recent)) / 60)
    player.total_playtime_hours = round2(Decimal(str(game["playtime_forever"])) / 60)
    return player


def apply_friends(player: Player, entries: List[Dict]) -> Player:
    player.friends = [Friend.from_api(e) for e in entries]
    return player


def run_round(
    name: str,
    players: List[Player],
    work: Callable[[Player], Player],
    max_workers: int = 8,
    isolate: bool = False,
) -> List[Player]:
    """Fan `work` out over public players and wait for all of them.

    Private players pass through untouched. The first failure is raised once
    every request has settled, unless `isolate` is set, in which case the
    failing player is left as it was.
    """
    public = [p for p in players if p.is_public]
    if not public:
        return players

    first_error: Optional[StatusOsintError] = None
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as ex:
        futures = {ex.submit(work, p): p for p in public}
        for fut in tqdm(as_completed(futures), total=len(futures), desc=name, unit="players"):
            p = futures[fut]
            try:
                fut.result()
            except StatusOsintError as e:
                if isolate:
                    log.warning("%s: skipping %s (%s)", name, p.steam_id64, e)
                    continue
                log.error("%s: %s failed (%s)", name, p.steam_id64, e)
                if first_error is None:
                    first_error = e

    if first_error is not None:
        raise first_error
    return players


def enrich_players(
    api: SteamAPI,
    players: List[Player],
    app_id: int = CSGO_APP_ID,
    playtime_source: str = "recent",
    max_workers: int = 8,
    isolate: bool = False,
) -> List[Player]:
    """Statistics, playtime and friends rounds, strictly in that order."""

    def stats(p: Player) -> Player:
        return apply_stats(p, api.get_user_stats(p.steam_id64, app_id))

    def playtime(p: Player) -> Player:
        if playtime_source == "owned":
            games = api.get_owned_games(p.steam_id64)
        else:
            games = api.get_recently_played_games(p.steam_id64)
        return apply_playtime(p, games, app_id)

    def friends(p: Player) -> Player:
        return apply_friends(p, api.get_friend_list(p.steam_id64))

    for name, work in (("stats", stats), ("playtime", playtime), ("friends", friends)):
        players = run_round(name, players, work, max_workers=max_workers, isolate=isolate)
    return players
