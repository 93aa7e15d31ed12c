from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

import requests

from .errors import TransportError

log = logging.getLogger(__name__)

CSGO_APP_ID = 730


class SteamAPI:
    BASE = "https://api.steampowered.com"
    BATCH = 100

    def __init__(
        self,
        key: str,
        timeout: Optional[float] = 25,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.key = key
        self.timeout = timeout
        self._shared = session
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """An injected session, otherwise one session per thread."""
        if self._shared is not None:
            return self._shared
        s = getattr(self._local, "session", None)
        if s is None:
            s = self._local.session = requests.Session()
        return s

    def _get(self, path: str, params: Dict) -> Dict:
        p = dict(params)
        p["key"] = self.key
        log.debug("GET %s %s", path, params)
        try:
            r = self.session.get(self.BASE + path, params=p, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"{path}: {e}") from e
        if r.status_code != 200:
            raise TransportError(f"{path}: HTTP {r.status_code}", status=r.status_code)
        try:
            return r.json()
        except ValueError as e:
            raise TransportError(f"{path}: invalid JSON body") from e

    def _batches(self, ids: List[str]) -> List[List[str]]:
        unique = list(dict.fromkeys(ids))
        return [unique[i : i + self.BATCH] for i in range(0, len(unique), self.BATCH)]

    def get_player_summaries(self, ids: List[str]) -> List[Dict]:
        out: List[Dict] = []
        for sub in self._batches(ids):
            data = self._get(
                "/ISteamUser/GetPlayerSummaries/v2/",
                {"steamids": ",".join(sub)},
            )
            out.extend(data.get("response", {}).get("players", []))
        return out

    def get_player_bans(self, ids: List[str]) -> Dict[str, Dict]:
        out: Dict[str, Dict] = {}
        for sub in self._batches(ids):
            data = self._get(
                "/ISteamUser/GetPlayerBans/v1/",
                {"steamids": ",".join(sub)},
            )
            for p in data.get("players", []):
                sid = p.get("SteamId")
                if sid:
                    out[sid] = p
        return out

    def get_user_stats(self, steamid: str, appid: int = CSGO_APP_ID) -> List[Dict]:
        data = self._get(
            "/ISteamUserStats/GetUserStatsForGame/v2/",
            {"steamid": steamid, "appid": appid},
        )
        return data.get("playerstats", {}).get("stats", []) or []

    def get_recently_played_games(self, steamid: str) -> List[Dict]:
        data = self._get(
            "/IPlayerService/GetRecentlyPlayedGames/v1/",
            {"steamid": steamid, "format": "json"},
        )
        return data.get("response", {}).get("games", []) or []

    def get_owned_games(self, steamid: str) -> List[Dict]:
        data = self._get(
            "/IPlayerService/GetOwnedGames/v1/",
            {"steamid": steamid, "include_played_free_games": 1, "format": "json"},
        )
        return data.get("response", {}).get("games", []) or []

    def get_friend_list(self, steamid: str) -> List[Dict]:
        """Raw friend entries: [{steamid, relationship, friend_since}, ...]."""
        data = self._get(
            "/ISteamUser/GetFriendList/v1/",
            {"steamid": steamid, "relationship": "friend"},
        )
        return data.get("friendslist", {}).get("friends", []) or []
