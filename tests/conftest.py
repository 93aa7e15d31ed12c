from typing import Callable, Dict, List, Tuple, Union

import pytest

from status_osint.config import load_config
from status_osint.steam_api import SteamAPI

A = "76561197960265730"  # STEAM_1:0:1
B = "76561197960265733"  # STEAM_1:1:2
C = "76561197960265734"  # STEAM_1:0:3

NOW = 1_700_000_000
DAY = 86400

STATUS = """\
hostname: Valve CS:GO EU West Server (srcds019-ams1.123.45)
version : 1.38.7.5/13875 1161/8012 secure  [G:1:3016931]
map     : de_dust2
players : 3 humans, 0 bots (10/0 max) (not hibernating)

# userid name uniqueid connected ping loss state rate adr
#  2 1 "alpha" STEAM_1:0:1 05:12 40 0 active 196608
#  3 2 "bravo" STEAM_1:1:2 05:10 55 0 active 196608
#  4 3 "charlie" STEAM_1:0:3 02:01 80 0 active 196608
#end
"""


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


Route = Union[Tuple[int, object], Callable[[Dict], Tuple[int, object]], Exception]


class FakeSession:
    """requests.Session stand-in keyed by API path."""

    def __init__(self, routes: Dict[str, Route]):
        self.routes = routes
        self.calls: List[Tuple[str, Dict]] = []

    def get(self, url, params=None, timeout=None):
        path = url.replace(SteamAPI.BASE, "")
        self.calls.append((path, dict(params or {})))
        route = self.routes.get(path)
        if route is None:
            return FakeResponse(404, {})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            route = route(params or {})
        status, payload = route
        return FakeResponse(status, payload)

    def paths(self) -> List[str]:
        return [p for p, _ in self.calls]


def summary(sid, name, public=True, created=None, country=None):
    s = {
        "steamid": sid,
        "personaname": name,
        "profileurl": f"https://steamcommunity.com/profiles/{sid}/",
        "avatar": f"https://avatars.example/{name}.jpg",
        "communityvisibilitystate": 3 if public else 1,
    }
    if created is not None:
        s["timecreated"] = created
    if country is not None:
        s["loccountrycode"] = country
    return s


def stats_payload(**overrides):
    values = {
        "total_kills": 100,
        "total_deaths": 50,
        "total_kills_headshot": 40,
        "total_shots_hit": 300,
        "total_shots_fired": 1200,
        "total_matches_won": 30,
        "total_matches_played": 60,
    }
    values.update(overrides)
    return {
        "playerstats": {
            "steamID": "x",
            "gameName": "ValveTestApp260",
            "stats": [{"name": k, "value": v} for k, v in values.items() if v is not None],
        }
    }


def games_payload(recent=90, forever=6000, appid=730):
    return {
        "response": {
            "total_count": 2,
            "games": [
                {"appid": 440, "playtime_2weeks": 5, "playtime_forever": 10},
                {"appid": appid, "playtime_2weeks": recent, "playtime_forever": forever},
            ],
        }
    }


def friends_payload(*entries):
    return {
        "friendslist": {
            "friends": [
                {"steamid": sid, "relationship": "friend", "friend_since": since}
                for sid, since in entries
            ]
        }
    }


@pytest.fixture
def server_routes():
    """A and B are public friends of each other, C is private."""
    friends = {
        A: friends_payload((B, NOW - 400 * DAY), ("76561198000000000", NOW - DAY)),
        B: friends_payload((A, NOW - 400 * DAY)),
    }
    return {
        "/ISteamUser/GetPlayerSummaries/v2/": (
            200,
            {
                "response": {
                    "players": [
                        summary(A, "alpha", created=NOW - (3 * 365 + 30) * DAY, country="SE"),
                        summary(B, "bravo"),
                        summary(C, "charlie", public=False, created=NOW - 365 * DAY),
                    ]
                }
            },
        ),
        "/ISteamUser/GetPlayerBans/v1/": (
            200,
            {
                "players": [
                    {"SteamId": A, "VACBanned": False, "NumberOfVACBans": 0},
                    {"SteamId": C, "VACBanned": True, "NumberOfVACBans": 1},
                ]
            },
        ),
        "/ISteamUserStats/GetUserStatsForGame/v2/": (200, stats_payload()),
        "/IPlayerService/GetRecentlyPlayedGames/v1/": (200, games_payload()),
        "/ISteamUser/GetFriendList/v1/": lambda params: (200, friends[params["steamid"]]),
    }


@pytest.fixture
def make_api():
    def _make(routes):
        session = FakeSession(routes)
        return SteamAPI("test-key", session=session), session

    return _make


@pytest.fixture
def cfg():
    return load_config()

