from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import networkx as nx

from .errors import FileWriteError
from .models import FriendPair, Player
from .utils import ensure_dir, since


def friend_graph(players: List[Player]) -> nx.Graph:
    """Players on the server as nodes, friendships between them as edges.

    Edges keep the first-seen `friend_since` and the order they were found
    in; the player whose list mentioned the other is recorded as `listed_by`.
    """
    by_id: Dict[str, Player] = {p.steam_id64: p for p in players}
    G = nx.Graph()
    for p in players:
        G.add_node(
            p.steam_id64,
            label=p.display_name or p.steam_id64,
            is_public=p.is_public,
            is_banned=bool(p.vac_banned),
        )
    for user in players:
        if not user.is_public or not user.friends:
            continue
        for f in user.friends:
            match = by_id.get(f.steam_id)
            if match is None or match.steam_id64 == user.steam_id64:
                continue
            if G.has_edge(match.steam_id64, user.steam_id64):
                continue
            G.add_edge(
                match.steam_id64,
                user.steam_id64,
                friend_since=f.friend_since,
                listed_by=user.steam_id64,
                order=G.number_of_edges(),
            )
    return G


def correlate_friends(
    players: List[Player], now: Optional[float] = None
) -> List[FriendPair]:
    """Each friendship among present players once, in discovery order."""
    by_id: Dict[str, Player] = {p.steam_id64: p for p in players}
    G = friend_graph(players)
    edges = sorted(G.edges(data=True), key=lambda e: e[2]["order"])
    pairs: List[FriendPair] = []
    for a, b, data in edges:
        user = by_id[data["listed_by"]]
        other = by_id[b if a == user.steam_id64 else a]
        pairs.append(FriendPair(other.handle, user.handle, since(data["friend_since"], now)))
    return pairs


def export_gephi(G: nx.Graph, out_dir: Path) -> Tuple[Path, Path]:
    try:
        return _write_gephi(G, out_dir)
    except OSError as e:
        raise FileWriteError(f"cannot export graph to {out_dir}: {e}") from e


def _write_gephi(G: nx.Graph, out_dir: Path) -> Tuple[Path, Path]:
    ensure_dir(out_dir)
    nodes_csv = out_dir / "nodes.csv"
    edges_csv = out_dir / "edges.csv"
    deg = dict(G.degree())

    with nodes_csv.open("w", encoding="utf-8", newline="") as f:
        f.write("Id,Label,degree,is_public,is_banned\n")
        for sid, n in G.nodes(data=True):
            f.write(
                f"{sid},{_esc(n.get('label') or sid)},{deg.get(sid, 0)},"
                f"{str(n.get('is_public', False)).lower()},"
                f"{str(n.get('is_banned', False)).lower()}\n"
            )

    with edges_csv.open("w", encoding="utf-8", newline="") as f:
        f.write("Source,Target,friend_since\n")
        for a, b, e in G.edges(data=True):
            f.write(f"{a},{b},{e.get('friend_since', '')}\n")

    return nodes_csv, edges_csv


def _esc(s: str) -> str:
    return (
        s.replace(",", " ")
        .replace("\n", " ")
        .replace("\r", " ")
        .replace('"', "'")
        .strip()
    )
