from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

import questionary as q
from colorama import Fore, Style as CStyle, init as colorama_init
from dotenv import load_dotenv
from questionary import Style
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from status_osint.config import PLAYTIME_SOURCES, load_config, validate
from status_osint.errors import ConfigError, StatusOsintError
from status_osint.friends import export_gephi, friend_graph
from status_osint.parser import read_status
from status_osint.report import write_report
from status_osint.scanner import scan_server
from status_osint.steam_api import SteamAPI
from status_osint.utils import open_path, stamp


# ────────────────────────────── Initialization

colorama_init(autoreset=True)

THEME = Theme({"accent": "cyan", "hint": "cyan", "warn": "yellow"})
console = Console(theme=THEME)

ENV = Path.cwd() / ".env"

# ────────────────────────────── Styles (CMD-Safe)
CUSTOM_STYLE = Style(
    [
        ("qmark", "fg:yellow bold"),
        ("question", "fg:cyan bold"),
        ("answer", "fg:green bold"),
        ("pointer", "fg:yellow bold"),
        ("selected", "fg:black bg:yellow bold"),
        ("highlighted", "fg:black bg:yellow bold"),
        ("instruction", "fg:gray"),
        ("text", ""),
        ("disabled", "fg:gray"),
    ]
)


# ────────────────────────────── Banner

def clear_cmd() -> None:
    os.system("cls" if os.name == "nt" else "clear")


def print_banner() -> None:
    clear_cmd()
    print(Fore.CYAN + CStyle.BRIGHT + "steam-status-osint" + CStyle.RESET_ALL)
    print(Fore.CYAN + "-" * 70 + "\n")


# ────────────────────────────── ENV / Config / Logging

def _ensure_env(interactive: bool = True) -> bool:
    load_dotenv(dotenv_path=ENV)
    key = os.getenv("STEAM_API_KEY", "").strip()
    if key:
        return True
    if not interactive:
        console.print("STEAM_API_KEY is not set (environment or .env)", style="warn")
        return False
    console.print("Get your API key: https://steamcommunity.com/dev/apikey", style="hint")
    key = q.text("Paste your STEAM_API_KEY", style=CUSTOM_STYLE).ask()
    if not key:
        console.print("No key; exiting.", style="warn")
        return False
    ENV.write_text(f"STEAM_API_KEY={key.strip()}\n", encoding="utf-8")
    load_dotenv(dotenv_path=ENV, override=True)
    return True


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _guided_config(cfg: Dict) -> Dict:
    console.print("Guided Config (Press Enter for default)", style="accent")
    new = dict(cfg)
    new["status_file"] = (
        q.text(f"status_file [default {cfg['status_file']}]", style=CUSTOM_STYLE).ask()
        or cfg["status_file"]
    )
    new["output_file"] = (
        q.text(f"output_file [default {cfg['output_file']}]", style=CUSTOM_STYLE).ask()
        or cfg["output_file"]
    )
    new["playtime_source"] = q.select(
        "playtime_source",
        choices=list(PLAYTIME_SOURCES),
        default=cfg["playtime_source"],
        style=CUSTOM_STYLE,
    ).ask() or cfg["playtime_source"]
    workers = q.text(f"max_workers [default {cfg['max_workers']}]", style=CUSTOM_STYLE).ask()
    new["max_workers"] = int(workers) if workers and workers.isdigit() else cfg["max_workers"]
    new["isolate_player_failures"] = q.confirm(
        f"isolate_player_failures? [default {cfg['isolate_player_failures']}]",
        default=cfg["isolate_player_failures"],
        style=CUSTOM_STYLE,
    ).ask()
    new["export_graph"] = q.confirm(
        f"export_graph? [default {cfg['export_graph']}]",
        default=cfg["export_graph"],
        style=CUSTOM_STYLE,
    ).ask()
    try:
        return validate(new)
    except ConfigError as e:
        console.print(f"Config unchanged: {e}", style="warn")
        return cfg


# ────────────────────────────── Core logic

def _make_api(cfg: Dict) -> SteamAPI:
    key = os.getenv("STEAM_API_KEY", "").strip()
    return SteamAPI(key, timeout=cfg["request_timeout"])


def run_report(status_text: str, cfg: Dict, out_path: Optional[Path] = None) -> Path:
    """Full scan of one status dump; raises StatusOsintError on any abort."""
    api = _make_api(cfg)
    result = scan_server(api, status_text, cfg)
    out = write_report(out_path or Path(cfg["output_file"]), result.render())
    console.print(f"Saved {out}", style="accent")

    if cfg["export_graph"]:
        graph_dir = Path(cfg["graph_dir"]) / stamp()
        nodes_csv, edges_csv = export_gephi(friend_graph(result.players), graph_dir)
        console.print(f"Gephi:\n  {nodes_csv}\n  {edges_csv}", style="accent")
    return out


def scan_file(cfg: Dict) -> None:
    path = q.text(
        f"Status file [default {cfg['status_file']}]", style=CUSTOM_STYLE
    ).ask() or cfg["status_file"]
    try:
        out = run_report(read_status(path), cfg)
    except StatusOsintError as e:
        console.print(f"Aborted: {e}", style="warn")
        return
    if q.confirm("Open report?", default=False, style=CUSTOM_STYLE).ask():
        open_path(out)


def scan_pasted(cfg: Dict) -> None:
    text = q.text(
        "Paste the status output (Esc then Enter to finish)",
        multiline=True,
        style=CUSTOM_STYLE,
    ).ask()
    if not text:
        return
    try:
        out = run_report(text, cfg)
    except StatusOsintError as e:
        console.print(f"Aborted: {e}", style="warn")
        return
    if q.confirm("Open report?", default=False, style=CUSTOM_STYLE).ask():
        open_path(out)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="steam-status-osint",
        description="Markdown report of the players in a CS:GO `status` dump.",
    )
    ap.add_argument("status", nargs="?", help="status dump to scan (skips the menu)")
    ap.add_argument("-o", "--output", help="report path (default from config)")
    ap.add_argument("-c", "--config", help="YAML file overriding the defaults")
    return ap.parse_args(argv)


# ────────────────────────────── Entry point
def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        console.print(str(e), style="warn")
        return 2
    _setup_logging(cfg["log_level"])

    if args.status:
        if not _ensure_env(interactive=False):
            return 2
        try:
            run_report(
                read_status(args.status),
                cfg,
                Path(args.output) if args.output else None,
            )
        except StatusOsintError as e:
            console.print(f"Aborted: {e}", style="warn")
            return 1
        return 0

    if os.name == "nt":
        os.system("chcp 65001 >nul")
    print_banner()
    if not _ensure_env():
        return 1
    if args.output:
        cfg["output_file"] = args.output

    while True:
        choice = q.select(
            "What do you want to do?",
            choices=[
                "Scan status file",
                "Paste status dump",
                "Config",
                "Quit",
            ],
            style=CUSTOM_STYLE,
        ).ask()

        if not choice or choice == "Quit":
            break
        if choice == "Scan status file":
            scan_file(cfg)
        elif choice == "Paste status dump":
            scan_pasted(cfg)
        elif choice == "Config":
            cfg = _guided_config(cfg)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        console.print("\n[warn]ctrl-c; bye")
