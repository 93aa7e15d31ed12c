from decimal import Decimal

import pytest

from status_osint.errors import FileWriteError
from status_osint.models import FriendPair, Player
from status_osint.report import (
    COLUMNS,
    fmt_decimal,
    render_report,
    render_table,
    write_report,
)

HEADER = (
    "| Avatar | Handle | Country | Account age | Recent playtime (hours) | "
    "Total playtime (hours) | KDR | HSP | Accuracy | Win Rate | VAC |"
)


def _cells(row):
    assert row.startswith("| ") and row.endswith(" |")
    return row[2:-2].split(" | ")


def test_all_absent_fields_render_placeholders():
    p = Player("1", display_name="x", profile_url="u", avatar_url="a")
    row = render_table([p]).splitlines()[2]
    cells = _cells(row)
    assert len(cells) == len(COLUMNS) == 11
    assert cells[:2] == ["![x](a)", "[x](u)"]
    assert cells[2:] == ["-"] * 9


def test_full_row():
    p = Player(
        "1",
        display_name="x",
        profile_url="u",
        avatar_url="a",
        country="DE",
        is_public=True,
        account_age="2 years",
        vac_banned=False,
        kill_death_ratio=Decimal("2.00"),
        headshot_percent=Decimal("40.00"),
        accuracy_percent=Decimal("25.50"),
        win_rate_percent=Decimal("33.33"),
        recent_playtime_hours=Decimal("1.50"),
        total_playtime_hours=Decimal("100.00"),
    )
    cells = _cells(render_table([p]).splitlines()[2])
    assert cells[2:] == [
        "DE", "2 years", "1.5", "100", "2", "40%", "25.5%", "33.33%", "false",
    ]


def test_empty_table_is_header_and_separator():
    text = render_report([], [])
    assert text == HEADER + "\n" + "| --- " * 11 + "|\n\n"


def test_friend_lines_follow_the_table():
    text = render_report([], [FriendPair("[a](1)", "[b](2)", "3 years")])
    assert text.endswith("\n\n[a](1) has been friends with [b](2) for 3 years\n\n")


def test_pipes_in_names_are_escaped():
    p = Player("1", display_name="a|b", profile_url="u", avatar_url="v")
    row = render_table([p]).splitlines()[2]
    assert "[a\\|b](u)" in row
    assert len(_cells(row)) == 11


def test_fmt_decimal_has_no_exponent():
    assert fmt_decimal(Decimal("40.00")) == "40"
    assert fmt_decimal(Decimal("100.00")) == "100"
    assert fmt_decimal(Decimal("0.10")) == "0.1"


def test_write_report_overwrites(tmp_path):
    out = tmp_path / "out.md"
    out.write_text("old", encoding="utf-8")
    write_report(out, "new")
    assert out.read_text(encoding="utf-8") == "new"


def test_write_report_failure(tmp_path):
    with pytest.raises(FileWriteError):
        write_report(tmp_path / "missing" / "out.md", "x")
