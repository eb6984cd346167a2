"""Seed a Matchday league and walk it through a season for demo purposes.

Usage:
    python scripts/demo_league.py seed [TEAMS]       # Fresh league (default 8 teams) + schedule
    python scripts/demo_league.py schedule [--force] # Regenerate the current division's schedule
    python scripts/demo_league.py result N           # Enter random scores for round N
    python scripts/demo_league.py table              # Print the current table
    python scripts/demo_league.py close              # Close the current season
    python scripts/demo_league.py next               # Start the next season and schedule it

Uses a local JSON document (demo_matchday.json, or MATCHDAY_DOCUMENT_PATH).
"""

from __future__ import annotations

import os
import random
import sys

from matchday.core.league import new_document, resolve_selection
from matchday.core.presenter import (
    commit_rank_map,
    fixtures_for_round,
    max_round,
    present_standings,
)
from matchday.core.results import record_result
from matchday.core.scheduler import regenerate_schedule
from matchday.core.season import close_season, start_next_season
from matchday.db.store import DocumentStore
from matchday.models.league import ScheduleOptions, Selection

DEMO_DOCUMENT = os.environ.get("MATCHDAY_DOCUMENT_PATH", "demo_matchday.json")

OPTIONS = ScheduleOptions(double_round=True, swap_home_away=True)


def _current(store: DocumentStore):
    document = store.load()
    league = document.leagues[0]
    season = league.seasons[-1]
    _, _, division, _ = resolve_selection(
        document, Selection(league_id=league.id, season_id=season.id)
    )
    return document, league, season, division


def seed(team_count: int = 8) -> None:
    store = DocumentStore(DEMO_DOCUMENT)
    document = new_document("Demo League", team_count)
    division = document.leagues[0].seasons[0].divisions[0]
    regenerate_schedule(division, OPTIONS)
    store.save(document)
    print(f"League seeded: {team_count} teams, {len(division.matches)} fixtures")
    print(f"Division ID: {division.id}")


def schedule(force: bool = False) -> None:
    store = DocumentStore(DEMO_DOCUMENT)
    document, _, _, division = _current(store)
    try:
        regenerate_schedule(division, OPTIONS, confirm_discard=force)
    except ValueError as exc:
        print(f"{exc}. Pass --force to discard them.")
        return
    store.save(document)
    print(f"{division.name}: {len(division.matches)} fixtures over {max_round(division)} rounds")


def result(round_number: int) -> None:
    store = DocumentStore(DEMO_DOCUMENT)
    document, _, _, division = _current(store)
    fixtures = fixtures_for_round(division, round_number)
    if not fixtures:
        print(f"Round {round_number} has no fixtures.")
        return

    names = {t.id: t.name for t in division.teams}
    rng = random.Random(round_number)
    for m in fixtures:
        record_result(m, rng.randint(0, 4), rng.randint(0, 3))
        print(f"  {names[m.home_id]:<12} {m.home_goals}-{m.away_goals}  {names[m.away_id]}")
    store.save(document)


def table() -> None:
    store = DocumentStore(DEMO_DOCUMENT)
    document, _, season, division = _current(store)
    view = present_standings(division)

    arrows = {"up": "^", "down": "v", "same": "-"}
    print(f"{season.name} / {division.name}")
    header = f"{'Team':<12} {'P':>3} {'W':>3} {'D':>3} {'L':>3} {'GD':>4} {'Pts':>4}"
    print(f"{'#':>2}   {header}  Form  Zone")
    print("-" * 64)
    for row in view.rows:
        s = row.standing
        form = "".join(token[0].upper() for token in s.form)
        zone = row.band.label if row.band else ""
        print(
            f"{s.rank:>2} {arrows[row.movement.direction]} {s.team_name:<12} "
            f"{s.played:>3} {s.wins:>3} {s.draws:>3} {s.losses:>3} "
            f"{s.goal_difference:>4} {s.points:>4}  {form:<5} {zone}"
        )

    commit_rank_map(division, view)
    store.save(document)


def close() -> None:
    store = DocumentStore(DEMO_DOCUMENT)
    document, _, season, _ = _current(store)
    if season.is_closed:
        print(f"{season.name} is already closed.")
        return
    close_season(season)
    store.save(document)
    print(f"{season.name} closed; {len(season.divisions)} division snapshot(s) archived.")


def next_season() -> None:
    store = DocumentStore(DEMO_DOCUMENT)
    document, league, _, _ = _current(store)
    new_season = start_next_season(league)
    for division in new_season.divisions:
        regenerate_schedule(division, OPTIONS)
    store.save(document)
    print(f"Started {new_season.name} with {len(new_season.divisions)} division(s).")


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        return

    cmd = sys.argv[1]
    if cmd == "seed":
        n = int(sys.argv[2]) if len(sys.argv) > 2 else 8
        seed(n)
    elif cmd == "schedule":
        schedule(force="--force" in sys.argv[2:])
    elif cmd == "result":
        if len(sys.argv) < 3:
            print("Usage: demo_league.py result ROUND")
            return
        result(int(sys.argv[2]))
    elif cmd == "table":
        table()
    elif cmd == "close":
        close()
    elif cmd == "next":
        next_season()
    else:
        print(f"Unknown command: {cmd}")
        print(__doc__)


if __name__ == "__main__":
    main()
