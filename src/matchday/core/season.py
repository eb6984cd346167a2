"""Season management -- closing seasons into history and starting the next one.

Closing a season freezes, per division, the final table and the full fixture
list into a Snapshot appended to ``season.history``.  Snapshots are never
replaced or removed; closing twice simply appends twice.

Rolling a season forward creates fresh divisions (new ids, no fixtures, no
rank cache) but keeps every team's id, so a club's record can be followed
across seasons.  The archive travels with it as an independent deep copy:
appending to the new season's history never touches the old season.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

from matchday.core.standings import compute_table
from matchday.models.league import (
    Division,
    League,
    Season,
    Snapshot,
    SnapshotRow,
    new_id,
    utcnow,
)
from matchday.models.standings import ClubSeasonRecord

logger = logging.getLogger(__name__)

# Last run of digits in a season name ("Season 3", "2025 Cup 2").
_TRAILING_NUMBER = re.compile(r"(\d+)(?!.*\d)")


def snapshot_division(season: Season, division: Division, now: datetime | None = None) -> Snapshot:
    """Freeze a division's current table and fixtures."""
    table = compute_table(division.teams, division.matches)
    rows = [SnapshotRow(**s.model_dump(exclude={"form"})) for s in table]
    return Snapshot(
        season_id=season.id,
        season_name=season.name,
        division_id=division.id,
        division_name=division.name,
        saved_at=now or utcnow(),
        rows=rows,
        matches=[m.model_copy(deep=True) for m in division.matches],
    )


def close_season(season: Season, now: datetime | None = None) -> Season:
    """Archive every division's final table and mark the season closed.

    Appends one Snapshot per division to ``season.history`` and sets
    ``season.ended_at``.  Calling it again appends another set of
    snapshots; refusing a second closure is the caller's decision.

    Returns:
        The same season, now closed.
    """
    now = now or utcnow()
    if season.is_closed:
        logger.warning("season_reclosed season_id=%s", season.id)

    for division in season.divisions:
        snapshot = snapshot_division(season, division, now)
        season.history.setdefault(division.id, []).append(snapshot)

    season.ended_at = now
    logger.info(
        "season_closed season_id=%s name=%s snapshots=%d",
        season.id,
        season.name,
        len(season.divisions),
    )
    return season


def next_season_name(name: str, season_count: int) -> str:
    """Increment the trailing number in ``name``.

    Falls back to ``Season {season_count + 1}`` when the name has no digits.
    """
    match = _TRAILING_NUMBER.search(name or "")
    if match is None:
        return f"Season {season_count + 1}"
    start, end = match.span()
    return f"{name[:start]}{int(match.group(1)) + 1}{name[end:]}"


def _carry_division(division: Division) -> Division:
    return Division(
        name=division.name,
        logo=division.logo,
        teams=[t.model_copy(deep=True) for t in division.teams],
        rank_colors=[b.model_copy() for b in division.rank_colors],
    )


def roll_forward(season: Season, season_count: int = 1) -> Season:
    """Create the season that follows ``season``.

    Args:
        season: The season to carry teams from.
        season_count: How many seasons the league has, for naming when
            ``season.name`` carries no number.

    Returns:
        A new, active Season.  Teams keep their ids; divisions, fixtures,
        and rank caches start fresh.  ``history`` is a deep copy of the
        source archive.
    """
    new_season = Season(
        id=new_id(),
        name=next_season_name(season.name, season_count),
        divisions=[_carry_division(d) for d in season.divisions],
        history={
            division_id: [s.model_copy(deep=True) for s in snapshots]
            for division_id, snapshots in season.history.items()
        },
    )
    logger.info(
        "season_rolled_forward from=%s to=%s divisions=%d",
        season.id,
        new_season.id,
        len(new_season.divisions),
    )
    return new_season


def start_next_season(league: League, season_id: str | None = None) -> Season:
    """Roll ``season_id`` (default: the current season) forward and append it.

    Raises:
        ValueError: If the league has no such season.
    """
    source = league.season(season_id) if season_id else league.current_season
    if source is None:
        msg = f"Season {season_id} not found in league {league.id}"
        raise ValueError(msg)

    new_season = roll_forward(source, season_count=len(league.seasons))
    league.seasons.append(new_season)
    return new_season


def list_snapshots(season: Season) -> list[tuple[str, list[Snapshot]]]:
    """Each division id in the archive with its snapshots, oldest first."""
    return [(division_id, list(snaps)) for division_id, snaps in season.history.items()]


def _archives_for(league: League, season_id: str) -> list[Season]:
    # The season's own archive first, then later seasons that carry a copy
    # (the source season may have been deleted since).
    own = league.season(season_id)
    rest = [s for s in league.seasons if s.id != season_id]
    return ([own] if own else []) + rest


def find_snapshot(
    league: League,
    season_id: str,
    division_id: str | None = None,
    team_id: str | None = None,
) -> Snapshot | None:
    """Look up the archived snapshot of a closed season.

    Matches on division id first, then season id.  Without a division id,
    a snapshot listing ``team_id`` is preferred over any other snapshot of
    that season, so a club that changed division gets its own table.
    When a season was closed more than once the latest snapshot wins.
    """
    for archive in _archives_for(league, season_id):
        candidates = [
            snap
            for key, snaps in archive.history.items()
            for snap in snaps
            if snap.season_id == season_id
            and (division_id is None or (snap.division_id or key) == division_id)
        ]
        if team_id is not None:
            with_team = [s for s in candidates if s.row_for(team_id)]
            if with_team or division_id is None:
                candidates = with_team
        if candidates:
            return candidates[-1]
    return None


def club_history(
    league: League,
    team_id: str,
    season_id: str | None = None,
) -> list[ClubSeasonRecord]:
    """A club's season-by-season record as seen from one season.

    Collects every archived row for ``team_id`` in that season's history and
    adds the live table of the season itself unless it is already archived.
    One record per (season, division); a repeated closure keeps the latest.
    """
    season = league.season(season_id) if season_id else league.current_season
    if season is None:
        msg = f"Season {season_id} not found in league {league.id}"
        raise ValueError(msg)

    records: dict[tuple[str, str], ClubSeasonRecord] = {}
    for division_id, snaps in season.history.items():
        for snap in snaps:
            row = snap.row_for(team_id)
            if row is None:
                continue
            division = season.division(division_id)
            records[(snap.season_id, division_id)] = ClubSeasonRecord(
                season_id=snap.season_id,
                season_name=snap.season_name,
                division_id=division_id,
                division_name=snap.division_name or (division.name if division else ""),
                win_pct=row.wins / row.played * 100 if row.played else 0.0,
                **row.model_dump(exclude={"team_id", "team_name", "goal_difference"}),
            )

    for division in season.divisions:
        if division.team(team_id) is None or (season.id, division.id) in records:
            continue
        table = compute_table(division.teams, division.matches)
        live = next(s for s in table if s.team_id == team_id)
        records[(season.id, division.id)] = ClubSeasonRecord(
            season_id=season.id,
            season_name=season.name,
            division_id=division.id,
            division_name=division.name,
            rank=live.rank,
            points=live.points,
            played=live.played,
            wins=live.wins,
            draws=live.draws,
            losses=live.losses,
            goals_for=live.goals_for,
            goals_against=live.goals_against,
            win_pct=live.win_pct,
            archived=False,
        )

    return list(records.values())
