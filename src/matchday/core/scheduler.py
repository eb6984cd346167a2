"""Round-robin schedule generation.

Generates a schedule where every team meets every other team once per leg,
using the circle method (polygon scheduling).

Terminology:
  - **round**: one matchday, a set of fixtures in which no team appears
    twice.  With 4 teams a round has 2 fixtures.
  - **leg**: every team plays every other team once.  With 4 teams that's
    C(4,2)=6 fixtures across 3 rounds.
  - **bye**: with an odd number of teams one slot is a placeholder; whoever
    draws it sits the round out.
"""

from __future__ import annotations

import logging

from matchday.models.league import Division, Match, ScheduleOptions

logger = logging.getLogger(__name__)

# Stands in for the missing team when the field is odd.
BYE = None


def _first_leg(team_ids: list[str]) -> list[list[tuple[str, str]]]:
    """Return the (home, away) pairings of each round of one leg."""
    slots: list[str | None] = list(team_ids)
    if len(slots) % 2 != 0:
        slots.append(BYE)
    n = len(slots)

    rounds: list[list[tuple[str, str]]] = []
    for r in range(1, n):
        pairs: list[tuple[str, str]] = []
        for i in range(n // 2):
            a = slots[i]
            b = slots[n - 1 - i]
            if a is BYE or b is BYE:
                continue
            # Odd rounds host the first-listed slot, even rounds the second.
            pairs.append((a, b) if r % 2 == 1 else (b, a))
        rounds.append(pairs)

        # Rotate: slot 0 stays put, the last slot moves to position 1
        slots = [slots[0], slots[-1], *slots[1:-1]]

    return rounds


def generate_round_robin(
    team_ids: list[str],
    options: ScheduleOptions | None = None,
) -> list[Match]:
    """Generate a round-robin schedule using the circle method.

    With N teams (padded to even with a bye) one leg takes N-1 rounds of
    N/2 fixtures.  For 8 teams: 7 rounds, 28 fixtures.

    A double round replays the same pairings in rounds N..2(N-1).  With
    ``swap_home_away`` the second leg inverts every venue; without it the
    second leg repeats the first leg's venues.

    Args:
        team_ids: Unique team IDs in division order.
        options: Double-round and venue-swap settings (single leg by default).

    Returns:
        Fresh, unplayed Match objects sorted by round.  Fewer than 2 teams
        yields an empty list.
    """
    options = options or ScheduleOptions()
    if len(team_ids) < 2:
        return []

    first_leg = _first_leg(list(team_ids))
    rounds_per_leg = len(first_leg)

    matches = [
        Match(round=r, home_id=home, away_id=away)
        for r, pairs in enumerate(first_leg, start=1)
        for home, away in pairs
    ]

    if options.double_round:
        for r, pairs in enumerate(first_leg, start=1 + rounds_per_leg):
            for home, away in pairs:
                if options.swap_home_away:
                    home, away = away, home
                matches.append(Match(round=r, home_id=home, away_id=away))

    logger.debug(
        "schedule_generated teams=%d rounds=%d fixtures=%d",
        len(team_ids),
        rounds_per_leg * (2 if options.double_round else 1),
        len(matches),
    )
    return matches


def regenerate_schedule(
    division: Division,
    options: ScheduleOptions | None = None,
    confirm_discard: bool = False,
) -> list[Match]:
    """Replace a division's fixtures with a freshly generated schedule.

    Every existing match is discarded, recorded results included, so a
    division holding results is only rescheduled with ``confirm_discard``.

    Raises:
        ValueError: If results would be discarded without confirmation.
    """
    if division.has_results() and not confirm_discard:
        msg = (
            f"Division {division.name} has recorded results; "
            "regenerating the schedule would discard them"
        )
        raise ValueError(msg)

    discarded = len(division.matches)
    division.matches = generate_round_robin([t.id for t in division.teams], options)
    division.last_rank_map = {}
    logger.info(
        "schedule_regenerated division_id=%s discarded=%d fixtures=%d",
        division.id,
        discarded,
        len(division.matches),
    )
    return division.matches
