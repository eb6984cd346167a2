"""Standings computation -- fold played matches into a ranked table."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from matchday.models.league import Match, Team
from matchday.models.standings import FormToken, TeamStanding

logger = logging.getLogger(__name__)

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1
FORM_LENGTH = 5

# Results without an entry time sort before everything else.
_NEVER = datetime.min.replace(tzinfo=UTC)


def result_entered_at(m: Match) -> datetime:
    if m.played_at is None:
        return _NEVER
    if m.played_at.tzinfo is None:
        return m.played_at.replace(tzinfo=UTC)
    return m.played_at


def _chronological(matches: list[Match]) -> list[Match]:
    """Played matches in the order their results happened."""
    played = [m for m in matches if m.is_played]
    return sorted(played, key=lambda m: (result_entered_at(m), m.round))


def _sort_key(s: TeamStanding) -> tuple:
    return (-s.points, -s.goal_difference, -s.goals_for, s.team_name.casefold(), s.team_name)


def compute_table(teams: list[Team], matches: list[Match]) -> list[TeamStanding]:
    """Compute a division table from its teams and matches.

    Only matches with both goal counts count.  Results are folded in
    chronological order (entry time, then round) so each team's form lists
    its latest five results, newest first.

    Order: points, goal difference, goals scored (all descending), then
    team name.  Ranks are strictly increasing -- two teams level on every
    criterion still get different ranks, decided by name.

    Teams without a played match are listed with zero statistics.  Matches
    naming a team outside ``teams`` are ignored.
    """
    table: dict[str, TeamStanding] = {
        t.id: TeamStanding(team_id=t.id, team_name=t.name) for t in teams
    }
    history: dict[str, list[FormToken]] = {t.id: [] for t in teams}

    for m in matches:
        if m.is_malformed:
            logger.warning(
                "malformed_score match_id=%s home_goals=%s away_goals=%s treated_as=unplayed",
                m.id,
                m.home_goals,
                m.away_goals,
            )

    for m in _chronological(matches):
        home = table.get(m.home_id)
        away = table.get(m.away_id)
        if home is None or away is None:
            logger.debug("orphaned_match match_id=%s skipped", m.id)
            continue

        hg, ag = m.home_goals, m.away_goals
        home.played += 1
        away.played += 1
        home.goals_for += hg
        home.goals_against += ag
        away.goals_for += ag
        away.goals_against += hg

        if hg > ag:
            winner, loser = home, away
        elif hg < ag:
            winner, loser = away, home
        else:
            for side in (home, away):
                side.draws += 1
                side.points += POINTS_FOR_DRAW
                history[side.team_id].append("draw")
            continue

        winner.wins += 1
        winner.points += POINTS_FOR_WIN
        loser.losses += 1
        history[winner.team_id].append("win")
        history[loser.team_id].append("loss")

    for s in table.values():
        s.goal_difference = s.goals_for - s.goals_against
        s.form = list(reversed(history[s.team_id][-FORM_LENGTH:]))

    ranked = sorted(table.values(), key=_sort_key)
    for position, s in enumerate(ranked, start=1):
        s.rank = position
    return ranked
