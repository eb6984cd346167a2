"""Result entry -- record and clear match scores.

Both goal counts are written together, and ``played_at`` is stamped with
them, so a match is never left half played by these functions.
"""

from __future__ import annotations

import logging
from datetime import datetime

from matchday.models.league import Match, utcnow

logger = logging.getLogger(__name__)


def record_result(
    match: Match,
    home_goals: int,
    away_goals: int,
    now: datetime | None = None,
) -> Match:
    """Set the score of ``match`` and stamp when it was entered.

    Re-entering a score re-stamps the match, which moves it to the end of
    both teams' form.

    Raises:
        ValueError: If either goal count is negative.
    """
    if home_goals < 0 or away_goals < 0:
        msg = f"Goal counts must be non-negative (got {home_goals}-{away_goals})"
        raise ValueError(msg)

    match.home_goals = home_goals
    match.away_goals = away_goals
    match.played_at = now or utcnow()
    logger.info(
        "result_recorded match_id=%s round=%d score=%d-%d",
        match.id,
        match.round,
        home_goals,
        away_goals,
    )
    return match


def clear_result(match: Match) -> Match:
    """Return ``match`` to unplayed."""
    match.home_goals = None
    match.away_goals = None
    match.played_at = None
    logger.info("result_cleared match_id=%s", match.id)
    return match
