"""Rank bands -- map a table position to its configured colored zone."""

from __future__ import annotations

from matchday.models.league import RankColorBand

# Seeded into every new division: champion, promotion/playoff, relegation
# playoff, relegation.
DEFAULT_RANK_COLORS: tuple[RankColorBand, ...] = (
    RankColorBand(rank_from=1, rank_to=1, color="#FFD94A", label="Champion"),
    RankColorBand(rank_from=2, rank_to=4, color="#6EF2FF", label="Promotion / Playoff"),
    RankColorBand(rank_from=7, rank_to=7, color="#FFB84A", label="Relegation playoff"),
    RankColorBand(rank_from=8, rank_to=8, color="#FF6A6A", label="Relegation"),
)


def classify_rank(bands: list[RankColorBand], rank: int) -> RankColorBand | None:
    """Return the first band, in configured order, whose range holds ``rank``.

    Bands may overlap or leave gaps; the order they were entered in decides.
    """
    for band in bands:
        if band.contains(rank):
            return band
    return None


def default_rank_colors() -> list[RankColorBand]:
    return [band.model_copy() for band in DEFAULT_RANK_COLORS]
