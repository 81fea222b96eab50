from __future__ import annotations

from typing import Mapping

from scorekeeper.ranking import competition_groups, split_points
from scorekeeper.schemas import PlayerScore, ScoringMode

GREEN_POINTS: dict[int, tuple[int, int, int]] = {
    1: (4, 1, 0),
    2: (5, 2, 0),
    3: (6, 3, 2),
    4: (7, 4, 2),
}
BLUE_MAX_POINTS = 5


def _normalize_round(round_number: int) -> int:
    if round_number not in GREEN_POINTS:
        return 1
    return round_number


def score_green(player_counts: Mapping[str, int], round_number: int) -> list[PlayerScore]:
    """Competitive scoring: rank by count, tied players split their places' points.

    Players with a count of 0 never score, whatever place they tie into.
    """
    table = GREEN_POINTS[_normalize_round(round_number)]
    scores = sorted(
        (PlayerScore(player_name=name, count=count) for name, count in player_counts.items()),
        key=lambda s: (-s.count, s.player_name),
    )

    for group in competition_groups(scores, key=lambda s: s.count):
        points = split_points(table, group.rank, group.size)
        for score in group.members:
            score.rank = group.rank
            score.points = 0 if score.count == 0 else points
    return scores


def score_blue(player_counts: Mapping[str, int]) -> list[PlayerScore]:
    """Linear scoring: 1 point per item, between 0 and 5."""
    scores = [
        PlayerScore(player_name=name, count=count, points=min(max(count, 0), BLUE_MAX_POINTS))
        for name, count in player_counts.items()
    ]
    scores.sort(key=lambda s: (-s.points, s.player_name))
    # display order only
    for index, score in enumerate(scores, start=1):
        score.rank = index
    return scores


def score_goal(mode: ScoringMode, player_counts: Mapping[str, int], round_number: int = 1) -> list[PlayerScore]:
    if mode == ScoringMode.green:
        return score_green(player_counts, round_number)
    return score_blue(player_counts)
