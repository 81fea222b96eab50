from __future__ import annotations

import logging
from typing import Callable, Sequence

from scorekeeper.ranking import competition_groups, split_points
from scorekeeper.schemas import NectarScoring, PlayerGameEnd

logger = logging.getLogger(__name__)

# 1st = 5, 2nd = 2, everyone else 0
NECTAR_POINTS: tuple[int, int] = (5, 2)


def score_resource_pool(
    players: Sequence[PlayerGameEnd], get_count: Callable[[PlayerGameEnd], int]
) -> dict[str, int]:
    """Score one nectar habitat.

    Only players holding nectar there take part. Ties split the points of the
    places they occupy, rounded down: two players tied for 1st get (5 + 2) // 2.
    """
    contenders = [p for p in players if get_count(p) > 0]
    contenders.sort(key=get_count, reverse=True)

    points: dict[str, int] = {}
    for group in competition_groups(contenders, key=get_count):
        awarded = split_points(NECTAR_POINTS, group.rank, group.size)
        for player in group.members:
            points[player.player_name] = awarded
    return points


def calculate_nectar_points(players: Sequence[PlayerGameEnd]) -> NectarScoring:
    return NectarScoring(
        forest=score_resource_pool(players, lambda p: p.nectar_forest),
        grassland=score_resource_pool(players, lambda p: p.nectar_grassland),
        wetland=score_resource_pool(players, lambda p: p.nectar_wetland),
    )


def base_total(player: PlayerGameEnd) -> int:
    return (
        player.bird_points
        + player.bonus_cards
        + player.round_goals
        + player.eggs
        + player.cached_food
        + player.tucked_cards
    )


def nectar_total(player_name: str, nectar: NectarScoring) -> int:
    return (
        nectar.forest.get(player_name, 0)
        + nectar.grassland.get(player_name, 0)
        + nectar.wetland.get(player_name, 0)
    )


def rank_players(players: Sequence[PlayerGameEnd]) -> list[PlayerGameEnd]:
    """Order by total then unused food, both descending, and set competition ranks.

    Players level on both share a rank. Ranks are written onto the given records.
    """
    ordered = sorted(players, key=lambda p: (-p.total, -p.unused_food))
    for group in competition_groups(ordered, key=lambda p: (p.total, p.unused_food)):
        for player in group.members:
            player.rank = group.rank
    return ordered


def calculate_game_end_scores(
    players: Sequence[PlayerGameEnd], include_oceania: bool
) -> tuple[list[PlayerGameEnd], NectarScoring]:
    """Total every player's score and rank the table.

    The input records are left untouched; scored copies are returned in
    ranking order together with the nectar points awarded per habitat.
    """
    nectar = calculate_nectar_points(players) if include_oceania else NectarScoring()

    scored = []
    for player in players:
        total = base_total(player)
        if include_oceania:
            total += nectar_total(player.player_name, nectar)
        scored.append(player.model_copy(update={"total": total}, deep=True))

    ranked = rank_players(scored)
    if ranked:
        logger.debug("game end scored: %d players, winner %s", len(ranked), ranked[0].player_name)
    return ranked, nectar
