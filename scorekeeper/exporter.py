"""CSV export of stored games, one row per player per game."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Iterable

from scorekeeper.schemas import GameResult

CSV_HEADER: tuple[str, ...] = (
    "GameID",
    "Date",
    "IncludeOceania",
    "PlayerName",
    "BirdPoints",
    "BonusCards",
    "RoundGoals",
    "Eggs",
    "CachedFood",
    "TuckedCards",
    "NectarForest",
    "NectarGrassland",
    "NectarWetland",
    "UnusedFood",
    "Total",
    "Rank",
)


def export_games_to_csv(games: Iterable[GameResult]) -> str:
    """Render games in the same format the importer reads."""

    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for game in games:
        date = game.created_at.strftime("%Y-%m-%d")
        include_oceania = "true" if game.include_oceania else "false"
        for player in game.players:
            writer.writerow(
                [
                    game.id,
                    date,
                    include_oceania,
                    player.player_name,
                    player.bird_points,
                    player.bonus_cards,
                    player.round_goals,
                    player.eggs,
                    player.cached_food,
                    player.tucked_cards,
                    player.nectar_forest,
                    player.nectar_grassland,
                    player.nectar_wetland,
                    player.unused_food,
                    player.total,
                    player.rank,
                ]
            )

    return buffer.getvalue()


__all__ = [
    "CSV_HEADER",
    "export_games_to_csv",
]
