from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Iterator, Sequence

from scorekeeper.schemas import (
    GameResult,
    Leaderboard,
    LeaderEntry,
    NectarScoring,
    PlayerGameEnd,
    PlayerStats,
    RoundGoalBreakdown,
)

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS game_results (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT NOT NULL,
    num_players INTEGER NOT NULL,
    include_oceania BOOLEAN NOT NULL,
    winner_name TEXT NOT NULL,
    winner_score INTEGER NOT NULL,
    players_json TEXT NOT NULL,
    nectar_json TEXT
);
CREATE INDEX IF NOT EXISTS idx_created_at ON game_results(created_at DESC);
CREATE INDEX IF NOT EXISTS idx_winner_name ON game_results(winner_name);
"""

_COLUMNS = "id, created_at, num_players, include_oceania, winner_name, winner_score, players_json, nectar_json"

# leaderboard category -> player field
LEADERBOARD_FIELDS = {
    "total_score": "total",
    "bird_points": "bird_points",
    "bonus_cards": "bonus_cards",
    "round_goals": "round_goals",
    "eggs": "eggs",
    "cached_food": "cached_food",
    "tucked_cards": "tucked_cards",
    "nectar_forest": "nectar_forest",
    "nectar_grassland": "nectar_grassland",
    "nectar_wetland": "nectar_wetland",
}


class RepositoryError(RuntimeError):
    """Raised when a game result cannot be stored."""


class GameNotFoundError(RepositoryError):
    """Raised when a game result id does not exist."""


class GameRepository:
    """SQLite-backed store for completed games."""

    def __init__(self, db_path: str | Path, default_limit: int = 50) -> None:
        self.db_path = str(db_path)
        self._default_limit = default_limit
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(SCHEMA)
        self._lock = Lock()
        logger.info("game repository opened at %s", self.db_path)

    def _utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def save_game(
        self,
        players: Sequence[PlayerGameEnd],
        nectar_scoring: NectarScoring,
        include_oceania: bool,
        created_at: datetime | None = None,
    ) -> int:
        if not players:
            raise RepositoryError("no players provided")
        winner = next((p for p in players if p.rank == 1), None)
        if winner is None:
            raise RepositoryError("no winner found in player data")

        created_at = created_at or self._utcnow()
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        nectar_json = nectar_scoring.model_dump_json() if include_oceania else None
        players_json = json.dumps([p.model_dump(mode="json") for p in players])

        with self._lock:
            cursor = self._conn.execute(
                """
                INSERT INTO game_results (
                    created_at, num_players, include_oceania, winner_name, winner_score, players_json, nectar_json
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    created_at.isoformat(),
                    len(players),
                    include_oceania,
                    winner.player_name,
                    winner.total,
                    players_json,
                    nectar_json,
                ),
            )
            self._conn.commit()
            game_id = cursor.lastrowid
        logger.info("saved game %s (%d players, winner %s)", game_id, len(players), winner.player_name)
        return game_id

    def get_game(self, game_id: int) -> GameResult | None:
        with self._lock:
            row = self._conn.execute(f"SELECT {_COLUMNS} FROM game_results WHERE id = ?", (game_id,)).fetchone()
        return self._to_result(row) if row else None

    def list_games(self, limit: int = 0, offset: int = 0) -> list[GameResult]:
        if limit <= 0:
            limit = self._default_limit
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM game_results ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                (limit, max(offset, 0)),
            ).fetchall()
        return [self._to_result(row) for row in rows]

    def iter_games(self) -> Iterator[GameResult]:
        with self._lock:
            rows = self._conn.execute(f"SELECT {_COLUMNS} FROM game_results ORDER BY id").fetchall()
        for row in rows:
            yield self._to_result(row)

    def count_games(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM game_results").fetchone()[0]

    def delete_game(self, game_id: int) -> None:
        with self._lock:
            cursor = self._conn.execute("DELETE FROM game_results WHERE id = ?", (game_id,))
            self._conn.commit()
        if cursor.rowcount == 0:
            raise GameNotFoundError(f"game result {game_id} not found")
        logger.info("deleted game %s", game_id)

    def player_stats(self, player_name: str) -> PlayerStats:
        games_played = 0
        wins = 0
        total_score = 0
        for game in self.iter_games():
            player = next((p for p in game.players if p.player_name == player_name), None)
            if player is None:
                continue
            games_played += 1
            total_score += player.total
            if game.winner_name == player_name:
                wins += 1

        stats = PlayerStats(player_name=player_name, games_played=games_played, wins=wins)
        if games_played:
            stats.average_score = total_score / games_played
            stats.win_rate = wins / games_played * 100
        return stats

    def leaderboard(self) -> Leaderboard:
        """Best single-game value per category; the first player to reach it keeps it."""
        leaders = {category: LeaderEntry() for category in LEADERBOARD_FIELDS}
        for game in self.iter_games():
            for player in game.players:
                for category, field_name in LEADERBOARD_FIELDS.items():
                    value = getattr(player, field_name)
                    if value > leaders[category].score:
                        leaders[category] = LeaderEntry(player_name=player.player_name, score=value)
        return Leaderboard(**leaders)

    def _to_result(self, row: sqlite3.Row) -> GameResult:
        players = [PlayerGameEnd.model_validate(p) for p in json.loads(row["players_json"])]
        nectar = NectarScoring.model_validate_json(row["nectar_json"]) if row["nectar_json"] else None
        breakdown: dict[str, RoundGoalBreakdown] | None = None
        if any(p.round_goals_breakdown for p in players):
            breakdown = {p.player_name: p.round_goals_breakdown for p in players if p.round_goals_breakdown}
        return GameResult(
            id=row["id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            num_players=row["num_players"],
            include_oceania=bool(row["include_oceania"]),
            winner_name=row["winner_name"],
            winner_score=row["winner_score"],
            players=players,
            nectar_scoring=nectar,
            round_breakdown=breakdown,
        )
