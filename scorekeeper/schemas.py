from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, conint


class Expansion(str, Enum):
    base = "base"
    european = "european"
    oceania = "oceania"


class ScoringMode(str, Enum):
    green = "green"
    blue = "blue"


class Goal(BaseModel):
    id: str
    name: str
    description: str
    expansion: Expansion


class RoundGoals(BaseModel):
    round1: Goal | None = None
    round2: Goal | None = None
    round3: Goal | None = None
    round4: Goal | None = None


class PlayerScore(BaseModel):
    player_name: str
    count: int
    points: int = 0
    rank: int = 0


class ScoreRequest(BaseModel):
    mode: ScoringMode
    round: int = 1
    player_counts: dict[str, int] = Field(default_factory=dict)


class RoundGoalBreakdown(BaseModel):
    round1: int = 0
    round2: int = 0
    round3: int = 0
    round4: int = 0


class PlayerGameEnd(BaseModel):
    player_name: str
    bird_points: int = 0
    bonus_cards: int = 0
    round_goals: int = 0
    round_goals_breakdown: RoundGoalBreakdown | None = None
    eggs: int = 0
    cached_food: int = 0
    tucked_cards: int = 0
    nectar_forest: int = 0
    nectar_grassland: int = 0
    nectar_wetland: int = 0
    unused_food: int = 0
    total: int = 0
    rank: int = 0


class NectarScoring(BaseModel):
    forest: dict[str, int] = Field(default_factory=dict)
    grassland: dict[str, int] = Field(default_factory=dict)
    wetland: dict[str, int] = Field(default_factory=dict)


class GameEndRequest(BaseModel):
    include_oceania: bool = False
    players: list[PlayerGameEnd]


class GameEndResponse(BaseModel):
    players: list[PlayerGameEnd]
    nectar_scoring: NectarScoring
    game_id: int


class GameResult(BaseModel):
    id: int
    created_at: datetime
    num_players: int
    include_oceania: bool
    winner_name: str
    winner_score: int
    players: list[PlayerGameEnd]
    nectar_scoring: NectarScoring | None = None
    round_breakdown: dict[str, RoundGoalBreakdown] | None = None


class GameListResponse(BaseModel):
    games: list[GameResult]
    total_count: int
    limit: conint(ge=0)
    offset: conint(ge=0)


class PlayerStats(BaseModel):
    player_name: str
    games_played: int = 0
    wins: int = 0
    average_score: float = 0.0
    win_rate: float = 0.0


class LeaderEntry(BaseModel):
    player_name: str = ""
    score: int = 0


class Leaderboard(BaseModel):
    total_score: LeaderEntry = Field(default_factory=LeaderEntry)
    bird_points: LeaderEntry = Field(default_factory=LeaderEntry)
    bonus_cards: LeaderEntry = Field(default_factory=LeaderEntry)
    round_goals: LeaderEntry = Field(default_factory=LeaderEntry)
    eggs: LeaderEntry = Field(default_factory=LeaderEntry)
    cached_food: LeaderEntry = Field(default_factory=LeaderEntry)
    tucked_cards: LeaderEntry = Field(default_factory=LeaderEntry)
    nectar_forest: LeaderEntry = Field(default_factory=LeaderEntry)
    nectar_grassland: LeaderEntry = Field(default_factory=LeaderEntry)
    nectar_wetland: LeaderEntry = Field(default_factory=LeaderEntry)


class ImportIssueItem(BaseModel):
    line: int = 0
    game_id: str = ""
    message: str


class ImportResponse(BaseModel):
    success: bool
    games_imported: int = 0
    message: str = ""
    errors: list[ImportIssueItem] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    status: str
    id: int
