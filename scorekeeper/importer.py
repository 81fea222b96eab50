"""CSV import of finished games.

Rows are grouped by ``GameID``; every game is validated before anything is
written, and a single problem anywhere aborts the whole import.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field, fields
from datetime import datetime
from io import StringIO

from scorekeeper.exporter import CSV_HEADER
from scorekeeper.game_scoring import base_total, calculate_nectar_points, nectar_total
from scorekeeper.repository import GameRepository
from scorekeeper.schemas import NectarScoring, PlayerGameEnd

logger = logging.getLogger(__name__)

DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
)
TRUE_VALUES = {"true", "yes", "1", "y"}
FALSE_VALUES = {"false", "no", "0", "n"}
MIN_PLAYERS = 2
MAX_PLAYERS = 5


class ImportValidationError(ValueError):
    """Raised when a game's rows do not describe a valid finished game."""


@dataclass
class CSVRecord:
    game_id: str
    date: str
    include_oceania: str
    player_name: str
    bird_points: str
    bonus_cards: str
    round_goals: str
    eggs: str
    cached_food: str
    tucked_cards: str
    nectar_forest: str
    nectar_grassland: str
    nectar_wetland: str
    unused_food: str
    total: str
    rank: str


@dataclass
class ImportIssue:
    message: str
    line: int = 0
    game_id: str = ""

    def __str__(self) -> str:
        return f"line {self.line} (game {self.game_id}): {self.message}"


@dataclass
class ImportedGame:
    game_id: str
    created_at: datetime
    include_oceania: bool
    players: list[PlayerGameEnd]
    nectar_scoring: NectarScoring


@dataclass
class ImportResult:
    games_imported: int = 0
    errors: list[ImportIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


_RECORD_FIELDS = [f.name for f in fields(CSVRecord)]


def parse_csv(text: str) -> tuple[dict[str, list[CSVRecord]], list[ImportIssue]]:
    reader = csv.reader(StringIO(text), skipinitialspace=True)
    try:
        header = next(reader, None)
    except csv.Error as exc:
        return {}, [ImportIssue(line=1, message=f"failed to read header: {exc}")]
    if header is None:
        return {}, [ImportIssue(line=1, message="failed to read header: file is empty")]
    if len(header) != len(CSV_HEADER):
        return {}, [
            ImportIssue(
                line=1,
                message=f"invalid header: expected {len(CSV_HEADER)} columns, got {len(header)}",
            )
        ]

    games: dict[str, list[CSVRecord]] = {}
    issues: list[ImportIssue] = []
    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            issues.append(ImportIssue(line=reader.line_num, message=f"failed to read row: {exc}"))
            continue
        if not row:
            continue
        line = reader.line_num
        if len(row) != len(CSV_HEADER):
            issues.append(
                ImportIssue(
                    line=line,
                    message=f"invalid column count: expected {len(CSV_HEADER)}, got {len(row)}",
                )
            )
            continue

        record = CSVRecord(**{name: value.strip() for name, value in zip(_RECORD_FIELDS, row)})
        if not record.game_id:
            issues.append(ImportIssue(line=line, message="GameID cannot be empty"))
            continue
        games.setdefault(record.game_id, []).append(record)

    return games, issues


def parse_int(value: str, field_name: str) -> int:
    if value == "":
        raise ImportValidationError(f"{field_name} cannot be empty")
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ImportValidationError(f"invalid {field_name}: {value!r}") from exc
    if parsed < 0:
        raise ImportValidationError(f"{field_name} must be non-negative")
    return parsed


def parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ImportValidationError(f"invalid boolean value: {value}")


def parse_date(value: str) -> datetime:
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ImportValidationError(f"unable to parse date: {value}")


def convert_player(record: CSVRecord, include_oceania: bool) -> PlayerGameEnd:
    if not record.player_name:
        raise ImportValidationError("player name cannot be empty")

    player = PlayerGameEnd(
        player_name=record.player_name,
        bird_points=parse_int(record.bird_points, "BirdPoints"),
        bonus_cards=parse_int(record.bonus_cards, "BonusCards"),
        round_goals=parse_int(record.round_goals, "RoundGoals"),
        eggs=parse_int(record.eggs, "Eggs"),
        cached_food=parse_int(record.cached_food, "CachedFood"),
        tucked_cards=parse_int(record.tucked_cards, "TuckedCards"),
        rank=parse_int(record.rank, "Rank"),
    )
    if player.rank < 1:
        raise ImportValidationError("rank must be >= 1")
    if record.unused_food:
        player.unused_food = parse_int(record.unused_food, "UnusedFood")
    if include_oceania:
        player.nectar_forest = parse_int(record.nectar_forest, "NectarForest")
        player.nectar_grassland = parse_int(record.nectar_grassland, "NectarGrassland")
        player.nectar_wetland = parse_int(record.nectar_wetland, "NectarWetland")
    return player


def validate_and_convert_game(game_id: str, records: list[CSVRecord]) -> ImportedGame:
    if not records:
        raise ImportValidationError("no players for game")

    first = records[0]
    created_at = parse_date(first.date)
    include_oceania = parse_bool(first.include_oceania)

    if not MIN_PLAYERS <= len(records) <= MAX_PLAYERS:
        raise ImportValidationError(
            f"invalid player count: {len(records)} (must be {MIN_PLAYERS}-{MAX_PLAYERS})"
        )

    players: list[PlayerGameEnd] = []
    seen_names: set[str] = set()
    seen_ranks: set[int] = set()
    for record in records:
        if record.date != first.date:
            raise ImportValidationError("inconsistent dates within game")
        if record.include_oceania != first.include_oceania:
            raise ImportValidationError("inconsistent IncludeOceania within game")
        try:
            player = convert_player(record, include_oceania)
        except ImportValidationError as exc:
            raise ImportValidationError(f"player {record.player_name}: {exc}") from exc
        if player.player_name in seen_names:
            raise ImportValidationError(f"duplicate player name: {player.player_name}")
        seen_names.add(player.player_name)
        if player.rank in seen_ranks:
            raise ImportValidationError(f"duplicate rank {player.rank}")
        seen_ranks.add(player.rank)
        players.append(player)

    for rank in range(1, len(players) + 1):
        if rank not in seen_ranks:
            raise ImportValidationError(f"ranks must be sequential: missing rank {rank}")

    nectar = calculate_nectar_points(players) if include_oceania else NectarScoring()

    # exported totals are kept as-is so they survive a round trip
    for player, record in zip(players, records):
        if record.total:
            player.total = parse_int(record.total, "Total")
        else:
            player.total = base_total(player)
            if include_oceania:
                player.total += nectar_total(player.player_name, nectar)

    return ImportedGame(
        game_id=game_id,
        created_at=created_at,
        include_oceania=include_oceania,
        players=players,
        nectar_scoring=nectar,
    )


def import_games(text: str, repository: GameRepository) -> ImportResult:
    grouped, issues = parse_csv(text)
    result = ImportResult(errors=issues)

    games: list[ImportedGame] = []
    for game_id, records in grouped.items():
        try:
            games.append(validate_and_convert_game(game_id, records))
        except ImportValidationError as exc:
            result.errors.append(ImportIssue(game_id=game_id, message=str(exc)))

    if result.errors:
        logger.warning("import rejected: %d errors found", len(result.errors))
        return result

    for game in games:
        repository.save_game(game.players, game.nectar_scoring, game.include_oceania, created_at=game.created_at)
        result.games_imported += 1
    logger.info("imported %d games", result.games_imported)
    return result
