from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from scorekeeper.config import settings
from scorekeeper.exporter import export_games_to_csv
from scorekeeper.game_scoring import calculate_game_end_scores
from scorekeeper.goal_scoring import score_goal
from scorekeeper.goals import get_all_goals, select_random_goals
from scorekeeper.importer import import_games
from scorekeeper.repository import GameNotFoundError, GameRepository, RepositoryError
from scorekeeper.schemas import (
    DeleteResponse,
    GameEndRequest,
    GameEndResponse,
    GameListResponse,
    GameResult,
    Goal,
    ImportIssueItem,
    ImportResponse,
    Leaderboard,
    PlayerScore,
    PlayerStats,
    RoundGoals,
    ScoreRequest,
)
from scorekeeper.validators import validate_game_end_request

logger = logging.getLogger("uvicorn.error")
logger.setLevel(settings.log_level)

app = FastAPI(title="Wingspan Scorekeeper", version="0.1.0")
repo = GameRepository(settings.db_path, default_limit=settings.default_page_limit)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    client = request.client.host if request.client else "-"
    logger.info(
        "%s %s %d %.1fms from %s",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
        client,
    )
    return response


@app.get("/")
def root() -> dict[str, str]:
    return {
        "message": "Wingspan Scorekeeper API",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/goals", response_model=list[Goal])
def list_goals(base: bool = False, european: bool = False, oceania: bool = False) -> list[Goal]:
    if not (base or european or oceania):
        base = european = oceania = True
    return get_all_goals(base, european, oceania)


@app.post("/api/new-game", response_model=RoundGoals)
def new_game(
    base: bool = Form(False),
    european: bool = Form(False),
    oceania: bool = Form(False),
) -> RoundGoals:
    if not (base or european or oceania):
        base = True
    return select_random_goals(get_all_goals(base, european, oceania))


@app.post("/api/calculate-scores", response_model=list[PlayerScore])
def calculate_scores(req: ScoreRequest) -> list[PlayerScore]:
    return score_goal(req.mode, req.player_counts, req.round)


@app.post("/api/calculate-game-end", response_model=GameEndResponse)
def calculate_game_end(req: GameEndRequest) -> GameEndResponse:
    validate_game_end_request(req)
    players, nectar = calculate_game_end_scores(req.players, req.include_oceania)
    try:
        game_id = repo.save_game(players, nectar, req.include_oceania)
    except RepositoryError as exc:
        raise HTTPException(status_code=500, detail=f"Failed to save game result: {exc}") from exc
    return GameEndResponse(players=players, nectar_scoring=nectar, game_id=game_id)


@app.get("/api/games", response_model=GameListResponse)
def list_games(limit: int = 0, offset: int = 0) -> GameListResponse:
    if limit <= 0:
        limit = settings.default_page_limit
    offset = max(offset, 0)
    return GameListResponse(
        games=repo.list_games(limit=limit, offset=offset),
        total_count=repo.count_games(),
        limit=limit,
        offset=offset,
    )


@app.get("/api/games/{game_id}", response_model=GameResult)
def get_game(game_id: int) -> GameResult:
    game = repo.get_game(game_id)
    if not game:
        raise HTTPException(status_code=404, detail="game result not found")
    return game


@app.delete("/api/games/{game_id}", response_model=DeleteResponse)
def delete_game(game_id: int) -> DeleteResponse:
    try:
        repo.delete_game(game_id)
    except GameNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return DeleteResponse(status="ok", id=game_id)


@app.get("/api/stats/{player_name}", response_model=PlayerStats)
def player_stats(player_name: str) -> PlayerStats:
    player_name = player_name.strip()
    if not player_name:
        raise HTTPException(status_code=400, detail="player name is required")
    return repo.player_stats(player_name)


@app.get("/api/leaderboard", response_model=Leaderboard)
def leaderboard() -> Leaderboard:
    return repo.leaderboard()


@app.post("/api/import", response_model=ImportResponse)
async def import_csv(csv_file: UploadFile = File(...)):
    raw = await csv_file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="csv file is required")
    if len(raw) > settings.max_import_bytes:
        raise HTTPException(status_code=413, detail="csv file is too large")
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="csv file must be UTF-8 encoded") from exc

    try:
        result = import_games(text, repo)
    except RepositoryError as exc:
        raise HTTPException(status_code=500, detail=f"Failed to save imported games: {exc}") from exc
    if not result.ok:
        body = ImportResponse(
            success=False,
            message=f"{len(result.errors)} errors found",
            errors=[ImportIssueItem(line=e.line, game_id=e.game_id, message=e.message) for e in result.errors],
        )
        return JSONResponse(status_code=400, content=body.model_dump())
    return ImportResponse(
        success=True,
        games_imported=result.games_imported,
        message=f"imported {result.games_imported} games",
    )


@app.get("/api/export")
def export_csv() -> Response:
    content = export_games_to_csv(repo.iter_games())
    filename = f"wingspan-games-{datetime.now(timezone.utc).strftime('%Y%m%d')}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
