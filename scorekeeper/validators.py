from fastapi import HTTPException

from scorekeeper.schemas import GameEndRequest

MAX_PLAYERS = 5


def validate_game_end_request(req: GameEndRequest) -> None:
    if not req.players:
        raise HTTPException(status_code=422, detail="At least one player is required")
    if len(req.players) > MAX_PLAYERS:
        raise HTTPException(status_code=422, detail=f"At most {MAX_PLAYERS} players are supported")

    seen: set[str] = set()
    for player in req.players:
        player.player_name = player.player_name.strip()
        if not player.player_name:
            raise HTTPException(status_code=422, detail="Player name cannot be empty")
        if player.player_name in seen:
            raise HTTPException(status_code=422, detail=f"Duplicate player name: {player.player_name}")
        seen.add(player.player_name)
