import logging
import random
import uuid
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from board import MoveRejected
from config import Settings, load_settings
from core import Direction, EngineState
from session import GameSession

logger = logging.getLogger(__name__)

MAX_BOARD_SIDE = 16

# --- Pydantic Models for API requests and responses ---

class NewGameSettings(BaseModel):
    """Settings for creating a new game."""
    width: Optional[int] = Field(
        default=None,
        gt=1, # Board must be at least 2 wide
        le=MAX_BOARD_SIDE,
        description="Number of columns; defaults to the server setting (4)."
    )
    height: Optional[int] = Field(
        default=None,
        gt=1,
        le=MAX_BOARD_SIDE,
        description="Number of rows; defaults to the server setting (4)."
    )

class EventData(BaseModel):
    """One board event, e.g. a slide, merge, spawn or score award."""
    kind: str = Field(..., description="Event type name, e.g. TileSlid or ScoreAwarded.")
    data: Dict[str, Any] = Field(default_factory=dict, description="Event fields.")

class GameStateData(BaseModel):
    """Represents the complete state of a game session."""
    game_id: str = Field(..., description="Identifier of the session.")
    board: List[List[int]] = Field(..., description="Tile values row by row, 0 for empty cells.")
    ranks: List[List[Optional[int]]] = Field(..., description="Tile ranks row by row, null for empty cells.")
    score: int = Field(..., ge=0, description="Current score of the game.")
    best_score: int = Field(..., ge=0, description="Best score seen by this server.")
    state: EngineState = Field(..., description="Engine state (IDLE, SETTLING, GAME_OVER).")
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

class MoveRequestData(BaseModel):
    """Data required to make a move."""
    direction: Direction = Field(..., description="Direction of the move (UP, DOWN, LEFT, RIGHT).")
    settle: bool = Field(
        default=True,
        description="Spawn the next tile and check for game over in the same request."
    )

class MoveResponseData(GameStateData):
    """Response after a move or settle, including the emitted events."""
    move_was_effective: bool = Field(..., description="True if the move slid or merged any tile.")
    events: List[EventData] = Field(default_factory=list)
    message: Optional[str] = Field(default=None, description="Why a move was rejected, or game over notice.")

# --- Helpers ---

def _event_data(event) -> EventData:
    return EventData(kind=type(event).__name__, data=asdict(event))

def _state_data(game_id: str, session: GameSession) -> Dict[str, Any]:
    engine = session.engine
    width, height = engine.board_dimensions()
    return dict(
        game_id=game_id,
        board=engine.values_grid(),
        ranks=engine.ranks_grid(),
        score=session.score,
        best_score=session.best_score,
        state=engine.state,
        width=width,
        height=height,
    )

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Builds the FastAPI application with its own session store and rate limiter.
    Args:
        settings (Optional[Settings]): Defaults to settings loaded from the environment.
    Returns:
        FastAPI: The application.
    """
    settings = settings or load_settings()

    limiter = Limiter(key_func=get_remote_address)
    app = FastAPI(
        title="2048 Tile Board API",
        description="Play 2048-style tile boards. The server keeps one board engine per game session.",
        version="1.0.0"
    )
    app.state.limiter = limiter
    app.state.settings = settings
    app.state.games = {}
    app.state.best_score = 0
    app.state.rng = random.Random(settings.seed)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    def get_session(game_id: str) -> GameSession:
        session = app.state.games.get(game_id)
        if session is None:
            raise HTTPException(status_code=404, detail=f"Game {game_id} not found.")
        return session

    def remember_best(session: GameSession):
        app.state.best_score = max(app.state.best_score, session.best_score)

    def store_session(session: GameSession) -> str:
        games = app.state.games
        # Full store: drop finished games first, then the oldest ones.
        while games and len(games) >= settings.max_sessions:
            finished = next((gid for gid, s in games.items() if s.game_over), None)
            evicted = finished if finished is not None else next(iter(games))
            del games[evicted]
            logger.info("Evicted game %s", evicted)

        game_id = uuid.uuid4().hex
        games[game_id] = session
        return game_id

    # --- API Endpoints ---

    @app.post("/game/new", response_model=GameStateData, summary="Start a New Game")
    @limiter.limit(settings.rate_limit)
    async def start_new_game(request: Request, new_game: NewGameSettings):
        """
        Creates a session with a fresh board holding the opening tiles.

        - **width** / **height**: board dimensions, defaulting to the server settings.
        """
        try:
            session = GameSession(
                width=new_game.width or settings.width,
                height=new_game.height or settings.height,
                initial_tiles=settings.initial_tiles,
                rng=random.Random(app.state.rng.random()),
                best_score=app.state.best_score,
            )
            session.new_game()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error("Unexpected error in /game/new: %s", e, exc_info=True)
            raise HTTPException(status_code=500, detail=f"An unexpected error occurred during game creation: {str(e)}")

        game_id = store_session(session)
        logger.info("Created game %s", game_id)
        return GameStateData(**_state_data(game_id, session))

    @app.get("/game/{game_id}", response_model=GameStateData, summary="Get Game State")
    @limiter.limit(settings.rate_limit)
    async def get_game(request: Request, game_id: str):
        session = get_session(game_id)
        return GameStateData(**_state_data(game_id, session))

    @app.post("/game/{game_id}/move", response_model=MoveResponseData, summary="Make a Move in the Game")
    @limiter.limit(settings.rate_limit)
    async def make_move(request: Request, game_id: str, request_data: MoveRequestData):
        """
        Slides and merges tiles in the requested direction.

        With `settle` (the default) the next tile is spawned and game over is evaluated
        before responding. Without it the game stays SETTLING until `/settle` is called.
        """
        session = get_session(game_id)
        try:
            outcome = session.move(request_data.direction)
            events = list(outcome.events)
            message = None

            if outcome.accepted and request_data.settle:
                settled = session.settle()
                events.extend(settled.events)
            elif not outcome.accepted:
                message = next(e.reason for e in outcome.events if isinstance(e, MoveRejected))

            if session.game_over:
                message = "Game Over. No more valid moves."
            remember_best(session)
        except Exception as e:
            logger.error("Unexpected error in /game/%s/move: %s", game_id, e, exc_info=True)
            raise HTTPException(status_code=500, detail=f"An unexpected server error occurred while processing the move: {str(e)}")

        return MoveResponseData(
            **_state_data(game_id, session),
            move_was_effective=outcome.accepted,
            events=[_event_data(e) for e in events],
            message=message,
        )

    @app.post("/game/{game_id}/settle", response_model=MoveResponseData, summary="Finish a Pending Move")
    @limiter.limit(settings.rate_limit)
    async def settle_move(request: Request, game_id: str):
        session = get_session(game_id)
        try:
            settled = session.settle()
        except RuntimeError as e:
            raise HTTPException(status_code=409, detail=str(e))

        return MoveResponseData(
            **_state_data(game_id, session),
            move_was_effective=True,
            events=[_event_data(e) for e in settled.events],
            message="Game Over. No more valid moves." if settled.game_over else None,
        )

    @app.delete("/game/{game_id}", summary="End a Game")
    @limiter.limit(settings.rate_limit)
    async def end_game(request: Request, game_id: str):
        get_session(game_id)
        del app.state.games[game_id]
        logger.info("Ended game %s", game_id)
        return {"game_id": game_id, "ended": True}

    return app

app = create_app()
