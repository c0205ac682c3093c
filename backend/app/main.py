"""Three-reel bet server FastAPI application."""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.config_hash import get_config_hash
from app.errors import ErrorCode, GameError
from app.logic.engine import SlotEngine
from app.logic.simulator import run_many_spins
from app.middleware import ErrorHandlerMiddleware, RequestLogMiddleware
from app.protocol import (
    ManySpinsRequest,
    PlaceBetRequest,
    PlaceBetResponse,
    SpinStatsResponse,
)
from app.telemetry import (
    telemetry_service,
    BetPlacedEvent,
    BetRejectedEvent,
    SpinsCompletedEvent,
)
from app.validators import validate_bet, validate_many_spins_request


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and report the active config on startup."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "Bet server starting (config_hash=%s, allowed_bets=%s)",
        get_config_hash(),
        settings.allowed_bets,
    )
    yield


app = FastAPI(
    title="Three-Reel Bet Server",
    version="0.1.0",
    description="Bet resolution and RTP simulation for a three-reel slot",
    lifespan=lifespan,
)

# Last added runs first: CORS, then request log, then error conversion
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Stateless; safe to share across requests
engine = SlotEngine()


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render routing errors (404, 405) in the API error shape."""
    if exc.status_code == 404:
        return GameError(ErrorCode.NOT_FOUND, "Not found").to_response()
    error = GameError(ErrorCode.INVALID_REQUEST, str(exc.detail))
    response = error.to_response()
    response.status_code = exc.status_code
    return response


@app.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url="/api")


@app.get("/api")
async def api_index() -> dict:
    """API liveness message."""
    return {"message": "Game Server API is running"}


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


def _forced(body: PlaceBetRequest) -> str:
    if body.autowin:
        return "win"
    elif body.autolose:
        return "lose"
    return "none"


def _reject(endpoint: str, error: GameError) -> None:
    telemetry_service.emit_bet_rejected(
        BetRejectedEvent(endpoint=endpoint, reason=error.code.value, message=error.message)
    )


@app.post("/api/bet/place")
def place_bet(body: PlaceBetRequest) -> dict:
    """
    Resolve a single bet.

    Sync handler: FastAPI runs it in the threadpool.
    """
    try:
        amount = validate_bet(body)
        result = engine.place_bet(amount, body.to_options())
    except GameError as e:
        _reject("place", e)
        raise

    telemetry_service.emit_bet_placed(
        BetPlacedEvent(
            bet_amount=result.bet_amount,
            win_amount=result.win_amount,
            win_type=result.win_type.value,
            forced=_forced(body),
            weighted=body.outcomeWeights is not None or body.symbolWeights is not None,
            config_hash=get_config_hash(),
        )
    )
    return PlaceBetResponse.from_result(result).model_dump(mode="json")


@app.post("/api/bet/many-spins")
def many_spins(body: ManySpinsRequest) -> dict:
    """
    Run a batch of identical bets and return aggregate statistics.

    CPU-bound for large batches, so kept off the event loop.
    """
    start = time.monotonic()
    try:
        amount, spins = validate_many_spins_request(body)
        stats = run_many_spins(engine, amount, body.to_options(), spins)
    except GameError as e:
        _reject("many-spins", e)
        raise

    telemetry_service.emit_spins_completed(
        SpinsCompletedEvent(
            bet_amount=amount,
            total_spins=stats.total_spins,
            total_win_amount=stats.total_win_amount,
            return_to_player=stats.return_to_player,
            duration_ms=(time.monotonic() - start) * 1000,
            config_hash=get_config_hash(),
        )
    )
    return SpinStatsResponse.from_stats(stats).model_dump(mode="json")
