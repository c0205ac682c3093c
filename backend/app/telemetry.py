"""Server-side telemetry for bets and batch runs."""
import logging
from dataclasses import asdict, dataclass
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    """Protocol for telemetry sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Emit a telemetry event."""
        ...


class LoggingTelemetrySink:
    """Default sink that logs telemetry events."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Log telemetry event."""
        logger.info("TELEMETRY %s: %s", event_name, data)


@dataclass
class BetPlacedEvent:
    """bet_placed: one resolved bet."""

    bet_amount: int
    win_amount: int
    win_type: str
    forced: str  # "win" | "lose" | "none"
    weighted: bool
    config_hash: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return asdict(self)


@dataclass
class SpinsCompletedEvent:
    """spins_completed: one finished batch run."""

    bet_amount: int
    total_spins: int
    total_win_amount: int
    return_to_player: float
    duration_ms: float
    config_hash: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return asdict(self)


@dataclass
class BetRejectedEvent:
    """bet_rejected: request refused before resolution."""

    endpoint: str
    reason: str  # ErrorCode value
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return asdict(self)


class TelemetryService:
    """Service for emitting server telemetry events."""

    def __init__(self, sink: TelemetrySink | None = None):
        self._sink = sink or LoggingTelemetrySink()
        self._sink_errors = 0  # Counter for sink failures

    def set_sink(self, sink: TelemetrySink) -> None:
        """Set the telemetry sink (useful for testing)."""
        self._sink = sink

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """
        Emit event, never raising.

        Sink failures MUST NOT break HTTP requests.
        """
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Telemetry sink error (count=%d): %s - %s",
                self._sink_errors,
                event_name,
                str(e),
            )

    def emit_bet_placed(self, event: BetPlacedEvent) -> None:
        self._safe_emit("bet_placed", event.to_dict())

    def emit_spins_completed(self, event: SpinsCompletedEvent) -> None:
        self._safe_emit("spins_completed", event.to_dict())

    def emit_bet_rejected(self, event: BetRejectedEvent) -> None:
        self._safe_emit("bet_rejected", event.to_dict())


# Global instance
telemetry_service = TelemetryService()
