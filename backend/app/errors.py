"""Error codes and exceptions for the bet API."""
from enum import Enum

from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes returned in the error body."""

    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_BET = "INVALID_BET"
    INVALID_SPINS = "INVALID_SPINS"
    INVALID_WEIGHTS = "INVALID_WEIGHTS"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.INVALID_BET: 400,
    ErrorCode.INVALID_SPINS: 400,
    ErrorCode.INVALID_WEIGHTS: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INTERNAL_ERROR: 500,
}

# Whether retrying the same request can succeed
ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.INVALID_REQUEST: False,
    ErrorCode.INVALID_BET: False,
    ErrorCode.INVALID_SPINS: False,
    ErrorCode.INVALID_WEIGHTS: False,
    ErrorCode.NOT_FOUND: False,
    ErrorCode.INTERNAL_ERROR: True,
}


class ErrorBody(BaseModel):
    """Error body shape."""

    code: str
    message: str
    recoverable: bool


class ErrorResponse(BaseModel):
    """Full error response."""

    error: ErrorBody


class GameError(Exception):
    """Base error that maps to an API error response."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or f"Error: {code.value}"
        self.status_code = ERROR_HTTP_STATUS[code]
        self.recoverable = ERROR_RECOVERABLE[code]
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        """Convert to JSONResponse."""
        return JSONResponse(
            status_code=self.status_code,
            content=ErrorResponse(
                error=ErrorBody(
                    code=self.code.value,
                    message=self.message,
                    recoverable=self.recoverable,
                )
            ).model_dump(),
        )


class InvalidWeightsError(GameError):
    """Raised when an outcome or symbol weight map is malformed."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.INVALID_WEIGHTS, message)
