"""Request validators for the bet API."""
from app.config import settings
from app.errors import ErrorCode, GameError
from app.protocol import ManySpinsRequest, PlaceBetRequest


def validate_bet(request: PlaceBetRequest) -> int:
    """
    Validate the stake.

    Raises INVALID_BET unless amount is a JSON number in allowed_bets.
    Returns the stake as an int.
    """
    amount = request.amount
    # bool is an int subclass, and "5" must not match 5
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise GameError(ErrorCode.INVALID_BET, "Invalid bet amount")
    if amount not in settings.allowed_bets:
        raise GameError(ErrorCode.INVALID_BET, "Invalid bet amount")
    return int(amount)


def validate_spins(request: ManySpinsRequest) -> int:
    """
    Validate the batch size.

    Raises INVALID_SPINS if spins is outside [min_spins, max_spins].
    """
    if not settings.min_spins <= request.spins <= settings.max_spins:
        raise GameError(
            ErrorCode.INVALID_SPINS,
            f"Invalid number of spins. Must be between "
            f"{settings.min_spins} and {settings.max_spins}",
        )
    return request.spins


def validate_many_spins_request(request: ManySpinsRequest) -> tuple[int, int]:
    """Run all validations on a many-spins request."""
    return validate_bet(request), validate_spins(request)
