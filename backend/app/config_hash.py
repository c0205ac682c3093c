"""Config hash shared by telemetry events and the RTP simulation CSV.

The hash MUST be computed identically in both places so a simulation
run can be matched to the server config that produced live bets.
"""
import hashlib
import json

from app.config import settings
from app.logic.models import SYMBOLS, TWO_OF_A_KIND_FACTOR


def get_config_hash() -> str:
    """
    Generate hash of the paytable and bet limits.

    Returns 16-char hex hash of config snapshot.
    """
    config_snapshot = {
        "paytable": [[symbol.name, symbol.value] for symbol in SYMBOLS],
        "two_of_a_kind_factor": str(TWO_OF_A_KIND_FACTOR),
        "allowed_bets": list(settings.allowed_bets),
        "min_spins": settings.min_spins,
        "max_spins": settings.max_spins,
    }
    canonical = json.dumps(config_snapshot, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]
