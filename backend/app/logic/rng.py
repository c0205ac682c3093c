"""Random sources for bet resolution.

Every draw the engine makes goes through one of these, so tests and
simulations can swap in a seeded or scripted source.
"""
import hashlib
import random
import secrets
from abc import ABC, abstractmethod


class RNGBase(ABC):
    """Abstract RNG interface used by SlotEngine."""

    @abstractmethod
    def random(self) -> float:
        """Return random float in [0, 1)."""
        pass

    @abstractmethod
    def randbelow(self, n: int) -> int:
        """Return random int in [0, n)."""
        pass


class ProductionRNG(RNGBase):
    """Cryptographically secure source, no fixed seed."""

    def random(self) -> float:
        return secrets.randbelow(2**53) / (2**53)

    def randbelow(self, n: int) -> int:
        return secrets.randbelow(n)


class SeededRNG(RNGBase):
    """
    Deterministic RNG for tests and RTP simulations.

    The same seed always replays the same sequence of bets.
    """

    def __init__(self, seed: int):
        self._rng = random.Random(seed)
        self.seed = seed

    def random(self) -> float:
        return self._rng.random()

    def randbelow(self, n: int) -> int:
        return self._rng.randrange(n)


def seed_to_int(seed_str: str) -> int:
    """Convert string seed to integer deterministically."""
    return int(hashlib.sha256(seed_str.encode()).hexdigest(), 16) % (2**31)
