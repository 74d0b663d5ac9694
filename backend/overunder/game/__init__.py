"""Over-Under game core: the snapshot state machine and its dataset.

Nothing in this package knows about HTTP or sockets; the Flask layer holds
the current snapshot per game and feeds it input events.
"""

from .dataset import load_counts, parse_counts, parse_location
from .engine import ELIGIBLE_MIN_COUNT, GameEngine, GuessOutcome, GuessResult
from .errors import (
    DatasetParseError,
    EmptyEligibleSetError,
    GameError,
    GameNotFoundError,
    InvalidGuessError,
    InvalidStateError,
)
from .models import Comparison, GameStatus, Location

__all__ = [
    'ELIGIBLE_MIN_COUNT',
    'Comparison',
    'DatasetParseError',
    'EmptyEligibleSetError',
    'GameEngine',
    'GameError',
    'GameNotFoundError',
    'GameStatus',
    'GuessOutcome',
    'GuessResult',
    'InvalidGuessError',
    'InvalidStateError',
    'Location',
    'load_counts',
    'parse_counts',
    'parse_location',
]
