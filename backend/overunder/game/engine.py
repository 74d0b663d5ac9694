"""Over-Under game state machine.

A GameEngine value is one snapshot of a game. Transitions never mutate a
snapshot; they return a new one, and the caller rebinds to it:

    Inactive --start()--> Active --guess() correct--> Active
                                 --guess() wrong----> Done --restart()--> Active

Every snapshot of one game shares the same random source, which is only used
to pick location indices.
"""

import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Tuple

from .errors import EmptyEligibleSetError, InvalidStateError
from .models import Comparison, GameStatus, Location

# Locations must be strictly above this count to be played
ELIGIBLE_MIN_COUNT = 100


class GuessOutcome(str, Enum):
    CORRECT = 'correct'
    INCORRECT = 'incorrect'


@dataclass(frozen=True)
class GameEngine:
    locations: Tuple[Location, ...]
    status: GameStatus = GameStatus.INACTIVE
    current_index: int = 0
    next_index: int = 0
    current_score: int = 0
    best_score: int = 0
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    @classmethod
    def new(cls, records: Iterable[Location], rng=None, min_count: int = ELIGIBLE_MIN_COUNT) -> 'GameEngine':
        """Build an inactive engine from the locations with count > min_count.

        Raises EmptyEligibleSetError when nothing is left to play with.
        """
        eligible = tuple(loc for loc in records if loc.count > min_count)
        if not eligible:
            raise EmptyEligibleSetError(f'No locations with a count above {min_count}')
        return cls(locations=eligible, rng=rng if rng is not None else random.Random())

    # ---- transitions ----

    def start(self) -> 'GameEngine':
        self._require('start', GameStatus.INACTIVE)
        return replace(
            self,
            status=GameStatus.ACTIVE,
            current_index=self._pick_index(),
            next_index=self._pick_index(),
            current_score=0,
            best_score=0,
        )

    def guess(self, direction) -> 'GuessResult':
        """Judge a guess on how the next location compares to the current one.

        `higher` means the next location's count is larger than the current
        one, `lower` that it is smaller. An equal pair counts as correct whatever was guessed.
        """
        self._require('guess on', GameStatus.ACTIVE)
        direction = Comparison.parse(direction)
        truth = self.truth()
        if truth is Comparison.EQUAL or direction is truth:
            score = self.current_score + 1
            game = replace(
                self,
                current_score=score,
                best_score=max(self.best_score, score),
                current_index=self.next_index,
                next_index=self._pick_index(),
            )
            return GuessResult(GuessOutcome.CORRECT, game, truth, direction)
        # Keep the failing pair so it can be shown
        game = replace(self, status=GameStatus.DONE, current_score=0)
        return GuessResult(GuessOutcome.INCORRECT, game, truth, direction)

    def restart(self) -> 'GameEngine':
        self._require('restart', GameStatus.DONE)
        return replace(
            self,
            status=GameStatus.ACTIVE,
            current_score=0,
            current_index=self.next_index,
            next_index=self._pick_index(),
        )

    # ---- queries ----

    def current_location(self) -> Location:
        self._require('read locations of', GameStatus.ACTIVE, GameStatus.DONE)
        return self.locations[self.current_index]

    def next_location(self) -> Location:
        self._require('read locations of', GameStatus.ACTIVE, GameStatus.DONE)
        return self.locations[self.next_index]

    def truth(self) -> Comparison:
        return Comparison.of(self.current_location().count, self.next_location().count)

    def to_dict(self):
        """Everything a view needs for this snapshot.

        The next location's count stays hidden until the round is over.
        """
        data = {
            'status': self.status.value,
            'current_score': self.current_score,
            'best_score': self.best_score,
            'current': None,
            'next': None,
        }
        if self.status is not GameStatus.INACTIVE:
            data['current'] = self.current_location().to_dict()
            data['next'] = self.next_location().to_dict(include_count=self.status is GameStatus.DONE)
        return data

    # ---- helpers ----

    def _require(self, action: str, *allowed: GameStatus) -> None:
        if self.status not in allowed:
            raise InvalidStateError(f'Cannot {action} a game that is {self.status.value}')

    def _pick_index(self) -> int:
        if not self.locations:
            raise EmptyEligibleSetError('Cannot pick a location from an empty set')
        return self.rng.randrange(len(self.locations))


@dataclass(frozen=True)
class GuessResult:
    """Outcome of a guess: the new snapshot plus what was compared."""

    outcome: GuessOutcome
    game: GameEngine
    truth: Comparison
    guess: Comparison

    @property
    def correct(self) -> bool:
        return self.outcome is GuessOutcome.CORRECT

    def to_dict(self):
        return {
            'outcome': self.outcome.value,
            'correct': self.correct,
            'truth': self.truth.value,
            'guess': self.guess.value,
        }
