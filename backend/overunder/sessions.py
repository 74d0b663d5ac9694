"""In-memory game sessions.

Each game code maps to exactly one current GameEngine snapshot. Transitions
are applied under a lock so a reader never observes a half-applied swap.
Sessions are not persisted; restarting the process forgets them.
"""

import random
import string
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from overunder.game import (
    ELIGIBLE_MIN_COUNT,
    GameEngine,
    GameNotFoundError,
    GameStatus,
    GuessResult,
    Location,
    load_counts,
)

T = TypeVar('T')


def generate_game_code(existing, length=4):
    """Generate a unique, short game code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in existing:
            return code


class GameRegistry:
    """Holds the dataset and the current snapshot of every open game."""

    def __init__(self, clock=time.monotonic):
        self._lock = threading.RLock()
        self._games: Dict[str, GameEngine] = {}
        # Last time each game was read or changed, on `clock`
        self._touched: Dict[str, float] = {}
        self._clock = clock
        self.records: List[Location] = []
        self.min_count = ELIGIBLE_MIN_COUNT
        self._rng: Optional[random.Random] = None
        self._eligible_count = 0

    def init_app(self, app) -> None:
        """Load the dataset named by the app config.

        Parse errors and an empty eligible set propagate, so a bad dataset
        stops the app from starting.
        """
        path = app.config['DATASET_PATH']
        records = load_counts(path)
        self.load(records, min_count=app.config.get('MIN_COUNT', ELIGIBLE_MIN_COUNT), seed=app.config.get('RANDOM_SEED'))
        app.logger.info(f"[dataset] loaded {len(records)} records from {path}, {self._eligible_count} eligible")
        app.extensions['overunder.registry'] = self

    def load(self, records, min_count=ELIGIBLE_MIN_COUNT, seed=None) -> None:
        # Fails fast on an unplayable dataset before any game exists
        probe = GameEngine.new(records, min_count=min_count)
        with self._lock:
            self.records = list(records)
            self.min_count = min_count
            self._rng = random.Random(seed)
            self._eligible_count = len(probe.locations)
            self._games.clear()
            self._touched.clear()

    @property
    def eligible_count(self) -> int:
        return self._eligible_count

    def summary(self):
        return {'records': len(self.records), 'eligible': self._eligible_count, 'games': len(self._games)}

    # ---- sessions ----

    def create(self) -> Tuple[str, GameEngine]:
        with self._lock:
            code = generate_game_code(self._games)
            game = GameEngine.new(self.records, rng=self._rng, min_count=self.min_count)
            self._games[code] = game
            self._touched[code] = self._clock()
            return code, game

    def get(self, game_code: str) -> GameEngine:
        code = game_code.upper()
        with self._lock:
            try:
                game = self._games[code]
            except KeyError:
                raise GameNotFoundError(f'Game {code} not found') from None
            self._touched[code] = self._clock()
            return game

    def __contains__(self, game_code) -> bool:
        with self._lock:
            return game_code.upper() in self._games

    def end(self, game_code: str) -> bool:
        code = game_code.upper()
        with self._lock:
            self._touched.pop(code, None)
            return self._games.pop(code, None) is not None

    def reap_idle(self, max_idle_sec) -> List[str]:
        """Forget games nobody has read or played for `max_idle_sec` seconds.

        Returns the dropped codes. A limit of 0 or less keeps everything.
        """
        if not max_idle_sec or max_idle_sec <= 0:
            return []
        with self._lock:
            cutoff = self._clock() - max_idle_sec
            idle = [code for code, touched in self._touched.items() if touched < cutoff]
            for code in idle:
                self._games.pop(code, None)
                self._touched.pop(code, None)
            return idle

    def apply(self, game_code: str, transition: Callable[[GameEngine], T]) -> T:
        """Run `transition` on the current snapshot and store what it returns.

        `transition` returns either the next GameEngine or a GuessResult.
        Exceptions leave the stored snapshot untouched.
        """
        code = game_code.upper()
        with self._lock:
            current = self.get(code)
            outcome = transition(current)
            self._games[code] = outcome.game if isinstance(outcome, GuessResult) else outcome
            self._touched[code] = self._clock()
            return outcome

    def start(self, game_code: str) -> Tuple[GameEngine, GameEngine]:
        """Start an inactive game, restart a finished one; active games are left alone.

        Returns the replaced snapshot and the new one.
        """
        with self._lock:
            previous = self.get(game_code)
            return previous, self.apply(game_code, _start_or_restart)

    def guess(self, game_code: str, direction) -> GuessResult:
        return self.apply(game_code, lambda game: game.guess(direction))


def _start_or_restart(game: GameEngine) -> GameEngine:
    if game.status is GameStatus.INACTIVE:
        return game.start()
    if game.status is GameStatus.DONE:
        return game.restart()
    return game
