import string
import threading

import pytest

from overunder.game import GameNotFoundError, GameStatus, InvalidGuessError, Location
from overunder.sessions import GameRegistry, generate_game_code


def _registry(*pairs, seed=0):
    registry = GameRegistry()
    registry.load([Location(name, count) for name, count in pairs], seed=seed)
    return registry


def test_generate_game_code_avoids_existing():
    code = generate_game_code(set())
    assert len(code) == 4
    assert set(code) <= set(string.ascii_uppercase + string.digits)
    taken = {code}
    assert generate_game_code(taken) not in taken


def test_create_registers_inactive_game():
    registry = _registry(('a', 200), ('b', 300))
    code, game = registry.create()
    assert code in registry
    assert code.lower() in registry
    assert registry.get(code) is game
    assert game.status is GameStatus.INACTIVE


def test_start_then_restart_swaps_snapshot():
    registry = _registry(('a', 200), ('b', 300))
    code, created = registry.create()
    before, started = registry.start(code)
    assert before is created
    assert started.status is GameStatus.ACTIVE
    assert registry.get(code) is started

    # starting an active game is a no-op
    before, same = registry.start(code)
    assert same is before is started


def test_guess_stores_resulting_snapshot():
    registry = _registry(('a', 200), ('b', 200))
    code, _ = registry.create()
    registry.start(code)
    result = registry.guess(code, 'lower')
    assert result.correct
    assert registry.get(code) is result.game


def test_failed_transition_keeps_current_snapshot():
    registry = _registry(('a', 200), ('b', 300))
    code, _ = registry.create()
    _, started = registry.start(code)
    with pytest.raises(InvalidGuessError):
        registry.guess(code, 'sideways')
    assert registry.get(code) is started


def test_unknown_code_raises():
    registry = _registry(('a', 200))
    with pytest.raises(GameNotFoundError):
        registry.get('NOPE')
    assert not registry.end('NOPE')


def test_end_removes_game():
    registry = _registry(('a', 200))
    code, _ = registry.create()
    assert registry.end(code)
    assert code not in registry


def test_concurrent_guesses_are_serialized():
    registry = _registry(('a', 500), ('b', 500), seed=3)
    code, _ = registry.create()
    registry.start(code)

    def worker():
        for _ in range(50):
            registry.guess(code, 'higher')

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    # every guess on an all-equal dataset is correct, none may be lost
    assert registry.get(code).current_score == 200
    assert registry.get(code).best_score == 200


def test_summary_counts_eligible_records():
    registry = _registry(('a', 200), ('b', 50), ('c', 101))
    registry.create()
    assert registry.summary() == {'records': 3, 'eligible': 2, 'games': 1}


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_idle_games_are_reaped_and_active_ones_kept():
    clock = FakeClock()
    registry = GameRegistry(clock=clock)
    registry.load([Location('a', 200), Location('b', 300)], seed=0)
    idle, _ = registry.create()
    busy, _ = registry.create()

    clock.now = 50.0
    registry.start(busy)
    clock.now = 100.0
    registry.get(busy)

    assert registry.reap_idle(60) == [idle]
    assert idle not in registry
    assert busy in registry
    assert registry.summary()['games'] == 1


def test_reap_idle_disabled_by_zero_limit():
    clock = FakeClock()
    registry = GameRegistry(clock=clock)
    registry.load([Location('a', 200)], seed=0)
    code, _ = registry.create()
    clock.now = 10_000.0
    assert registry.reap_idle(0) == []
    assert code in registry
