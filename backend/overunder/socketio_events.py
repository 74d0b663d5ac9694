from flask_socketio import join_room, leave_room, emit
from overunder import registry, socketio
from flask import current_app, request
from overunder.game import GameNotFoundError, GameStatus, InvalidGuessError, InvalidStateError
from typing import Dict, Any
import time


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    # On disconnect, if this socket owned a game and no other owner
    # remains, end the session for that game code
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx:
        return
    game_code = ctx.get('game_code')
    if ctx.get('is_session_owner') and game_code:
        _owner_count[game_code] = max(0, _owner_count.get(game_code, 0) - 1)
        # In tests, end immediately for determinism; in prod, allow grace period
        if current_app.config.get('TESTING'):
            if _owner_count.get(game_code, 0) == 0:
                end_session(game_code)
            return
        _schedule_end_if_no_owner(game_code, current_app.config.get('SESSION_GRACE_SEC', 2.0))


def handle_join_game(data):
    game_code = (data or {}).get('game_code')
    is_session_owner = bool((data or {}).get('is_session_owner'))
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    code = game_code.upper()
    room = f"game:{code}"
    join_room(room)
    # Track session owner presence and socket context
    _sid_to_ctx[_get_sid()] = {'game_code': code, 'is_session_owner': is_session_owner}
    if is_session_owner:
        _owner_count[code] = _owner_count.get(code, 0) + 1
        _cancel_scheduled_end(code)
    emit('joined', {'room': room})
    if code in registry:
        emit('state_update', _state(code))


def handle_leave_game(data):
    game_code = (data or {}).get('game_code')
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    room = f"game:{game_code.upper()}"
    leave_room(room)
    emit('left', {'room': room})
    # An owner leaving explicitly ends the game immediately
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('is_session_owner') and ctx.get('game_code') == game_code.upper():
        end_session(game_code.upper())


def handle_start_game(data):
    game_code = (data or {}).get('game_code')
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    try:
        before, game = registry.start(game_code)
    except GameNotFoundError as exc:
        emit('error', {'message': str(exc)})
        return
    if game is not before:
        current_app.logger.info(
            f"[{'start' if before.status is GameStatus.INACTIVE else 'restart'}] game={game_code.upper()} via socket best={game.best_score}"
        )
    _broadcast(game_code.upper(), _state(game_code.upper(), game))


def handle_guess(data):
    game_code = (data or {}).get('game_code')
    direction = (data or {}).get('direction')
    if not game_code or not direction:
        emit('error', {'message': 'game_code and direction are required'})
        return
    try:
        result = registry.guess(game_code, direction)
    except (GameNotFoundError, InvalidGuessError, InvalidStateError) as exc:
        emit('error', {'message': str(exc)})
        return
    current_app.logger.info(
        f"[guess] game={game_code.upper()} via socket outcome={result.outcome.value} score={result.game.current_score}"
    )
    payload = _state(game_code.upper(), result.game)
    emit('guess_result', {**payload, 'result': result.to_dict()})
    _broadcast(game_code.upper(), payload)


def handle_ping(data):
    emit('pong', data or {})

# ---- Session owner lifecycle helpers ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_owner_count: Dict[str, int] = {}
_end_deadline: Dict[str, float] = {}

def _get_sid() -> str:
    return request.sid  # type: ignore[attr-defined]

def _state(game_code: str, game=None) -> Dict[str, Any]:
    from overunder.api.games import game_state
    return game_state(game_code, game)

def _broadcast(game_code: str, payload: Dict[str, Any]) -> None:
    from overunder.api.games import broadcast_state
    broadcast_state(game_code, payload)

def end_session(game_code: str) -> None:
    """End the session: notify clients and forget the game's snapshot."""
    # Use socketio.emit since this may be called from a background task
    socketio.emit('session_ended', {'game_code': game_code}, to=f"game:{game_code}", namespace='/ws')
    try:
        if registry.end(game_code):
            try:
                current_app.logger.info(f"[session-end] game={game_code}")
            except RuntimeError:
                # No app context in a background task
                pass
    finally:
        _owner_count.pop(game_code, None)
        _end_deadline.pop(game_code, None)
        _forget_last_guess(game_code)

def _forget_last_guess(game_code: str) -> None:
    from overunder.api.games import _last_guess_at
    _last_guess_at.pop(game_code, None)

def _schedule_end_if_no_owner(game_code: str, delay_sec: float = 2.0) -> None:
    if _owner_count.get(game_code, 0) > 0:
        return
    _end_deadline[game_code] = time.time() + delay_sec

    def _runner(code: str, deadline: float):
        sleep_for = max(0.0, deadline - time.time())
        if sleep_for:
            socketio.sleep(sleep_for)
        if _owner_count.get(code, 0) == 0 and _end_deadline.get(code) == deadline:
            end_session(code)

    socketio.start_background_task(_runner, game_code, _end_deadline[game_code])

def _cancel_scheduled_end(game_code: str) -> None:
    _end_deadline.pop(game_code, None)



def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = [
        ('connect', handle_connect),
        ('disconnect', handle_disconnect),
        ('join_game', handle_join_game),
        ('leave_game', handle_leave_game),
        ('start_game', handle_start_game),
        ('guess', handle_guess),
        ('ping', handle_ping),
    ]
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers:
            socketio.on_event(event, handler, namespace=namespace)
