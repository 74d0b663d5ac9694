from flask import Blueprint, jsonify, request, current_app
from overunder import registry, socketio
from overunder.game import Comparison, GameNotFoundError, GameStatus, InvalidGuessError, InvalidStateError
from overunder.socketio_events import end_session
import time


games = Blueprint('games', __name__)

_last_guess_at: dict[str, float] = {}


def game_state(game_code: str, game=None) -> dict:
    """Serialized snapshot for clients, tagged with its game code."""
    game = game if game is not None else registry.get(game_code)
    payload = game.to_dict()
    payload['game_code'] = game_code.upper()
    return payload


def broadcast_state(game_code: str, payload: dict) -> None:
    socketio.emit('state_update', payload, to=f"game:{game_code.upper()}", namespace='/ws')


@games.errorhandler(GameNotFoundError)
def _game_not_found(exc):
    return jsonify({'error': str(exc)}), 404


@games.route('/create', methods=['POST'])
def create_game():
    for idle_code in registry.reap_idle(current_app.config.get('SESSION_IDLE_SEC', 0)):
        current_app.logger.info(f"[idle] game={idle_code} dropped")
        end_session(idle_code)
    code, game = registry.create()
    current_app.logger.info(f"[create] game={code} locations={len(game.locations)}")
    return jsonify({
        'message': 'New game created!',
        'game_code': code,
        'state': game_state(code, game),
    }), 201


@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    return jsonify(game_state(game_code))


@games.route('/<string:game_code>/start', methods=['POST'])
def start_game(game_code):
    """Starts a new game or restarts a finished one. Idempotent while active."""
    before, game = registry.start(game_code)
    if game is not before:
        current_app.logger.info(
            f"[{'start' if before.status is GameStatus.INACTIVE else 'restart'}] game={game_code.upper()} best={game.best_score}"
        )
        broadcast_state(game_code, game_state(game_code, game))
    return jsonify(game_state(game_code, game))


@games.route('/<string:game_code>/guess', methods=['POST'])
def submit_guess(game_code):
    data = request.get_json(silent=True) or {}
    direction = data.get('direction')
    if not direction:
        return jsonify({'error': 'direction is required'}), 400
    registry.get(game_code)
    try:
        direction = Comparison.parse(direction)
    except InvalidGuessError as exc:
        return jsonify({'error': str(exc)}), 400

    # Debounce, only once the guess names a real game and direction
    try:
        debounce_ms = int(current_app.config.get('GUESS_DEBOUNCE_MS', 0))
    except (TypeError, ValueError):
        debounce_ms = 0
    if debounce_ms > 0:
        key = game_code.upper()
        now = time.time() * 1000.0
        last = _last_guess_at.get(key, 0)
        if now - last < debounce_ms:
            return jsonify({'message': 'debounced'}), 202
        _last_guess_at[key] = now

    try:
        result = registry.guess(game_code, direction)
    except InvalidStateError as exc:
        return jsonify({'error': str(exc)}), 400

    current_app.logger.info(
        f"[guess] game={game_code.upper()} guess={result.guess.value} truth={result.truth.value} "
        f"outcome={result.outcome.value} score={result.game.current_score} best={result.game.best_score}"
    )
    payload = game_state(game_code, result.game)
    broadcast_state(game_code, payload)
    return jsonify({**payload, 'result': result.to_dict()})


@games.route('/<string:game_code>/leave', methods=['POST'])
def leave_game(game_code):
    """Ends the game and forgets its snapshot."""
    registry.get(game_code)
    end_session(game_code.upper())
    return jsonify({'message': 'You have left the game.'}), 200
