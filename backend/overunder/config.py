import os
from pathlib import Path

DEFAULT_DATASET_PATH = Path(__file__).parent / 'data' / 'counts'


def _optional_int(name):
    value = os.environ.get(name)
    return int(value) if value not in (None, '') else None


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Counts file, one "<count> <name>" per line
    DATASET_PATH = os.environ.get('DATASET_PATH') or str(DEFAULT_DATASET_PATH)
    # Only locations with a count strictly above this are played
    MIN_COUNT = int(os.environ.get('MIN_COUNT', '100'))
    # Fixed seed for reproducible sessions; unset for fresh randomness
    RANDOM_SEED = _optional_int('RANDOM_SEED')
    # Optional: debounce repeated guesses per game (ms). 0 disables.
    GUESS_DEBOUNCE_MS = int(os.environ.get('GUESS_DEBOUNCE_MS', '0'))
    # Grace period before ending a game whose owner socket disconnected (sec)
    SESSION_GRACE_SEC = float(os.environ.get('SESSION_GRACE_SEC', '2.0'))
    # Games untouched this long (sec) are dropped when a new game is created. 0 keeps them forever.
    SESSION_IDLE_SEC = float(os.environ.get('SESSION_IDLE_SEC', '3600'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
