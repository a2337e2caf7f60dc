import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Default port the terminal clients dial
    GAME_PORT = int(os.environ.get('GAME_PORT', '27960'))
    # Liveness (seconds). A user is evicted on the first sweep after SESSION_TIMEOUT_SEC of silence.
    SESSION_TIMEOUT_SEC = float(os.environ.get('SESSION_TIMEOUT_SEC', '2'))
    SWEEP_INTERVAL_SEC = float(os.environ.get('SWEEP_INTERVAL_SEC', '2'))
    # How often clients are told to poll; must stay below SESSION_TIMEOUT_SEC
    CLIENT_POLL_SEC = float(os.environ.get('CLIENT_POLL_SEC', '1'))
    # Game shape
    BOARD_SIZE = int(os.environ.get('BOARD_SIZE', '3'))
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '2'))
    MAX_NAME_LENGTH = int(os.environ.get('MAX_NAME_LENGTH', '32'))
