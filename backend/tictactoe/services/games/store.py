import logging
import threading
import time

from .matchmaker import Matchmaker
from .registry import Registry


class GameStore:
    """Registry plus live games behind a single lock.

    One instance lives on the Flask app (``app.extensions['tictactoe']``) and
    is shared by the request handler and the liveness sweeper. Anything that
    reads or mutates either collection must hold ``lock``.
    """

    def __init__(self, board_size=3, max_players=2, max_name_length=32,
                 session_timeout=2.0, clock=time.monotonic, logger=None):
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock
        self.session_timeout = session_timeout
        self.lock = threading.RLock()
        self.registry = Registry(max_name_length=max_name_length, clock=clock, logger=self.logger)
        self.matchmaker = Matchmaker(board_size=board_size, max_players=max_players, logger=self.logger)

    @classmethod
    def from_config(cls, config, logger=None):
        return cls(
            board_size=int(config.get('BOARD_SIZE', 3)),
            max_players=int(config.get('MAX_PLAYERS', 2)),
            max_name_length=int(config.get('MAX_NAME_LENGTH', 32)),
            session_timeout=float(config.get('SESSION_TIMEOUT_SEC', 2)),
            logger=logger,
        )
