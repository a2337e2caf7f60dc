from typing import List, Optional

from tictactoe.errors import ErrorKind, GameError
from tictactoe.models import GameSnapshot, Outcome, User

from .store import GameStore


def _coordinate(value, label):
    if isinstance(value, bool):
        raise GameError(ErrorKind.OUT_OF_BOUNDS, f'{label} must be an integer')
    if isinstance(value, float):
        # 1.0 is fine, 0.9 is not a cell
        if not value.is_integer():
            raise GameError(ErrorKind.OUT_OF_BOUNDS, f'{label} must be an integer, got {value!r}')
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise GameError(ErrorKind.OUT_OF_BOUNDS, f'{label} must be an integer, got {value!r}')


class RequestHandler:
    """Request/response operations over a GameStore.

    Each call takes the store lock for its whole duration, authorizes the
    caller (except ``register``) and hands back snapshots instead of live
    objects. Failures surface as GameError.
    """

    def __init__(self, store: GameStore):
        self.store = store

    @property
    def logger(self):
        return self.store.logger

    def register(self, name) -> User:
        with self.store.lock:
            return self.store.registry.register(name)

    def authorize(self, name) -> User:
        with self.store.lock:
            return self.store.registry.authorize(name)

    def list_open_games(self, name) -> List[str]:
        with self.store.lock:
            user = self.store.registry.authorize(name)
            return self.store.matchmaker.list_open_games(user)

    def create_game(self, name) -> GameSnapshot:
        with self.store.lock:
            user = self.store.registry.authorize(name)
            return self.store.matchmaker.create_game(user).snapshot()

    def join_game(self, name, host) -> GameSnapshot:
        with self.store.lock:
            user = self.store.registry.authorize(name)
            return self.store.matchmaker.join_game(user, host).snapshot()

    def mark(self, name, row, col) -> GameSnapshot:
        row = _coordinate(row, 'row')
        col = _coordinate(col, 'col')
        with self.store.lock:
            user = self.store.registry.authorize(name)
            game = self.store.matchmaker.game_for(user.name)
            if game is None:
                raise GameError(ErrorKind.NOT_IN_GAME, f'user "{user.name}" is not in a game')
            outcome = game.mark(user.name, row, col)
            self.logger.info(f'[mark] user="{user.name}" game="{game.name}" at {row},{col}')
            if outcome is Outcome.WIN:
                self.logger.info(f'[win] game="{game.name}" winner="{user.name}"')
            elif outcome is Outcome.DRAW:
                self.logger.info(f'[draw] game="{game.name}"')
            return game.snapshot()

    def quit_game(self, name) -> None:
        with self.store.lock:
            user = self.store.registry.authorize(name)
            game = self.store.matchmaker.quit(user)
            self.logger.info(f'[quit] user="{user.name}" game="{game.name}"')

    def get_game_state(self, name) -> Optional[GameSnapshot]:
        with self.store.lock:
            user = self.store.registry.authorize(name)
            game = self.store.matchmaker.game_for(user.name)
            return game.snapshot() if game else None

    def poll(self, name) -> dict:
        """Game state and lobby in one call, for clients refreshing on a timer."""
        with self.store.lock:
            user = self.store.registry.authorize(name)
            game = self.store.matchmaker.game_for(user.name)
            return {
                'game': game.snapshot() if game else None,
                'lobby': self.store.matchmaker.list_open_games(user),
            }

    def logout(self, name) -> None:
        with self.store.lock:
            user = self.store.registry.authorize(name)
            self.disconnect(user.name)

    def session_of(self, name) -> Optional[int]:
        with self.store.lock:
            entry = self.store.registry.entry(name)
            return entry.session if entry else None

    def disconnect(self, name, session: Optional[int] = None) -> bool:
        """Log a user out and drop them from their game, without authorizing.

        When ``session`` is given the call only acts while it is still the
        user's current login; a connection opened before an eviction or logout
        must not end the login that replaced it. Returns whether anything ran.
        """
        with self.store.lock:
            if session is not None and self.session_of(name) != session:
                self.logger.info(f'[disconnect-stale] user="{name}" session={session}')
                return False
            if self.store.registry.logout(name):
                self.logger.info(f'[logout] user="{name}"')
            self.store.matchmaker.kick(name)
            return True
