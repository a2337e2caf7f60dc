import logging
from typing import List, Optional

from tictactoe.errors import ErrorKind, GameError
from tictactoe.models import Game, User


def game_name_for(host: str) -> str:
    return f"{host}'s game"


class Matchmaker:
    """Owns the live games and keeps every user in at most one of them.

    Like the registry this expects the caller to hold the store lock so the
    membership check and the insert happen as one step.
    """

    def __init__(self, board_size: int = 3, max_players: int = 2, logger=None):
        self.board_size = board_size
        self.max_players = max_players
        self.logger = logger or logging.getLogger(__name__)
        self._games: List[Game] = []

    def __len__(self):
        return len(self._games)

    def games(self) -> List[Game]:
        return list(self._games)

    def game_for(self, name: str) -> Optional[Game]:
        for g in self._games:
            if g.has(name):
                return g
        return None

    def _ensure_free(self, user: User) -> None:
        current = self.game_for(user.name)
        if current is not None:
            raise GameError(ErrorKind.ALREADY_IN_GAME, f'you are already in game "{current.name}"')

    def create_game(self, user: User) -> Game:
        self._ensure_free(user)
        name = game_name_for(user.name)
        # Guard on the name slot; only reachable if a host somehow holds two games
        if any(g.name == name and not g.is_terminal for g in self._games):
            raise GameError(ErrorKind.DUPLICATE_NAME, f'game "{name}" already exists')

        game = Game(name, board_size=self.board_size, max_players=self.max_players)
        game.join(user)
        self._games.append(game)
        self.logger.info(f'[create] user="{user.name}" game="{game.name}"')
        return game

    def join_game(self, user: User, host_name: str) -> Game:
        self._ensure_free(user)
        game = self.game_for(host_name)
        if game is None:
            raise GameError(ErrorKind.GAME_NOT_FOUND, f'game with user "{host_name}" not found')
        if game.started or game.is_terminal:
            raise GameError(ErrorKind.GAME_FULL, f'game with user "{host_name}" is full, {game.occupancy}')

        symbol = game.join(user)
        self.logger.info(f'[join] user="{user.name}" game="{game.name}" symbol={symbol.value}')
        return game

    def list_open_games(self, user: User) -> List[str]:
        return [
            g.participants[0].user.name
            for g in self._games
            if not g.started and g.participants and not g.has(user.name)
        ]

    def quit(self, user: User) -> Game:
        game = self.game_for(user.name)
        if game is None:
            raise GameError(ErrorKind.NOT_IN_GAME, f'user "{user.name}" is not in a game')
        self._remove(game, user.name)
        return game

    def kick(self, name: str) -> Optional[Game]:
        """Remove a user from whatever game they are in; no-op if none."""
        game = self.game_for(name)
        if game is not None:
            self._remove(game, name)
        return game

    def _remove(self, game: Game, name: str) -> None:
        had_winner = game.winner is not None
        game.remove(name)
        if not had_winner and game.winner is not None:
            self.logger.info(f'[forfeit] game="{game.name}" user="{name}" winner="{game.winner.name}"')
        if not game.participants:
            self._games.remove(game)
            self.logger.info(f'[cleanup] game="{game.name}" removed, no players left')
