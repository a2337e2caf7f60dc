from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from flask_login import UserMixin

from tictactoe.errors import ErrorKind, GameError

EMPTY = ' '
NOT_STARTED = -1


class Symbol(str, Enum):
    X = 'X'
    O = 'O'


# Symbols are handed out in join order: first participant plays X.
JOIN_ORDER = (Symbol.X, Symbol.O)


class Outcome(str, Enum):
    CONTINUE = 'continue'
    WIN = 'win'
    DRAW = 'draw'


@dataclass(frozen=True)
class User(UserMixin):
    name: str

    def get_id(self):
        return self.name

    def to_dict(self):
        return {'name': self.name}


@dataclass(frozen=True)
class Participant:
    user: User
    symbol: Symbol

    @property
    def name(self) -> str:
        return self.user.name

    def to_dict(self):
        return {'name': self.user.name, 'symbol': self.symbol.value}


class Board:
    """Square grid of marks with win and draw detection."""

    def __init__(self, size: int = 3):
        if size < 1:
            raise ValueError(f'board size must be positive, got {size}')
        self.size = size
        self.cells: List[List[str]] = [[EMPTY] * size for _ in range(size)]
        self.moves = 0
        self._marks = {}

    def place(self, row: int, col: int, symbol: Symbol) -> Outcome:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise GameError(ErrorKind.OUT_OF_BOUNDS, f'mark is out of bounds {row}, {col}')
        current = self.cells[row][col]
        if current != EMPTY:
            raise GameError(ErrorKind.CELL_OCCUPIED, f'mark "{current}" already exists at {row},{col}')

        self.cells[row][col] = symbol.value
        self.moves += 1
        self._marks[symbol] = self._marks.get(symbol, 0) + 1

        if self.completes_line(row, col):
            return Outcome.WIN
        if self.is_full():
            return Outcome.DRAW
        return Outcome.CONTINUE

    def completes_line(self, row: int, col: int) -> bool:
        """Check the lines through (row, col) for the mark sitting there."""
        mark = self.cells[row][col]
        if mark == EMPTY:
            return False
        n = self.size
        # A line needs n marks from the mover.
        if self._marks.get(Symbol(mark), 0) < n:
            return False

        if all(self.cells[row][c] == mark for c in range(n)):
            return True
        if all(self.cells[r][col] == mark for r in range(n)):
            return True
        if row == col and all(self.cells[i][i] == mark for i in range(n)):
            return True
        if row + col == n - 1 and all(self.cells[i][n - 1 - i] == mark for i in range(n)):
            return True
        return False

    def is_full(self) -> bool:
        return self.moves == self.size * self.size

    def rows(self) -> Tuple[Tuple[str, ...], ...]:
        return tuple(tuple(row) for row in self.cells)


class Game:
    """One match: participants in join order, a board and a turn counter.

    The turn counter stays at NOT_STARTED until the game is full, then
    ``turn % len(participants)`` names whoever may mark next. Once a winner
    is set (or the board fills) the game is terminal and nothing moves again.
    """

    def __init__(self, name: str, board_size: int = 3, max_players: int = 2):
        if not 2 <= max_players <= len(JOIN_ORDER):
            raise ValueError(f'max_players must be between 2 and {len(JOIN_ORDER)}')
        self.name = name
        self.max_players = max_players
        self.board = Board(board_size)
        self.participants: List[Participant] = []
        self.turn = NOT_STARTED
        self.winner: Optional[User] = None

    @property
    def started(self) -> bool:
        return self.turn != NOT_STARTED

    @property
    def is_draw(self) -> bool:
        return self.winner is None and self.board.is_full()

    @property
    def is_terminal(self) -> bool:
        return self.winner is not None or self.is_draw

    @property
    def status(self) -> str:
        if self.winner is not None:
            return 'won'
        if self.is_draw:
            return 'draw'
        if self.started:
            return 'active'
        return 'forming'

    @property
    def occupancy(self) -> str:
        return f'{len(self.participants)}/{self.max_players} players'

    def participant(self, name: str) -> Optional[Participant]:
        for p in self.participants:
            if p.user.name == name:
                return p
        return None

    def has(self, name: str) -> bool:
        return self.participant(name) is not None

    def current_participant(self) -> Optional[Participant]:
        if not self.started or self.is_terminal or not self.participants:
            return None
        return self.participants[self.turn % len(self.participants)]

    def join(self, user: User) -> Symbol:
        if len(self.participants) >= self.max_players:
            raise GameError(ErrorKind.GAME_FULL, f'game "{self.name}" is full, {self.occupancy}')
        symbol = JOIN_ORDER[len(self.participants)]
        self.participants.append(Participant(user, symbol))
        if len(self.participants) == self.max_players:
            self.turn = 0
        return symbol

    def mark(self, name: str, row: int, col: int) -> Outcome:
        mover = self.participant(name)
        if mover is None:
            raise GameError(ErrorKind.NOT_IN_GAME, f'user "{name}" is not in game "{self.name}"')
        if not self.started:
            raise GameError(ErrorKind.NOT_STARTED, 'game has not started')
        if self.winner is not None:
            raise GameError(ErrorKind.ALREADY_WON, f'game is already won by "{self.winner.name}"')
        if self.is_draw:
            raise GameError(ErrorKind.GAME_OVER, 'game ended in a draw')
        expected = self.participants[self.turn % len(self.participants)]
        if expected.user.name != name:
            raise GameError(ErrorKind.WRONG_TURN, f"it's not your turn, waiting on \"{expected.user.name}\"")

        outcome = self.board.place(row, col, mover.symbol)
        self.turn += 1
        if outcome is Outcome.WIN:
            self.winner = mover.user
        return outcome

    def remove(self, name: str) -> bool:
        """Drop a participant, awarding a forfeit win when one player remains.

        Returns False when the user was not part of this game.
        """
        mover = self.participant(name)
        if mover is None:
            return False
        was_terminal = self.is_terminal
        self.participants.remove(mover)
        if self.started and not was_terminal and len(self.participants) == 1:
            self.winner = self.participants[0].user
        return True

    def snapshot(self) -> 'GameSnapshot':
        current = self.current_participant()
        return GameSnapshot(
            name=self.name,
            participants=tuple(self.participants),
            board=self.board.rows(),
            turn=self.turn,
            max_players=self.max_players,
            winner=self.winner.name if self.winner else None,
            status=self.status,
            current_player=current.user.name if current else None,
        )


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only copy of a game handed to transports."""
    name: str
    participants: Tuple[Participant, ...]
    board: Tuple[Tuple[str, ...], ...]
    turn: int
    max_players: int
    winner: Optional[str]
    status: str
    current_player: Optional[str]

    def to_dict(self):
        return {
            'name': self.name,
            'players': [p.to_dict() for p in self.participants],
            'board': [list(row) for row in self.board],
            'turn': self.turn,
            'max_players': self.max_players,
            'winner': self.winner,
            'status': self.status,
            'current_player': self.current_player,
        }
