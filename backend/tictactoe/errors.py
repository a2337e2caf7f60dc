from enum import Enum


class ErrorKind(str, Enum):
    INVALID_NAME = 'InvalidName'
    OUT_OF_BOUNDS = 'OutOfBounds'
    NOT_REGISTERED = 'NotRegistered'
    NOT_LOGGED_IN = 'NotLoggedIn'
    NAME_IN_USE = 'NameInUse'
    ALREADY_IN_GAME = 'AlreadyInGame'
    DUPLICATE_NAME = 'DuplicateName'
    GAME_FULL = 'GameFull'
    GAME_NOT_FOUND = 'GameNotFound'
    NOT_IN_GAME = 'NotInGame'
    CELL_OCCUPIED = 'CellOccupied'
    WRONG_TURN = 'WrongTurn'
    ALREADY_WON = 'AlreadyWon'
    NOT_STARTED = 'NotStarted'
    GAME_OVER = 'GameOver'
    INVALID_REQUEST = 'InvalidRequest'


VALIDATION = 'validation'
AUTHORIZATION = 'authorization'
CONFLICT = 'conflict'

_CATEGORIES = {
    ErrorKind.INVALID_NAME: VALIDATION,
    ErrorKind.OUT_OF_BOUNDS: VALIDATION,
    ErrorKind.INVALID_REQUEST: VALIDATION,
    ErrorKind.NOT_REGISTERED: AUTHORIZATION,
    ErrorKind.NOT_LOGGED_IN: AUTHORIZATION,
}

_STATUS_CODES = {
    VALIDATION: 400,
    AUTHORIZATION: 401,
    CONFLICT: 409,
}


class GameError(Exception):
    """Raised by the registry, matchmaker and games when a request is refused.

    Every mutation validates before touching state, so a raised GameError
    means nothing changed.
    """

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def category(self) -> str:
        return _CATEGORIES.get(self.kind, CONFLICT)

    @property
    def status_code(self) -> int:
        if self.kind in (ErrorKind.GAME_NOT_FOUND, ErrorKind.NOT_IN_GAME):
            return 404
        return _STATUS_CODES[self.category]

    def to_dict(self):
        return {
            'error': self.message,
            'kind': self.kind.value,
        }

    def __repr__(self):
        return f'GameError({self.kind.value}, {self.message!r})'
