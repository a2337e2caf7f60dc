import logging
import time
import unicodedata
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from tictactoe.errors import ErrorKind, GameError
from tictactoe.models import User


@dataclass
class RegistryEntry:
    user: User
    logged_in: bool
    last_seen: float
    # Bumped on every register or resume
    session: int = 1


def clean_name(raw) -> str:
    """Strip control characters (newlines in particular) from a display name."""
    if not isinstance(raw, str):
        return ''
    return ''.join(ch for ch in raw if unicodedata.category(ch)[0] != 'C')


class Registry:
    """Directory of every user seen by this process and their liveness.

    Not thread-safe on its own; callers hold the store lock.
    """

    def __init__(self, max_name_length: int = 32, clock: Callable[[], float] = time.monotonic, logger=None):
        self.max_name_length = max_name_length
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)
        self._entries: Dict[str, RegistryEntry] = {}

    def __len__(self):
        return len(self._entries)

    def __contains__(self, name):
        return name in self._entries

    def entry(self, name: str) -> Optional[RegistryEntry]:
        return self._entries.get(name)

    def entries(self) -> List[RegistryEntry]:
        return list(self._entries.values())

    def register(self, raw_name) -> User:
        name = clean_name(raw_name)
        if not name:
            raise GameError(ErrorKind.INVALID_NAME, 'name cannot be empty')
        if len(name) > self.max_name_length:
            raise GameError(ErrorKind.INVALID_NAME, f'name must be at most {self.max_name_length} characters')

        existing = self._entries.get(name)
        if existing is not None:
            if existing.logged_in:
                raise GameError(ErrorKind.NAME_IN_USE, f'user "{name}" is already logged in')
            existing.logged_in = True
            existing.last_seen = self.clock()
            existing.session += 1
            self.logger.info(f'[login] user="{name}" resumed')
            return existing.user

        user = User(name)
        self._entries[name] = RegistryEntry(user=user, logged_in=True, last_seen=self.clock())
        self.logger.info(f'[register] user="{name}"')
        return user

    def authorize(self, name) -> User:
        entry = self._entries.get(name) if isinstance(name, str) else None
        if entry is None:
            raise GameError(ErrorKind.NOT_REGISTERED, f'user "{name}" is not registered')
        if not entry.logged_in:
            raise GameError(ErrorKind.NOT_LOGGED_IN, f'user "{name}" is not logged in')
        entry.last_seen = self.clock()
        return entry.user

    def logout(self, name: str) -> bool:
        entry = self._entries.get(name)
        if entry is None or not entry.logged_in:
            return False
        entry.logged_in = False
        return True

    def expired(self, now: float, timeout: float) -> List[RegistryEntry]:
        return [e for e in self._entries.values() if e.logged_in and now - e.last_seen > timeout]
