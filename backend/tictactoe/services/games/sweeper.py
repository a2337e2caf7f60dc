import time
from typing import List, Optional


class LivenessSweeper:
    """Periodically logs out users who stopped polling and forfeits their games.

    ``start`` hands the loop to a background-task launcher (Socket.IO's
    ``start_background_task`` in the app). ``stop`` only prevents further
    ticks; a sweep already running finishes under the store lock.
    """

    def __init__(self, store, interval: float = 2.0, timeout: Optional[float] = None,
                 sleep=time.sleep):
        self.store = store
        self.interval = interval
        self.timeout = store.session_timeout if timeout is None else timeout
        self.sleep = sleep
        self._running = False
        self._task = None

    @property
    def running(self) -> bool:
        return self._running

    def sweep(self, now: Optional[float] = None) -> List[str]:
        """Run one pass and return the names that were evicted."""
        evicted = []
        with self.store.lock:
            if now is None:
                now = self.store.clock()
            for entry in self.store.registry.expired(now, self.timeout):
                name = entry.user.name
                self.store.registry.logout(name)
                evicted.append(name)
                self.store.logger.info(
                    f'[timeout] user="{name}" idle={now - entry.last_seen:.1f}s timeout={self.timeout}s'
                )
                self.store.matchmaker.kick(name)
        return evicted

    def run(self) -> None:
        while self._running:
            self.sleep(self.interval)
            if not self._running:
                break
            try:
                self.sweep()
            except Exception:
                self.store.logger.exception('[sweep-error] liveness sweep failed')

    def start(self, start_task):
        if self._running:
            return self._task
        self._running = True
        self.store.logger.info(f'[sweeper-start] interval={self.interval}s timeout={self.timeout}s')
        self._task = start_task(self.run)
        return self._task

    def stop(self) -> None:
        if self._running:
            self._running = False
            self.store.logger.info('[sweeper-stop]')
