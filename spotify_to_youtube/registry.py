from __future__ import annotations

import abc
import contextlib
import logging
import threading
import typing as t

from spotify_to_youtube.exceptions import ConflictError
from spotify_to_youtube.typings.core import UserRunState

logger = logging.getLogger(__name__)


class RunRegistry(abc.ABC):
    """
    Tracks which users have a migration in progress.

    `try_acquire` must check and set in one indivisible step.
    Entries never expire: a run that never finishes keeps its user locked out.
    """

    @abc.abstractmethod
    async def try_acquire(self: RunRegistry, user_id: str) -> bool:
        ...

    @abc.abstractmethod
    async def release(self: RunRegistry, user_id: str) -> None:
        ...

    @contextlib.asynccontextmanager
    async def acquire(self: RunRegistry, user_id: str) -> t.AsyncIterator[None]:
        if not await self.try_acquire(user_id):
            raise ConflictError(user_id)
        try:
            yield
        finally:
            await self.release(user_id)


class InMemoryRunRegistry(RunRegistry):
    """
    Single process registry.
    Every worker process gets its own, so it only serializes runs that land on the same worker.
    """

    def __init__(self: InMemoryRunRegistry) -> None:
        self._states: dict[str, UserRunState] = {}
        # never held across an await
        self._lock = threading.Lock()

    async def try_acquire(self: InMemoryRunRegistry, user_id: str) -> bool:
        with self._lock:
            state = self._states.get(user_id)
            if state is None:
                state = self._states[user_id] = UserRunState(user_id=user_id)
            if state.pending:
                logger.debug(f"Run already pending for {user_id}")
                return False
            state.pending = True
            return True

    async def release(self: InMemoryRunRegistry, user_id: str) -> None:
        with self._lock:
            state = self._states.get(user_id)
            if state is not None:
                state.pending = False

    def state(self: InMemoryRunRegistry, user_id: str) -> UserRunState | None:
        return self._states.get(user_id)
