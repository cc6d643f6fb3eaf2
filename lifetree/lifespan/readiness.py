"""Settle-once readiness signal."""
import asyncio
from enum import Enum
from typing import Any, Callable, List, Optional


class ReadyState(Enum):
    """Readiness of a single component, ignoring its children."""
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class ReadySignal:
    """
    Future-like value that settles exactly once.

    Unlike asyncio.Future it does not need an event loop at construction,
    so components can be built and marked ready from synchronous code and
    awaited later from any running loop. A second resolve/reject returns
    False and changes nothing.
    """

    def __init__(self):
        self._state = ReadyState.PENDING
        self._error: Optional[BaseException] = None
        self._observers: List[Callable[["ReadySignal"], Any]] = []

    @property
    def state(self) -> ReadyState:
        return self._state

    @property
    def settled(self) -> bool:
        return self._state is not ReadyState.PENDING

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def resolve(self) -> bool:
        return self._settle(ReadyState.READY, None)

    def reject(self, error: BaseException) -> bool:
        return self._settle(ReadyState.FAILED, error)

    def _settle(self, state: ReadyState, error: Optional[BaseException]) -> bool:
        if self.settled:
            return False
        self._state = state
        self._error = error
        observers, self._observers = self._observers, []
        for observer in observers:
            observer(self)
        return True

    def add_observer(self, observer: Callable[["ReadySignal"], Any]) -> None:
        """Call ``observer(signal)`` on settle, or right away if already settled."""
        if self.settled:
            observer(self)
        else:
            self._observers.append(observer)

    def remove_observer(self, observer: Callable[["ReadySignal"], Any]) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    async def wait(self) -> None:
        """Return once resolved; raise the rejection error once rejected."""
        if not self.settled:
            future = asyncio.get_running_loop().create_future()

            def observer(signal):
                if not future.done():
                    future.set_result(None)

            self.add_observer(observer)
            try:
                await future
            finally:
                self.remove_observer(observer)
        if self._state is ReadyState.FAILED:
            raise self._error


__all__ = ["ReadyState", "ReadySignal"]
