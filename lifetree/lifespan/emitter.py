"""Synchronous publish/subscribe primitive that components are built on."""
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

Handler = Callable[..., Any]


@runtime_checkable
class SupportsEvents(Protocol):
    """Anything a component can listen to: EventEmitter, Component, foreign emitters."""

    def on(self, event: str, handler: Handler) -> Any: ...
    def remove_listener(self, event: str, handler: Handler) -> Any: ...


@runtime_checkable
class SupportsClose(Protocol):
    def close(self) -> Any: ...


class EventEmitter:
    """
    Minimal named-event emitter.

    Listeners are called synchronously, in the order they were
    registered. Dispatch iterates over a snapshot, so listeners added or
    removed while an event is being emitted only affect later emits.
    If a listener raises, dispatch stops and the error reaches the caller
    of emit().
    """

    def __init__(self):
        self._listeners: Dict[str, List[Handler]] = {}

    def on(self, event: str, handler: Handler) -> Handler:
        """Register a handler; returns it so this can be used as a decorator."""
        self._listeners.setdefault(event, []).append(handler)
        return handler

    def once(self, event: str, handler: Handler) -> Handler:
        """Register a handler that is removed before its first call."""
        def wrapper(*args):
            self.remove_listener(event, wrapper)
            return handler(*args)
        wrapper.listener = handler
        return self.on(event, wrapper)

    def remove_listener(self, event: str, handler: Handler) -> bool:
        handlers = self._listeners.get(event)
        if not handlers:
            return False
        for i, registered in enumerate(handlers):
            if registered is handler or getattr(registered, "listener", None) is handler:
                del handlers[i]
                if not handlers:
                    del self._listeners[event]
                return True
        return False

    def remove_all_listeners(self, event: Optional[str] = None) -> None:
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener of ``event``; returns whether any existed."""
        handlers = self._listeners.get(event)
        if not handlers:
            return False
        for handler in list(handlers):
            handler(*args)
        return True

    def listeners(self, event: str) -> List[Handler]:
        return list(self._listeners.get(event, ()))

    def listener_count(self, event: Optional[str] = None) -> int:
        if event is None:
            return sum(len(handlers) for handlers in self._listeners.values())
        return len(self._listeners.get(event, ()))


__all__ = ["EventEmitter", "Handler", "SupportsEvents", "SupportsClose"]
