"""Component core: bindings, readiness, closing and diagnostics."""
import asyncio
from typing import Any, Dict, FrozenSet, List, Optional, Union

from ..core.config import Settings, get_settings
from ..core.exceptions import (
    ComponentClosedError,
    ComponentFailedError,
    DoubleBindError,
    NotAnEmitterError,
    NotBoundError,
    NullComponentError,
)
from ..core.logging import get_logger
from .binding import Binding, bind_child_to_parent
from .emitter import EventEmitter, Handler, SupportsEvents
from .readiness import ReadySignal, ReadyState
from .registry import Subscription, SubscriptionRegistry


class Component:
    """
    A node in the lifecycle tree.

    Each component represents a stateful subsystem (connection, worker,
    service) that may own subcomponents and may itself be owned by at
    most one parent.

    Features:
    - bind/unbind of subcomponents with strong or weak edges
    - settle-once readiness, awaitable across the whole subtree
    - idempotent close that cascades down (always) and up (strong edges)
    - "info"/"warn" diagnostics relayed upward, child errors downgraded
      to "subcomponent-error" warnings at the parent

    Subclasses may define ``async def close_async(self)`` to release
    resources before the "close" event fires.
    """

    close_async = None

    def __init__(self, name: str, ready: bool = False, *, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.style: List[str] = []
        self.target: Any = self
        self._name = name
        self._emitter = EventEmitter()
        self._subscriptions = SubscriptionRegistry()
        self._ready = ReadySignal()
        self._close_done = ReadySignal()
        self._children: Dict["Component", Binding] = {}
        self._parent: Optional["Component"] = None
        self._closed = False
        self._error: Any = None
        self._close_task: Optional[asyncio.Task] = None
        self._logger = get_logger("component")

        self.safe_log("component_created")

        if ready:
            self.ready()

    # ========================================================================
    # Introspection
    # ========================================================================

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> Optional["Component"]:
        return self._parent

    @property
    def bound(self) -> bool:
        return self._parent is not None

    @property
    def children(self) -> FrozenSet["Component"]:
        return frozenset(self._children)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> ReadyState:
        return self._ready.state

    @property
    def error(self) -> Any:
        """Value passed to the most recent failed() call, if any."""
        return self._error

    @property
    def subscriptions(self) -> SubscriptionRegistry:
        return self._subscriptions

    def self_is_ready(self) -> bool:
        """Whether this component alone (children ignored) is ready."""
        return self._ready.state is ReadyState.READY

    def binding(self, child: Any) -> Optional[Binding]:
        """Edge handle for a current child (or the object it wraps)."""
        key = self._find_child(child)
        return self._children[key] if key is not None else None

    def rename(self, name: str) -> None:
        self.safe_log("component_renamed", new_name=name)
        self._name = name

    # ========================================================================
    # Events
    # ========================================================================

    def on(self, event: str, handler: Handler) -> Handler:
        return self._emitter.on(event, handler)

    def once(self, event: str, handler: Handler) -> Handler:
        return self._emitter.once(event, handler)

    def remove_listener(self, event: str, handler: Handler) -> bool:
        return self._emitter.remove_listener(event, handler)

    def listeners(self, event: str) -> List[Handler]:
        return self._emitter.listeners(event)

    def listener_count(self, event: Optional[str] = None) -> int:
        return self._emitter.listener_count(event)

    def emit(self, event: str, *args: Any) -> bool:
        """
        Dispatch ``event`` to listeners.

        An "error" event fails this component after its listeners (the
        parent's reclassification among them) have run.
        """
        try:
            return self._emitter.emit(event, *args)
        finally:
            if event == "error":
                self.failed(args[0] if args else None)

    def subscribe(self, target: SupportsEvents, event: str, handler: Handler) -> Subscription:
        """Listen on another emitter; removed automatically on close."""
        return self._subscriptions.subscribe(target, event, handler)

    def unsubscribe(self, target, event: Optional[str] = None, handler: Optional[Handler] = None) -> bool:
        return self._subscriptions.unsubscribe(target, event, handler)

    def warn(self, data: Union[str, Dict[str, Any], None] = None) -> None:
        """Emit a "warn" tagged with this component as source."""
        self._diagnostic("warn", data)

    def info(self, data: Union[str, Dict[str, Any], None] = None) -> None:
        """Emit an "info" tagged with this component as source."""
        self._diagnostic("info", data)

    def _diagnostic(self, kind: str, data) -> None:
        if isinstance(data, str):
            data = {"message": data}
        self.emit(kind, {"type": kind, "source": self, **(data or {})})

    # ========================================================================
    # Tree
    # ========================================================================

    def bind(self, child: Any, weak: bool = False) -> Binding:
        """
        Add a subcomponent.

        Objects that are not components are promoted through a
        ComponentWrapper first.

        Args:
            child: Component or foreign emitter
            weak: If True, the child closing does not close this component

        Returns:
            Binding handle for the new edge

        Raises:
            NullComponentError: child is None
            DoubleBindError: child already has a parent
            NotAnEmitterError: child cannot be wrapped
        """
        if child is None:
            raise NullComponentError("bind")
        if not isinstance(child, Component):
            child = self._promote(child)
        if child.bound:
            raise DoubleBindError(child.name, self._name)

        child._parent = self
        binding = bind_child_to_parent(child, self, weak, child_subscriptions=child.subscriptions)
        self._children[child] = binding
        return binding

    def unbind(self, child: Any) -> None:
        """
        Remove a subcomponent and cut propagation through its edge.

        Unbinding a wrapper (or the object it wraps) also removes the
        wrapper's handlers from that object.

        Raises:
            NullComponentError: child is None
            NotBoundError: child is not a current subcomponent
        """
        from .wrapper import ComponentWrapper

        if child is None:
            raise NullComponentError("unbind")
        key = self._find_child(child)
        if key is None:
            raise NotBoundError(self._name)

        binding = self._children.pop(key)
        binding.dispose()
        key._parent = None
        if isinstance(key, ComponentWrapper):
            key.release()
        self.safe_log("component_unbound", child=key.name)

    def link_event(self, event: str, recurse: bool = False) -> None:
        """Re-emit ``event`` from current children on this component."""
        def relay(*args):
            self.emit(event, *args)

        for child, binding in list(self._children.items()):
            binding.add(self._subscriptions.subscribe(child, event, relay))
            if recurse:
                child.link_event(event, recurse=True)

    def _find_child(self, obj: Any) -> Optional["Component"]:
        for child in self._children:
            if child is obj:
                return child
        for child in self._children:
            if child.target is obj:
                return child
        return None

    def _promote(self, obj: Any) -> "Component":
        from .wrapper import ComponentWrapper

        if not isinstance(obj, SupportsEvents):
            raise NotAnEmitterError(type(obj).__name__)
        owner = ComponentWrapper.bound_wrapper(obj)
        if owner is not None:
            raise DoubleBindError(f"{owner.name} -> {type(obj).__name__}", self._name)
        return ComponentWrapper(obj, settings=self.settings)

    # ========================================================================
    # Readiness
    # ========================================================================

    def ready(self) -> None:
        """Mark this component (not its children) as ready."""
        if self._ready.resolve():
            self.safe_log("component_ready")

    def failed(self, error: Any = None) -> Optional[asyncio.Task]:
        """
        Reject readiness with ``error`` and close.

        Valid before ready (initialisation fault) and after ready
        (runtime fault); in the latter case readiness stays resolved.
        """
        if self._ready.state is ReadyState.READY:
            self.safe_log("component_failed", error=repr(error))
        else:
            self.safe_log("component_failed_to_initialise", error=repr(error))
        self._error = error
        if not isinstance(error, BaseException):
            error = ComponentFailedError(self._name, error)
        self._ready.reject(error)
        return self.close()

    def wait_for_ready(self) -> "asyncio.Future[None]":
        """
        Future for this component and every current descendant being ready.

        The subtree is captured when this is called, not when the future
        is first awaited; children bound later are not waited for. The
        future fails with the first failure to settle.

        Must be called with an event loop running.
        """
        signals = list(self._subtree_signals())
        future = asyncio.get_running_loop().create_future()
        remaining = len(signals)

        def observer(signal: ReadySignal):
            nonlocal remaining
            if future.done():
                return
            if signal.state is ReadyState.FAILED:
                future.set_exception(signal.error)
                return
            remaining -= 1
            if remaining == 0:
                future.set_result(None)

        def release(_):
            for signal in signals:
                signal.remove_observer(observer)

        future.add_done_callback(release)
        for signal in signals:
            signal.add_observer(observer)
        return future

    def _subtree_signals(self):
        yield self._ready
        for child in list(self._children):
            yield from child._subtree_signals()

    # ========================================================================
    # Closing
    # ========================================================================

    def close(self) -> Optional[asyncio.Task]:
        """
        Close this component; a no-op after the first call.

        Runs the ``close_async`` hook first when present (failures become
        an "error" event), then emits "close", then detaches from the
        parent and drops every listener and subscription.

        With an event loop running the hook is scheduled as a task; without
        one it is driven to completion before close() returns.

        Returns:
            The task finishing the close when a hook was scheduled, else None
        """
        if self._closed:
            return None

        self._closed = True
        self.safe_log("component_closing")
        self._ready.reject(ComponentClosedError(self._name))

        hook = self.close_async
        if hook is None:
            self._finish_close()
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._close_with_hook(hook))
            return None

        self._close_task = loop.create_task(self._close_with_hook(hook))
        self._close_task.add_done_callback(self._on_close_task_done)
        return self._close_task

    async def _close_with_hook(self, hook) -> None:
        try:
            await hook()
        except Exception as e:
            self.log_error("close_hook_failed", e)
            self.emit("error", e)
        finally:
            self._finish_close()

    def _on_close_task_done(self, task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            self.log_error("close_failed", task.exception())

    def _finish_close(self) -> None:
        try:
            self.emit("close")
        finally:
            self.safe_log("component_closed")
            if self._parent is not None:
                self._parent.unbind(self)
            self._emitter.remove_all_listeners()
            self._subscriptions.unsubscribe_all()
            self._close_done.resolve()

    async def wait_closed(self) -> None:
        """Return once close() has fully completed."""
        if self._close_task is not None:
            await asyncio.wait([self._close_task])
        await self._close_done.wait()

    # ========================================================================
    # Logging
    # ========================================================================

    def safe_log(self, event: str, **kwargs):
        """Lifecycle trace, only when DEBUG is enabled."""
        if self.settings.DEBUG:
            self._logger.info(event, component=self._name, **kwargs)

    def log_error(self, event: str, error: Exception, **kwargs):
        """Helper for error logging with full context."""
        self._logger.error(
            event,
            component=self._name,
            error=str(error),
            error_type=type(error).__name__,
            **kwargs,
            exc_info=True
        )

    def __repr__(self) -> str:
        closed = " closed" if self._closed else ""
        return f"<{type(self).__name__} {self._name!r} {self.state.value}{closed}>"


__all__ = ["Component"]