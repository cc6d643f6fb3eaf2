"""Promote a foreign event emitter into a Component."""
import weakref
from typing import Any, Optional

from ..core.config import Settings
from .base import Component
from .binding import bind_child_to_parent
from .emitter import SupportsEvents

# id(wrapped object) -> wrapper; a live wrapper holds its object, so ids stay unique
_wrappers: "weakref.WeakValueDictionary[int, ComponentWrapper]" = weakref.WeakValueDictionary()


class ComponentWrapper(Component):
    """
    Component standing in for an object that only emits events.

    The wrapped object is treated as a strong child: its "close" closes
    the wrapper, the wrapper's "close" calls its close() if it has one,
    its "warn"/"info" pass through and its "error" is reported as a
    subcomponent warning. An "error" from the object also closes the
    wrapper. The wrapper is ready as soon as it is created.
    """

    def __init__(self, obj: SupportsEvents, name: str = "Wrapper", *, settings: Optional[Settings] = None):
        super().__init__(name, ready=True, settings=settings)
        self.target: Any = obj
        self.wrapped_binding = bind_child_to_parent(obj, self, weak=False)
        self.wrapped_binding.add(self.subscribe(obj, "error", self._on_target_error))
        _wrappers[id(obj)] = self

    @classmethod
    def bound_wrapper(cls, obj: Any) -> Optional["ComponentWrapper"]:
        """Wrapper currently binding ``obj`` into a tree, if any."""
        wrapper = _wrappers.get(id(obj))
        if wrapper is not None and wrapper.target is obj and wrapper.bound:
            return wrapper
        return None

    def release(self) -> None:
        """Remove every handler installed on the wrapped object."""
        self.wrapped_binding.dispose()
        self.subscriptions.unsubscribe_all()
        if _wrappers.get(id(self.target)) is self:
            del _wrappers[id(self.target)]
        self.safe_log("wrapper_released", target=type(self.target).__name__)

    def _on_target_error(self, *_):
        try:
            self.close()
        except Exception as e:
            self.log_error("wrapper_close_failed", e, target=type(self.target).__name__)


__all__ = ["ComponentWrapper", "SupportsEvents"]
