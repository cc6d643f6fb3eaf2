"""Parent/child edge wiring: close cascades and diagnostic relays."""
from typing import Any, List, Optional
import structlog

from .emitter import SupportsClose
from .registry import Subscription, SubscriptionRegistry

logger = structlog.get_logger(__name__)


def describe(obj: Any) -> str:
    """Display name of a component or foreign object, for logs."""
    name = getattr(obj, "name", None)
    if isinstance(name, str):
        return name
    return type(obj).__name__


class Binding:
    """
    Disposable handle for one parent -> child edge.

    Holds every subscription the wiring installed, on both sides, so the
    edge can be cut in one call when the child is unbound.
    """

    def __init__(self, parent, child, weak: bool):
        self.parent = parent
        self.child = child
        self.weak = weak
        self._subscriptions: List[Subscription] = []

    def add(self, subscription: Subscription) -> Subscription:
        self._subscriptions.append(subscription)
        return subscription

    @property
    def subscriptions(self) -> List[Subscription]:
        return [s for s in self._subscriptions if s.active]

    @property
    def active(self) -> bool:
        return any(s.active for s in self._subscriptions)

    def dispose(self) -> int:
        """Stop all propagation through this edge; returns removed count."""
        removed = sum(1 for s in self._subscriptions if s.dispose())
        self._subscriptions.clear()
        return removed

    def __repr__(self) -> str:
        strength = "weak" if self.weak else "strong"
        return f"<Binding {describe(self.parent)} -> {describe(self.child)} ({strength})>"


def bind_child_to_parent(
    child: Any,
    parent,
    weak: bool = False,
    child_subscriptions: Optional[SubscriptionRegistry] = None
) -> Binding:
    """
    Install the four propagation rules between ``parent`` and ``child``.

    1. parent "close" closes the child (any strength)
    2. child "close" closes the parent (strong only)
    3. child "warn"/"info" are re-emitted on the parent unchanged
    4. child "error" becomes a "subcomponent-error" warning on the parent

    Args:
        child: Component or foreign emitter
        parent: Component receiving the child
        weak: Omit rule 2 when True
        child_subscriptions: Registry the child tracks its own handlers in.
            The downward close handler is recorded there so the child drops
            it when it closes; foreign children have none, so the parent's
            registry is used instead.

    Returns:
        Binding holding every installed subscription
    """
    binding = Binding(parent, child, weak)
    debug = parent.settings.DEBUG

    if debug:
        logger.info(
            "binding_component",
            parent=describe(parent),
            child=describe(child),
            strength="weak" if weak else "strong"
        )

    if isinstance(child, SupportsClose):
        def on_parent_close(*_):
            try:
                child.close()
            except Exception as e:
                logger.error(
                    "close_propagation_failed",
                    direction="down",
                    parent=describe(parent),
                    child=describe(child),
                    error=str(e),
                    exc_info=True
                )

        registry = child_subscriptions if child_subscriptions is not None else parent.subscriptions
        binding.add(registry.subscribe(parent, "close", on_parent_close))

    def on_child_warn(data):
        parent.emit("warn", data)

    def on_child_info(data):
        parent.emit("info", data)

    def on_child_error(error=None, *_):
        if debug:
            logger.info(
                "propagating_error_as_warning",
                parent=describe(parent),
                child=describe(child)
            )
        parent.warn({"type": "subcomponent-error", "origin": child, "error": error})

    binding.add(parent.subscriptions.subscribe(child, "warn", on_child_warn))
    binding.add(parent.subscriptions.subscribe(child, "info", on_child_info))
    binding.add(parent.subscriptions.subscribe(child, "error", on_child_error))

    if not weak:
        def on_child_close(*_):
            try:
                parent.close()
            except Exception as e:
                logger.error(
                    "close_propagation_failed",
                    direction="up",
                    parent=describe(parent),
                    child=describe(child),
                    error=str(e),
                    exc_info=True
                )

        binding.add(parent.subscriptions.subscribe(child, "close", on_child_close))

    return binding


__all__ = ["Binding", "bind_child_to_parent", "describe"]
