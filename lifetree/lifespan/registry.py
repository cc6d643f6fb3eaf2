"""Subscription registry so a component can drop every handler it installed."""
from typing import Any, List, Optional
import structlog

from .emitter import Handler

logger = structlog.get_logger(__name__)


class Subscription:
    """
    Disposable record of one (target, event, handler) registration.

    Disposing is idempotent and removes the handler from the target as
    well as from the owning registry.
    """

    __slots__ = ("target", "event", "handler", "_registry")

    def __init__(self, registry: "SubscriptionRegistry", target: Any, event: str, handler: Handler):
        self.target = target
        self.event = event
        self.handler = handler
        self._registry = registry

    @property
    def active(self) -> bool:
        return self._registry is not None

    def dispose(self) -> bool:
        """Remove the handler; returns False if already disposed."""
        if self._registry is None:
            return False
        return self._registry.unsubscribe(self)

    def _detach(self) -> None:
        self.target.remove_listener(self.event, self.handler)
        self._registry = None

    def __repr__(self) -> str:
        state = "active" if self.active else "disposed"
        return f"<Subscription {self.event!r} on {type(self.target).__name__} ({state})>"


class SubscriptionRegistry:
    """
    Ledger of every handler a component registered on other emitters.

    Features:
    - subscribe() hands back a disposable Subscription
    - unsubscribe() by handle or by (target, event, handler)
    - unsubscribe_all() for bulk teardown on close
    """

    def __init__(self):
        self._subscriptions: List[Subscription] = []

    def subscribe(self, target: Any, event: str, handler: Handler) -> Subscription:
        """
        Register ``handler`` for ``event`` on ``target`` and record it.

        Args:
            target: Any object with on()/remove_listener()
            event: Event name
            handler: Callable invoked with the event arguments

        Returns:
            Subscription handle that can be disposed individually
        """
        target.on(event, handler)
        subscription = Subscription(self, target, event, handler)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(
        self,
        target: Any,
        event: Optional[str] = None,
        handler: Optional[Handler] = None
    ) -> bool:
        """
        Remove one subscription.

        Accepts either a Subscription handle or the original
        (target, event, handler) triple.

        Returns:
            True if a subscription was removed
        """
        if isinstance(target, Subscription):
            match = target if target in self._subscriptions else None
        else:
            match = next(
                (s for s in self._subscriptions
                 if s.target is target and s.event == event and s.handler is handler),
                None
            )
        if match is None:
            return False
        self._subscriptions.remove(match)
        match._detach()
        return True

    def unsubscribe_all(self) -> int:
        """Remove every recorded subscription; returns how many there were."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            try:
                subscription._detach()
            except Exception as e:
                logger.error(
                    "unsubscribe_failed",
                    event=subscription.event,
                    target=type(subscription.target).__name__,
                    error=str(e),
                    exc_info=True
                )
        return len(subscriptions)

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __iter__(self):
        return iter(list(self._subscriptions))


__all__ = ["Subscription", "SubscriptionRegistry"]
