"""
Lifecycle tree: components bound into parent/child hierarchies with
readiness tracking, close cascades and upward diagnostic relays.
"""

from .base import Component
from .binding import Binding, bind_child_to_parent
from .emitter import EventEmitter, SupportsClose, SupportsEvents
from .manager import supervise
from .readiness import ReadySignal, ReadyState
from .registry import Subscription, SubscriptionRegistry
from .tree import render_tree
from .wrapper import ComponentWrapper


__all__ = [
    "Component",
    "ComponentWrapper",
    "Binding",
    "bind_child_to_parent",
    "EventEmitter",
    "SupportsEvents",
    "SupportsClose",
    "ReadySignal",
    "ReadyState",
    "Subscription",
    "SubscriptionRegistry",
    "render_tree",
    "supervise",
]
