"""Component lifecycle and supervision trees."""

from .core.config import Settings, get_settings
from .core.exceptions import (
    LifecycleException,
    ContractViolation,
    NullComponentError,
    DoubleBindError,
    NotBoundError,
    NotAnEmitterError,
    ComponentFailedError,
    ComponentClosedError,
    ReadyTimeoutError,
)
from .core.logging import setup_logging, get_logger
from .lifespan import (
    Binding,
    Component,
    ComponentWrapper,
    EventEmitter,
    ReadyState,
    render_tree,
    supervise,
)

__version__ = "1.0.0"

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "Binding",
    "Component",
    "ComponentWrapper",
    "EventEmitter",
    "ReadyState",
    "render_tree",
    "supervise",
    "LifecycleException",
    "ContractViolation",
    "NullComponentError",
    "DoubleBindError",
    "NotBoundError",
    "NotAnEmitterError",
    "ComponentFailedError",
    "ComponentClosedError",
    "ReadyTimeoutError",
]
