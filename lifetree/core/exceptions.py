"""
lifetree/core/exceptions.py
Custom exceptions for the lifecycle tree
"""

from typing import Optional, Any


class LifecycleException(Exception):
    """Base exception for all lifecycle errors"""

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[dict] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for logging"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


# ============================================================================
# Contract Violations (programmer errors, raised at the call site)
# ============================================================================

class ContractViolation(LifecycleException):
    """A lifecycle operation was called with arguments it cannot accept"""


class NullComponentError(ContractViolation):
    """None passed where a component is required"""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Parameter of '{operation}' cannot be None",
            error_code="NULL_COMPONENT",
            details={"operation": operation}
        )


class DoubleBindError(ContractViolation):
    """Component is already bound to a parent"""

    def __init__(self, child: str, parent: str):
        super().__init__(
            message=f"Subcomponent [{child}] double-bound to [{parent}]",
            error_code="DOUBLE_BIND",
            details={"child": child, "parent": parent}
        )


class NotBoundError(ContractViolation):
    """Unbind of something that is not a child"""

    def __init__(self, parent: str):
        super().__init__(
            message=f"Unbind failed, given component is not bound to [{parent}]",
            error_code="NOT_BOUND",
            details={"parent": parent}
        )


class NotAnEmitterError(ContractViolation):
    """Object is neither a component nor an event emitter"""

    def __init__(self, type_name: str):
        super().__init__(
            message=f"Cannot bind object of type '{type_name}': it does not emit events",
            error_code="NOT_AN_EMITTER",
            details={"type": type_name}
        )


# ============================================================================
# Runtime Faults (surface through readiness rejection)
# ============================================================================

class ComponentFailedError(LifecycleException):
    """Component failed with an error value that is not an exception"""

    def __init__(self, component: str, error: Any):
        self.error = error
        super().__init__(
            message=f"Component [{component}] failed: {error!r}",
            error_code="COMPONENT_FAILED",
            details={"component": component, "error": repr(error)}
        )


class ComponentClosedError(LifecycleException):
    """Component closed before it ever became ready"""

    def __init__(self, component: str):
        super().__init__(
            message=f"Component [{component}] closed before becoming ready",
            error_code="CLOSED_BEFORE_READY",
            details={"component": component}
        )


class ReadyTimeoutError(LifecycleException):
    """Tree did not become ready in time"""

    def __init__(self, component: str, timeout_seconds: float):
        super().__init__(
            message=f"Component [{component}] not ready after {timeout_seconds} seconds",
            error_code="READY_TIMEOUT",
            details={"component": component, "timeout_seconds": timeout_seconds}
        )


# ============================================================================
# Export
# ============================================================================

__all__ = [
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
