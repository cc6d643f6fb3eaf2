"""
lifetree/lifespan/manager.py
Async context manager that runs a component tree for the duration of a block.

Responsibilities:
1. Wait for the whole tree to become ready on entry
2. Close the root on exit, whatever happened inside the block
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional
import structlog

from ..core.exceptions import ReadyTimeoutError
from .base import Component

logger = structlog.get_logger("lifespan")


@asynccontextmanager
async def supervise(root: Component, ready_timeout: Optional[float] = None):
    """
    Run ``root`` and its subtree.

    Startup:
    - Wait for the readiness aggregate (bounded by ready_timeout, or the
      root's READY_TIMEOUT setting)

    Shutdown:
    - Close the root, which cascades to every child
    - Wait until the close sequence has finished

    Raises:
        ReadyTimeoutError: tree not ready in time
        Any readiness failure of the tree, after the root is closed
    """
    timeout = ready_timeout if ready_timeout is not None else root.settings.READY_TIMEOUT

    # ========================================================================
    # STARTUP
    # ========================================================================

    logger.info("tree_starting", root=root.name, ready_timeout=timeout)
    try:
        if timeout is None:
            await root.wait_for_ready()
        else:
            try:
                await asyncio.wait_for(root.wait_for_ready(), timeout)
            except asyncio.TimeoutError:
                raise ReadyTimeoutError(root.name, timeout) from None
        logger.info("tree_ready", root=root.name, components=_count(root))

        # ====================================================================
        # TREE RUNNING
        # ====================================================================

        yield root
    except Exception as e:
        logger.error("tree_failed", root=root.name, error=str(e), error_type=type(e).__name__)
        raise

    # ========================================================================
    # SHUTDOWN
    # ========================================================================

    finally:
        logger.info("tree_shutting_down", root=root.name)
        root.close()
        await root.wait_closed()
        logger.info("tree_shutdown_completed", root=root.name)


def _count(component: Component) -> int:
    return 1 + sum(_count(child) for child in component.children)


# ============================================================================
# Export
# ============================================================================

__all__ = ["supervise"]
