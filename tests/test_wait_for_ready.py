import asyncio

import pytest

from lifetree.core.exceptions import ComponentClosedError, ComponentFailedError
from lifetree.lifespan.base import Component
from lifetree.lifespan.readiness import ReadyState


async def spin(times=5):
    for _ in range(times):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_resolves_after_whole_subtree_ready(make):
    root, child, grandchild = make("root"), make("child"), make("grandchild")
    root.bind(child)
    child.bind(grandchild)
    waiter = asyncio.ensure_future(root.wait_for_ready())

    root.ready()
    child.ready()
    await spin()
    assert not waiter.done()

    grandchild.ready()
    await asyncio.wait_for(waiter, 1)


@pytest.mark.asyncio
async def test_already_ready_tree_resolves_immediately(make):
    root, child = make("root", ready=True), make("child", ready=True)
    root.bind(child)

    await asyncio.wait_for(root.wait_for_ready(), 1)


@pytest.mark.asyncio
async def test_rejects_with_failure(make):
    root, child = make("root", ready=True), make("child")
    root.bind(child, weak=True)
    waiter = asyncio.ensure_future(root.wait_for_ready())
    error = ConnectionError("refused")

    child.failed(error)

    with pytest.raises(ConnectionError) as info:
        await asyncio.wait_for(waiter, 1)
    assert info.value is error


@pytest.mark.asyncio
async def test_first_failure_wins_over_cascade(make):
    root, a, b, d = make("R"), make("A", ready=True), make("B"), make("D")
    root.bind(a)
    root.bind(b, weak=True)
    a.bind(d)
    waiter = asyncio.ensure_future(root.wait_for_ready())
    error = RuntimeError("D broke")

    d.failed(error)

    with pytest.raises(RuntimeError) as info:
        await asyncio.wait_for(waiter, 1)
    assert info.value is error
    assert root.closed and b.closed


@pytest.mark.asyncio
async def test_non_exception_error_event_rejects(make):
    component = make("svc")
    component.emit("error", "lol")

    with pytest.raises(ComponentFailedError) as info:
        await component.wait_for_ready()
    assert info.value.error == "lol"


@pytest.mark.asyncio
async def test_closing_pending_component_rejects_instead_of_hanging(make):
    component = make("svc")
    waiter = asyncio.ensure_future(component.wait_for_ready())
    await spin()

    component.close()

    with pytest.raises(ComponentClosedError):
        await asyncio.wait_for(waiter, 1)


@pytest.mark.asyncio
async def test_scenario_weak_pending_child_blocks_root(make):
    root, a, b, d = make("R"), make("A"), make("B"), make("D")
    root.bind(a)
    root.bind(b, weak=True)
    a.bind(d)
    root.ready()
    a.ready()
    d.ready()

    waiter = asyncio.ensure_future(root.wait_for_ready())
    await spin()
    assert not waiter.done()

    b.ready()
    await asyncio.wait_for(waiter, 1)


@pytest.mark.asyncio
async def test_scenario_error_reported_twice_unmodified(make):
    root, a, b, d = make("R"), make("A"), make("B"), make("D")
    root.bind(a)
    root.bind(b, weak=True)
    a.bind(d)
    a.ready()
    d.ready()
    at_a, at_r = [], []
    a.on("warn", at_a.append)
    root.on("warn", at_r.append)
    error = RuntimeError("D broke")

    d.emit("error", error)

    assert len(at_a) == 1
    assert at_a[0]["type"] == "subcomponent-error"
    assert at_a[0]["origin"] is d
    assert at_r[0] is at_a[0]
    # D is strong all the way up, so the whole tree is torn down
    assert root.closed and a.closed and b.closed
    assert root.children == frozenset()


@pytest.mark.asyncio
async def test_timeout_leaves_no_observers(make):
    component = make("svc")
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(component.wait_for_ready(), 0.01)

    await spin()
    assert component._ready._observers == []


# ============================================================================
# Asynchronous close hook
# ============================================================================

class Connection(Component):
    def __init__(self, name, settings, fail=False):
        super().__init__(name, ready=True, settings=settings)
        self.fail = fail
        self.steps = []
        self.on("close", lambda: self.steps.append("close-event"))

    async def close_async(self):
        await asyncio.sleep(0)
        self.steps.append("hook")
        if self.fail:
            raise OSError("socket already gone")


@pytest.mark.asyncio
async def test_close_hook_runs_before_close_event(settings):
    parent = Component("pool", ready=True, settings=settings)
    conn = Connection("conn", settings)
    parent.bind(conn, weak=True)

    task = conn.close()
    assert task is not None
    assert conn.closed
    assert conn.close() is None
    assert conn.parent is parent

    await task
    await conn.wait_closed()
    assert conn.steps == ["hook", "close-event"]
    assert conn.parent is None
    assert conn.state is ReadyState.READY


@pytest.mark.asyncio
async def test_close_hook_failure_becomes_warning(settings):
    parent = Component("pool", ready=True, settings=settings)
    conn = Connection("conn", settings, fail=True)
    parent.bind(conn, weak=True)
    warnings = []
    parent.on("warn", warnings.append)

    await conn.close()

    assert conn.steps == ["hook", "close-event"]
    assert isinstance(conn.error, OSError)
    assert warnings[0]["type"] == "subcomponent-error"
    assert warnings[0]["origin"] is conn
    assert not parent.closed


def test_close_hook_without_loop_runs_to_completion(settings):
    conn = Connection("conn", settings)

    assert conn.close() is None

    assert conn.closed
    assert conn.steps == ["hook", "close-event"]


def test_sync_parent_close_over_hooked_child(settings):
    root = Component("R", ready=True, settings=settings)
    conn = Connection("C", settings)
    root.bind(conn)

    root.close()

    assert conn.closed
    assert conn.steps == ["hook", "close-event"]
    assert root.children == frozenset()


def test_error_event_closes_hooked_component_without_loop(settings):
    conn = Connection("C", settings)

    conn.emit("error", RuntimeError("lost connection"))

    assert conn.closed
    assert conn.steps == ["hook", "close-event"]


@pytest.mark.asyncio
async def test_cascade_keeps_close_task_and_reports_its_failure(settings):
    root = Component("R", ready=True, settings=settings)
    conn = Connection("C", settings)
    root.bind(conn, weak=True)

    def broken_listener():
        raise RuntimeError("listener failed")

    conn.on("close", broken_listener)
    root.close()
    task = conn._close_task
    assert task is not None

    await conn.wait_closed()

    assert task.done()
    assert isinstance(task.exception(), RuntimeError)
    assert conn.parent is None
    assert root.children == frozenset()


# ============================================================================
# Subtree capture
# ============================================================================

@pytest.mark.asyncio
async def test_subtree_is_captured_when_called(make):
    root, child = make("root", ready=True), make("child")
    root.bind(child, weak=True)
    error = ConnectionError("refused")

    waiter = root.wait_for_ready()
    child.failed(error)

    assert isinstance(waiter, asyncio.Future)
    assert not child.bound
    with pytest.raises(ConnectionError) as info:
        await asyncio.wait_for(waiter, 1)
    assert info.value is error


@pytest.mark.asyncio
async def test_children_bound_after_call_are_not_awaited(make):
    root = make("root", ready=True)
    waiter = root.wait_for_ready()
    root.bind(make("late"))

    await asyncio.wait_for(waiter, 1)
