import pytest

from lifetree.lifespan.emitter import EventEmitter, SupportsClose, SupportsEvents


def test_listeners_called_in_registration_order():
    emitter = EventEmitter()
    calls = []
    emitter.on("tick", lambda n: calls.append(("first", n)))
    emitter.on("tick", lambda n: calls.append(("second", n)))

    assert emitter.emit("tick", 1) is True
    assert calls == [("first", 1), ("second", 1)]


def test_emit_without_listeners_returns_false():
    assert EventEmitter().emit("nothing") is False


def test_dispatch_uses_snapshot():
    emitter = EventEmitter()
    calls = []

    def second():
        calls.append("second")

    def first():
        calls.append("first")
        emitter.remove_listener("go", second)

    emitter.on("go", first)
    emitter.on("go", second)
    emitter.emit("go")
    emitter.emit("go")

    assert calls == ["first", "second", "first"]


def test_once_runs_a_single_time():
    emitter = EventEmitter()
    calls = []
    emitter.once("go", lambda: calls.append(1))

    emitter.emit("go")
    emitter.emit("go")

    assert calls == [1]
    assert emitter.listener_count("go") == 0


def test_once_listener_can_be_removed_by_original_handler():
    emitter = EventEmitter()
    handler = lambda: None
    emitter.once("go", handler)

    assert emitter.remove_listener("go", handler) is True
    assert emitter.listener_count() == 0


def test_listener_exception_reaches_emitter():
    emitter = EventEmitter()
    calls = []

    def boom():
        raise RuntimeError("boom")

    emitter.on("go", boom)
    emitter.on("go", lambda: calls.append("never"))

    with pytest.raises(RuntimeError):
        emitter.emit("go")
    assert calls == []


def test_remove_all_listeners():
    emitter = EventEmitter()
    emitter.on("a", lambda: None)
    emitter.on("b", lambda: None)
    emitter.on("b", lambda: None)
    assert emitter.listener_count() == 3

    emitter.remove_all_listeners("b")
    assert emitter.listener_count() == 1

    emitter.remove_all_listeners()
    assert emitter.listener_count() == 0
    assert emitter.listeners("a") == []


def test_protocols():
    emitter = EventEmitter()
    assert isinstance(emitter, SupportsEvents)
    assert not isinstance(emitter, SupportsClose)
    assert not isinstance(object(), SupportsEvents)
