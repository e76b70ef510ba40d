import pytest


@pytest.fixture
def target():
    from ..deferred import Deferred

    return Deferred


def test_deferred(target):
    calls = []

    def yielder(a, b=0):
        calls.append((a, b))
        return a + b

    d = target(yielder, 1, b=2)
    assert not d.resolved
    assert d() == 3
    assert d.resolved
    assert d() == 3
    assert calls == [(1, 2)]


def test_deferred_retries_after_failure(target):
    attempts = []

    def yielder():
        attempts.append(None)
        if len(attempts) == 1:
            raise ValueError()
        return "ok"

    d = target(yielder)
    with pytest.raises(ValueError):
        d()
    assert not d.resolved
    assert d() == "ok"
    assert len(attempts) == 2


def test_promise():
    from ..deferred import Promise

    p = Promise()
    assert not p.resolved
    with pytest.raises(RuntimeError):
        p()
    assert p.set(None) is p
    assert p.resolved
    assert p() is None
