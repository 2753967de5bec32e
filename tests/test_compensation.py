import pytest

from app.services.compensation import CompensationStack


def test_unwinds_newest_first(app):
    calls = []
    saga = CompensationStack()
    saga.push('first', calls.append, 'first')
    saga.push('second', calls.append, 'second')
    assert len(saga) == 2
    assert saga.unwind() == []
    assert calls == ['second', 'first']
    assert len(saga) == 0


def test_discard_forgets_steps(app):
    calls = []
    saga = CompensationStack()
    saga.push('step', calls.append, 'x')
    saga.discard()
    assert saga.unwind() == []
    assert calls == []


def test_retries_until_success(app):
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise RuntimeError('store unavailable')

    saga = CompensationStack(retries=3)
    saga.push('flaky', flaky)
    assert saga.unwind() == []
    assert len(attempts) == 3


def test_reports_steps_that_keep_failing(app):
    calls = []

    def broken():
        raise RuntimeError('still down')

    saga = CompensationStack(retries=2)
    saga.push('ok', calls.append, 'ok', ref=1)
    saga.push('broken', broken, ref=7)
    failures = saga.unwind()
    assert [(f.step.description, f.step.ref) for f in failures] == [('broken', 7)]
    assert isinstance(failures[0].error, RuntimeError)
    # later steps still run after a failure
    assert calls == ['ok']


def test_waits_longer_between_attempts(app, monkeypatch):
    sleeps = []
    monkeypatch.setattr('app.services.compensation.time.sleep', sleeps.append)

    def broken():
        raise RuntimeError('down')

    saga = CompensationStack(retries=3, delay=0.5)
    saga.push('broken', broken)
    saga.unwind()
    assert sleeps == [0.5, 1.0]


@pytest.mark.parametrize('retries', [0, -2])
def test_always_tries_at_least_once(app, retries):
    calls = []
    saga = CompensationStack(retries=retries)
    saga.push('once', calls.append, 1)
    saga.unwind()
    assert calls == [1]
