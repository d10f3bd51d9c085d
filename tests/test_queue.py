import logging

import pytest

from lorgnette.queue import CallbackQueue


def test_enqueue_never_runs_callback(queue):
    calls = []
    queue.enqueue(lambda: calls.append(1))
    assert calls == []
    assert len(queue) == 1


def test_drain_is_fifo(queue):
    calls = []
    for i in range(5):
        queue.enqueue(lambda i=i: calls.append(i))
    assert queue.drain() == 5
    assert calls == [0, 1, 2, 3, 4]
    assert len(queue) == 0


def test_drain_runs_callbacks_enqueued_while_draining(queue):
    calls = []

    def first():
        calls.append('first')
        queue.enqueue(lambda: calls.append('nested'))

    queue.enqueue(first)
    queue.enqueue(lambda: calls.append('second'))
    queue.drain()
    assert calls == ['first', 'second', 'nested']


def test_enqueue_rejects_non_callable(queue):
    with pytest.raises(TypeError):
        queue.enqueue(42)


def test_failing_callback_is_logged_and_draining_continues(queue, caplog):
    calls = []

    def boom():
        raise RuntimeError("boom")

    queue.enqueue(boom)
    queue.enqueue(lambda: calls.append('after'))
    with caplog.at_level(logging.ERROR, logger="lorgnette"):
        queue.drain()
    assert calls == ['after']
    assert "boom" in caplog.text


def test_reentrant_drain_is_a_noop(queue):
    results = []
    queue.enqueue(lambda: results.append(queue.drain()))
    queue.drain()
    assert results == [0]


def test_wakeup_called_once_per_idle_period():
    wakeups = []
    queue = CallbackQueue(wakeup=wakeups.append)
    queue.enqueue(lambda: None)
    queue.enqueue(lambda: None)
    assert wakeups == [queue.drain]

    queue.drain()
    queue.enqueue(lambda: None)
    assert len(wakeups) == 2


def test_wakeup_not_called_for_work_added_during_drain():
    wakeups = []
    queue = CallbackQueue(wakeup=wakeups.append)
    queue.enqueue(lambda: queue.enqueue(lambda: None))
    queue.drain()
    assert len(wakeups) == 1
    assert len(queue) == 0
