import gc
import heapq
import itertools

import pytest

from lorgnette.queue import CallbackQueue, get_default_queue, set_default_queue


class FakeEventLoop(object):
    """
    Stands in for a stack's eventloop module: tasks only run when the test
    advances the clock, and the callback queue is drained after each one.
    """

    def __init__(self, queue):
        self.queue = queue
        self.now = 0.0
        self._tasks = []
        self._seq = itertools.count()

    def queue_task(self, delay, callable, *args, **kw):
        heapq.heappush(self._tasks, (self.now + delay, next(self._seq),
                                     callable, args, kw))

    def advance(self, seconds):
        until = self.now + seconds
        while self._tasks and self._tasks[0][0] <= until:
            when, _, callable, args, kw = heapq.heappop(self._tasks)
            self.now = when
            callable(*args, **kw)
            self.queue.drain()
        self.now = until
        self.queue.drain()


@pytest.fixture
def queue():
    return CallbackQueue()


@pytest.fixture
def clock(queue):
    return FakeEventLoop(queue)


@pytest.fixture
def unhandled():
    from lorgnette.deferred import set_unhandled_rejection_hook
    gc.collect()
    reported = []
    set_unhandled_rejection_hook(lambda description, reason: reported.append(reason))
    yield reported
    set_unhandled_rejection_hook(None)


@pytest.fixture
def default_queue(queue):
    previous = get_default_queue()
    set_default_queue(queue)
    yield queue
    set_default_queue(previous)
