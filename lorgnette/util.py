from collections import deque

from lorgnette.deferred import Deferred, Rejection
from lorgnette.combinators import race
from lorgnette.core import log_exception


class DeferredTimeout(Exception):
    pass


def _eventloop(eventloop):
    if eventloop is None:
        try:
            from lorgnette.stack import eventloop
        except ImportError:
            raise RuntimeError("no event loop; call lorgnette.init() first")
    return eventloop


def delay(seconds, value, eventloop=None, queue=None):
    d = Deferred(queue=queue)
    _eventloop(eventloop).queue_task(seconds, d.resolve, value)
    return d


def sleep(seconds, eventloop=None, queue=None):
    return delay(seconds, None, eventloop, queue)


def timeout(d, seconds, eventloop=None, queue=None):
    """
    Race `d` against a timer.  If the timer wins, the result rejects with
    DeferredTimeout; whatever `d` is waiting on keeps running.
    """
    if queue is None and isinstance(d, Deferred):
        queue = d.queue
    timer = Deferred(queue=queue)

    _eventloop(eventloop).queue_task(
        seconds, timer.reject,
        DeferredTimeout("timed out after %s seconds" % seconds))
    return race([d, timer], queue=queue)


class TaskQueue(object):
    """
    Runs pushed tasks, at most `concurrency` at a time, in the order they
    were pushed.  A task is any callable returning a Deferred (an @_o
    routine, say) or a plain value.  A failing task is logged and the
    queue moves on.
    """

    def __init__(self, concurrency=1, queue=None):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1, not %r" % concurrency)
        self.concurrency = concurrency
        self.running = 0
        self._queue = queue
        self._pending = deque()

    def __len__(self):
        return len(self._pending)

    def push(self, task, *args, **kwargs):
        d = Deferred(queue=self._queue)
        # failures are reported here; callers may still react to d
        d.catch(log_exception)
        self._pending.append((task, args, kwargs, d))
        self._next()
        return d

    def _next(self):
        while self.running < self.concurrency and self._pending:
            task, args, kwargs, d = self._pending.popleft()
            self.running += 1
            try:
                d.resolve(task(*args, **kwargs))
            except Rejection as e:
                d.reject(e.reason)
            except Exception as e:
                d.reject(e)
            d.then(self._done, self._done)

    def _done(self, outcome):
        self.running -= 1
        self._next()


def sequence(tasks, queue=None):
    """
    Call each of `tasks` once the previous one's Deferred has fulfilled.
    The result fulfils with the last task's value; the first failure
    rejects it and the remaining tasks never run.
    """
    d = Deferred.resolved(None, queue)
    for task in tasks:
        d = d.then(lambda _, task=task: task())
    return d
