# -*- coding: utf-8 -*-
#
# FIFO queue of zero-argument callbacks, drained after the current unit
# of work.  Deferred reactions are only ever run from here.

import logging
import threading
from collections import deque

log = logging.getLogger("lorgnette")


class CallbackQueue(object):
    """
    A callback queue.  `enqueue` only records the callback; nothing runs
    until `drain` is called.

    If a `wakeup` function is given, it is called (with `drain` as its
    only argument) whenever the queue goes from idle to holding work, so
    an event loop can schedule the drain.  Without one, the queue is
    manual: whoever owns it calls `drain` when they want callbacks to
    run.
    """

    def __init__(self, wakeup=None):
        self._wakeup = wakeup
        self._callbacks = deque()
        self._lock = threading.Lock()
        self._scheduled = False
        self._draining = False

    def __len__(self):
        return len(self._callbacks)

    def enqueue(self, callback):
        if not callable(callback):
            raise TypeError("'%s' object is not callable" % type(callback).__name__)
        with self._lock:
            self._callbacks.append(callback)
            wake = (self._wakeup is not None and
                    not self._scheduled and not self._draining)
            if wake:
                self._scheduled = True
        if wake:
            self._wakeup(self.drain)

    def drain(self):
        """
        Run callbacks until the queue is empty, including any enqueued by
        the callbacks themselves.  Returns the number of callbacks run.
        """
        with self._lock:
            if self._draining:
                # re-entrant drain; the outer loop will get to them
                return 0
            self._draining = True
            self._scheduled = False
        count = 0
        try:
            while True:
                with self._lock:
                    if not self._callbacks:
                        break
                    callback = self._callbacks.popleft()
                try:
                    callback()
                except Exception:
                    log.exception("error in queued callback %r", callback)
                count += 1
        finally:
            with self._lock:
                self._draining = False
                wake = (self._callbacks and self._wakeup is not None and
                        not self._scheduled)
                if wake:
                    self._scheduled = True
            if wake:
                self._wakeup(self.drain)
        return count


_default_queue = CallbackQueue()


def get_default_queue():
    return _default_queue


def set_default_queue(queue):
    global _default_queue
    if queue is None:
        queue = CallbackQueue()
    _default_queue = queue
    return queue
