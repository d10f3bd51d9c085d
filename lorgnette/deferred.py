# -*- coding: utf-8 -*-
#
# Sort of like Twisted's Deferred, but every reaction is run from a
# callback queue instead of synchronously, and `then` returns a new
# Deferred instead of mutating the chain in place.

import inspect
import logging
import threading
from functools import partial

from lorgnette.queue import get_default_queue

log = logging.getLogger("lorgnette")

PENDING = 'pending'
FULFILLED = 'fulfilled'
REJECTED = 'rejected'

_PRIMITIVES = (type(None), bool, int, float, complex, str, bytes)
_missing = object()


class Rejection(Exception):
    """
    Raise this from an initializer or a handler to reject with `reason`
    itself rather than with the exception.
    """

    def __init__(self, reason):
        Exception.__init__(self, reason)
        self.reason = reason


class CircularResolutionError(TypeError):
    pass


def _log_unhandled(description, reason):
    if isinstance(reason, BaseException):
        log.error("Unhandled rejection in %s", description,
                  exc_info=(type(reason), reason, reason.__traceback__))
    else:
        log.error("Unhandled rejection in %s: %r", description, reason)


_unhandled_rejection_hook = _log_unhandled


def set_unhandled_rejection_hook(hook):
    """
    Install `hook(description, reason)`, called when a rejected Deferred
    that nothing ever reacted to is reclaimed.  None restores the default,
    which logs to the "lorgnette" logger.
    """
    global _unhandled_rejection_hook
    _unhandled_rejection_hook = hook if hook is not None else _log_unhandled


class _Latch(object):
    def __init__(self):
        self._fired = False
        self._lock = threading.Lock()

    def fire(self):
        with self._lock:
            if self._fired:
                return False
            self._fired = True
            return True


class Deferred(object):
    def __init__(self, initializer=None, queue=None):
        self._state = PENDING
        self._outcome = None
        self._callbacks = []
        self._errbacks = []
        self._locked_in = False
        self._handled = False
        self._lock = threading.RLock()
        self._queue = queue if queue is not None else get_default_queue()

        if initializer is not None:
            try:
                initializer(self.resolve, self.reject)
            except Rejection as e:
                self.reject(e.reason)
            except Exception as e:
                self.reject(e)

    def __repr__(self):
        if self._state is PENDING:
            return "<%s.%s object at 0x%x; pending>" % (
                self.__class__.__module__, self.__class__.__name__, id(self))
        return "<%s.%s object at 0x%x; %s: %r>" % (
            self.__class__.__module__, self.__class__.__name__, id(self),
            self._state, self._outcome)

    def __del__(self):
        try:
            if self._state is REJECTED and not self._handled:
                _unhandled_rejection_hook(repr(self), self._outcome)
        except Exception:
            # interpreter shutdown, or a broken hook; nowhere to report it
            pass

    @classmethod
    def resolved(cls, value, queue=None):
        if isinstance(value, cls) and (queue is None or value._queue is queue):
            return value
        d = cls(queue=queue)
        d.resolve(value)
        return d

    @classmethod
    def rejected(cls, reason, queue=None):
        d = cls(queue=queue)
        d.reject(reason)
        return d

    @property
    def state(self):
        return self._state

    @property
    def outcome(self):
        return self._outcome

    @property
    def settled(self):
        return self._state is not PENDING

    @property
    def queue(self):
        return self._queue

    # producer side

    def _lock_in(self):
        with self._lock:
            if self._locked_in:
                return False
            self._locked_in = True
            return True

    def resolve(self, value=None):
        if self._lock_in():
            self._resolve_with(value)

    def reject(self, reason):
        if self._lock_in():
            self._settle(REJECTED, reason)

    def _transition(self, state, outcome):
        with self._lock:
            if self._state is not PENDING:
                return False, ()
            self._state = state
            self._outcome = outcome
            reactions = self._callbacks if state is FULFILLED else self._errbacks
            self._callbacks = []
            self._errbacks = []
            return True, reactions

    def _settle(self, state, outcome):
        # enqueue under the lock so a concurrent then() lands behind these
        with self._lock:
            moved, reactions = self._transition(state, outcome)
            for reaction in reactions:
                self._queue.enqueue(partial(reaction, outcome))
        return moved

    def _resolve_with(self, x):
        if x is self:
            self._settle(REJECTED, CircularResolutionError(
                "Deferred %r cannot be resolved with itself" % self))
            return
        if isinstance(x, _PRIMITIVES):
            self._settle(FULFILLED, x)
            return

        try:
            then = x.then
        except AttributeError as e:
            if inspect.getattr_static(x, "then", _missing) is _missing:
                then = None
            else:
                self._settle(REJECTED, e)
                return
        except Exception as e:
            self._settle(REJECTED, e)
            return

        if not callable(then):
            self._settle(FULFILLED, x)
            return

        self._queue.enqueue(partial(self._follow, x, then))

    def _follow(self, thenable, then):
        latch = _Latch()

        def on_fulfilled(value):
            if latch.fire():
                self._resolve_with(value)

        def on_rejected(reason):
            if latch.fire():
                self._settle(REJECTED, reason)

        try:
            then(on_fulfilled, on_rejected)
        except Rejection as e:
            if latch.fire():
                self._settle(REJECTED, e.reason)
        except Exception as e:
            if latch.fire():
                self._settle(REJECTED, e)

    # consumer side

    def _reaction(self, child, handler, state):
        def react(outcome):
            if handler is None:
                if state is FULFILLED:
                    child._resolve_with(outcome)
                else:
                    child._settle(REJECTED, outcome)
                return
            try:
                result = handler(outcome)
            except Rejection as e:
                child._settle(REJECTED, e.reason)
            except Exception as e:
                child._settle(REJECTED, e)
            else:
                child._resolve_with(result)
        return react

    def then(self, on_fulfilled=None, on_rejected=None):
        for handler in (on_fulfilled, on_rejected):
            if handler is not None and not callable(handler):
                raise TypeError("'%s' object is not callable" % type(handler).__name__)

        child = self.__class__(queue=self._queue)
        child._locked_in = True
        callback = self._reaction(child, on_fulfilled, FULFILLED)
        errback = self._reaction(child, on_rejected, REJECTED)

        with self._lock:
            self._handled = True
            state = self._state
            if state is PENDING:
                self._callbacks.append(callback)
                self._errbacks.append(errback)
            elif state is FULFILLED:
                self._queue.enqueue(partial(callback, self._outcome))
            else:
                self._queue.enqueue(partial(errback, self._outcome))
        return child

    def catch(self, on_rejected):
        return self.then(None, on_rejected)

    def finally_(self, on_finally):
        if not callable(on_finally):
            raise TypeError("'%s' object is not callable" % type(on_finally).__name__)
        queue = self._queue
        cls = self.__class__

        def on_fulfilled(value):
            return cls.resolved(on_finally(), queue).then(lambda _: value)

        def on_rejected(reason):
            return cls.resolved(on_finally(), queue).then(
                lambda _: cls.rejected(reason, queue))

        return self.then(on_fulfilled, on_rejected)

    def __await__(self):
        return (yield self)


def defer(result, queue=None):
    return Deferred.resolved(result, queue)
