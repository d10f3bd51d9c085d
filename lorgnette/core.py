# Routines: generator (or async def) functions that yield Deferreds and get
# resumed with their outcomes.  The driving loop started out as Twisted's
# inlineCallbacks.

import sys
import types
import logging
import traceback
import time
import inspect
import functools
import os.path

from lorgnette.deferred import Deferred, Rejection, defer

logging.basicConfig(stream=sys.stderr,
                    format="%(message)s")
log = logging.getLogger("lorgnette")

blocking_warn_threshold = 500 # ms
tracebacks_elide_internals = True

_package_dir = os.path.dirname(os.path.abspath(__file__))


class Return(object):
    def __init__(self, *args):
        # mimic the semantics of the return statement
        if len(args) == 0:
            self.value = None
        elif len(args) == 1:
            self.value = args[0]
        else:
            self.value = args

    def __repr__(self):
        return "<%s.%s object at 0x%x; value: %s>" % (self.__class__.__module__,
                                                      self.__class__.__name__,
                                                      id(self),
                                                      repr(self.value))


class InvalidYieldException(Exception):
    pass


def _is_internal(filename):
    return os.path.abspath(filename).startswith(_package_dir + os.sep)


def format_stack_lines(frames, elide_internals=tracebacks_elide_internals):
    eliding = False
    lines = []
    for frame in frames:
        if not _is_internal(frame.filename) or not elide_internals:
            eliding = False
            lines.append("  File %s, line %s, in %s\n    %s" %
                         (frame.filename, frame.lineno, frame.name,
                          (frame.line or "").strip()))
        else:
            if not eliding:
                eliding = True
                lines.append("  -- eliding lorgnette internals --")
    return lines


def format_tb(e, elide_internals=tracebacks_elide_internals):
    frames = traceback.extract_tb(e.__traceback__)
    lines = ["Traceback (most recent call last):"]
    lines += format_stack_lines(frames, elide_internals)
    lines += [l.rstrip("\n")
              for l in traceback.format_exception_only(type(e), e)]
    return "\n".join(lines)


def log_exception(e=None, elide_internals=None):
    if e is None:
        e = sys.exc_info()[1]
    if elide_internals is None:
        elide_internals = tracebacks_elide_internals

    if isinstance(e, BaseException):
        log.error("%s\n%s", str(e), format_tb(e, elide_internals=elide_internals))
    else:
        log.error("Rejected with non-exception reason: %r", e)


def _thrown(reason):
    if isinstance(reason, BaseException):
        return reason
    return Rejection(reason)


def _warn_if_blocked(g, start):
    duration = (time.time() - start) * 1000
    if duration > blocking_warn_threshold:
        frame = getattr(g, 'gi_frame', None) or getattr(g, 'cr_frame', None)
        if inspect.isframe(frame):
            fi = inspect.getframeinfo(frame)
            log.warning("routine '%s' blocked for %dms before %s:%s",
                        g.__name__, duration, fi.filename, fi.lineno)
        else:
            log.warning("routine '%s' blocked for %dms", g.__name__, duration)


def _step(g, d, to_gen, is_error):
    # Send the last outcome back as the result of the yield expression.
    start = time.time()
    try:
        try:
            if is_error:
                from_gen = g.throw(_thrown(to_gen))
            else:
                from_gen = g.send(to_gen)
        finally:
            _warn_if_blocked(g, start)
    except StopIteration as e:
        # "return" statement (or fell off the end of the generator)
        d.resolve(e.value)
        return
    except Rejection as e:
        d.reject(e.reason)
        return
    except Exception as e:
        d.reject(e)
        return

    if isinstance(from_gen, Return):
        try:
            g.close()
        except Exception as e:
            d.reject(e)
        else:
            d.resolve(from_gen.value)
        return

    if not isinstance(from_gen, Deferred):
        then = getattr(from_gen, 'then', None)
        if callable(then):
            from_gen = Deferred.resolved(from_gen, d.queue)
        else:
            e = InvalidYieldException("Unexpected value '%s' of type '%s' yielded from routine '%s'.  Routines can only yield Deferred and Return types." % (from_gen, type(from_gen), g))
            return _step(g, d, e, True)

    from_gen.then(lambda value: _step(g, d, value, False),
                  lambda reason: _step(g, d, reason, True))


def maybe_deferred_routine(f, *args, **kw):
    try:
        result = f(*args, **kw)
    except Rejection as e:
        return Deferred.rejected(e.reason)
    except Exception as e:
        return Deferred.rejected(e)

    if isinstance(result, (types.GeneratorType, types.CoroutineType)):
        d = Deferred()
        _step(result, d, None, False)
        return d
    elif isinstance(result, Deferred):
        return result
    return defer(result)


# @_o
def _o(f):
    """
    lorgnette lets you write Deferred-using code that looks like a regular
    sequential function.  For example::

        @_o
        def foo():
            result = yield make_some_request_returning_a_deferred()
            print(result)

    When you call anything that returns a Deferred, you can simply yield
    it; your generator is resumed once the Deferred settles.  The
    generator is sent the value with 'send', or, if the Deferred was
    rejected, the reason is raised at the yield with 'throw'.  Reasons
    that aren't exceptions arrive wrapped in a Rejection.

    Calling the decorated function returns a Deferred for the routine's
    result: `yield Return(value)` or a plain `return value` fulfils it, an
    unhandled exception rejects it.  `async def` functions work the same
    way, with `await` in place of `yield`::

        @_o
        async def bar():
            value = await foo()
            return value * 2

    Yielding anything other than a Deferred, a thenable or a Return throws
    an InvalidYieldException into the routine.
    """
    @functools.wraps(f)
    def unwind_routine(*args, **kwargs):
        return maybe_deferred_routine(f, *args, **kwargs)
    return unwind_routine
o = _o


@_o
def launch(routine, *args, **kwargs):
    try:
        r = yield maybe_deferred_routine(routine, *args, **kwargs)
        yield Return(r)
    except GeneratorExit:
        raise
    except Rejection as e:
        log_exception(e.reason)
    except Exception:
        log_exception()
