import sys
import importlib

VERSION = '0.1.0'

from lorgnette.queue import CallbackQueue, get_default_queue, set_default_queue
from lorgnette.deferred import (Deferred, Rejection, CircularResolutionError,
                                PENDING, FULFILLED, REJECTED, defer,
                                set_unhandled_rejection_hook)
from lorgnette.combinators import AggregateError, all_, all_settled, race, any_
from lorgnette.core import _o, o, Return, InvalidYieldException, launch, log_exception

STACKS = ('asyncio', 'twisted', 'tornado')

_stack_name = None


def init(stack_name):
    """
    Pick the event loop everything runs on.  The stack's module becomes
    lorgnette.stack.eventloop, and its callback queue becomes the default
    queue for new Deferreds.
    """
    global _stack_name
    if stack_name not in STACKS:
        raise ValueError("unknown stack '%s', expected one of %s" %
                         (stack_name, ", ".join(STACKS)))
    if _stack_name is not None and _stack_name != stack_name:
        raise RuntimeError("lorgnette already initialized with stack '%s'" %
                           _stack_name)

    eventloop = importlib.import_module('lorgnette.%s_stack.eventloop' % stack_name)
    import lorgnette.stack
    sys.modules['lorgnette.stack.eventloop'] = eventloop
    lorgnette.stack.eventloop = eventloop
    set_default_queue(eventloop.callback_queue)
    _stack_name = stack_name
    return eventloop
