import asyncio

from lorgnette.deferred import Deferred


def to_future(d, loop=None):
    """
    Wrap a Deferred in an asyncio Future.  Outcomes are copied over with
    call_soon_threadsafe, so the Deferred may settle on any thread.  Without
    `loop`, this has to be called from a running event loop.
    """
    if loop is None:
        loop = asyncio.get_running_loop()
    fut = loop.create_future()

    def set_result(value):
        if not fut.done():
            fut.set_result(value)

    def set_exception(reason):
        if fut.done():
            return
        if not isinstance(reason, BaseException):
            reason = Exception(reason)
        fut.set_exception(reason)

    d.then(lambda value: loop.call_soon_threadsafe(set_result, value),
           lambda reason: loop.call_soon_threadsafe(set_exception, reason))
    return fut


def from_future(fut, queue=None):
    d = Deferred(queue=queue)

    def done(fut):
        if fut.cancelled():
            d.reject(asyncio.CancelledError())
        elif fut.exception() is not None:
            d.reject(fut.exception())
        else:
            d.resolve(fut.result())

    fut.add_done_callback(done)
    return d
