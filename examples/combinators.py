import sys

import lorgnette
from lorgnette import _o, Deferred, AggregateError
lorgnette.init(sys.argv[1] if len(sys.argv) > 1 else 'asyncio')

from lorgnette.stack import eventloop
from lorgnette.util import delay, timeout, DeferredTimeout

def fail_after(seconds, reason):
    d = Deferred()
    eventloop.queue_task(seconds, d.reject, reason)
    return d

@_o
def main():
    values = yield lorgnette.all_([delay(0.2, 'a'), delay(0.1, 'b'), 'c'])
    print("all:", values)

    records = yield lorgnette.all_settled([delay(0.1, 1), fail_after(0.1, "x")])
    print("all_settled:", records)

    winner = yield lorgnette.race([delay(0.5, 'slow'), delay(0.1, 'fast')])
    print("race:", winner)

    try:
        yield lorgnette.any_([fail_after(0.1, "a"), fail_after(0.2, "b")])
    except AggregateError as e:
        print("any failed:", e.errors)

    try:
        yield timeout(delay(5, 'too late'), 0.3)
    except DeferredTimeout as e:
        print("timeout:", e)

    # microtasks drain before the next timer fires
    eventloop.queue_task(0, print, "timer")
    Deferred.resolved(None).then(lambda _: print("reaction"))
    print("sync")
    yield delay(0.1, None)
    eventloop.halt()

lorgnette.launch(main)
eventloop.run()
