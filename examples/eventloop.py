import sys

import lorgnette
from lorgnette import _o
lorgnette.init(sys.argv[1] if len(sys.argv) > 1 else 'asyncio')

from lorgnette.stack import eventloop
from lorgnette.util import sleep

@_o
def foo(x, z=1):
    yield sleep(1)
    print(x)

def bar(x, z=1):
    print(x)

@_o
def fail():
    raise Exception("whoo")
    yield sleep(1)

eventloop.queue_task(0, foo, x="routine worked")
eventloop.queue_task(0, bar, x="function worked")
eventloop.queue_task(0, fail)
eventloop.queue_task(2, eventloop.halt)
eventloop.run()
