import sys

import lorgnette
from lorgnette import _o
lorgnette.init(sys.argv[1] if len(sys.argv) > 1 else 'asyncio')

from lorgnette.stack import eventloop
from lorgnette.util import sleep

@_o
def print_every_second():
    for i in range(5):
        print("1")
        yield sleep(1)

@_o
def print_every_two_seconds():
    for i in range(5):
        print("2")
        yield sleep(2)
    eventloop.halt()

lorgnette.launch(print_every_second)
lorgnette.launch(print_every_two_seconds)
eventloop.run()
