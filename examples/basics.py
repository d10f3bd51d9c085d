import sys

import lorgnette
from lorgnette import Return, InvalidYieldException
lorgnette.init(sys.argv[1] if len(sys.argv) > 1 else 'asyncio')
from lorgnette.stack import eventloop

@lorgnette.o
def square(x):
    yield Return(x*x)
    print("not reached")

@lorgnette.o
def fail():
    raise Exception("boo")
    print((yield square(2)))

@lorgnette.o
def invalid_yield():
    yield "this should fail"

@lorgnette.o
def main():
    value = yield square(5)
    print(value)
    try:
        yield fail()
    except Exception as e:
        print("Caught exception:", type(e), str(e))

    try:
        yield invalid_yield()
    except InvalidYieldException as e:
        print("Caught exception:", type(e), str(e))
    else:
        assert False
    eventloop.halt()

lorgnette.launch(main)
eventloop.run()
