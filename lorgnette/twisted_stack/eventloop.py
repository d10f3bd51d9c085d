import threading

from twisted.internet import reactor
from twisted.internet.error import ReactorNotRunning

from lorgnette import launch
from lorgnette.queue import CallbackQueue


# thanks to Peter Norvig
def singleton(object, message="singleton class already instantiated",
              instantiated=[]):
    """
    Raise an exception if an object of this class has been instantiated before.
    """
    assert object.__class__ not in instantiated, message
    instantiated.append(object.__class__)


class EventLoop(object):
    def __init__(self):
        singleton(self, "Twisted can only have one EventLoop (reactor)")
        self._halted = False
        self._thread_ident = threading.get_ident()

    def queue_task(self, delay, callable, *args, **kw):
        if threading.get_ident() != self._thread_ident:
            reactor.callFromThread(reactor.callLater, delay, launch, callable, *args, **kw)
        else:
            return reactor.callLater(delay, launch, callable, *args, **kw)

    def call_soon(self, callable):
        if threading.get_ident() != self._thread_ident:
            reactor.callFromThread(callable)
        else:
            reactor.callLater(0, callable)

    def run(self):
        if not self._halted:
            self._thread_ident = threading.get_ident()
            reactor.run()

    def halt(self):
        try:
            reactor.stop()
        except ReactorNotRunning:
            self._halted = True

evlp = EventLoop()
queue_task = evlp.queue_task
run = evlp.run
halt = evlp.halt
callback_queue = CallbackQueue(wakeup=evlp.call_soon)
