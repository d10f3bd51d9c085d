import asyncio
import threading

from lorgnette import launch
from lorgnette.queue import CallbackQueue


class EventLoop(object):
    def __init__(self):
        self._loop = asyncio.new_event_loop()
        self._thread_ident = threading.get_ident()

    def queue_task(self, delay, callable, *args, **kw):
        def task():
            return launch(callable, *args, **kw)

        if threading.get_ident() != self._thread_ident:
            self._loop.call_soon_threadsafe(self._loop.call_later, delay, task)
        else:
            return self._loop.call_later(delay, task)

    def call_soon(self, callable):
        if threading.get_ident() != self._thread_ident:
            self._loop.call_soon_threadsafe(callable)
        else:
            self._loop.call_soon(callable)

    def run(self):
        self._thread_ident = threading.get_ident()
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def halt(self):
        if threading.get_ident() != self._thread_ident:
            self._loop.call_soon_threadsafe(self._loop.stop)
        else:
            self._loop.stop()

    @property
    def loop(self):
        return self._loop

evlp = EventLoop()
queue_task = evlp.queue_task
run = evlp.run
halt = evlp.halt
callback_queue = CallbackQueue(wakeup=evlp.call_soon)
