import threading

import tornado.ioloop

from lorgnette import launch
from lorgnette.queue import CallbackQueue


class Task(object):
    def __init__(self, tornado_ioloop, timeout):
        self._timeout = timeout
        self._tornado_ioloop = tornado_ioloop

    def cancel(self):
        self._tornado_ioloop.remove_timeout(self._timeout)


class EventLoop(object):
    def __init__(self):
        self._tornado_ioloop = tornado.ioloop.IOLoop(make_current=False)
        self._thread_ident = threading.get_ident()

    def queue_task(self, delay, callable, *args, **kw):
        def task():
            return launch(callable, *args, **kw)
        def queue():
            timeout = self._tornado_ioloop.call_later(delay, task)
            return Task(self._tornado_ioloop, timeout)

        if threading.get_ident() != self._thread_ident:
            self._tornado_ioloop.add_callback(queue)
        else:
            return queue()

    def call_soon(self, callable):
        self._tornado_ioloop.add_callback(callable)

    def run(self):
        self._thread_ident = threading.get_ident()
        self._tornado_ioloop.start()

    def halt(self):
        if threading.get_ident() != self._thread_ident:
            self._tornado_ioloop.add_callback(self._tornado_ioloop.stop)
        else:
            self._tornado_ioloop.stop()

evlp = EventLoop()
queue_task = evlp.queue_task
run = evlp.run
halt = evlp.halt
callback_queue = CallbackQueue(wakeup=evlp.call_soon)
