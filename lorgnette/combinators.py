# -*- coding: utf-8 -*-
#
# Combinators over collections of Deferreds (or plain values, which count
# as already fulfilled).  Each returns one new Deferred.

from lorgnette.deferred import Deferred, FULFILLED, REJECTED
from lorgnette.queue import get_default_queue


class AggregateError(Exception):
    def __init__(self, errors, message="All deferreds were rejected"):
        Exception.__init__(self, message)
        self.errors = list(errors)

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.errors)


def _prepare(deferreds, queue):
    if queue is None:
        queue = get_default_queue()
    return [Deferred.resolved(d, queue) for d in deferreds], queue


def all_(deferreds, queue=None):
    """
    Fulfils with the list of values, in input order, once every input has
    fulfilled.  Rejects with the first rejection reason.
    """
    entries, queue = _prepare(deferreds, queue)

    def initializer(resolve, reject):
        if not entries:
            resolve([])
            return
        values = [None] * len(entries)
        remaining = [len(entries)]

        for i, d in enumerate(entries):
            def on_fulfilled(value, i=i):
                values[i] = value
                remaining[0] -= 1
                if remaining[0] == 0:
                    resolve(values)
            d.then(on_fulfilled, reject)

    return Deferred(initializer, queue=queue)


def all_settled(deferreds, queue=None):
    """
    Fulfils, once every input has settled, with one record per input:
    {'status': 'fulfilled', 'value': v} or {'status': 'rejected',
    'reason': r}.  Never rejects.
    """
    entries, queue = _prepare(deferreds, queue)

    def initializer(resolve, reject):
        if not entries:
            resolve([])
            return
        records = [None] * len(entries)
        remaining = [len(entries)]

        def record(i, entry):
            records[i] = entry
            remaining[0] -= 1
            if remaining[0] == 0:
                resolve(records)

        for i, d in enumerate(entries):
            d.then(lambda value, i=i: record(i, {'status': FULFILLED,
                                                  'value': value}),
                   lambda reason, i=i: record(i, {'status': REJECTED,
                                                   'reason': reason}))

    return Deferred(initializer, queue=queue)


def race(deferreds, queue=None):
    """
    Settles the same way as the first input to settle.  An empty input
    never settles.
    """
    entries, queue = _prepare(deferreds, queue)

    def initializer(resolve, reject):
        for d in entries:
            d.then(resolve, reject)

    return Deferred(initializer, queue=queue)


def any_(deferreds, queue=None):
    """
    Fulfils with the first value to arrive.  If every input rejects,
    rejects with an AggregateError holding the reasons in input order.
    """
    entries, queue = _prepare(deferreds, queue)

    def initializer(resolve, reject):
        if not entries:
            reject(AggregateError([]))
            return
        reasons = [None] * len(entries)
        remaining = [len(entries)]

        for i, d in enumerate(entries):
            def on_rejected(reason, i=i):
                reasons[i] = reason
                remaining[0] -= 1
                if remaining[0] == 0:
                    reject(AggregateError(reasons))
            d.then(resolve, on_rejected)

    return Deferred(initializer, queue=queue)
