from lorgnette.deferred import Deferred, PENDING, FULFILLED, REJECTED
from lorgnette.combinators import AggregateError, all_, all_settled, race, any_
from lorgnette.util import delay


def ok(value, queue):
    return Deferred.resolved(value, queue)


def fail(reason, queue):
    return Deferred.rejected(reason, queue)


def failing_later(seconds, reason, clock):
    d = Deferred(queue=clock.queue)
    clock.queue_task(seconds, d.reject, reason)
    return d


def test_all_collects_values_in_input_order(queue, clock):
    slow = delay(5, 'slow', eventloop=clock, queue=queue)
    fast = delay(1, 'fast', eventloop=clock, queue=queue)
    d = all_([slow, fast, 'plain'], queue=queue)
    clock.advance(1)
    assert d.state == PENDING
    clock.advance(4)
    assert d.state == FULFILLED
    assert d.outcome == ['slow', 'fast', 'plain']


def test_all_fails_fast(queue, clock):
    third = delay(100, 3, eventloop=clock, queue=queue)
    d = all_([ok(1, queue), fail("x", queue), third], queue=queue)
    d.catch(lambda reason: None)
    queue.drain()
    assert d.state == REJECTED
    assert d.outcome == "x"
    assert third.state == PENDING

    clock.advance(100)
    assert third.outcome == 3
    assert d.outcome == "x"


def test_all_empty(queue):
    d = all_([], queue=queue)
    assert d.state == FULFILLED
    assert d.outcome == []


def test_all_accepts_generators(queue):
    d = all_((ok(i, queue) for i in range(3)), queue=queue)
    queue.drain()
    assert d.outcome == [0, 1, 2]


def test_all_settled_reports_every_outcome(queue):
    d = all_settled([ok(1, queue), fail("x", queue)], queue=queue)
    queue.drain()
    assert d.outcome == [{'status': 'fulfilled', 'value': 1},
                         {'status': 'rejected', 'reason': "x"}]


def test_all_settled_waits_for_slowest(queue, clock):
    d = all_settled([failing_later(2, "late", clock),
                     delay(1, 'early', eventloop=clock, queue=queue)],
                    queue=queue)
    clock.advance(1)
    assert d.state == PENDING
    clock.advance(1)
    assert d.outcome == [{'status': REJECTED, 'reason': "late"},
                         {'status': FULFILLED, 'value': 'early'}]


def test_all_settled_empty(queue):
    d = all_settled([], queue=queue)
    assert d.outcome == []


def test_race_first_to_settle_wins(queue, clock):
    d = race([delay(0.05, 1, eventloop=clock, queue=queue),
              delay(0.01, 2, eventloop=clock, queue=queue)], queue=queue)
    clock.advance(0.02)
    assert d.outcome == 2
    clock.advance(1)
    assert d.outcome == 2


def test_race_first_rejection_wins(queue, clock):
    d = race([delay(1, 'slow', eventloop=clock, queue=queue),
              failing_later(0.5, "fast failure", clock)], queue=queue)
    d.catch(lambda reason: None)
    clock.advance(2)
    assert d.state == REJECTED
    assert d.outcome == "fast failure"


def test_race_empty_never_settles(queue):
    d = race([], queue=queue)
    queue.drain()
    assert d.state == PENDING


def test_any_first_fulfilment_wins(queue):
    d = any_([fail("a", queue), ok(5, queue)], queue=queue)
    queue.drain()
    assert d.outcome == 5


def test_any_all_fail(queue, clock):
    d = any_([failing_later(2, "a", clock), failing_later(1, "b", clock)],
             queue=queue)
    d.catch(lambda reason: None)
    clock.advance(1)
    assert d.state == PENDING
    clock.advance(1)
    assert d.state == REJECTED
    assert isinstance(d.outcome, AggregateError)
    assert d.outcome.errors == ["a", "b"]


def test_any_empty_rejects(queue):
    d = any_([], queue=queue)
    d.catch(lambda reason: None)
    assert d.state == REJECTED
    assert isinstance(d.outcome, AggregateError)
    assert d.outcome.errors == []


def test_combinators_adopt_thenables(queue):
    class Ready(object):
        def then(self, on_fulfilled, on_rejected):
            on_fulfilled('foreign')

    d = all_([Ready(), 1], queue=queue)
    queue.drain()
    assert d.outcome == ['foreign', 1]
