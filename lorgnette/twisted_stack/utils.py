from twisted.python.failure import Failure
from twisted.internet.defer import Deferred as TwistedDeferred

from lorgnette.deferred import Deferred


def to_twisted(d):
    df = TwistedDeferred()
    def errback(reason, df=df):
        if not isinstance(reason, BaseException):
            reason = Exception(reason)
        df.errback(Failure(reason, type(reason), reason.__traceback__))
    d.then(df.callback, errback)
    return df


def from_twisted(df, queue=None):
    d = Deferred(queue=queue)
    def callback(result):
        d.resolve(result)
    def errback(failure):
        d.reject(failure.value)
    df.addCallbacks(callback, errback)
    return d
