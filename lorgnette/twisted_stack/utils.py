from twisted.python.failure import Failure
from twisted.internet.defer import Deferred as TwistedDeferred

from lorgnette.core import as_exception
from lorgnette.deferred import Deferred, unwrap


def promise_to_df(promise):
    df = TwistedDeferred()
    def call_deferred_back(*args):
        df.callback(unwrap(args))
    def call_deferred_err(*args):
        e = as_exception(unwrap(args))
        df.errback(Failure(e))
    promise.then(call_deferred_back, call_deferred_err)
    return df


def df_to_promise(df):
    d = Deferred()
    def got_result(r):
        d.resolve(r)
        return r
    def got_failure(f):
        # consumed here, so twisted won't report it as unhandled
        d.reject(f.value)
    df.addCallbacks(got_result, got_failure)
    return d.promise()
