# Sort of like jQuery's Deferred.  A Deferred is held by whoever
# produces the outcome; everybody else gets its Promise, which can
# only watch.
import inspect

from lorgnette.callback import Callback

PENDING = "pending"
RESOLVED = "resolved"
REJECTED = "rejected"


def unwrap(args):
    # mimic the semantics of the return statement
    if args is None or len(args) == 0:
        return None
    elif len(args) == 1:
        return args[0]
    return args


def is_deferred(value):
    return isinstance(value, (Deferred, Promise))


def _takes_arguments(f):
    try:
        params = inspect.signature(f).parameters.values()
    except (TypeError, ValueError):
        return True
    return any(p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
               for p in params)


class Deferred(object):
    def __init__(self, init=None):
        self._state = PENDING
        self._done = Callback(once=True, memory=True)
        self._fail = Callback(once=True, memory=True)
        self._progress = Callback(memory=True)
        self._promise = Promise(self)

        # state bookkeeping runs ahead of any user callback
        self._done.add(self._on_resolved)
        self._fail.add(self._on_rejected)

        if init is not None:
            if _takes_arguments(init):
                init(self)
            else:
                init()

    def __repr__(self):
        return "<%s.%s object at 0x%x; %s>" % (self.__class__.__module__,
                                               self.__class__.__name__,
                                               id(self), self._state)

    def _on_resolved(self, *args):
        self._state = RESOLVED
        self._fail.disable()
        self._progress.lock()

    def _on_rejected(self, *args):
        self._state = REJECTED
        self._done.disable()
        self._progress.lock()

    def promise(self):
        return self._promise

    # triggers

    def resolve(self, *args):
        self._done(*args)
        return self

    def reject(self, *args):
        self._fail(*args)
        return self

    def notify(self, *args):
        if self._state == PENDING:
            self._progress(*args)
        return self

    # state

    @property
    def state(self):
        return self._state

    @property
    def pending(self):
        return self._state == PENDING

    @property
    def resolved(self):
        return self._state == RESOLVED

    @property
    def rejected(self):
        return self._state == REJECTED

    @property
    def result(self):
        return unwrap(self._done.last_args)

    @property
    def error(self):
        return unwrap(self._fail.last_args)

    @property
    def status(self):
        return unwrap(self._progress.last_args)

    # subscription

    def on_result(self, callback):
        self._done.add(callback)
        return self

    def on_error(self, callback):
        self._fail.add(callback)
        return self

    def on_progress(self, callback):
        self._progress.add(callback)
        return self

    done = on_result
    fail = on_error
    progress = on_progress

    def then(self, result_cb, error_cb=None, progress_cb=None):
        if result_cb is not None:
            self.on_result(result_cb)
        if error_cb is not None:
            self.on_error(error_cb)
        if progress_cb is not None:
            self.on_progress(progress_cb)
        return self

    def always(self, callback):
        self._done.add(callback)
        self._fail.add(callback)
        return self

    def pipe(self, on_resolve=None, on_reject=None, on_progress=None):
        """
        Return the Promise of a new Deferred whose outcome is derived
        from this one's.

        Each transform is called with the arguments of its channel.  If
        it returns a Deferred or Promise, the new Deferred follows that
        one instead (resolve, reject and notify alike).  Any other
        return value is passed on with the channel's own action, so a
        value returned from on_reject still rejects.  A channel with no
        transform is passed on unchanged.

        A transform that raises is not caught: the exception reaches
        whoever triggered this Deferred, and the new one stays pending.
        """
        piped = Deferred()
        for add, transform, action in ((self.on_result, on_resolve, piped.resolve),
                                       (self.on_error, on_reject, piped.reject),
                                       (self.on_progress, on_progress, piped.notify)):
            add(_piped_handler(piped, transform, action))
        return piped.promise()


def _piped_handler(piped, transform, action):
    if transform is None:
        return action

    def handler(*args):
        value = transform(*args)
        if is_deferred(value):
            value.then(piped.resolve, piped.reject, piped.notify)
        else:
            action(value)
    return handler


class Promise(object):
    def __init__(self, deferred):
        self._deferred = deferred

    def __repr__(self):
        return "<%s.%s object at 0x%x; %s>" % (self.__class__.__module__,
                                               self.__class__.__name__,
                                               id(self), self._deferred.state)

    def promise(self):
        return self

    @property
    def state(self):
        return self._deferred.state

    @property
    def pending(self):
        return self._deferred.pending

    @property
    def resolved(self):
        return self._deferred.resolved

    @property
    def rejected(self):
        return self._deferred.rejected

    @property
    def result(self):
        return self._deferred.result

    @property
    def error(self):
        return self._deferred.error

    @property
    def status(self):
        return self._deferred.status

    def on_result(self, callback):
        self._deferred.on_result(callback)
        return self

    def on_error(self, callback):
        self._deferred.on_error(callback)
        return self

    def on_progress(self, callback):
        self._deferred.on_progress(callback)
        return self

    done = on_result
    fail = on_error
    progress = on_progress

    def then(self, result_cb, error_cb=None, progress_cb=None):
        self._deferred.then(result_cb, error_cb, progress_cb)
        return self

    def always(self, callback):
        self._deferred.always(callback)
        return self

    def pipe(self, on_resolve=None, on_reject=None, on_progress=None):
        return self._deferred.pipe(on_resolve, on_reject, on_progress)


def resolved(*args):
    return Deferred().resolve(*args).promise()


def rejected(*args):
    return Deferred().reject(*args).promise()
