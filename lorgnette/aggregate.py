from lorgnette.deferred import Deferred, is_deferred, resolved, unwrap


def _as_promise(value):
    if value is None:
        return resolved(None)
    if is_deferred(value):
        return value.promise()
    if callable(value):
        d = Deferred(value)
        if d.pending:
            d.resolve(None)
        return d.promise()
    return resolved(value)


def _inputs(args):
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        args = args[0]
    return [_as_promise(a) for a in args]


def when(*args):
    """
    Combine several deferred values into one Promise.

    Accepts any number of arguments, or a single list or tuple of them.
    Deferreds and Promises are watched; a callable is run as the
    initializer of a fresh Deferred (which is resolved with None if the
    callable doesn't settle it); None and any other value count as
    already resolved with that value.

    The returned Promise resolves, once every input has resolved, with
    one argument per input in input order.  It rejects as soon as any
    input rejects, with one argument per input: inputs that have not
    failed yet are None there.  Every progress notification from an
    input re-notifies with the latest status of each input.
    """
    promises = _inputs(args)
    d = Deferred()
    if not promises:
        return d.resolve().promise()

    count = len(promises)
    results = [None] * count
    errors = [None] * count
    statuses = [None] * count
    remaining = [count]

    for i, p in enumerate(promises):
        def on_result(*a, i=i):
            results[i] = unwrap(a)
            remaining[0] -= 1
            if remaining[0] == 0:
                d.resolve(*results)

        def on_error(*a, i=i):
            errors[i] = unwrap(a)
            d.reject(*errors)

        def on_progress(*a, i=i):
            statuses[i] = unwrap(a)
            d.notify(*statuses)

        p.then(on_result, on_error, on_progress)
    return d.promise()


# first one to settle wins.  Nothing is cancelled: the losers just
# aren't listened to any more.
def first_of(*args):
    promises = _inputs(args)
    d = Deferred()
    if not promises:
        return d.resolve().promise()

    for i, p in enumerate(promises):
        p.then(lambda *a, i=i: d.resolve(i, unwrap(a)),
               lambda *a, i=i: d.reject(i, unwrap(a)),
               lambda *a, i=i: d.notify(i, unwrap(a)))
    return d.promise()
