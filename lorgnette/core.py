# The oroutine machinery is based heavily on inlineCallbacks from
# Twisted 10.0.

import sys
import types
import logging
import traceback
import time
import inspect
import functools
import os.path

from lorgnette.deferred import Deferred, is_deferred, rejected, resolved, unwrap

logging.basicConfig(stream=sys.stderr,
                    format="%(message)s")
log = logging.getLogger("lorgnette")

blocking_warn_threshold = 500 # ms
tracebacks_elide_internals = True

_package_dir = os.path.dirname(os.path.abspath(__file__))


class Return(object):
    def __init__(self, *args):
        self.value = unwrap(args)

    def __repr__(self):
        return "<%s.%s object at 0x%x; value: %s>" % (self.__class__.__module__,
                                                      self.__class__.__name__,
                                                      id(self),
                                                      repr(self.value))


class InvalidYieldException(Exception):
    pass


class Rejected(Exception):
    """
    Raised into an oroutine when a yielded Promise is rejected with
    something that isn't an exception.  The rejection payload is kept in
    ``value``.
    """
    def __init__(self, value):
        Exception.__init__(self, value)
        self.value = value


def as_exception(error):
    if isinstance(error, BaseException):
        return error
    return Rejected(error)


def is_internal_frame(filename):
    return os.path.abspath(filename).startswith(_package_dir + os.sep)


def format_stack_lines(stack, elide_internals=None):
    if elide_internals is None:
        elide_internals = tracebacks_elide_internals
    eliding = False
    lines = []
    for frame in stack:
        if not is_internal_frame(frame.filename) or not elide_internals:
            eliding = False
            lines.append("  File %s, line %s, in %s\n    %s" %
                         (frame.filename, frame.lineno, frame.name, frame.line))
        else:
            if not eliding:
                eliding = True
                lines.append("  -- eliding lorgnette internals --")
    return lines


def format_tb(e, elide_internals=None):
    if elide_internals is None:
        elide_internals = tracebacks_elide_internals
    s = ""
    first = last = ""
    for tb, stack in reversed(e._lorgnette['tracebacks']):
        lines = tb.rstrip('\n').split('\n')

        first = lines[0] # "Traceback (most recent call last):"
        last = lines[-1] # Line describing the exception

        # the stack leading to the oroutine, then the frames of the
        # traceback itself
        lines = format_stack_lines(stack, elide_internals) + lines[1:-1]
        s += "\n" + '\n'.join(lines)
    return first + s + "\n" + last


def _append_traceback(e, tb, stack):
    if not hasattr(e, "_lorgnette"):
        e._lorgnette = {'tracebacks': []}
    e._lorgnette['tracebacks'].append((tb, stack))
    return e


def _add_lorgnette_tb(e):
    tb = traceback.format_exc()
    stack = traceback.extract_stack()
    return _append_traceback(e, tb, stack)


def _warn_if_blocked(g, start):
    duration = (time.time() - start) * 1000
    if duration > blocking_warn_threshold:
        if inspect.isframe(g.gi_frame):
            fi = inspect.getframeinfo(g.gi_frame)
            log.warning("oroutine '%s' blocked for %dms before %s:%s",
                        g.__name__, duration, fi.filename, fi.lineno)
        else:
            log.warning("oroutine '%s' blocked for %dms", g.__name__, duration)


def _lorgnette_chain(to_gen, g, deferred, throw=False):
    # This function is complicated by the need to prevent unbounded recursion
    # arising from repeatedly yielding already settled promises.  This while
    # loop solves that by manually unfolding the recursion.

    while True:
        try:
            # Send the last result back as the result of the yield expression.
            start = time.time()
            try:
                if throw:
                    from_gen = g.throw(to_gen)
                else:
                    from_gen = g.send(to_gen)
            finally:
                _warn_if_blocked(g, start)
        except StopIteration as e:
            # "return" statement (or fell off the end of the generator)
            from_gen = Return(e.value)
        except Exception as e:
            deferred.reject(_add_lorgnette_tb(e))
            return deferred.promise()

        if isinstance(from_gen, Return):
            try:
                g.close()
            except Exception as e:
                deferred.reject(_add_lorgnette_tb(e))
            else:
                deferred.resolve(from_gen.value)
            return deferred.promise()
        elif not is_deferred(from_gen):
            to_gen = InvalidYieldException(
                "Unexpected value '%s' of type '%s' yielded from o-routine '%s'.  "
                "O-routines can only yield Deferred, Promise and Return types." %
                (from_gen, type(from_gen).__name__, g.__name__))
            throw = True
            continue

        if from_gen.pending:
            def got_result(*args):
                _lorgnette_chain(unwrap(args), g, deferred)
            def got_error(*args):
                _lorgnette_chain(as_exception(unwrap(args)), g, deferred,
                                 throw=True)
            from_gen.then(got_result, got_error)
            return deferred.promise()

        if from_gen.resolved:
            to_gen, throw = from_gen.result, False
        else:
            to_gen, throw = as_exception(from_gen.error), True


def maybe_deferred_generator(f, *args, **kw):
    try:
        result = f(*args, **kw)
    except Exception as e:
        return rejected(_add_lorgnette_tb(e))

    if isinstance(result, types.GeneratorType):
        return _lorgnette_chain(None, result, Deferred())
    elif is_deferred(result):
        return result.promise()
    return resolved(result)


# @_o
def _o(f):
    """
    lorgnette helps you write Promise-using code that looks like a regular
    sequential function.  For example::

        @_o
        def foo():
            result = yield make_some_request_returning_a_promise()
            print(result)

    When you call anything that results in a Deferred or Promise, you can
    simply yield it; your generator will automatically be resumed when
    the outcome is available.  The generator will be sent the result with
    the 'send' method on generators, or if the promise was rejected, the
    error is raised at the yield with 'throw'.  Errors that aren't
    exceptions arrive wrapped in Rejected.

    Your oroutine returns a Promise, which resolves with the return value
    of the generator (or rejects with the exception if your generator
    raises one).  You can use "return result" or "yield Return(result)";
    falling off the end of the generator resolves the Promise with None.
    Yielding anything other than a Deferred, a Promise or a Return raises
    InvalidYieldException inside the generator.

    The Promise returned from your oroutine rejects with any exception
    your generator didn't handle::

        @_o
        def foo():
            result = yield make_some_request_returning_a_promise()
            if result == 'foo':
                # this will become the result of the Promise
                return 'success'
            else:
                # this will be the error
                raise Exception('fail')
    """
    @functools.wraps(f)
    def unwind_generator(*args, **kwargs):
        return maybe_deferred_generator(f, *args, **kwargs)
    return unwind_generator
o = _o


def log_exception(e=None, elide_internals=None):
    if e is None:
        e = sys.exc_info()[1]
        if e is None:
            # nothing in flight
            return

    if hasattr(e, '_lorgnette'):
        log.error("%s\n%s", str(e), format_tb(e, elide_internals=elide_internals))
    else:
        log.error("%s", str(e), exc_info=(type(e), e, e.__traceback__))


@_o
def launch(oroutine, *args, **kwargs):
    elide_internals = kwargs.pop('elide_internals', None)
    try:
        p = oroutine(*args, **kwargs)
        if not is_deferred(p):
            return p

        r = yield p
        return r
    except GeneratorExit:
        raise
    except Exception:
        log_exception(elide_internals=elide_internals)
