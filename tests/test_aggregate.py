"""Tests for when() and first_of()."""

from lorgnette.aggregate import first_of, when
from lorgnette.deferred import Deferred, Promise, resolved


class TestWhenResolution:
    """when() resolves once every input has resolved, in input order."""

    def test_resolved_inputs(self):
        p = when(resolved(1), resolved(2))
        assert isinstance(p, Promise)
        assert p.resolved
        assert p.result == (1, 2)

    def test_out_of_order_settling_keeps_input_order(self):
        calls = []
        a, b = Deferred(), Deferred()
        p = when(a, b)
        p.done(lambda *r: calls.append(r))

        b.resolve(2)
        assert p.pending
        a.resolve(1)

        assert p.resolved
        assert calls == [(1, 2)]

    def test_single_sequence_is_unwrapped(self):
        p = when([resolved("a"), resolved("b"), resolved("c")])
        assert p.result == ("a", "b", "c")

    def test_single_input_resolves_with_its_value(self):
        p = when(Deferred().resolve(7))
        assert p.result == 7

    def test_multi_argument_results_are_grouped(self):
        p = when(Deferred().resolve(1, 2), resolved(3))
        assert p.result == ((1, 2), 3)

    def test_empty(self):
        calls = []
        p = when()
        p.done(lambda *a: calls.append(a))
        assert p.resolved
        assert p.result is None
        assert calls == [()]

    def test_empty_sequence(self):
        assert when([]).resolved


class TestWhenCoercion:
    """Non-deferred inputs are turned into promises."""

    def test_plain_values_and_none(self):
        p = when(None, "x", 3)
        assert p.result == (None, "x", 3)

    def test_deferred_and_promise_inputs(self):
        d = Deferred()
        p = when(d, d.promise())
        d.resolve("v")
        assert p.result == ("v", "v")

    def test_callable_that_resolves(self):
        p = when(lambda d: d.resolve("from init"), 1)
        assert p.result == ("from init", 1)

    def test_callable_that_does_nothing_resolves_with_none(self):
        calls = []
        p = when(lambda: calls.append("ran"))
        assert calls == ["ran"]
        assert p.resolved
        assert p.result is None

    def test_keyword_only_callable_is_called_without_deferred(self):
        seen = []
        p = when(lambda **kw: seen.append(kw))
        assert seen == [{}]
        assert p.resolved

    def test_callable_that_rejects(self):
        p = when(lambda d: d.reject("no"))
        assert p.rejected
        assert p.error == "no"


class TestWhenRejection:
    """when() fails fast on the first rejection."""

    def test_rejects_without_waiting(self):
        a = Deferred()
        p = when(a, resolved("b"), Deferred())
        a.reject("err")
        assert p.rejected
        assert p.error == ("err", None, None)

    def test_errors_hold_only_settled_failures(self):
        calls = []
        a, b = Deferred(), Deferred()
        p = when(a, b)
        p.fail(lambda *e: calls.append(e))
        b.reject("second")
        a.reject("first")
        assert calls == [(None, "second")]
        assert p.error == (None, "second")

    def test_late_resolution_does_not_resolve(self):
        a, b = Deferred(), Deferred()
        p = when(a, b)
        a.reject("err")
        b.resolve("ok")
        assert p.rejected
        assert p.result is None


class TestWhenProgress:
    """Progress from any input re-broadcasts every latest status."""

    def test_statuses_snapshot(self):
        calls = []
        a, b = Deferred(), Deferred()
        p = when(a, b)
        p.progress(lambda *s: calls.append(s))
        a.notify(10)
        b.notify(20)
        a.notify(11)
        assert calls == [(10, None), (10, 20), (11, 20)]
        assert p.status == (11, 20)


class TestFirstOf:
    """first_of() settles with whichever input settles first."""

    def test_first_resolution_wins(self):
        a, b = Deferred(), Deferred()
        p = first_of(a, b)
        b.resolve("b")
        a.resolve("a")
        assert p.result == (1, "b")

    def test_first_rejection_wins(self):
        a, b = Deferred(), Deferred()
        p = first_of([a, b])
        a.reject("bad")
        b.resolve("good")
        assert p.rejected
        assert p.error == (0, "bad")

    def test_already_settled_input(self):
        p = first_of(Deferred(), "ready")
        assert p.result == (1, "ready")

    def test_progress_is_tagged(self):
        a = Deferred()
        p = first_of(a, Deferred())
        a.notify("half")
        assert p.status == (0, "half")

    def test_empty(self):
        assert first_of().resolved
