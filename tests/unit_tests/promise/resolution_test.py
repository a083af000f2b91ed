# -*- coding: utf-8 -*-

from aplus.errors import SelfResolutionError
from aplus.promise import Deferred, Promise, is_thenable, resolve_thenable


class Recorder(object):
    """Collect the calls to the fulfill and reject callbacks."""

    def __init__(self):
        self.calls = []

    def fulfill(self, value):
        self.calls.append(('fulfill', value))

    def reject(self, reason):
        self.calls.append(('reject', reason))


class TestIsThenable(object):

    def test_promise_is_thenable(self):
        assert is_thenable(Promise.resolve(1))

    def test_object_with_then_method(self):
        class Thenable(object):
            def then(self, on_fulfilled, on_rejected):
                pass

        assert is_thenable(Thenable())

    def test_plain_values(self):
        class NotThenable(object):
            then = 'not a method'

        assert not is_thenable(None)
        assert not is_thenable(3)
        assert not is_thenable('then')
        assert not is_thenable({'then': lambda a, b: None})
        assert not is_thenable(NotThenable())


class TestResolveThenable(object):

    def test_plain_value(self):
        """A value who is not a thenable fulfills directly."""
        recorder = Recorder()
        resolve_thenable(object(), 12, recorder.fulfill, recorder.reject)
        assert recorder.calls == [('fulfill', 12)]

    def test_none_value(self):
        recorder = Recorder()
        resolve_thenable(object(), None, recorder.fulfill, recorder.reject)
        assert recorder.calls == [('fulfill', None)]

    def test_self_resolution(self):
        """Resolve a promise with itself."""
        recorder = Recorder()
        p = Promise(lambda ok, error: None)
        resolve_thenable(p, p, recorder.fulfill, recorder.reject)

        assert len(recorder.calls) == 1
        action, reason = recorder.calls[0]
        assert action == 'reject'
        assert isinstance(reason, SelfResolutionError)
        assert isinstance(reason, TypeError)

    def test_thenable_fulfilled(self):
        class Thenable(object):
            def then(self, on_fulfilled, on_rejected):
                on_fulfilled(5)

        recorder = Recorder()
        resolve_thenable(object(), Thenable(), recorder.fulfill,
                         recorder.reject)
        assert recorder.calls == [('fulfill', 5)]

    def test_thenable_rejected(self):
        error = ValueError()

        class Thenable(object):
            def then(self, on_fulfilled, on_rejected):
                on_rejected(error)

        recorder = Recorder()
        resolve_thenable(object(), Thenable(), recorder.fulfill,
                         recorder.reject)
        assert recorder.calls == [('reject', error)]

    def test_nested_thenables(self):
        """The value of a thenable is resolved recursively."""
        class Thenable(object):
            def __init__(self, value):
                self.value = value

            def then(self, on_fulfilled, on_rejected):
                on_fulfilled(self.value)

        recorder = Recorder()
        resolve_thenable(object(), Thenable(Thenable(Thenable(7))),
                         recorder.fulfill, recorder.reject)
        assert recorder.calls == [('fulfill', 7)]

    def test_thenable_resolved_with_the_promise(self):
        """A thenable who resolves the waiting promise with itself."""
        p = Promise(lambda ok, error: None)

        class Thenable(object):
            def then(self, on_fulfilled, on_rejected):
                on_fulfilled(p)

        recorder = Recorder()
        resolve_thenable(p, Thenable(), recorder.fulfill, recorder.reject)
        assert recorder.calls[0][0] == 'reject'
        assert isinstance(recorder.calls[0][1], SelfResolutionError)

    def test_thenable_calling_callbacks_many_times(self):
        """Only the first call to a callback of the thenable has an effect."""
        class Thenable(object):
            def then(self, on_fulfilled, on_rejected):
                on_fulfilled(1)
                on_rejected(ValueError())
                on_fulfilled(2)

        recorder = Recorder()
        resolve_thenable(object(), Thenable(), recorder.fulfill,
                         recorder.reject)
        assert recorder.calls == [('fulfill', 1)]

    def test_then_attribute_raising_error(self):
        """Reading the `then` attribute raises an error."""
        error = RuntimeError('no access')

        class Thenable(object):
            @property
            def then(self):
                raise error

        recorder = Recorder()
        resolve_thenable(object(), Thenable(), recorder.fulfill,
                         recorder.reject)
        assert recorder.calls == [('reject', error)]

    def test_then_attribute_read_once(self):
        """The `then` attribute is read only one time."""
        reads = []

        class Thenable(object):
            @property
            def then(self):
                reads.append(1)
                return lambda on_fulfilled, on_rejected: on_fulfilled('ok')

        recorder = Recorder()
        resolve_thenable(object(), Thenable(), recorder.fulfill,
                         recorder.reject)
        assert reads == [1]
        assert recorder.calls == [('fulfill', 'ok')]

    def test_then_method_raising_error(self):
        """The `then` method raises before calling the callbacks."""
        error = RuntimeError()

        class Thenable(object):
            def then(self, on_fulfilled, on_rejected):
                raise error

        recorder = Recorder()
        resolve_thenable(object(), Thenable(), recorder.fulfill,
                         recorder.reject)
        assert recorder.calls == [('reject', error)]

    def test_then_method_raising_error_after_callback(self):
        """The error raised after a callback call is ignored."""
        class Thenable(object):
            def then(self, on_fulfilled, on_rejected):
                on_fulfilled('done')
                raise RuntimeError()

        recorder = Recorder()
        resolve_thenable(object(), Thenable(), recorder.fulfill,
                         recorder.reject)
        assert recorder.calls == [('fulfill', 'done')]

    def test_thenable_settled_later(self):
        """The thenable keeps the callbacks and calls them later."""
        callbacks = []

        class Thenable(object):
            def then(self, on_fulfilled, on_rejected):
                callbacks.append((on_fulfilled, on_rejected))

        recorder = Recorder()
        resolve_thenable(object(), Thenable(), recorder.fulfill,
                         recorder.reject)
        assert recorder.calls == []

        on_fulfilled, on_rejected = callbacks[0]
        on_rejected('late')
        on_fulfilled('ignored')
        assert recorder.calls == [('reject', 'late')]

    def test_native_promise(self, task_queue):
        """A Promise is adopted like any thenable."""
        df = Deferred()
        recorder = Recorder()
        resolve_thenable(object(), df.promise, recorder.fulfill,
                         recorder.reject)

        df.resolve('native')
        assert recorder.calls == []
        task_queue.drain()
        assert recorder.calls == [('fulfill', 'native')]
