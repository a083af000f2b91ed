# -*- coding: utf-8 -*-

import logging
from functools import partial
from threading import Condition

from ..errors import RejectionError, TimeoutError
from . import scheduler
from .resolution import resolve_thenable

_logger = logging.getLogger(__name__)


class Promise(object):
    """It represents an operation expected to be completed in the future.

    A Promise is used for asynchronous computation. It contains a value not yet
    known when the Promise is created. It allows to set callbacks who will be
    called as soon as the result is known. It's a "promise" of a future value.

    The callbacks are never called directly: they are sent to a task queue
    (see the `scheduler` module), who executes them later, in the order they
    have been registered.

    All calls to the methods are thread-safe.
    """

    PENDING = 'pending'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'

    def __init__(self, executor, _name=None, _queue=None):
        """Constructor of the Promise.

        Generate the two callbacks for the executor, then call the `executor`.
        It means the executor will be fully executed before the the constructor
        returns.
        If the executor raises an exception, it's caught and the Promise is
        rejected with this exception.

        Args:
            executor (callable): Takes 2 callable arguments:
                The first one, `on_fulfilled()` should be called when the
                Promise is fulfilled (ie the tasks is done) and must accept the
                result's value as its only argument. If this value is a
                Promise or a thenable, its state is adopted.
                The second, `on_rejected()`, should be called when an error
                occurs. Its argument should be an instance of `Exception`.
                Only the first call to one of these callbacks has an effect.
            _name (str): if set, name used when converted to text.
            _queue (optional): task queue executing the callbacks. By default,
                the queue returned by `scheduler.get_default()`.
        Raises:
            TypeError: if executor is not callable.
        """
        if not callable(executor):
            raise TypeError('Promise executor must be callable, not %r'
                            % (executor,))

        self._state = self.PENDING
        self._value = None
        self._reason = None
        self._condition = Condition()
        self._name = _name or getattr(executor, '__name__', '???')
        self._queue = _queue if _queue is not None else scheduler.get_default()

        # Set by the first call to on_fulfilled() or on_rejected(). When the
        # Promise adopts the state of a thenable, it stays pending, but all
        # subsequent calls are ignored.
        self._is_locked = False

        self._callbacks = []
        self._errbacks = []

        def on_fulfilled(value):
            with self._condition:
                if self._is_locked:
                    _logger.debug('Try to fulfill Promise %s already '
                                  'settled. New result will be ignored: %s'
                                  % (repr(self), repr(value)))
                    return
                self._is_locked = True

            if isinstance(value, Promise) and value is not self:
                value.then(self._fulfill, self._reject)
            else:
                resolve_thenable(self, value, self._fulfill, self._reject)

        def on_rejected(reason):
            with self._condition:
                if self._is_locked:
                    _logger.debug('Try to reject Promise %s already settled.'
                                  ' New error will be ignored: %s'
                                  % (repr(self), repr(reason)))
                    return
                self._is_locked = True
            if not isinstance(reason, Exception):
                # The non-exception value can be chained like any reason. In
                # case of call to result(), a RejectionError is raised instead.
                _logger.warning('Promise %s rejected with non-exception '
                                'value: %s' % (repr(self), repr(reason)))
            self._reject(reason)

        try:
            executor(on_fulfilled, on_rejected)
        except Exception as error:
            on_rejected(error)

    @property
    def state(self):
        """str: one of PENDING, FULFILLED or REJECTED."""
        with self._condition:
            return self._state

    @property
    def value(self):
        """Value of the fulfilled Promise. None in other states."""
        with self._condition:
            return self._value

    @property
    def reason(self):
        """Rejection reason of the Promise. None in other states."""
        with self._condition:
            return self._reason

    def result(self, timeout=None):
        """Wait for the result and returns it as soon as it's available.

        Note that the callbacks are executed by the task queue: if the queue
        is not running (a `TaskQueue` not drained), a Promise depending of
        callbacks can't be settled during the wait.

        Args:
            timeout (int, optional): if set, maximum time to wait the promise
                to be fulfilled. By default, it can wait indefinitely.
        Returns:
            *: value encapsulated, defined by the operation.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
            RejectionError: if the promise is rejected with a value who is
                not an exception.
            *: If the promise is rejected, the rejection cause is raised.
        """
        with self._condition:
            self._wait(timeout)

            if self._state == self.REJECTED:
                if isinstance(self._reason, BaseException):
                    raise self._reason
                raise RejectionError(self._reason)
            return self._value

    def exception(self, timeout=None):
        """Wait for the promise rejection and returns it's error.

        Args:
            timeout (int, optional): if set, maximum time to wait the promise
                to be rejected. By default, it can wait indefinitely.
        Returns:
            *: the reason of the rejection of the Promise.
            None: if the promise is fulfilled.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
        """
        with self._condition:
            self._wait(timeout)
            return self._reason

    def then(self, on_fulfilled=None, on_rejected=None):
        """Create a new promise from callbacks called when this one is settled.

        If the promise is fulfilled, the `on_fulfilled` callback will be
        called. Otherwise (the promise has been rejected), the `on_rejected`
        callback is called.
        The callback is never called before this method returns, even if the
        promise is already settled.
        In any case, the callback will define the state of the returned
        Promise. If the callback raises an exception, the new Promise is
        rejected. The callback can returns:
        - A value: the new promise will be fulfilled with this value.
        - Another Promise, or any object with a `then` method: when fulfilled
            or rejected, will transfer its status (state and result/error) to
            the Promise returned by this method.

        If a callback is not defined (or is not callable), the state of the
        "self promise" is transferred at the new promise (the state and the
        value/error).

        Args:
            on_fulfilled (callable, optional):  This callback will receive the
                result of the original promise as argument.
            on_rejected (callable, optional): This callback will receive the
                exception raised by the original promise as argument.
        Returns:
            Promise<*>: new promise depending of self.
        """
        if not callable(on_fulfilled):
            on_fulfilled = None
        if not callable(on_rejected):
            on_rejected = None

        if not on_rejected:
            name = '%s' % getattr(on_fulfilled, '__name__', '???')
        elif not on_fulfilled:
            name = '<None, %s>' % getattr(on_rejected, '__name__', '???')
        else:
            name = '<%s, %s>' % (getattr(on_fulfilled, '__name__', '???'),
                                 getattr(on_rejected, '__name__', '???'))

        # The child is settled only by the callbacks below, through its
        # internal _fulfill() and _reject(): the value returned by a callback
        # is unwrapped once, by resolve_thenable().
        child = Promise(lambda ok, error: None,
                        _name='%s -> %s' % (self._name, name),
                        _queue=self._queue)

        def callback(value):
            if on_fulfilled is None:
                return child._fulfill(value)
            try:
                x = on_fulfilled(value)
            except Exception as error:
                return child._reject(error)
            resolve_thenable(child, x, child._fulfill, child._reject)

        def errback(reason):
            if on_rejected is None:
                return child._reject(reason)
            try:
                x = on_rejected(reason)
            except Exception as error:
                return child._reject(error)
            resolve_thenable(child, x, child._fulfill, child._reject)

        self._add_callbacks(callback, errback)
        return child

    def catch(self, on_rejected):
        """Create a new promise with a callback called when an error occurs.

        Alias of `self.then(None, on_rejected)`

        Args:
            on_rejected (callable): Must take an argument instance of Exception
                (or one of its subclass). Will be called if `self` is rejected.
        returns:
            Promise<*>: new Promise chained to `self`. If `self` is fulfilled,
                the promised value will be the same as `self`. Otherwise, the
                value returned by the `on_rejected()` callback.
        """
        return self.then(None, on_rejected)

    def safeguard(self):
        """Catch all errors and log them with the most details possible.

        This method is aimed to protect the program from uncaught rejected
        Promise. If no error handler has been set (via then() or catch()), the
        default behavior is to do nothing, and thus, errors are silently
        ignored.
        Calling `safeguard()` after all chains are set will catch these errors,
        and log them as ERROR with the maximum of details possible.
        """
        def guard(reason):
            if isinstance(reason, BaseException):
                _logger.error('[SAFEGUARD] %s' % self,
                              exc_info=(type(reason), reason,
                                        reason.__traceback__))
            else:
                _logger.error('[SAFEGUARD] %s rejected with %r'
                              % (self, reason))

        self.then(None, guard)

    def __repr__(self):
        return 'Promise(%s)' % self._inner_print()

    def _inner_print(self):
        with self._condition:
            if self._state == self.REJECTED:
                state = 'R'
            elif self._state == self.FULFILLED:
                state = 'F'
            else:
                state = 'P'
        return '%s %s' % (self._name, state)

    @classmethod
    def resolve(cls, value, _queue=None):
        """Create a promise who resolves the selected value.

        Args:
            value: result of the promise. If it's a Promise, it's returned as
                is. If it's another thenable, its state is adopted.
            _queue (optional): task queue of the new Promise.
        Returns:
            Promise: new Promise resolved with the value passed in parameter.
        """
        if isinstance(value, cls):
            return value
        return cls(lambda ok, error: ok(value), _name='RESOLVE',
                   _queue=_queue)

    @classmethod
    def reject(cls, reason, _queue=None):
        """Create a Promise rejected for the reason specified.

        Args:
            reason: Exception set to the Promise
            _queue (optional): task queue of the new Promise.
        Returns:
            Promise: new Promise already rejected.
        """
        return cls(lambda ok, error: error(reason), _name='REJECT',
                   _queue=_queue)

    @classmethod
    def deferred(cls, _queue=None):
        """Create a new Deferred, exposing the Promise and its callbacks.

        Args:
            _queue (optional): task queue of the new Promise.
        Returns:
            Deferred: object with the attributes `promise`, `resolve` and
                `reject`.
        """
        from .deferred import Deferred

        return Deferred(_queue=_queue)

    def _wait(self, timeout):
        # Must be called with self._condition acquired.
        if not self._condition.wait_for(
                lambda: self._state != self.PENDING, timeout):
            raise TimeoutError()

    def _fulfill(self, value):
        self._settle(self.FULFILLED, value)

    def _reject(self, reason):
        self._settle(self.REJECTED, reason)

    def _settle(self, state, payload):
        with self._condition:
            if self._state != self.PENDING:
                _logger.debug('Promise %s already settled. Ignore %s state.'
                              % (repr(self), state))
                return

            self._is_locked = True
            if state == self.FULFILLED:
                self._value = payload
                continuations = self._callbacks
            else:
                self._reason = payload
                continuations = self._errbacks
            self._state = state

            self._condition.notify_all()

            for continuation in continuations:
                self._defer_callback(continuation, payload,
                                     is_errback=state == self.REJECTED)

            # Free the references
            self._callbacks = None
            self._errbacks = None

    def _add_callbacks(self, callback, errback):
        with self._condition:
            if self._state == self.PENDING:
                self._callbacks.append(callback)
                self._errbacks.append(errback)
            elif self._state == self.FULFILLED:
                self._defer_callback(callback, self._value)
            else:
                self._defer_callback(errback, self._reason, is_errback=True)

    def _defer_callback(self, callback, value, is_errback=False):
        self._queue.defer(partial(self._exec_callback, callback, value,
                                  is_errback))

    @staticmethod
    def _exec_callback(callback, value, is_errback=False):
        try:
            callback(value)
        except Exception:
            if is_errback:
                _logger.exception("Promise errback raise an exception!")
            else:
                _logger.exception("Promise callback raise an exception!")
