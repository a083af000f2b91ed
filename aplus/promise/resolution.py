# -*- coding: utf-8 -*-

"""Promise resolution procedure.

Decides how a value returned by a continuation settles the Promise waiting
for it. If the value is a thenable (a Promise, or any foreign object with a
callable `then` member), the Promise adopts its state, recursively until a
plain value or an error is reached.
"""

import logging
from threading import Lock

from ..errors import SelfResolutionError

_logger = logging.getLogger(__name__)


def resolve_thenable(promise, x, fulfill, reject):
    """Settle `promise` with `x`, unwrapping the thenables.

    Args:
        promise (Promise): the promise who will be settled. It's used only to
            detect the self-resolution.
        x: the value to resolve. It can be a thenable.
        fulfill (callable): called with the final value.
        reject (callable): called with the rejection reason.
    """
    if x is promise:
        return reject(SelfResolutionError('Cannot resolve %r with itself.'
                                          % (promise,)))

    try:
        then = getattr(x, 'then', None)
    except Exception as error:
        return reject(error)

    if not callable(then):
        return fulfill(x)

    lock = Lock()
    is_called = [False]

    def _acquire_once():
        with lock:
            if is_called[0]:
                return False
            is_called[0] = True
            return True

    def adopted_success(value):
        if not _acquire_once():
            _logger.debug('Thenable %r already settled. Value ignored: %r'
                          % (x, value))
            return
        resolve_thenable(promise, value, fulfill, reject)

    def adopted_failure(reason):
        if not _acquire_once():
            _logger.debug('Thenable %r already settled. Reason ignored: %r'
                          % (x, reason))
            return
        reject(reason)

    try:
        then(adopted_success, adopted_failure)
    except Exception as error:
        if not _acquire_once():
            _logger.debug('Thenable %r raised after being settled: %r'
                          % (x, error))
            return
        reject(error)
