# -*- coding: utf-8 -*-

from .promise import Promise


class Deferred(object):
    """

    A Deferred is the "creator" side of an async task, whereas a Promise
    represents the asynchronous value from the "consumer" side.

    It can be unpacked as a tuple:

        >>> promise, resolve, reject = Deferred()

    Attributes:
        promise (Promise): the Promise associated to the Deferred.
        resolve (function)
        reject (function)
    """

    def __init__(self, *args, **kwargs):
        self.promise = Promise(self._executor, *args, **kwargs)

    def __iter__(self):
        return iter((self.promise, self.resolve, self.reject))

    def _executor(self, resolve, reject):
        self.resolve = resolve
        self.reject = reject
