# -*- coding: utf-8 -*-


class PromiseError(Exception):
    """Base class of the errors raised by the aplus package."""
    pass


class SelfResolutionError(PromiseError, TypeError):
    """A Promise has been resolved with itself.

    Adopting its own state would leave the Promise pending forever, so the
    Promise is rejected with this error instead.
    """
    pass


class TimeoutError(PromiseError):
    """The Promise was not settled within the time allowed."""
    pass


class RejectionError(PromiseError):
    """Raised in place of a rejection reason who is not an exception.

    Attributes:
        reason: the original rejection reason.
    """

    def __init__(self, reason):
        PromiseError.__init__(self, 'Promise rejected with non-exception '
                                    'value: %r' % (reason,))
        self.reason = reason
