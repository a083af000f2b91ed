# -*- coding: utf-8 -*-

from ..errors import (PromiseError, RejectionError, SelfResolutionError,
                      TimeoutError)
from .decorators import wrap_promise
from .deferred import Deferred
from .promise import Promise
from .resolution import resolve_thenable
from .scheduler import AsyncioTaskQueue, TaskQueue, ThreadTaskQueue
from .util import is_thenable

__all__ = ['is_thenable', 'resolve_thenable', 'AsyncioTaskQueue', 'Deferred',
           'Promise', 'PromiseError', 'RejectionError', 'SelfResolutionError',
           'TaskQueue', 'ThreadTaskQueue', 'TimeoutError', 'wrap_promise']
