# -*- coding: utf-8 -*-

from .__version__ import __version__  # noqa

import logging

from .common import config
from .common import log
from .errors import (PromiseError, RejectionError, SelfResolutionError,
                     TimeoutError)
from .promise import (AsyncioTaskQueue, Deferred, Promise, TaskQueue,
                      ThreadTaskQueue, is_thenable, resolve_thenable,
                      wrap_promise)
from .promise import scheduler

__all__ = ['configure', 'is_thenable', 'resolve_thenable', 'wrap_promise',
           'AsyncioTaskQueue', 'Deferred', 'Promise', 'PromiseError',
           'RejectionError', 'SelfResolutionError', 'TaskQueue',
           'ThreadTaskQueue', 'TimeoutError']


def configure():
    """Load the config file and apply it.

    Set the log levels and install the default task queue, according to the
    entries 'debug_mode', 'log_levels' and 'scheduler'.

    Returns:
        the new default task queue.
    """
    config.load()
    log.set_debug_mode(config.get('debug_mode'))
    log.set_logs_level(config.get('log_levels'))

    task_queue = scheduler.create(config.get('scheduler'))
    scheduler.set_default(task_queue)

    logging.getLogger(__name__).debug('aplus %s configured.', __version__)
    return task_queue
