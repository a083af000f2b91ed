# -*- coding: utf-8 -*-

"""Task queues used to defer the execution of the Promise continuations.

A continuation is never executed during the call who registers it, nor during
the settlement who triggers it. Instead, it's wrapped into a task (a callable
without arguments) and sent to a task queue, who executes the tasks later, one
at a time, in the order they were submitted.

Three kinds of queue are available:
- `TaskQueue` stores the tasks until someone calls `run_pending()` or
  `drain()`. It's fully deterministic and is mostly used by the tests.
- `ThreadTaskQueue` executes the tasks in a dedicated worker thread, like the
  event loop of a host environment would do.
- `AsyncioTaskQueue` sends the tasks to an asyncio event loop.

Promises created without an explicit queue use the default queue, returned by
`get_default()`.
"""

from collections import deque
import logging
import queue
import threading

_logger = logging.getLogger(__name__)


class TaskQueue(object):
    """FIFO queue of tasks, executed on demand.

    The tasks are executed only when `run_pending()` or `drain()` are called,
    by the calling thread.
    """

    def __init__(self):
        self._tasks = deque()
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._tasks)

    def defer(self, task):
        """Add a task at the end of the queue.

        The task is never executed by this call.

        Args:
            task (callable): function without arguments.
        """
        with self._lock:
            self._tasks.append(task)

    def run_pending(self):
        """Execute the tasks present in the queue when the method is called.

        Tasks added by the executed tasks are kept for the next call.

        Returns:
            int: number of tasks executed.
        """
        with self._lock:
            nb_tasks = len(self._tasks)

        for _ in range(nb_tasks):
            self._run_next()
        return nb_tasks

    def drain(self, limit=None):
        """Execute tasks until the queue is empty.

        Tasks added by the executed tasks are executed too, in order.

        Args:
            limit (int, optional): maximum number of tasks to execute. It
                protects against never-ending chains of tasks.
        Returns:
            int: number of tasks executed.
        Raises:
            RuntimeError: if the queue is still not empty after `limit` tasks.
        """
        count = 0
        while self._run_next():
            count += 1
            if limit is not None and count >= limit and len(self):
                raise RuntimeError('Task queue not drained after %s tasks'
                                   % count)
        return count

    def _run_next(self):
        with self._lock:
            if not self._tasks:
                return False
            task = self._tasks.popleft()
        _exec_task(task)
        return True


class ThreadTaskQueue(object):
    """Execute the tasks in a dedicated thread, in the order of submission.

    The worker thread is a daemon: it doesn't prevent the program to exit.
    """

    _STOP = object()

    def __init__(self, name='aplus-tasks'):
        """
        Args:
            name (str): name of the worker thread.
        """
        self._queue = queue.Queue()
        self._thread = threading.Thread(target=self._worker, name=name)
        self._thread.daemon = True
        self._thread.start()

    def __len__(self):
        return self._queue.qsize()

    def defer(self, task):
        """Add a task at the end of the queue.

        Args:
            task (callable): function without arguments.
        """
        self._queue.put(task)

    def stop(self, timeout=None):
        """Stop the worker thread after the tasks already submitted.

        Args:
            timeout (float, optional): maximum time to wait the thread.
        Returns:
            boolean: True if the thread has stopped; False if it's still
                running after the timeout.
        """
        self._queue.put(self._STOP)
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout)
        return not self._thread.is_alive()

    def _worker(self):
        _logger.debug('Start worker thread %s', self._thread.name)
        while True:
            task = self._queue.get()
            if task is self._STOP:
                break
            _exec_task(task)
        _logger.debug('Worker thread %s stopped.', self._thread.name)


class AsyncioTaskQueue(object):
    """Send the tasks to an asyncio event loop.

    The tasks are scheduled with `loop.call_soon_threadsafe()`, so promises
    can be settled from any thread.
    """

    def __init__(self, loop):
        """
        Args:
            loop (asyncio.AbstractEventLoop): the loop who executes the tasks.
        """
        self._loop = loop

    def defer(self, task):
        """Schedule the task in the event loop.

        Args:
            task (callable): function without arguments.
        """
        self._loop.call_soon_threadsafe(_exec_task, task)


def _exec_task(task):
    try:
        task()
    except Exception:
        _logger.exception('Task %r raised an exception!' % (task,))


_queue_factories = {
    'manual': TaskQueue,
    'thread': ThreadTaskQueue
}

_default_queue = None
_default_lock = threading.Lock()


def create(kind):
    """Create a new task queue from its name.

    Args:
        kind (str): 'manual' or 'thread'.
    Returns:
        TaskQueue or ThreadTaskQueue: the new queue.
    Raises:
        ValueError: if the kind of queue is unknown.
    """
    try:
        factory = _queue_factories[kind]
    except KeyError:
        raise ValueError('Unknown task queue "%s". Expected one of: %s'
                         % (kind, ', '.join(sorted(_queue_factories))))
    return factory()


def get_default():
    """Returns the task queue used by Promises created without queue.

    If no queue has been set, it's created the first time, using the
    'scheduler' config entry.
    """
    global _default_queue

    with _default_lock:
        if _default_queue is None:
            from ..common import config

            kind = config.get('scheduler')
            _default_queue = create(kind)
            _logger.debug('Default task queue created: %s', kind)
        return _default_queue


def set_default(task_queue):
    """Replace the default task queue.

    Promises already created keep their own queue.

    Args:
        task_queue: any object with a `defer(task)` method. If None, the
            default queue will be created again at the next use.
    Returns:
        the previous default queue (or None).
    """
    global _default_queue

    with _default_lock:
        previous = _default_queue
        _default_queue = task_queue
    return previous


def defer(task):
    """Add a task to the default task queue."""
    get_default().defer(task)
