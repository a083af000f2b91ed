# -*- coding: utf-8 -*-

import logging
import pytest

from aplus.common import config
from aplus.promise import TaskQueue, scheduler


@pytest.fixture(autouse=True)
def task_queue(request):
    """Install a manual task queue as the default queue.

    The tests execute the pending callbacks by calling ``task_queue.drain()``.
    The previous default queue is restored at the end of the test.

    Returns:
        TaskQueue: the new default queue.
    """
    queue = TaskQueue()
    previous = scheduler.set_default(queue)
    request.addfinalizer(lambda: scheduler.set_default(previous))
    return queue


@pytest.fixture
def config_file(request, tmpdir, monkeypatch):
    """Redirect the config module to a temporary config file.

    All entries set during the test are removed at the end.

    Returns:
        str: path of the (not yet existing) config file.
    """
    path = str(tmpdir.join('aplus.ini'))
    monkeypatch.setattr(config, '_get_config_file_path', lambda: path)

    def clean_config():
        config._config_parser.remove_section('config')
        config._config_parser.add_section('config')

    request.addfinalizer(clean_config)
    return path


@pytest.fixture
def log_levels(request):
    """Restore the level of the main loggers at the end of the test."""
    names = ['', 'aplus', 'aplus.promise', 'aplus.promise.scheduler']
    levels = dict((name, logging.getLogger(name).level) for name in names)

    def restore_levels():
        for name, level in levels.items():
            logging.getLogger(name).setLevel(level)

    request.addfinalizer(restore_levels)
