# -*- coding: utf-8 -*-

"""Configuration module of the logs.

This module configure the python ``logging`` module, in order to have useful
and easy to activate logs. The aplus package never installs a handler by
itself: an application may use ``Context`` to display the logs on the console.

On console output, if the system supports it, logs entries will be colorized.
"""

import logging
import sys

_logger = logging.getLogger(__name__)


def _support_color_output():
    """Try to guess if the standard output supports color term code.

    Returns:
        boolean: True if we are sure the output supports color; False otherwise
    """
    if hasattr(sys.stdout, 'isatty') and sys.stdout.isatty():
        if not sys.platform.startswith('win'):
            return True
    return False


class ColoredFormatter(logging.Formatter):
    """Formatter who display colored messages using ANSI escape codes."""

    _colors = {
        'RESET': '\033[0m',
        'DEBUG': '\033[34m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[31m',
        'NAME': '\033[36m',
        'DATE': '\033[30;1m',
        'EXCEPTION_NAME': '\033[31;1m',
        'EXCEPTION_STR': '\033[37;1m'
    }

    def _colorize(self, msg, color):
        return self._colors.get(color, '') + msg + self._colors.get('RESET')

    def formatTime(self, record, datefmt=None):
        result = logging.Formatter.formatTime(self, record, datefmt)
        return self._colorize(result, 'DATE')

    def formatException(self, ei):
        msg = logging.Formatter.formatException(self, ei)
        msg_lines = msg.split('\n')
        last_line = msg_lines[-1]
        result = '\n'.join(msg_lines[:-1]) + '\n'
        result += self._colorize(last_line.split(':')[0], 'EXCEPTION_NAME')
        result += ':' + self._colorize(':'.join(last_line.split(':')[1:]),
                                       'EXCEPTION_STR')
        return result

    def format(self, record):
        # The record is shared between handlers: it must not be modified.
        record = logging.makeLogRecord(record.__dict__)
        record.name = self._colorize(record.name, 'NAME')
        record.levelname = self._colorize(record.levelname, record.levelname)
        return logging.Formatter.format(self, record)


class Context(object):
    """Context class used to open and close the console log handler."""

    date_format = '%Y-%m-%d %H:%M:%S'
    string_format = '%(asctime)s %(levelname)-7s %(name)s - %(message)s'

    def __init__(self, stream=None):
        """Prepare a new log context.

        Args:
            stream (file, optional): output of the logs. Default to stderr.
        """
        self._stream = stream
        self._handler = None
        self._previous_levels = None

    def __enter__(self):
        """Add the console handler to the root logger."""
        root_logger = logging.getLogger()

        self._handler = logging.StreamHandler(self._stream)
        if self._stream is None and _support_color_output():
            formatter = ColoredFormatter(fmt=self.string_format,
                                         datefmt=self.date_format)
        else:
            formatter = logging.Formatter(fmt=self.string_format,
                                          datefmt=self.date_format)
        self._handler.setFormatter(formatter)
        root_logger.addHandler(self._handler)

        self._previous_levels = (root_logger.level,
                                 logging.getLogger('aplus').level)

        # Before any configuration, all messages should be displayed.
        set_debug_mode(True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Remove the handler installed by __enter__()."""
        _logger.debug('Stop logger ...')
        root_logger = logging.getLogger()
        root_logger.removeHandler(self._handler)
        self._handler.close()
        self._handler = None
        root_logger.setLevel(self._previous_levels[0])
        logging.getLogger('aplus').setLevel(self._previous_levels[1])


def set_logs_level(levels):
    """Configure a fine-grained log levels for the different modules.

    Args:
        levels (dict): A list of tuple associating a module name and a log
            level. A log level can be a number or a str representing one of the
            logging levels (DEBUG, WARNING, ...). The level name will be
            converted to uppercase.
            Invalids values will be ignored.

    Example:

        >>> # Accept DEBUG logs only for the task queues.
        >>> set_logs_level({'aplus': 'info',
        ...                 'aplus.promise.scheduler': 'debug'})

        >>> # Accept DEBUG log in general, but only ERROR logs (and above) for
        >>> # the promises.
        >>> set_logs_level({'aplus': 10, 'aplus.promise.promise': 40})
    """
    for (module, level) in levels.items():
        try:
            if isinstance(level, str):
                level = level.upper()
            logging.getLogger(module).setLevel(level)
        except ValueError:
            _logger.warning('Invalid log level "%s" for logger "%s". '
                            'Will be ignored.',
                            level, module)


def set_debug_mode(debug):
    """Set, or unset the debug log level.

    Note: modules others than aplus.* are not set to DEBUG, even in DEBUG
    mode. If needed, the level log of other modules can be set by
    ``set_logs_level()``.

    Args:
        debug (boolean): if True, the aplus log level will be set to DEBUG.
            If False, it will be set to INFO.
    """
    if debug:
        logging.getLogger().setLevel(logging.INFO)
        logging.getLogger('aplus').setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.WARNING)
        logging.getLogger('aplus').setLevel(logging.INFO)


def reset():
    """Reset the root logger (remove handlers and filters)."""
    logger = logging.getLogger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for log_filter in list(logger.filters):
        logger.removeFilter(log_filter)
