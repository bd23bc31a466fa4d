# Copyright (C) 2026 bzr2gitnotes developers
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301 USA

"""Messages and logging.

Messages are supplied by callers as a string-formatting template, plus values
to be inserted into it.  The actual %-formatting is deferred to the log
library so that it doesn't need to be done for messages that won't be emitted.

Messages can be sent to two places: stderr, and an optional log file enabled
with ``--logging``.  stderr gets warnings and errors by default and notes when
running verbosely.  The log file gets everything, including the diagnostics
written with mutter() and full tracebacks for fatal errors.

Errors that terminate a conversion are passed back as exceptions and reported
once by report_exception().
"""

import logging
import sys

# held in a global for quick reference
_logger = logging.getLogger("bzr2gitnotes")

_trace_handler = None

_stderr_handler = None


def note(*args, **kwargs):
    """Output a note to the user.

    Takes the same parameters as logging.info.
    """
    _logger.info(*args, **kwargs)


def warning(*args, **kwargs):
    _logger.warning(*args, **kwargs)


def mutter(fmt, *args):
    """Write a diagnostic to the log file, if one is enabled.

    Bytes in fmt or args are decoded as utf-8, so stream paths and refs are
    logged as text.
    """
    if _trace_handler is None:
        return
    if isinstance(fmt, bytes):
        fmt = fmt.decode("utf-8", "replace")
    args = tuple(_decode(a) for a in args)
    _logger.debug(fmt, *args)


def _decode(value):
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return value


def enable_default_logging(verbose=False, err_file=None):
    """Configure default logging: messages to stderr.

    This should only be called once per process.
    """
    global _stderr_handler
    if err_file is None:
        err_file = sys.stderr
    if _stderr_handler is not None:
        _logger.removeHandler(_stderr_handler)
    _stderr_handler = logging.StreamHandler(stream=err_file)
    _stderr_handler.setFormatter(logging.Formatter("bzr2gitnotes: %(message)s"))
    if verbose:
        _stderr_handler.setLevel(logging.INFO)
    else:
        _stderr_handler.setLevel(logging.WARNING)
    _logger.addHandler(_stderr_handler)
    _logger.setLevel(logging.DEBUG)
    _logger.propagate = False
    return _stderr_handler


def enable_log_file(filename):
    """Send every message, diagnostics included, to filename.

    The file is truncated first so that each run starts a fresh log.

    :return: the handler, to be passed to disable_log_file.
    """
    global _trace_handler
    handler = logging.FileHandler(filename, mode="w", encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    handler.setLevel(logging.DEBUG)
    _logger.addHandler(handler)
    _logger.setLevel(logging.DEBUG)
    _trace_handler = handler
    return handler


def disable_log_file(handler):
    """Undo enable_log_file."""
    global _trace_handler
    _logger.removeHandler(handler)
    # must be closed, otherwise logging will try to close it at exit
    handler.close()
    if _trace_handler is handler:
        _trace_handler = None


def log_exception_quietly():
    """Log the last exception to the log file only."""
    import traceback

    mutter(traceback.format_exc())


def report_exception(exc_info, err_file):
    """Report an exception to err_file (typically stderr) and to the log.

    Conversion errors format themselves into a readable message and are shown
    without a traceback.

    :return: the exit code for this error.
    """
    log_exception_quietly()
    exc_type, exc_object, exc_tb = exc_info
    if isinstance(exc_object, KeyboardInterrupt):
        err_file.write("bzr2gitnotes: interrupted\n")
    else:
        err_file.write("bzr2gitnotes: ERROR: %s\n" % (exc_object,))
    return 1
