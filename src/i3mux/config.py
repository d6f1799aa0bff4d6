""" Locate the i3 IPC socket and hold the handful of protocol parameters
    that vary between i3 releases and platforms.
"""

import logging
import os
import subprocess
import sys

from .errors import NoIpcSocket


logger = logging.getLogger(__name__)

default_tick_event = 7


def socket_path(default=None):
    """ Return the filesystem path of the i3 IPC socket. An explicit
        *default* always wins; otherwise the ``I3SOCK`` environment variable
        is consulted, and failing that the running i3 is asked directly via
        ``i3 --get-socketpath``. The answer from i3 itself is cached, the
        environment variable is not, so that a changed ``I3SOCK`` is
        honored on the next call.

        :class:`i3mux.errors.NoIpcSocket` is raised if no path can be found.
    """

    if default is not None:
        return os.fspath(default)

    try:
        found = os.environ['I3SOCK']
    except KeyError:
        pass
    else:
        if found:
            return found

    found = socket_path.found

    if found is not None:
        return found

    arguments = ('i3', '--get-socketpath')

    try:
        result = subprocess.run(arguments, capture_output=True, check=True, timeout=5)
    except (OSError, subprocess.SubprocessError) as e:
        raise NoIpcSocket('cannot determine the i3 IPC socket path: ' + str(e)) from e

    found = result.stdout.decode().strip()

    if found == '':
        raise NoIpcSocket('i3 --get-socketpath returned an empty path')

    logger.debug('i3 reports its IPC socket at %s', found)
    socket_path.found = found
    return found

socket_path.found = None



def tick_event():
    """ Return the event subtype used for tick events. The tick event was
        added to the protocol after the others, and the numeric value should
        be confirmed against the target server; it can be overridden with
        the ``I3MUX_TICK_EVENT`` environment variable.
    """

    try:
        value = os.environ['I3MUX_TICK_EVENT']
    except KeyError:
        return default_tick_event

    try:
        value = int(value, 0)
    except ValueError:
        raise ValueError('I3MUX_TICK_EVENT must be an integer, not ' + repr(value))

    if value < 0 or value > 0x7FFFFFFF:
        raise ValueError('I3MUX_TICK_EVENT out of range: ' + str(value))

    return value



def byteorder():
    """ Return the byte order used for frame headers. i3 uses the native
        byte order of the host it runs on; ``I3MUX_BYTEORDER`` may be set to
        'little' or 'big' to talk to a server with a different order, for
        example through a forwarded socket.
    """

    value = os.environ.get('I3MUX_BYTEORDER')

    if value is None or value == '':
        return sys.byteorder

    value = value.strip().lower()

    if value in ('little', 'big'):
        return value

    raise ValueError("I3MUX_BYTEORDER must be 'little' or 'big', not " + repr(value))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
