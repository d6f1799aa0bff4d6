""" Python implementation of the i3 window manager IPC protocol. This covers
    the client side only: issuing commands and queries over the i3 socket,
    and receiving the events a client subscribes to, interleaved on the same
    connection.
"""

# Utility components.

from . import json
from . import callbacks
from . import config
from . import errors

# Submodules used by multiple other components.

from . import protocol
from . import transport
from . import reply
from . import event
from . import demux

# Primary public-facing interfaces.

from .errors import (
    BadMagic,
    BadReply,
    ConnectionClosed,
    NoIpcSocket,
    ProtocolError,
    UnexpectedEof,
    UnknownType,
)
from .connection import Connection, connect
from .client import Client, client

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
