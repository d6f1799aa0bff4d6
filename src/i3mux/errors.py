""" Exceptions raised by i3mux.

All i3mux-specific exceptions inherit from :class:`ProtocolError` so that
callers can catch a single base class when they do not care about the
specific failure mode. :class:`BadMagic` and :class:`UnexpectedEof` leave the
stream at an unknown offset; the :class:`i3mux.Connection` that raised them
is closed and cannot be used again. :class:`BadReply` and
:class:`UnknownType` only concern the message being decoded.
"""


class ProtocolError(Exception):
    """Base class for all i3mux errors."""


class NoIpcSocket(ProtocolError):
    """The i3 IPC socket could not be located or connected to."""


class BadMagic(ProtocolError):
    """A frame header did not begin with the ``i3-ipc`` marker."""

    def __init__(self, got):
        self.got = got
        ProtocolError.__init__(self, 'bad magic string: %r' % (got,))


class UnexpectedEof(ProtocolError):
    """The peer closed the connection in the middle of a frame."""


class UnknownType(ProtocolError):
    """An event frame carried a subtype with no known decoder."""

    def __init__(self, kind):
        self.kind = kind
        ProtocolError.__init__(self, 'unknown event type: %d' % (kind,))


class BadReply(ProtocolError):
    """A payload did not match the shape expected for its message kind."""

    def __init__(self, detail):
        self.detail = detail
        ProtocolError.__init__(self, detail)


class ConnectionClosed(ProtocolError):
    """The connection was disconnected, or failed, and cannot be reused."""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
