"""Single-owner connection to a running i3.

:class:`Connection` owns the socket and the demultiplexer that separates
replies from events. It is deliberately not thread-safe: one thread drives
it, and because i3 replies carry no request identifier, at most one request
may be outstanding at a time. :class:`i3mux.Client` wraps a connection for
use from multiple threads.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from . import config
from . import event
from .demux import Demultiplexer
from .errors import BadMagic, BadReply, ConnectionClosed, UnexpectedEof, UnknownType
from .protocol.request import Requests
from .transport import Transport, UnixTransport


logger = logging.getLogger(__name__)

# Errors after which the byte offset of the next frame is unknown.
FATAL = (BadMagic, UnexpectedEof, OSError)


class Connection(Requests):
    """A connection to the i3 IPC socket.

    Parameters:
        transport: A connected :class:`i3mux.transport.Transport`.
            :func:`connect` is the usual way to build a connection.
        tick_kind: Event subtype of tick events; defaults to
            :func:`i3mux.config.tick_event`.
    """

    def __init__(self, transport: Transport, tick_kind: Optional[int] = None) -> None:
        self.transport: Optional[Transport] = transport
        self.demux = Demultiplexer(transport)
        self.tick_kind = config.tick_event() if tick_kind is None else tick_kind
        self.failure: Optional[BaseException] = None

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *exc_info) -> None:
        self.disconnect()

    @property
    def closed(self) -> bool:
        return self.transport is None

    def _live(self) -> Transport:
        if self.transport is None:
            if self.failure is not None:
                raise ConnectionClosed(f"connection failed earlier: {self.failure}")
            raise ConnectionClosed("connection is closed")
        return self.transport

    def _fail(self, error: BaseException) -> None:
        logger.debug("connection failed, closing: %s", error)
        self.failure = error
        self.disconnect()

    def fileno(self) -> int:
        return self._live().fileno()

    def pump(self) -> None:
        """Read one frame into the demultiplexer's buffers."""
        self._live()
        try:
            self.demux.pump()
        except FATAL as e:
            self._fail(e)
            raise

    def write(self, kind: int, payload: bytes = b"") -> None:
        transport = self._live()
        try:
            transport.write_frame(kind, payload)
        except FATAL as e:
            self._fail(e)
            raise

    def call(self, kind: int, payload: bytes = b"", accept: Optional[Callable[[bytes], bool]] = None) -> bytes:
        """Send one request and block until the reply of the same kind.

        Events that arrive in the meantime are kept for :meth:`next_event`.
        There is no timeout.

        Parameters:
            kind: The request kind, see :mod:`i3mux.protocol.fields`.
            payload: The raw request payload.
            accept: Optional predicate on the raw reply payload; replies
                for which it returns False are left buffered.

        Returns:
            The raw reply payload.
        """
        self.write(kind, payload)

        try:
            return self.demux.next_reply(kind, accept)
        except FATAL as e:
            self._fail(e)
            raise

    def next_raw_event(self):
        """Return the next buffered (subtype, payload) event, blocking for one."""
        self._live()
        try:
            return self.demux.next_event()
        except FATAL as e:
            self._fail(e)
            raise

    def next_event(self) -> event.Event:
        """Block until the next event and return it decoded.

        Raises:
            UnknownType: The event subtype has no decoder. The event is
                consumed and the connection stays usable.
            BadReply: The event payload did not decode. Likewise consumed.
        """
        kind, payload = self.next_raw_event()
        return event.decode(kind, payload, self.tick_kind)

    def events(self) -> Iterable[event.Event]:
        """Yield decoded events until the connection closes.

        Events that fail to decode are logged and skipped, so one bad
        event does not end the iteration. Use :meth:`next_event` to see
        those errors.
        """
        while not self.closed:
            try:
                decoded = self.next_event()
            except (BadReply, UnknownType) as e:
                logger.warning("skipping undecodable event: %s", e)
                continue
            yield decoded

    def disconnect(self) -> None:
        """Close the socket. Safe to call repeatedly and after failures."""
        transport = self.transport
        self.transport = None
        if transport is not None:
            transport.close()
        self.demux.clear()


def connect(path: Optional[str] = None, byteorder: Optional[str] = None, tick_kind: Optional[int] = None) -> Connection:
    """Connect to i3 and return a :class:`Connection`.

    The socket is located with :func:`i3mux.config.socket_path` unless
    *path* is given.

    Raises:
        NoIpcSocket: The socket could not be located or connected.
    """
    path = config.socket_path(path)
    byteorder = byteorder or config.byteorder()
    transport = UnixTransport.connect(path, byteorder)
    return Connection(transport, tick_kind)
