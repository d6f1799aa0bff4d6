"""Unix domain stream socket transport.

Reads and writes are blocking; a read that finds no data waits in ``recv``
until the peer sends more, so none of the loops here spin.
"""

from __future__ import annotations

import logging
import socket
import sys
from typing import Optional, Tuple

from ..errors import BadMagic, NoIpcSocket, UnexpectedEof
from ..protocol import fields, message
from .base import Transport


logger = logging.getLogger(__name__)

_MAGIC_SIZE = len(fields.MAGIC)


class UnixTransport(Transport):
    """Frame-level I/O over a connected ``AF_UNIX`` stream socket.

    Parameters:
        sock: An already connected stream socket. :meth:`connect` is the
            usual way to obtain one.
        byteorder: 'little' or 'big'; the host order when omitted.
    """

    chunk_size = 65536

    def __init__(self, sock: socket.socket, byteorder: Optional[str] = None) -> None:
        self.sock: Optional[socket.socket] = sock
        self.byteorder = byteorder or sys.byteorder

    @classmethod
    def connect(cls, path: str, byteorder: Optional[str] = None) -> "UnixTransport":
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(path)
        except OSError as e:
            sock.close()
            raise NoIpcSocket(f"cannot connect to i3 at {path}: {e}") from e

        logger.debug("connected to %s", path)
        return cls(sock, byteorder)

    @property
    def is_open(self) -> bool:
        return self.sock is not None

    def fileno(self) -> int:
        return self._socket().fileno()

    def _socket(self) -> socket.socket:
        if self.sock is None:
            raise OSError("transport is closed")
        return self.sock

    def read_exact(self, n: int) -> bytes:
        """Read exactly *n* bytes, retrying short reads.

        Raises:
            UnexpectedEof: If the peer closes before *n* bytes arrive.
        """
        sock = self._socket()
        buffer = bytearray()

        # The buffer grows with the data actually received, not with the
        # declared length.
        while len(buffer) < n:
            chunk = sock.recv(min(n - len(buffer), self.chunk_size))
            if not chunk:
                raise UnexpectedEof(f"connection closed after {len(buffer)} of {n} bytes")
            buffer += chunk

        return bytes(buffer)

    def write_exact(self, data: bytes) -> None:
        """Write all of *data*, retrying short writes."""
        sock = self._socket()
        view = memoryview(data)
        offset = 0

        while offset < len(data):
            offset += sock.send(view[offset:])

    def read_frame(self) -> Tuple[int, bytes]:
        # The marker is read and checked on its own, so that a desynchronised
        # stream gives up after six bytes instead of a full header.
        magic = self.read_exact(_MAGIC_SIZE)
        if magic != fields.MAGIC:
            raise BadMagic(magic)

        rest = self.read_exact(fields.HEADER_SIZE - _MAGIC_SIZE)
        length, kind = message.decode_header(magic + rest, self.byteorder)
        payload = self.read_exact(length) if length else b""

        logger.debug("read frame kind=0x%08x length=%d", kind, length)
        return kind, payload

    def write_frame(self, kind: int, payload: bytes = b"") -> None:
        frame = message.encode(kind, payload, self.byteorder)
        self.write_exact(frame)
        logger.debug("wrote frame kind=%d length=%d", kind, len(frame) - fields.HEADER_SIZE)

    def close(self) -> None:
        """Close the socket. Safe to call multiple times or after a failure."""
        if self.sock is not None:
            try:
                self.sock.close()
            except OSError:
                pass
            self.sock = None
