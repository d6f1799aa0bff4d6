"""Transport interface.

This is the (small) contract a byte-stream transport must follow so that the
demultiplexer can pull whole frames from it. It lives outside
:mod:`i3mux.protocol` so the codec stays independent of any socket API.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Tuple


class Transport(ABC):
    """Minimal contract for a frame-level transport."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket. Must be idempotent."""

    @abstractmethod
    def read_frame(self) -> Tuple[int, bytes]:
        """Block until one complete frame arrives; return (kind, payload)."""

    @abstractmethod
    def write_frame(self, kind: int, payload: bytes = b"") -> None:
        """Send one complete frame."""

    @abstractmethod
    def fileno(self) -> int:
        """File descriptor to poll for readability."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False
