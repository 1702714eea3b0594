"""A UDP-backed transport that sends all buffered writes as one datagram."""

from __future__ import annotations

import errno
import socket
import threading
from enum import IntEnum
from typing import Any

MAX_LENGTH = 65000
"""Largest payload, in bytes, that one flushed packet may carry."""

_MAX_REMAINING = 2**64 - 1


class TransportErrorType(IntEnum):
    """Kinds of transport failure."""

    UNKNOWN = 0
    NOT_OPEN = 1
    ALREADY_OPEN = 2
    TIMED_OUT = 3
    END_OF_FILE = 4
    INVALID_DATA = 5
    PROTOCOL_ERROR = 6


class TransportError(Exception):
    """Raised when a transport operation fails."""

    def __init__(
        self, message: str, kind: TransportErrorType = TransportErrorType.UNKNOWN
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind


def _split_host_port(host_port: str) -> tuple[str, int]:
    if host_port.startswith("["):
        close = host_port.find("]")
        if close < 0:
            raise TransportError(
                f"address {host_port}: missing ']' in address",
                TransportErrorType.NOT_OPEN,
            )
        host = host_port[1:close]
        rest = host_port[close + 1 :]
        if not rest.startswith(":"):
            raise TransportError(
                f"address {host_port}: missing port in address",
                TransportErrorType.NOT_OPEN,
            )
        port_text = rest[1:]
    else:
        host, sep, port_text = host_port.rpartition(":")
        if not sep:
            raise TransportError(
                f"address {host_port}: missing port in address",
                TransportErrorType.NOT_OPEN,
            )
        if ":" in host:
            raise TransportError(
                f"address {host_port}: too many colons in address",
                TransportErrorType.NOT_OPEN,
            )
    if port_text == "":
        return host, 0
    if port_text.isdigit():
        port = int(port_text)
        if port > 65535:
            raise TransportError(
                f"address {host_port}: invalid port", TransportErrorType.NOT_OPEN
            )
        return host, port
    try:
        return host, socket.getservbyname(port_text, "udp")
    except OSError:
        raise TransportError(
            f"address {host_port}: unknown port", TransportErrorType.NOT_OPEN
        ) from None


def _resolve(host_port: str, passive: bool) -> tuple[int, Any]:
    host, port = _split_host_port(host_port)
    flags = socket.AI_PASSIVE if passive else 0
    try:
        infos = socket.getaddrinfo(host or None, port, 0, socket.SOCK_DGRAM, 0, flags)
    except OSError as exc:
        raise TransportError(str(exc), TransportErrorType.NOT_OPEN) from exc
    if not infos:
        raise TransportError(
            f"address {host_port}: no suitable address", TransportErrorType.NOT_OPEN
        )
    chosen = next((info for info in infos if info[0] == socket.AF_INET), infos[0])
    return chosen[0], chosen[4]


def _format_addr(sockaddr: Any) -> str:
    host, port = sockaddr[0], sockaddr[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _wrap_os_error(exc: OSError) -> TransportError:
    if isinstance(exc, TimeoutError):
        return TransportError(str(exc), TransportErrorType.TIMED_OUT)
    return TransportError(str(exc), TransportErrorType.UNKNOWN)


class UDPTransport:
    """Transport over a UDP socket; writes are buffered and flushed as one packet."""

    def __init__(self, sock: socket.socket, addr: Any) -> None:
        self._sock = sock
        self._addr = addr
        self._write_buf = bytearray()
        self._closed = False
        self._lock = threading.Lock()

    @classmethod
    def client(cls, dest_host_port: str, loc_host_port: str = "") -> UDPTransport:
        """Connect a transport to dest_host_port, optionally bound to loc_host_port."""
        family, dest_addr = _resolve(dest_host_port, passive=False)
        local_addr = _resolve(loc_host_port, passive=True)[1] if loc_host_port else None
        sock = socket.socket(family, socket.SOCK_DGRAM)
        try:
            if local_addr is not None:
                sock.bind(local_addr)
            sock.connect(dest_addr)
        except OSError as exc:
            sock.close()
            raise TransportError(str(exc), TransportErrorType.NOT_OPEN) from exc
        return cls(sock, dest_addr)

    @classmethod
    def server(cls, host_port: str) -> UDPTransport:
        """Create a transport listening for packets on host_port."""
        family, bind_addr = _resolve(host_port, passive=True)
        sock = socket.socket(family, socket.SOCK_DGRAM)
        try:
            sock.bind(bind_addr)
            local = sock.getsockname()
        except OSError as exc:
            sock.close()
            raise TransportError(str(exc), TransportErrorType.NOT_OPEN) from exc
        return cls(sock, local)

    def __enter__(self) -> UDPTransport:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def conn(self) -> socket.socket:
        """The underlying socket."""
        return self._sock

    @property
    def addr(self) -> str:
        """The address listened on or written to, as host:port."""
        return _format_addr(self._addr)

    @property
    def buffered(self) -> int:
        """Number of bytes waiting to be flushed."""
        return len(self._write_buf)

    def open(self) -> None:
        """Check the transport is usable; the socket itself is opened on creation."""
        self._ensure_open()

    def is_open(self) -> bool:
        with self._lock:
            return not self._closed

    def close(self) -> None:
        """Close the socket; closing an already closed transport is a no-op."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._sock.fileno() == -1:
            raise OSError(errno.EBADF, "use of closed network connection")
        self._sock.close()

    def _ensure_open(self) -> None:
        if not self.is_open():
            raise TransportError("Connection not open", TransportErrorType.NOT_OPEN)

    def _ensure_room(self, size: int) -> None:
        if len(self._write_buf) + size > MAX_LENGTH:
            raise TransportError(
                "Data does not fit within one UDP packet",
                TransportErrorType.INVALID_DATA,
            )

    def read(self, size: int) -> bytes:
        """Read one packet, returning at most size bytes of it."""
        self._ensure_open()
        try:
            return self._sock.recv(size)
        except OSError as exc:
            raise _wrap_os_error(exc) from exc

    def read_byte(self) -> int:
        """Read one packet and return its first byte."""
        data = self.read(1)
        if not data:
            raise TransportError(
                "Received empty packet", TransportErrorType.PROTOCOL_ERROR
            )
        return data[0]

    def remaining_bytes(self) -> int:
        """The amount left is unknown, so report the largest unsigned 64-bit value."""
        return _MAX_REMAINING

    def write(self, data: bytes) -> int:
        """Append data to the write buffer and return its length."""
        self._ensure_open()
        self._ensure_room(len(data))
        self._write_buf.extend(data)
        return len(data)

    def write_byte(self, value: int) -> None:
        """Append a single byte to the write buffer."""
        self._ensure_open()
        self._ensure_room(1)
        self._write_buf.append(value)

    def write_string(self, text: str) -> int:
        """Append text, UTF-8 encoded, and return the number of bytes written."""
        return self.write(text.encode("utf-8"))

    def flush(self) -> None:
        """Send the write buffer as one packet; the buffer is cleared even on error."""
        self._ensure_open()
        try:
            self._sock.send(bytes(self._write_buf))
        finally:
            self._write_buf.clear()