"""A transport that writes to several UDP transports at once."""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from tallymetrics.thriftudp.transport import (
    TransportError,
    TransportErrorType,
    UDPTransport,
)


class _Transport(Protocol):
    def open(self) -> None: ...

    def is_open(self) -> bool: ...

    def close(self) -> None: ...

    def write(self, data: bytes) -> int: ...

    def flush(self) -> None: ...


class MultiUDPTransport:
    """Forwards writes, flushes, opens and closes to every underlying transport."""

    def __init__(self, transports: Iterable[_Transport] = ()) -> None:
        self.transports: list[_Transport] = list(transports)

    @classmethod
    def client(
        cls, dest_host_ports: Sequence[str], loc_host_port: str = ""
    ) -> MultiUDPTransport:
        """Create one client transport per destination address."""
        transports: list[UDPTransport] = []
        try:
            for dest in dest_host_ports:
                transports.append(UDPTransport.client(dest, loc_host_port))
        except TransportError:
            for trans in transports:
                trans.close()
            raise
        return cls(transports)

    def __enter__(self) -> MultiUDPTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def open(self) -> None:
        for trans in self.transports:
            trans.open()

    def is_open(self) -> bool:
        return all(trans.is_open() for trans in self.transports)

    def close(self) -> None:
        for trans in self.transports:
            trans.close()

    def read(self, size: int) -> bytes:
        """Reading is not supported across several transports."""
        raise TransportError("not supported", TransportErrorType.UNKNOWN)

    def remaining_bytes(self) -> int:
        """Reading is not supported, so nothing ever remains."""
        return 0

    def write(self, data: bytes) -> int:
        """Write data to every transport; return the largest count written."""
        written = 0
        for trans in self.transports:
            written = max(written, trans.write(data))
        return written

    def flush(self) -> None:
        for trans in self.transports:
            trans.flush()