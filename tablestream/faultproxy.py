"""A connection dialer that can inject read and write failures."""

from __future__ import annotations

import socket
import threading
from typing import Optional, Tuple, Union

Address = Union[str, Tuple[str, int]]


def _addr_string(addr: tuple) -> str:
    host, port = addr[0], addr[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _parse_address(address: Address) -> Tuple[str, int]:
    if isinstance(address, tuple):
        return address[0], int(address[1])
    host, _, port = address.rpartition(":")
    return host.strip("[]"), int(port)


class ProxiedConnection:
    """A socket whose reads and writes fail while the proxy says so."""

    def __init__(self, sock: socket.socket, proxy: "FaultInjectingProxy") -> None:
        self._sock = sock
        self._proxy = proxy
        self._key = _addr_string(sock.getsockname())

    @property
    def local_address(self) -> str:
        return self._key

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes, or raise the injected read error."""
        error = self._proxy._read_error()
        if error is not None:
            raise error
        return self._sock.recv(size)

    def write(self, data: bytes) -> int:
        """Write all of ``data``, or raise the injected write error."""
        error = self._proxy._write_error()
        if error is not None:
            raise error
        self._sock.sendall(data)
        return len(data)

    def close(self) -> None:
        try:
            self._sock.close()
        finally:
            self._proxy._remove(self._key)

    def __enter__(self) -> "ProxiedConnection":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class FaultInjectingProxy:
    """Dials connections and tracks them by local address."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._read_err: Optional[BaseException] = None
        self._write_err: Optional[BaseException] = None
        self._conns: dict[str, ProxiedConnection] = {}

    def dial(self, address: Address) -> ProxiedConnection:
        """Connect to ``address`` (``(host, port)`` or ``"host:port"``)."""
        sock = socket.create_connection(_parse_address(address))
        conn = ProxiedConnection(sock, self)
        with self._lock:
            self._conns[conn.local_address] = conn
        return conn

    def _remove(self, key: str) -> None:
        with self._lock:
            self._conns.pop(key, None)

    def _read_error(self) -> Optional[BaseException]:
        with self._lock:
            return self._read_err

    def _write_error(self) -> Optional[BaseException]:
        with self._lock:
            return self._write_err

    def connections(self) -> list[str]:
        """Return the local addresses of the open connections."""
        with self._lock:
            return list(self._conns)

    def set_read_error(self, err: Optional[BaseException]) -> None:
        with self._lock:
            self._read_err = err

    def set_write_error(self, err: Optional[BaseException]) -> None:
        with self._lock:
            self._write_err = err

    def reset_errors(self) -> None:
        with self._lock:
            self._read_err = None
            self._write_err = None

    def __str__(self) -> str:
        return "Fault Injecting Proxy (FIP)"