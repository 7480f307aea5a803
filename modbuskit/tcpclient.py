"""A plain TCP stream client with a byte-oriented, non-blocking-friendly API."""

from __future__ import annotations

import socket
import time
from types import TracebackType

from modbuskit.ipv4 import NIL_ADDR, IPAddress
from modbuskit.modlog import LogLevel, ModbusLogger

_log = ModbusLogger()

_DRAIN_SECONDS = 2.0
_PEEK_LIMIT = 256


def hostname_to_ip(hostname: str) -> IPAddress:
    """Resolve ``hostname`` to its first non-zero IPv4 address, or 0.0.0.0."""
    _log.log(LogLevel.DEBUG, f"Looking for '{hostname}'\n")
    try:
        infos = socket.getaddrinfo(hostname, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except (OSError, UnicodeError) as exc:
        _log.log(LogLevel.ERROR, f"getaddrinfo: {exc}\n")
        return IPAddress(NIL_ADDR)
    for family, _type, _proto, _name, sockaddr in infos:
        if family != socket.AF_INET:
            continue
        address = IPAddress(sockaddr[0])
        if address != NIL_ADDR:
            _log.log(LogLevel.DEBUG, f"Host '{hostname}'={address}\n")
            return address
    _log.log(LogLevel.DEBUG, f"No IP for '{hostname}' found\n")
    return IPAddress(NIL_ADDR)


class TcpClient:
    """A TCP connection to one host, with peeking and non-blocking availability checks."""

    def __init__(self, host: IPAddress | str | None = None, port: int = 0) -> None:
        self._sock: socket.socket | None = None
        self.host = IPAddress(NIL_ADDR)
        self.port = 0
        self.no_delay = False
        if host is not None:
            self.connect(host, port)

    # ----------------------------------------------------------- connection

    def connect(self, host: IPAddress | str, port: int) -> None:
        """Connect to ``host`` (address, dotted string or host name) and ``port``.

        Any existing connection is closed first. Raises OSError on failure.
        """
        if isinstance(host, IPAddress):
            address = IPAddress(host)
        else:
            address = hostname_to_ip(host)
            if address == NIL_ADDR:
                _log.log(LogLevel.ERROR, f"No such host '{host}'\n")
                raise OSError(f"no such host {host!r}")

        if self._sock is not None:
            self.disconnect()

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            if self.no_delay:
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            sock.connect((str(address), port))
        except OSError as exc:
            sock.close()
            _log.log(LogLevel.ERROR, f"Error connecting to {address}:{port} - {exc}\n")
            raise
        _log.log(LogLevel.DEBUG, "Connected.\n")
        self._sock = sock
        self.host = address
        self.port = port

    def disconnect(self) -> bool:
        """Drain pending input for at most two seconds, then close the socket."""
        sock = self._sock
        if sock is not None:
            deadline = time.monotonic() + _DRAIN_SECONDS
            sock.setblocking(False)
            while time.monotonic() < deadline:
                try:
                    chunk = sock.recv(_PEEK_LIMIT)
                except OSError:
                    break
                if not chunk:
                    break
                _log.dump(LogLevel.DEBUG, "Read", chunk)
            sock.close()
            self._sock = None
        self.host = IPAddress(NIL_ADDR)
        self.port = 0
        return True

    def stop(self) -> None:
        """Close the connection if there is one."""
        if self._sock is not None:
            self.disconnect()

    def set_no_delay(self, enabled: bool) -> None:
        """Switch the Nagle algorithm off (True) or on; kept for later connections."""
        self.no_delay = bool(enabled)
        if self._sock is not None:
            self._sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, int(self.no_delay))

    def connected(self) -> bool:
        """Whether the peer is still connected, checked without blocking."""
        if self._sock is None:
            return False
        try:
            data = self._peek(1)
        except (BlockingIOError, InterruptedError, TimeoutError):
            return True
        except OSError:
            return False
        return len(data) != 0

    def __bool__(self) -> bool:
        return self.connected()

    def __enter__(self) -> TcpClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    # ------------------------------------------------------------------ I/O

    def _peek(self, size: int) -> bytes:
        sock = self._sock
        if sock is None:
            raise OSError("not connected")
        timeout = sock.gettimeout()
        sock.setblocking(False)
        try:
            return sock.recv(size, socket.MSG_PEEK)
        finally:
            sock.settimeout(timeout)

    def write(self, data: bytes | bytearray | int) -> int:
        """Send a byte value or a block of bytes; return the number of bytes sent."""
        payload = bytes([data & 0xFF]) if isinstance(data, int) else bytes(data)
        if self._sock is None:
            raise OSError("not connected")
        try:
            sent = self._sock.send(payload)
        except OSError as exc:
            _log.log(LogLevel.ERROR, f"Error sending: {exc}\n")
            raise
        _log.log(LogLevel.DEBUG, f"send buffer[{len(payload)}] -> {sent}\n")
        return sent

    def available(self) -> int:
        """Number of bytes waiting to be read, at most 256."""
        try:
            return len(self._peek(_PEEK_LIMIT))
        except OSError:
            return 0

    def read(self, size: int = 1) -> bytes:
        """Read up to ``size`` bytes; empty bytes on end of stream or error."""
        if self._sock is None:
            return b""
        try:
            return self._sock.recv(size)
        except OSError:
            return b""

    def peek(self) -> int | None:
        """The next byte without consuming it, or None if nothing is waiting."""
        try:
            data = self._peek(1)
        except OSError:
            return None
        return data[0] if data else None

    def flush(self) -> None:
        """Nothing is buffered on this side; present for stream compatibility."""