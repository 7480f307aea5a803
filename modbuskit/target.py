"""Parsing of ``host[:port[:serverID]]`` target descriptors."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from modbuskit.ipv4 import NIL_ADDR, IPAddress
from modbuskit.tcpclient import hostname_to_ip

DEFAULT_PORT = 502
DEFAULT_SERVER_ID = 1

_IP_RE = re.compile(
    r"((\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3}))(:(\d{1,5})(:(\d{1,3}))?)?", re.ASCII
)
_HOST_RE = re.compile(
    r"(([a-zA-Z0-9][a-zA-Z0-9\-]*)(\.[a-zA-Z0-9][a-zA-Z0-9\-]*)*)(:(\d{1,5})(:(\d{1,3}))?)?",
    re.ASCII,
)


class TargetError(ValueError):
    """A target descriptor could not be used.

    ``code`` is -1 for an unknown host, -2 for a bad port, -3 for a bad server ID.
    """

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass
class Target:
    """Address, port and Modbus server ID of a TCP server."""

    ip: IPAddress = field(default_factory=lambda: IPAddress(NIL_ADDR))
    port: int = DEFAULT_PORT
    server_id: int = DEFAULT_SERVER_ID


def parse_target(
    source: str, resolver: Callable[[str], IPAddress] = hostname_to_ip
) -> Target:
    """Parse ``IP[:port[:serverID]]`` or ``hostname[:port[:serverID]]``.

    Host names are turned into addresses by ``resolver``. Raises TargetError.
    """
    port_text = ""
    sid_text = ""
    match = _IP_RE.fullmatch(source)
    is_ip = match is not None and all(
        0 < int(match.group(i)) <= 255 for i in range(2, 6)
    )

    if is_ip:
        assert match is not None
        ip = IPAddress(match.group(1))
        port_text = match.group(7) or ""
        sid_text = match.group(9) or ""
    else:
        match = _HOST_RE.fullmatch(source)
        if match is None:
            raise TargetError(-1, f"invalid target descriptor {source!r}")
        ip = IPAddress(resolver(match.group(1)))
        if ip == NIL_ADDR:
            raise TargetError(-1, f"no address found for {match.group(1)!r}")
        port_text = match.group(5) or ""
        sid_text = match.group(7) or ""

    target = Target(ip=ip)
    if port_text:
        port = int(port_text)
        if not 0 < port < 65536:
            raise TargetError(-2, f"invalid port {port}")
        target.port = port
        if sid_text:
            server_id = int(sid_text)
            if not 0 < server_id < 248:
                raise TargetError(-3, f"invalid server ID {server_id}")
            target.server_id = server_id
    return target