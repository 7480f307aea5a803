"""A small mutable IPv4 address type."""

from __future__ import annotations

from collections.abc import Iterator


def parse_dotted(text: str) -> tuple[int, int, int, int]:
    """Parse ``"a.b.c.d"`` into four octets.

    Missing trailing groups are 0 and each group is taken modulo 256.
    More than four groups or any character other than digits and dots
    gives ``(0, 0, 0, 0)``.
    """
    octets = [0, 0, 0, 0]
    index = 0
    value = 0
    for ch in text + "\0":
        if ch in ".\0":
            octets[index] = value
            index += 1
            value = 0
            if ch == "\0":
                break
            if index == 4:
                return (0, 0, 0, 0)
        elif "0" <= ch <= "9":
            value = (value * 10 + ord(ch) - ord("0")) & 0xFF
        else:
            return (0, 0, 0, 0)
    return (octets[0], octets[1], octets[2], octets[3])


def _check_octet(value: int) -> int:
    if not 0 <= value <= 255:
        raise ValueError(f"octet {value} outside 0..255")
    return value


class IPAddress:
    """An IPv4 address, built from an integer, a dotted string or another address."""

    def __init__(self, value: int | str | IPAddress = 0) -> None:
        if isinstance(value, IPAddress):
            self._octets = bytearray(value._octets)
        elif isinstance(value, str):
            self._octets = bytearray(parse_dotted(value))
        elif isinstance(value, int):
            self._octets = bytearray((value & 0xFFFFFFFF).to_bytes(4, "big"))
        else:
            raise TypeError(f"cannot make an IPAddress from {type(value).__name__}")

    @classmethod
    def from_octets(cls, b0: int, b1: int, b2: int, b3: int) -> IPAddress:
        """Build an address from its four octets, most significant first."""
        address = cls()
        address._octets = bytearray(_check_octet(b) for b in (b0, b1, b2, b3))
        return address

    def __int__(self) -> int:
        return int.from_bytes(self._octets, "big")

    def __getitem__(self, index: int) -> int:
        """Octet 0..3; any other index reads as 0."""
        if 0 <= index <= 3:
            return self._octets[index]
        return 0

    def __setitem__(self, index: int, value: int) -> None:
        """Change octet 0..3; writes to any other index are discarded."""
        _check_octet(value)
        if 0 <= index <= 3:
            self._octets[index] = value

    def __iter__(self) -> Iterator[int]:
        return iter(bytes(self._octets))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IPAddress):
            return self._octets == other._octets
        if isinstance(other, (int, str)):
            return self._octets == IPAddress(other)._octets
        return NotImplemented

    def __hash__(self) -> int:
        return hash(bytes(self._octets))

    def __str__(self) -> str:
        return ".".join(str(b) for b in self._octets)

    def __repr__(self) -> str:
        return f"IPAddress({str(self)!r})"


NIL_ADDR = IPAddress(0)
"""The unset address 0.0.0.0."""