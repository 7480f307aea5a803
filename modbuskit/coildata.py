"""Packed storage for Modbus coil (single bit) values."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

MAX_COILS = 2000
"""Largest number of coils a single set may hold (Modbus limit)."""


def _pattern_bits(pattern: str) -> Iterator[bool]:
    """Yield the bits of a readable bit image such as ``"1101 _0011"``.

    ``'1'`` and ``'0'`` are bits, ``'_'`` makes the next bit character be
    ignored, and any other character is a separator that cancels a pending
    ``'_'``.
    """
    skip = False
    for ch in pattern:
        if ch in "01":
            if skip:
                skip = False
            else:
                yield ch == "1"
        elif ch == "_":
            skip = True
        else:
            skip = False


class CoilData:
    """A fixed-size set of up to 2000 coils, packed LSB first into bytes."""

    __hash__ = None  # mutable container

    def __init__(self, size: int = 0, init_value: bool = False) -> None:
        if size < 0:
            raise ValueError("coil count must not be negative")
        self._size = 0
        self._buffer = bytearray()
        self._allocate(min(size, MAX_COILS), init_value)

    # ------------------------------------------------------------------ setup

    def _allocate(self, size: int, value: bool) -> None:
        self._size = size
        self._buffer = bytearray(b"\xff" if value else b"\x00") * ((size + 7) // 8)
        self._mask_tail()

    def _mask_tail(self) -> None:
        rest = self._size % 8
        if self._buffer and rest:
            self._buffer[-1] &= (1 << rest) - 1

    def _put(self, index: int, value: bool) -> None:
        mask = 1 << (index & 7)
        if value:
            self._buffer[index >> 3] |= mask
        else:
            self._buffer[index >> 3] &= ~mask & 0xFF

    def _get(self, index: int) -> bool:
        return bool(self._buffer[index >> 3] & (1 << (index & 7)))

    @classmethod
    def from_pattern(cls, pattern: str) -> CoilData:
        """Build a coil set from a bit image; an unusable image gives an empty set."""
        coils = cls()
        try:
            coils.assign_pattern(pattern)
        except ValueError:
            pass
        return coils

    def assign_pattern(self, pattern: str) -> None:
        """Replace all coils by the bits of a bit image.

        The existing coils are discarded first; if the image holds no bits
        or more than 2000, the set is left empty and ValueError is raised.
        """
        bits = list(_pattern_bits(pattern))
        self._allocate(0, False)
        if not bits or len(bits) > MAX_COILS:
            raise ValueError(f"bit image holds {len(bits)} bits, need 1..{MAX_COILS}")
        self._allocate(len(bits), False)
        for index, bit in enumerate(bits):
            if bit:
                self._put(index, True)

    # ------------------------------------------------------------- protocol

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __getitem__(self, index: int) -> bool:
        """Value of one coil; indexes outside the set read as False."""
        if 0 <= index < self._size:
            return self._get(index)
        return False

    def __iter__(self) -> Iterator[bool]:
        return (self._get(i) for i in range(self._size))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CoilData):
            return self._size == other._size and self._buffer == other._buffer
        if isinstance(other, str):
            for index, bit in enumerate(_pattern_bits(other)):
                if index >= self._size or self._get(index) != bit:
                    return False
            return True
        return NotImplemented

    def __bytes__(self) -> bytes:
        return bytes(self._buffer)

    def __copy__(self) -> CoilData:
        twin = CoilData()
        twin._size = self._size
        twin._buffer = bytearray(self._buffer)
        return twin

    def __repr__(self) -> str:
        bits = "".join("1" if b else "0" for b in self)
        return f"CoilData({bits!r})"

    # ------------------------------------------------------------ accessors

    def coils(self) -> int:
        """Number of coils in the set."""
        return self._size

    def byte_size(self) -> int:
        """Number of bytes the packed coils occupy."""
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """The packed coils, first coil in the lowest bit of the first byte."""
        return bytes(self._buffer)

    def slice(self, start: int = 0, length: int = 0) -> CoilData:
        """Return a new set of ``length`` coils from ``start``, shifted to index 0.

        A length of 0 means all coils up to the end. Parameters that do not
        fit the set give an empty result.
        """
        result = CoilData()
        if self._size == 0 or start < 0 or start > self._size:
            return result
        if length == 0:
            length = self._size - start
        if length < 0 or start + length > self._size:
            return result
        result = CoilData(length)
        for offset in range(length):
            if self._get(start + offset):
                result._put(offset, True)
        return result

    # -------------------------------------------------------------- setters

    def set(self, index: int, value: bool) -> None:
        """Set a single coil; raises IndexError outside the set."""
        if not 0 <= index < self._size:
            raise IndexError(f"coil {index} outside 0..{self._size - 1}")
        self._put(index, bool(value))

    def set_bits(self, start: int, length: int, data: Iterable[int]) -> None:
        """Overwrite ``length`` coils from ``start`` with packed bits from ``data``."""
        packed = bytes(data)
        if length <= 0:
            raise ValueError("length must be positive")
        if len(packed) < (length - 1) // 8 + 1:
            raise ValueError(f"{len(packed)} bytes cannot hold {length} bits")
        if start < 0 or start + length > self._size:
            raise IndexError(f"coils {start}..{start + length - 1} outside the set")
        for offset in range(length):
            self._put(start + offset, bool(packed[offset >> 3] & (1 << (offset & 7))))

    def set_coils(self, index: int, other: CoilData) -> None:
        """Copy the coils of ``other`` in from ``index`` until either set ends."""
        if not other:
            raise ValueError("source coil set is empty")
        if self._size == 0 or not 0 <= index < self._size:
            raise IndexError(f"coil {index} outside the set")
        for offset, bit in zip(range(index, self._size), other):
            self._put(offset, bit)

    def set_pattern(self, index: int, pattern: str) -> None:
        """Overwrite coils from ``index`` with a bit image until either ends."""
        if self._size == 0 or not 0 <= index < self._size:
            raise IndexError(f"coil {index} outside the set")
        for offset, bit in zip(range(index, self._size), _pattern_bits(pattern)):
            self._put(offset, bit)

    def init(self, value: bool = False) -> None:
        """Set every coil to ``value``."""
        fill = 0xFF if value else 0x00
        for i in range(len(self._buffer)):
            self._buffer[i] = fill
        self._mask_tail()

    # ---------------------------------------------------------- statistics

    def coils_set_on(self) -> int:
        """Number of coils that are 1."""
        return sum(bin(b).count("1") for b in self._buffer)

    def coils_set_off(self) -> int:
        """Number of coils that are 0."""
        return self._size - self.coils_set_on()

    def format(self, label: str = "") -> str:
        """Readable dump: label, then bits in groups of four, ending in a newline.

        Lines are broken after a group once 80 columns are reached and the
        continuation is indented by the label's width.
        """
        parts = [label]
        label_len = len(label)
        pos = label_len
        for i, bit in enumerate(self):
            parts.append("1" if bit else "0")
            pos += 1
            if i % 4 == 3:
                if pos >= 80:
                    parts.append("\n" + " " * label_len)
                    pos = label_len + 1
                else:
                    parts.append(" ")
                    pos += 1
        parts.append("\n")
        return "".join(parts)