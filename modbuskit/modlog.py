"""Levelled console logging with coloured severities and hex dumps."""

from __future__ import annotations

import inspect
import sys
import time
from enum import IntEnum
from typing import TextIO

RED = "\x1b[1;31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[1;33m"
BLUE = "\x1b[34m"
MAGENTA = "\x1b[35m"
CYAN = "\x1b[36m"
NORM = "\x1b[0m"

_START = time.monotonic()


class LogLevel(IntEnum):
    """Severity levels; a message is shown if the logger's level is at least this."""

    NONE = 0
    CRITICAL = 1
    ERROR = 2
    WARNING = 3
    INFO = 4
    DEBUG = 5
    VERBOSE = 6

    @property
    def letter(self) -> str:
        """One-letter tag used in log headers."""
        return self.name[0]


_COLOURS = {LogLevel.CRITICAL: RED, LogLevel.ERROR: YELLOW}


def file_name(path: str) -> str:
    """The part of ``path`` after its last slash or backslash."""
    cut = max(path.rfind("/"), path.rfind("\\"))
    return path[cut + 1:]


def _ascii(byte: int) -> str:
    return chr(byte) if 32 <= byte <= 127 else "."


def hex_dump(letter: str, label: str, data: bytes, address: int = 0) -> str:
    """Render ``data`` as a header line plus lines of 16 bytes in hex and ASCII."""
    payload = bytes(data)
    lines = [f"[{letter}] {label}: @{address:X}/{len(payload) & 0xFFFFFFFF}:\n"]
    for offset in range(0, len(payload), 16):
        chunk = payload[offset:offset + 16]
        hex_part = "".join(f"{b:02X} " for b in chunk[:8])
        if len(chunk) > 8:
            hex_part += " " + "".join(f"{b:02X} " for b in chunk[8:])
        left = f"  | {offset & 0xFFFF:04X}: {hex_part}".ljust(60)
        text = "".join(_ascii(b) for b in chunk).ljust(16)
        lines.append(f"{left}|{text}|\n")
    return "".join(lines)


class ModbusLogger:
    """Writes messages at or below a configurable severity to a text stream."""

    def __init__(self, level: LogLevel = LogLevel.ERROR, stream: TextIO | None = None) -> None:
        self.level = LogLevel(level)
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _enabled(self, level: LogLevel) -> bool:
        return self.level >= level

    @staticmethod
    def _millis() -> int:
        return int((time.monotonic() - _START) * 1000)

    def log(
        self,
        level: LogLevel,
        message: str,
        func: str | None = None,
        line: int | None = None,
        path: str | None = None,
    ) -> None:
        """Write ``message`` with a header naming time, file, line and function.

        Missing location details are taken from the caller.
        """
        level = LogLevel(level)
        if not self._enabled(level):
            return
        if func is None or line is None or path is None:
            frame = inspect.currentframe()
            caller = frame.f_back if frame is not None else None
            if caller is not None:
                func = caller.f_code.co_name if func is None else func
                line = caller.f_lineno if line is None else line
                path = caller.f_code.co_filename if path is None else path
        header = (
            f"[{level.letter}] {self._millis()}| {file_name(path or ''):<20} "
            f"[{line or 0:4d}] {func or ''}: "
        )
        colour = _COLOURS.get(level)
        if colour:
            self.stream.write(f"{colour}{header}{message}{NORM}")
        else:
            self.stream.write(f"{header}{message}")

    def raw(self, level: LogLevel, message: str) -> None:
        """Write ``message`` without a header."""
        level = LogLevel(level)
        if not self._enabled(level):
            return
        colour = _COLOURS.get(level)
        if colour:
            self.stream.write(f"{colour}{message}{NORM}")
        else:
            self.stream.write(message)

    def dump(self, level: LogLevel, label: str, data: bytes) -> None:
        """Write a hex dump of ``data``."""
        level = LogLevel(level)
        if not self._enabled(level):
            return
        self.stream.write(hex_dump(level.letter, label, data, id(data)))