"""Modbus building blocks: coil storage, logging, IPv4 addresses, TCP client and target parsing."""

__version__ = "0.1.0"
__all__ = ["coildata", "modlog", "ipv4", "tcpclient", "target"]