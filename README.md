# modbuskit

Building blocks for Modbus tooling in plain Python, with no dependencies
outside the standard library.

## Modules

### `modbuskit.coildata`

`CoilData` holds up to 2000 coils (bits), packed first coil into the lowest
bit of the first byte.

- `CoilData(size=0, init_value=False)` makes a set of `size` coils (capped at
  2000), all 0 or all 1.
- `CoilData.from_pattern("1101_1 0011")` builds a set from a bit image:
  `1` and `0` are bits, `_` makes the next bit character be ignored, any other
  character is a separator. An image with no bits or more than 2000 gives an
  empty set. `assign_pattern()` does the same in place and raises `ValueError`
  for such an image (leaving the set empty).
- `coils[i]` reads a coil (indexes outside the set read as `False`);
  `len()`, `bool()`, iteration, `bytes()` / `to_bytes()`, `coils()` and
  `byte_size()` describe the set.
- A set compares equal to another set with the same coils, or to a bit image
  whose bits all match its leading coils.
- `slice(start=0, length=0)` returns a new set shifted to index 0 (length 0
  means "to the end"; parameters that do not fit give an empty set).
- `set(index, value)` changes one coil and raises `IndexError` outside the set.
  `set_bits(start, length, data)` copies packed bits from bytes,
  `set_coils(index, other)` copies from another set, and
  `set_pattern(index, pattern)` copies from a bit image; the last two stop
  where either side ends.
- `init(value=False)` sets every coil; `coils_set_on()` and `coils_set_off()`
  count them.
- `format(label="")` returns the label followed by the bits in groups of four,
  wrapping after a group once 80 columns are reached.

### `modbuskit.modlog`

- `LogLevel` – `NONE`, `CRITICAL`, `ERROR`, `WARNING`, `INFO`, `DEBUG`,
  `VERBOSE`.
- `ModbusLogger(level=LogLevel.ERROR, stream=None)` writes to `stream`
  (standard output by default) only messages whose level is at or below its
  own. `log()` adds a header with milliseconds since start, file name, line
  and function (taken from the caller when not given); `raw()` writes the
  message alone; `dump()` writes a hex dump. Critical messages are shown in
  red and errors in yellow.
- `hex_dump(letter, label, data, address=0)` returns a header line and then
  lines of 16 bytes in hex and ASCII.
- `file_name(path)` returns the part after the last slash or backslash.

### `modbuskit.ipv4`

- `IPAddress(value=0)` accepts an integer, a dotted string or another
  address; `IPAddress.from_octets(b0, b1, b2, b3)` takes four octets.
  Supports `int()`, `str()`, octet indexing and assignment, iteration,
  hashing, and comparison with addresses, integers and dotted strings.
- `parse_dotted(text)` turns `"a.b.c.d"` into four octets; more than four
  groups or any character other than digits and dots gives `(0, 0, 0, 0)`.
- `NIL_ADDR` is `0.0.0.0`.

### `modbuskit.tcpclient`

- `TcpClient(host=None, port=0)` connects to an `IPAddress` or a host name;
  `connect()` raises `OSError` on failure. It offers `write()`, `read()`,
  `available()` (at most 256), `peek()`, `connected()`, `set_no_delay()`,
  `disconnect()` (drains pending input for up to two seconds, then closes)
  and `stop()`, and works as a context manager.
- `hostname_to_ip(hostname)` returns the first IPv4 address found, or
  `0.0.0.0`.

### `modbuskit.target`

- `parse_target(source, resolver=hostname_to_ip)` parses
  `IP[:port[:serverID]]` or `hostname[:port[:serverID]]` into a `Target`
  (`ip`, `port` defaulting to 502, `server_id` defaulting to 1).
- Bad input raises `TargetError`, whose `code` is -1 for an unknown or
  malformed host, -2 for a bad port and -3 for a server ID outside 1..247.

## What this package does not do

It does not build or decode Modbus request and response messages, and it has
no Modbus client or server, no request queue and no RTU or ASCII serial
transport. The TCP client only moves raw bytes.

## Installation

```
pip install .
```

## Examples

```python
from modbuskit.coildata import CoilData

coils = CoilData.from_pattern("0001 0111 0000 0110")
coils.set(8, True)
print(coils.format("State: "), end="")
print(bytes(coils.slice(3, 6)).hex())
print(coils.coils_set_on(), coils.coils_set_off())
```

```python
from modbuskit.target import parse_target

target = parse_target("192.168.1.10:1502:3")
print(target.ip, target.port, target.server_id)
```

```python
from modbuskit.modlog import hex_dump

print(hex_dump("N", "Request", bytes.fromhex("04030000000c")), end="")
```

## Tests

```
pip install .[test]
pytest
```