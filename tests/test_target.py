import pytest

from modbuskit.ipv4 import NIL_ADDR, IPAddress
from modbuskit.target import Target, TargetError, parse_target


def _resolver(table):
    calls = []

    def resolve(name):
        calls.append(name)
        return IPAddress(table.get(name, 0))

    resolve.calls = calls
    return resolve


def test_plain_ip_uses_defaults():
    result = parse_target("192.168.1.2", _resolver({}))
    assert result == Target(IPAddress("192.168.1.2"), 502, 1)


def test_ip_with_port_and_server_id():
    result = parse_target("192.168.1.2:503:4", _resolver({}))
    assert result.ip == IPAddress("192.168.1.2")
    assert result.port == 503
    assert result.server_id == 4


def test_ip_with_port_only():
    result = parse_target("10.0.0.9:1502")
    assert result.port == 1502
    assert result.server_id == 1


@pytest.mark.parametrize("source", ["192.168.1.2:0", "192.168.1.2:70000"])
def test_bad_port(source):
    with pytest.raises(TargetError) as info:
        parse_target(source, _resolver({}))
    assert info.value.code == -2


@pytest.mark.parametrize("source", ["192.168.1.2:502:0", "192.168.1.2:502:248"])
def test_bad_server_id(source):
    with pytest.raises(TargetError) as info:
        parse_target(source, _resolver({}))
    assert info.value.code == -3


def test_server_id_upper_bound_accepted():
    assert parse_target("192.168.1.2:502:247", _resolver({})).server_id == 247


def test_hostname_resolved():
    resolve = _resolver({"plc.example.com": "10.1.2.3"})
    result = parse_target("plc.example.com:1502:7", resolve)
    assert resolve.calls == ["plc.example.com"]
    assert result == Target(IPAddress("10.1.2.3"), 1502, 7)


def test_unresolvable_hostname():
    with pytest.raises(TargetError) as info:
        parse_target("nothing.example.com", _resolver({}))
    assert info.value.code == -1


def test_malformed_descriptor():
    resolve = _resolver({})
    with pytest.raises(TargetError) as info:
        parse_target("bad host!", resolve)
    assert info.value.code == -1
    assert resolve.calls == []


def test_zero_octet_falls_back_to_hostname():
    resolve = _resolver({"0.1.2.3": "10.9.8.7"})
    result = parse_target("0.1.2.3:600", resolve)
    assert resolve.calls == ["0.1.2.3"]
    assert result.ip == IPAddress("10.9.8.7")
    assert result.port == 600


def test_target_error_is_value_error():
    with pytest.raises(ValueError):
        parse_target("::", _resolver({}))


def test_default_target_is_nil():
    assert Target().ip == NIL_ADDR
    assert Target().port == 502