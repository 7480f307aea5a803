import copy

import pytest

from modbuskit.coildata import CoilData

EXAMPLE_ON = [3, 5, 6, 7, 13, 14, 28, 30, 31, 33]


@pytest.fixture
def example_coils():
    coils = CoilData(35)
    for index in EXAMPLE_ON:
        coils.set(index, True)
    return coils


def test_new_set_is_all_off():
    coils = CoilData(35)
    assert len(coils) == 35
    assert coils.coils() == 35
    assert coils.byte_size() == 5
    assert coils.coils_set_on() == 0
    assert coils.coils_set_off() == 35


def test_init_value_true_masks_overhang():
    coils = CoilData(10, True)
    assert coils.coils_set_on() == 10
    assert bytes(coils) == b"\xff\x03"


def test_size_is_capped_at_2000():
    coils = CoilData(5000)
    assert coils.coils() == 2000
    assert coils.byte_size() == 250


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        CoilData(-1)


def test_empty_set_is_falsy():
    assert not CoilData()
    assert CoilData(1)


def test_format_matches_documented_output(example_coils):
    assert example_coils.format("Initial coil state: ") == (
        "Initial coil state: 0001 0111 0000 0110 0000 0000 0000 1011 010\n"
    )


def test_slice_matches_documented_output(example_coils):
    part = example_coils.slice(13, 12)
    assert part.format("Received                          : ") == (
        "Received                          : 1100 0000 0000 \n"
    )


def test_set_single_coil_documented(example_coils):
    example_coils.set(8, True)
    assert example_coils.format("   Coil 8 set to 1: ") == (
        "   Coil 8 set to 1: 0001 0111 1000 0110 0000 0000 0000 1011 010\n"
    )


def test_set_bits_documented(example_coils):
    example_coils.set(8, True)
    block = CoilData.from_pattern("011010010110")
    example_coils.set_bits(20, block.coils(), block.to_bytes())
    assert example_coils.format("Block of coils set: ") == (
        "Block of coils set: 0001 0111 1000 0110 0000 0110 1001 0110 010\n"
    )


def test_pattern_packs_lsb_first():
    coils = CoilData.from_pattern("011010010110")
    assert coils.to_bytes() == b"\x96\x06"
    assert coils == "011010010110"


def test_pattern_with_no_bits_gives_empty():
    assert CoilData.from_pattern("abc").coils() == 0


def test_assign_pattern_failure_clears(example_coils):
    with pytest.raises(ValueError):
        example_coils.assign_pattern("1" * 2001)
    assert example_coils.coils() == 0
    assert example_coils.to_bytes() == b""


def test_assign_pattern_replaces():
    coils = CoilData(50)
    coils.assign_pattern("111")
    assert coils.coils() == 3
    assert coils.coils_set_on() == 3


def test_getitem_out_of_range_is_false():
    coils = CoilData(4, True)
    assert coils[3] is True
    assert coils[4] is False
    assert coils[-1] is False


def test_iteration_matches_indexing(example_coils):
    bits = list(example_coils)
    assert len(bits) == 35
    assert [i for i, b in enumerate(bits) if b] == EXAMPLE_ON


def test_set_out_of_range_raises():
    coils = CoilData(8)
    with pytest.raises(IndexError):
        coils.set(8, True)


def test_set_then_clear():
    coils = CoilData(16)
    coils.set(9, True)
    assert coils[9]
    coils.set(9, False)
    assert coils.coils_set_on() == 0


def test_equality_between_sets():
    a = CoilData.from_pattern("1010")
    b = CoilData.from_pattern("1010")
    c = CoilData.from_pattern("10100")
    assert a == b
    assert a != c
    b.set(0, False)
    assert a != b


def test_pattern_comparison_rules():
    coils = CoilData.from_pattern("1011")
    assert coils == "1011"
    assert coils == "10"
    assert coils != "10111"
    assert coils == "1011_1"
    assert coils != "0011"


def test_slice_defaults_and_limits(example_coils):
    assert example_coils.slice() == example_coils
    tail = example_coils.slice(30)
    assert tail.coils() == 5
    assert list(tail) == list(example_coils)[30:]
    assert example_coils.slice(36).coils() == 0
    assert example_coils.slice(30, 6).coils() == 0
    assert CoilData().slice().coils() == 0


def test_set_bits_round_trip(example_coils):
    target = CoilData(35)
    target.set_bits(0, 35, example_coils.to_bytes())
    assert target == example_coils


def test_set_bits_errors():
    coils = CoilData(16)
    with pytest.raises(ValueError):
        coils.set_bits(0, 16, b"\x01")
    with pytest.raises(ValueError):
        coils.set_bits(0, 0, b"\x01" * 300)
    with pytest.raises(IndexError):
        coils.set_bits(10, 8, b"\xff")


def test_set_coils_stops_at_end():
    target = CoilData(6)
    source = CoilData(4, True)
    target.set_coils(4, source)
    assert list(target) == [False] * 4 + [True, True]
    assert target.coils_set_on() == 2


def test_set_coils_errors():
    with pytest.raises(ValueError):
        CoilData(4).set_coils(0, CoilData())
    with pytest.raises(IndexError):
        CoilData(4).set_coils(4, CoilData(1, True))


def test_set_pattern():
    coils = CoilData(6, True)
    coils.set_pattern(2, "0_1 0 0 0 0")
    assert list(coils) == [True, True, False, False, False, False]
    with pytest.raises(IndexError):
        coils.set_pattern(6, "1")


def test_init_resets_all(example_coils):
    example_coils.init(True)
    assert example_coils.coils_set_on() == 35
    assert example_coils.coils_set_off() == 0
    example_coils.init()
    assert example_coils.coils_set_on() == 0


def test_on_off_counts_sum(example_coils):
    assert example_coils.coils_set_on() == len(EXAMPLE_ON)
    assert example_coils.coils_set_on() + example_coils.coils_set_off() == 35


def test_copy_is_independent(example_coils):
    twin = copy.copy(example_coils)
    assert twin == example_coils
    twin.set(0, True)
    assert twin != example_coils
    assert example_coils[0] is False


def test_format_wraps_long_sets():
    coils = CoilData(100, True)
    label = "ab: "
    text = coils.format(label)
    lines = text.rstrip("\n").split("\n")
    assert len(lines) > 1
    assert lines[0].startswith(label)
    assert all(line.startswith(" " * len(label)) for line in lines[1:])
    assert "".join(text[len(label):].split()) == "1" * 100
    assert text.endswith("\n")