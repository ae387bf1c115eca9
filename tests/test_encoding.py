import pytest

from nachosim.encoding import (
    MAX_OPCODE,
    OP_STRINGS,
    OP_TABLE,
    SPECIAL_TABLE,
    Format,
    OpCode,
    OpInfo,
    OpString,
    RegType,
    index_to_addr,
)


def test_op_table_head_and_formats():
    assert OP_TABLE[0] == OpInfo(OpCode.SPECIAL, Format.RFMT)
    assert OP_TABLE[1] == OpInfo(OpCode.BCOND, Format.IFMT)
    assert OP_TABLE[2].format == Format.JFMT
    assert OP_TABLE[3].op_code == OpCode.JAL
    others = [info.format for i, info in enumerate(OP_TABLE) if i not in (0, 2, 3)]
    assert set(others) == {Format.IFMT}


@pytest.mark.parametrize(
    "index, op",
    [
        (0x08, OpCode.ADDI),
        (0x0F, OpCode.LUI),
        (0x10, OpCode.UNIMP),
        (0x14, OpCode.RES),
        (0x20, OpCode.LB),
        (0x23, OpCode.LW),
        (0x2B, OpCode.SW),
        (0x2E, OpCode.SWR),
        (0x3F, OpCode.RES),
    ],
)
def test_op_table_entries(index, op):
    assert OP_TABLE[index].op_code == op


@pytest.mark.parametrize(
    "funct, op",
    [
        (0, OpCode.SLL),
        (8, OpCode.JR),
        (12, OpCode.SYSCALL),
        (13, OpCode.UNIMP),
        (26, OpCode.DIV),
        (32, OpCode.ADD),
        (39, OpCode.NOR),
        (43, OpCode.SLTU),
        (63, OpCode.RES),
    ],
)
def test_special_table_entries(funct, op):
    assert SPECIAL_TABLE[funct] == op


def test_op_strings_match_names():
    for op in OpCode:
        if op <= MAX_OPCODE and op not in (OpCode.UNIMP, OpCode.RES):
            assert OP_STRINGS[op].string.split()[0] == op.name


def test_op_string_render():
    entry = OP_STRINGS[OpCode.LW]
    assert entry == OpString("LW r%d,%d(r%d)", (RegType.RT, RegType.EXTRA, RegType.RS))
    assert entry.string % (4, 8, 29) == "LW r4,8(r29)"


def test_index_to_addr_is_word_scaling():
    for n in range(0, 50):
        assert index_to_addr(n) // 4 == n
        assert index_to_addr(n) % 4 == 0
    assert index_to_addr(-1) == -4