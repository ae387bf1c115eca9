import pytest

from nachosim.encoding import OP_STRINGS, OpCode, RegType
from nachosim.instruction import Instruction


def r_type(rs, rt, rd, shamt, funct):
    return (rs << 21) | (rt << 16) | (rd << 11) | (shamt << 6) | funct


def i_type(op, rs, rt, imm):
    return (op << 26) | (rs << 21) | (rt << 16) | (imm & 0xFFFF)


def test_decode_add_fields_and_text():
    instr = Instruction.decode(r_type(1, 2, 3, 0, 0x20))
    assert instr.op_code is OpCode.ADD
    assert (instr.rs, instr.rt, instr.rd) == (1, 2, 3)
    assert instr.disassemble() == "ADD r3,r1,r2"


def test_rfmt_extra_is_shift_amount():
    instr = Instruction.decode(r_type(0, 4, 5, 7, 0x00))
    assert instr.op_code is OpCode.SLL
    assert instr.extra == 7


def test_ifmt_immediate_is_sign_extended():
    instr = Instruction.decode(i_type(8, 1, 2, -1))
    assert instr.op_code is OpCode.ADDI
    assert instr.extra == -1
    assert instr.rs == 1 and instr.rt == 2


def test_ifmt_positive_immediate_kept():
    instr = Instruction.decode(i_type(15, 0, 9, 0x1234))
    assert instr.op_code is OpCode.LUI
    assert instr.extra == 0x1234


def test_jfmt_target():
    target = 0x0ABCDEF
    instr = Instruction.decode((2 << 26) | target)
    assert instr.op_code is OpCode.J
    assert instr.extra == target


@pytest.mark.parametrize(
    "rt, expected",
    [
        (0x00, OpCode.BLTZ),
        (0x01, OpCode.BGEZ),
        (0x10, OpCode.BLTZAL),
        (0x11, OpCode.BGEZAL),
        (0x05, OpCode.UNIMP),
    ],
)
def test_bcond_selection(rt, expected):
    assert Instruction.decode(i_type(1, 3, rt, 4)).op_code is expected


def test_reserved_and_syscall_text():
    assert Instruction.decode(0x14 << 26).disassemble() == "Reserved"
    assert Instruction.decode(r_type(0, 0, 0, 0, 12)).disassemble() == "SYSCALL"


def test_reg_from_type_maps_fields():
    instr = Instruction.decode(r_type(6, 7, 8, 3, 0x20))
    assert instr.reg_from_type(RegType.RS) == instr.rs
    assert instr.reg_from_type(RegType.RT) == instr.rt
    assert instr.reg_from_type(RegType.RD) == instr.rd
    assert instr.reg_from_type(RegType.EXTRA) == instr.extra
    assert instr.reg_from_type(RegType.NONE) == 0


@pytest.mark.parametrize(
    "value", [0, 0xFFFFFFFF, 0x12345678, 0x8C820004, 0xDEADBEEF, 0x00430821]
)
def test_decoded_fields_in_range(value):
    instr = Instruction.decode(value)
    assert instr.value == value
    assert all(0 <= reg < 32 for reg in (instr.rs, instr.rt, instr.rd))
    assert instr.op_code in OpCode
    assert instr.op_code not in (OpCode.SPECIAL, OpCode.BCOND)
    assert instr.disassemble().split()[0] == OP_STRINGS[instr.op_code].string.split()[0]


@pytest.mark.parametrize("value", [-1, 1 << 32])
def test_decode_rejects_non_words(value):
    with pytest.raises(ValueError):
        Instruction.decode(value)