"""Decoding of binary MIPS instructions into their operation and operands."""

from dataclasses import dataclass

from nachosim.encoding import (
    OP_STRINGS,
    OP_TABLE,
    SPECIAL_TABLE,
    Format,
    OpCode,
    RegType,
)

_WORD_MASK = 0xFFFFFFFF


def _decode_bcond(value: int) -> OpCode:
    selector = value & 0x1F0000
    return {
        0x000000: OpCode.BLTZ,
        0x010000: OpCode.BGEZ,
        0x100000: OpCode.BLTZAL,
        0x110000: OpCode.BGEZAL,
    }.get(selector, OpCode.UNIMP)


@dataclass(frozen=True)
class Instruction:
    """An instruction in binary form together with its decoded fields.

    `op_code` is the simulator's operation code, not the raw opcode field.
    `extra` holds the immediate (sign-extended), jump target or shift amount.
    """

    value: int
    op_code: OpCode
    rs: int
    rt: int
    rd: int
    extra: int

    @classmethod
    def decode(cls, value: int) -> "Instruction":
        """Decode a 32-bit instruction word."""
        if not 0 <= value <= _WORD_MASK:
            raise ValueError(f"instruction word {value:#x} is not 32 bits")
        rs = value >> 21 & 0x1F
        rt = value >> 16 & 0x1F
        rd = value >> 11 & 0x1F
        info = OP_TABLE[value >> 26 & 0x3F]

        if info.format is Format.IFMT:
            extra = value & 0xFFFF
            if extra & 0x8000:
                extra -= 0x10000
        elif info.format is Format.RFMT:
            extra = value >> 6 & 0x1F
        else:
            extra = value & 0x3FFFFFF

        op_code = info.op_code
        if op_code is OpCode.SPECIAL:
            op_code = SPECIAL_TABLE[value & 0x3F]
        elif op_code is OpCode.BCOND:
            op_code = _decode_bcond(value)

        return cls(value, OpCode(op_code), rs, rt, rd, extra)

    def reg_from_type(self, reg_type: RegType) -> int:
        """The operand of the instruction that `reg_type` refers to."""
        reg_type = RegType(reg_type)
        return {
            RegType.RS: self.rs,
            RegType.RT: self.rt,
            RegType.RD: self.rd,
            RegType.EXTRA: self.extra,
            RegType.NONE: 0,
        }[reg_type]

    def disassemble(self) -> str:
        """The instruction in assembler-like text, for debugging."""
        entry = OP_STRINGS[self.op_code]
        used = entry.string.count("%d")
        operands = tuple(self.reg_from_type(arg) for arg in entry.args[:used])
        return entry.string % operands