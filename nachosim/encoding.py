"""Tables describing the MIPS instruction encoding used by the simulator."""

from dataclasses import dataclass
from enum import IntEnum


class OpCode(IntEnum):
    """Decoded operation codes.

    `UNIMP` marks a legal instruction the simulator does not implement;
    `RES` a reserved opcode.  `SPECIAL` and `BCOND` only appear in
    `OP_TABLE`, meaning further decoding is needed.
    """

    ADD = 1
    ADDI = 2
    ADDIU = 3
    ADDU = 4
    AND = 5
    ANDI = 6
    BEQ = 7
    BGEZ = 8
    BGEZAL = 9
    BGTZ = 10
    BLEZ = 11
    BLTZ = 12
    BLTZAL = 13
    BNE = 14
    DIV = 16
    DIVU = 17
    J = 18
    JAL = 19
    JALR = 20
    JR = 21
    LB = 22
    LBU = 23
    LH = 24
    LHU = 25
    LUI = 26
    LW = 27
    LWL = 28
    LWR = 29
    MFHI = 31
    MFLO = 32
    MTHI = 34
    MTLO = 35
    MULT = 36
    MULTU = 37
    NOR = 38
    OR = 39
    ORI = 40
    RFE = 41
    SB = 42
    SH = 43
    SLL = 44
    SLLV = 45
    SLT = 46
    SLTI = 47
    SLTIU = 48
    SLTU = 49
    SRA = 50
    SRAV = 51
    SRL = 52
    SRLV = 53
    SUB = 54
    SUBU = 55
    SW = 56
    SWL = 57
    SWR = 58
    XOR = 59
    XORI = 60
    SYSCALL = 61
    UNIMP = 62
    RES = 63
    SPECIAL = 100
    BCOND = 101


MAX_OPCODE = 63

SIGN_BIT = 0x80000000


class Format(IntEnum):
    """Instruction layout: immediate, jump or register."""

    IFMT = 1
    JFMT = 2
    RFMT = 3


class RegType(IntEnum):
    """Which instruction field an operand of a disassembly comes from."""

    NONE = 0
    RS = 1
    RT = 2
    RD = 3
    EXTRA = 4


@dataclass(frozen=True)
class OpInfo:
    """Meaning of the top six bits of an instruction."""

    op_code: OpCode
    format: Format


@dataclass(frozen=True)
class OpString:
    """Printf-style text of an instruction and the fields that fill it."""

    string: str
    args: tuple[RegType, RegType, RegType]


def index_to_addr(x: int) -> int:
    """Convert a word index into a byte address."""
    return x << 2


def _ifmt(op: OpCode, count: int = 1) -> tuple[OpInfo, ...]:
    return (OpInfo(op, Format.IFMT),) * count


OP_TABLE: tuple[OpInfo, ...] = (
    (
        OpInfo(OpCode.SPECIAL, Format.RFMT),
        OpInfo(OpCode.BCOND, Format.IFMT),
        OpInfo(OpCode.J, Format.JFMT),
        OpInfo(OpCode.JAL, Format.JFMT),
    )
    + _ifmt(OpCode.BEQ)
    + _ifmt(OpCode.BNE)
    + _ifmt(OpCode.BLEZ)
    + _ifmt(OpCode.BGTZ)
    + _ifmt(OpCode.ADDI)
    + _ifmt(OpCode.ADDIU)
    + _ifmt(OpCode.SLTI)
    + _ifmt(OpCode.SLTIU)
    + _ifmt(OpCode.ANDI)
    + _ifmt(OpCode.ORI)
    + _ifmt(OpCode.XORI)
    + _ifmt(OpCode.LUI)
    + _ifmt(OpCode.UNIMP, 4)
    + _ifmt(OpCode.RES, 12)
    + _ifmt(OpCode.LB)
    + _ifmt(OpCode.LH)
    + _ifmt(OpCode.LWL)
    + _ifmt(OpCode.LW)
    + _ifmt(OpCode.LBU)
    + _ifmt(OpCode.LHU)
    + _ifmt(OpCode.LWR)
    + _ifmt(OpCode.RES)
    + _ifmt(OpCode.SB)
    + _ifmt(OpCode.SH)
    + _ifmt(OpCode.SWL)
    + _ifmt(OpCode.SW)
    + _ifmt(OpCode.RES, 2)
    + _ifmt(OpCode.SWR)
    + _ifmt(OpCode.RES)
    + _ifmt(OpCode.UNIMP, 4)
    + _ifmt(OpCode.RES, 4)
    + _ifmt(OpCode.UNIMP, 4)
    + _ifmt(OpCode.RES, 4)
)
"""Indexed by bits 31:26 of an instruction."""

_R = OpCode.RES

SPECIAL_TABLE: tuple[OpCode, ...] = (
    OpCode.SLL, _R, OpCode.SRL, OpCode.SRA,
    OpCode.SLLV, _R, OpCode.SRLV, OpCode.SRAV,
    OpCode.JR, OpCode.JALR, _R, _R,
    OpCode.SYSCALL, OpCode.UNIMP, _R, _R,
    OpCode.MFHI, OpCode.MTHI, OpCode.MFLO, OpCode.MTLO,
    _R, _R, _R, _R,
    OpCode.MULT, OpCode.MULTU, OpCode.DIV, OpCode.DIVU,
    _R, _R, _R, _R,
    OpCode.ADD, OpCode.ADDU, OpCode.SUB, OpCode.SUBU,
    OpCode.AND, OpCode.OR, OpCode.XOR, OpCode.NOR,
    _R, _R, OpCode.SLT, OpCode.SLTU,
) + (_R,) * 20
"""Indexed by the `funct` field (bits 5:0) of SPECIAL instructions."""

_N, _S, _T, _D, _E = (
    RegType.NONE,
    RegType.RS,
    RegType.RT,
    RegType.RD,
    RegType.EXTRA,
)
_NOT_USED = OpString("Should not happen", (_N, _N, _N))

OP_STRINGS: tuple[OpString, ...] = (
    _NOT_USED,
    OpString("ADD r%d,r%d,r%d", (_D, _S, _T)),
    OpString("ADDI r%d,r%d,%d", (_T, _S, _E)),
    OpString("ADDIU r%d,r%d,%d", (_T, _S, _E)),
    OpString("ADDU r%d,r%d,r%d", (_D, _S, _T)),
    OpString("AND r%d,r%d,r%d", (_D, _S, _T)),
    OpString("ANDI r%d,r%d,%d", (_T, _S, _E)),
    OpString("BEQ r%d,r%d,%d", (_S, _T, _E)),
    OpString("BGEZ r%d,%d", (_S, _E, _N)),
    OpString("BGEZAL r%d,%d", (_S, _E, _N)),
    OpString("BGTZ r%d,%d", (_S, _E, _N)),
    OpString("BLEZ r%d,%d", (_S, _E, _N)),
    OpString("BLTZ r%d,%d", (_S, _E, _N)),
    OpString("BLTZAL r%d,%d", (_S, _E, _N)),
    OpString("BNE r%d,r%d,%d", (_S, _T, _E)),
    _NOT_USED,
    OpString("DIV r%d,r%d", (_S, _T, _N)),
    OpString("DIVU r%d,r%d", (_S, _T, _N)),
    OpString("J %d", (_E, _N, _N)),
    OpString("JAL %d", (_E, _N, _N)),
    OpString("JALR r%d,r%d", (_D, _S, _N)),
    OpString("JR r%d,r%d", (_D, _S, _N)),
    OpString("LB r%d,%d(r%d)", (_T, _E, _S)),
    OpString("LBU r%d,%d(r%d)", (_T, _E, _S)),
    OpString("LH r%d,%d(r%d)", (_T, _E, _S)),
    OpString("LHU r%d,%d(r%d)", (_T, _E, _S)),
    OpString("LUI r%d,%d", (_T, _E, _N)),
    OpString("LW r%d,%d(r%d)", (_T, _E, _S)),
    OpString("LWL r%d,%d(r%d)", (_T, _E, _S)),
    OpString("LWR r%d,%d(r%d)", (_T, _E, _S)),
    _NOT_USED,
    OpString("MFHI r%d", (_D, _N, _N)),
    OpString("MFLO r%d", (_D, _N, _N)),
    _NOT_USED,
    OpString("MTHI r%d", (_S, _N, _N)),
    OpString("MTLO r%d", (_S, _N, _N)),
    OpString("MULT r%d,r%d", (_S, _T, _N)),
    OpString("MULTU r%d,r%d", (_S, _T, _N)),
    OpString("NOR r%d,r%d,r%d", (_D, _S, _T)),
    OpString("OR r%d,r%d,r%d", (_D, _S, _T)),
    OpString("ORI r%d,r%d,%d", (_T, _S, _E)),
    OpString("RFE", (_N, _N, _N)),
    OpString("SB r%d,%d(r%d)", (_T, _E, _S)),
    OpString("SH r%d,%d(r%d)", (_T, _E, _S)),
    OpString("SLL r%d,r%d,%d", (_D, _T, _E)),
    OpString("SLLV r%d,r%d,r%d", (_D, _T, _S)),
    OpString("SLT r%d,r%d,r%d", (_D, _S, _T)),
    OpString("SLTI r%d,r%d,%d", (_T, _S, _E)),
    OpString("SLTIU r%d,r%d,%d", (_T, _S, _E)),
    OpString("SLTU r%d,r%d,r%d", (_D, _S, _T)),
    OpString("SRA r%d,r%d,%d", (_D, _T, _E)),
    OpString("SRAV r%d,r%d,r%d", (_D, _T, _S)),
    OpString("SRL r%d,r%d,%d", (_D, _T, _E)),
    OpString("SRLV r%d,r%d,r%d", (_D, _T, _S)),
    OpString("SUB r%d,r%d,r%d", (_D, _S, _T)),
    OpString("SUBU r%d,r%d,r%d", (_D, _S, _T)),
    OpString("SW r%d,%d(r%d)", (_T, _E, _S)),
    OpString("SWL r%d,%d(r%d)", (_T, _E, _S)),
    OpString("SWR r%d,%d(r%d)", (_T, _E, _S)),
    OpString("XOR r%d,r%d,r%d", (_D, _S, _T)),
    OpString("XORI r%d,r%d,%d", (_T, _S, _E)),
    OpString("SYSCALL", (_N, _N, _N)),
    OpString("Unimplemented", (_N, _N, _N)),
    OpString("Reserved", (_N, _N, _N)),
)
"""Indexed by decoded opcode, for printing instructions."""