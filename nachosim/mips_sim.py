"""Execution of user programs on a simulated MIPS R2000/R3000 processor.

Byte order is little-endian.  Each instruction is executed from scratch
using only the machine's registers and memory.  Any exception traps to the
kernel handler and leaves the program counters unchanged, so the
instruction can be restarted.
"""

import sys
from typing import Optional, TextIO

from nachosim.encoding import OpCode, index_to_addr
from nachosim.exception_type import ExceptionType
from nachosim.instruction import Instruction
from nachosim.interrupt import MachineStatus
from nachosim.machine import (
    HI_REG,
    LO_REG,
    LOAD_REG,
    LOAD_VALUE_REG,
    NEXT_PC_REG,
    PC_REG,
    PREV_PC_REG,
    RET_ADDR_REG,
    Machine,
)

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _s32(value: int) -> int:
    return ((value + 0x80000000) & _MASK32) - 0x80000000


def _u32(value: int) -> int:
    return value & _MASK32


def _fits_s32(value: int) -> bool:
    return -0x80000000 <= value <= 0x7FFFFFFF


def mult(a: int, b: int, signed: bool) -> tuple[int, int]:
    """Multiply two 32-bit values into a 64-bit result.

    Returns `(hi, lo)`, each as a signed 32-bit value.  With `signed` the
    operands are taken as two's complement, otherwise as unsigned.
    """
    if a == 0 or b == 0:
        return 0, 0
    if signed:
        product = _s32(a) * _s32(b)
    else:
        product = _u32(a) * _u32(b)
    product &= _MASK64
    return _s32(product >> 32), _s32(product)


def _truncating_divmod(a: int, b: int) -> tuple[int, int]:
    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient
    return quotient, a - quotient * b


class Simulator:
    """Fetches, decodes and executes user instructions on `machine`."""

    def __init__(self, machine: Machine, output: Optional[TextIO] = None) -> None:
        self.machine = machine
        self.output = output

    @property
    def _regs(self) -> list[int]:
        return self.machine.registers

    def fetch_instruction(self) -> Optional[Instruction]:
        """Fetch and decode the instruction at the program counter.

        Returns None if fetching raised an exception in the machine.
        """
        regs = self._regs
        raw = self.machine.read_mem(regs[PC_REG], 4)
        if raw is None:
            return None
        instr = Instruction.decode(_u32(raw))
        debug = self.machine.debug
        if debug.is_enabled("m"):
            debug.print("m", "At PC = 0x%X: ", _u32(regs[PC_REG]))
            debug.print_cont("m", "%s", instr.disassemble())
            debug.print_cont("m", "\n")
        return instr

    def _raise(self, et: ExceptionType, bad_vaddr: int) -> None:
        self.machine.raise_exception(et, bad_vaddr)

    def _prior_load_value(self, reg: int) -> int:
        regs = self._regs
        if regs[LOAD_REG] == reg:
            return regs[LOAD_VALUE_REG]
        return regs[reg]

    @staticmethod
    def _check_aligned(address: int) -> None:
        if address & 0x3:
            raise RuntimeError(f"unaligned partial-word access at {address:#x}")

    def exec_instruction(self, instr: Instruction) -> None:
        """Execute one decoded instruction and advance the program counters.

        On an exception the kernel handler runs and the counters are left
        as they were.
        """
        regs = self._regs
        machine = self.machine
        op = instr.op_code
        rs, rt, rd, extra = instr.rs, instr.rt, instr.rd, instr.extra
        next_load_reg = 0
        next_load_value = 0
        pc_after = _s32(regs[NEXT_PC_REG] + 4)

        def branch_target() -> int:
            return _s32(regs[NEXT_PC_REG] + index_to_addr(extra))

        if op is OpCode.ADD:
            total = regs[rs] + regs[rt]
            if not _fits_s32(total):
                self._raise(ExceptionType.OVERFLOW_EXCEPTION, 0)
                return
            regs[rd] = total
        elif op is OpCode.ADDI:
            total = regs[rs] + extra
            if not _fits_s32(total):
                self._raise(ExceptionType.OVERFLOW_EXCEPTION, 0)
                return
            regs[rt] = total
        elif op is OpCode.ADDIU:
            regs[rt] = _s32(regs[rs] + extra)
        elif op is OpCode.ADDU:
            regs[rd] = _s32(regs[rs] + regs[rt])
        elif op is OpCode.AND:
            regs[rd] = regs[rs] & regs[rt]
        elif op is OpCode.ANDI:
            regs[rt] = regs[rs] & (extra & 0xFFFF)
        elif op is OpCode.BEQ:
            if regs[rs] == regs[rt]:
                pc_after = branch_target()
        elif op in (OpCode.BGEZ, OpCode.BGEZAL):
            if op is OpCode.BGEZAL:
                regs[RET_ADDR_REG] = _s32(regs[NEXT_PC_REG] + 4)
            if regs[rs] >= 0:
                pc_after = branch_target()
        elif op is OpCode.BGTZ:
            if regs[rs] > 0:
                pc_after = branch_target()
        elif op is OpCode.BLEZ:
            if regs[rs] <= 0:
                pc_after = branch_target()
        elif op in (OpCode.BLTZ, OpCode.BLTZAL):
            if op is OpCode.BLTZAL:
                regs[RET_ADDR_REG] = _s32(regs[NEXT_PC_REG] + 4)
            if regs[rs] < 0:
                pc_after = branch_target()
        elif op is OpCode.BNE:
            if regs[rs] != regs[rt]:
                pc_after = branch_target()
        elif op is OpCode.DIV:
            if regs[rt] == 0:
                regs[LO_REG] = regs[HI_REG] = 0
            else:
                quotient, remainder = _truncating_divmod(regs[rs], regs[rt])
                regs[LO_REG] = _s32(quotient)
                regs[HI_REG] = _s32(remainder)
        elif op is OpCode.DIVU:
            dividend, divisor = _u32(regs[rs]), _u32(regs[rt])
            if divisor == 0:
                regs[LO_REG] = regs[HI_REG] = 0
            else:
                regs[LO_REG] = _s32(dividend // divisor)
                regs[HI_REG] = _s32(dividend % divisor)
        elif op in (OpCode.J, OpCode.JAL):
            if op is OpCode.JAL:
                regs[RET_ADDR_REG] = _s32(regs[NEXT_PC_REG] + 4)
            pc_after = _s32((_u32(pc_after) & 0xF0000000) | index_to_addr(extra))
        elif op in (OpCode.JR, OpCode.JALR):
            if op is OpCode.JALR:
                regs[rd] = _s32(regs[NEXT_PC_REG] + 4)
            pc_after = regs[rs]
        elif op in (OpCode.LB, OpCode.LBU):
            address = _s32(regs[rs] + extra)
            value = machine.read_mem(address, 1)
            if value is None:
                return
            value &= 0xFF
            if value & 0x80 and op is OpCode.LB:
                value -= 0x100
            next_load_reg, next_load_value = rt, value
        elif op in (OpCode.LH, OpCode.LHU):
            address = _s32(regs[rs] + extra)
            if address & 0x1:
                self._raise(ExceptionType.ADDRESS_ERROR_EXCEPTION, address)
                return
            value = machine.read_mem(address, 2)
            if value is None:
                return
            value &= 0xFFFF
            if value & 0x8000 and op is OpCode.LH:
                value -= 0x10000
            next_load_reg, next_load_value = rt, value
        elif op is OpCode.LUI:
            machine.debug.print("m", "Executing: LUI r%d,%d\n", rt, extra)
            regs[rt] = _s32(extra << 16)
        elif op is OpCode.LW:
            address = _s32(regs[rs] + extra)
            if address & 0x3:
                self._raise(ExceptionType.ADDRESS_ERROR_EXCEPTION, address)
                return
            value = machine.read_mem(address, 4)
            if value is None:
                return
            next_load_reg, next_load_value = rt, value
        elif op is OpCode.LWL:
            address = _s32(regs[rs] + extra)
            self._check_aligned(address)
            value = machine.read_mem(address, 4)
            if value is None:
                return
            next_load_reg, next_load_value = rt, value
        elif op is OpCode.LWR:
            address = _s32(regs[rs] + extra)
            self._check_aligned(address)
            value = machine.read_mem(address, 4)
            if value is None:
                return
            previous = self._prior_load_value(rt)
            next_load_reg = rt
            next_load_value = _s32((previous & 0xFFFFFF00) | (value >> 24 & 0xFF))
        elif op is OpCode.MFHI:
            regs[rd] = regs[HI_REG]
        elif op is OpCode.MFLO:
            regs[rd] = regs[LO_REG]
        elif op is OpCode.MTHI:
            regs[HI_REG] = regs[rs]
        elif op is OpCode.MTLO:
            regs[LO_REG] = regs[rs]
        elif op in (OpCode.MULT, OpCode.MULTU):
            regs[HI_REG], regs[LO_REG] = mult(regs[rs], regs[rt], op is OpCode.MULT)
        elif op is OpCode.NOR:
            regs[rd] = ~(regs[rs] | regs[rt])
        elif op is OpCode.OR:
            regs[rd] = regs[rs] | regs[rt]
        elif op is OpCode.ORI:
            regs[rt] = regs[rs] | (extra & 0xFFFF)
        elif op in (OpCode.SB, OpCode.SH, OpCode.SW):
            size = {OpCode.SB: 1, OpCode.SH: 2, OpCode.SW: 4}[op]
            if not machine.write_mem(_u32(regs[rs] + extra), size, regs[rt]):
                return
        elif op is OpCode.SLL:
            regs[rd] = _s32(regs[rt] << extra)
        elif op is OpCode.SLLV:
            regs[rd] = _s32(regs[rt] << (regs[rs] & 0x1F))
        elif op is OpCode.SLT:
            regs[rd] = 1 if regs[rs] < regs[rt] else 0
        elif op is OpCode.SLTI:
            regs[rt] = 1 if regs[rs] < extra else 0
        elif op is OpCode.SLTIU:
            regs[rt] = 1 if _u32(regs[rs]) < _u32(extra) else 0
        elif op is OpCode.SLTU:
            regs[rd] = 1 if _u32(regs[rs]) < _u32(regs[rt]) else 0
        elif op in (OpCode.SRA, OpCode.SRL):
            # Both shifts propagate the sign bit on this machine.
            regs[rd] = regs[rt] >> extra
        elif op in (OpCode.SRAV, OpCode.SRLV):
            regs[rd] = regs[rt] >> (regs[rs] & 0x1F)
        elif op is OpCode.SUB:
            difference = regs[rs] - regs[rt]
            if not _fits_s32(difference):
                self._raise(ExceptionType.OVERFLOW_EXCEPTION, 0)
                return
            regs[rd] = difference
        elif op is OpCode.SUBU:
            regs[rd] = _s32(regs[rs] - regs[rt])
        elif op is OpCode.SWL:
            address = _s32(regs[rs] + extra)
            self._check_aligned(address)
            if machine.read_mem(address & ~0x3, 4) is None:
                return
            if not machine.write_mem(address & ~0x3, 4, regs[rt]):
                return
        elif op is OpCode.SWR:
            address = _s32(regs[rs] + extra)
            self._check_aligned(address)
            value = machine.read_mem(address & ~0x3, 4)
            if value is None:
                return
            value = _s32((value & 0xFFFFFF) | (regs[rt] << 24))
            if not machine.write_mem(address & ~0x3, 4, value):
                return
        elif op is OpCode.SYSCALL:
            self._raise(ExceptionType.SYSCALL_EXCEPTION, 0)
            return
        elif op is OpCode.XOR:
            regs[rd] = regs[rs] ^ regs[rt]
        elif op is OpCode.XORI:
            regs[rt] = regs[rs] ^ (extra & 0xFFFF)
        elif op in (OpCode.RES, OpCode.UNIMP):
            self._raise(ExceptionType.ILLEGAL_INSTR_EXCEPTION, 0)
            return
        else:
            raise RuntimeError(f"cannot execute instruction {op.name}")

        machine.delayed_load(next_load_reg, next_load_value)
        regs[PREV_PC_REG] = regs[PC_REG]
        regs[PC_REG] = regs[NEXT_PC_REG]
        regs[NEXT_PC_REG] = pc_after

    def run(self, max_steps: Optional[int] = None) -> int:
        """Run the user program.

        Without `max_steps` it runs until something stops the machine (a
        handler halting it, for instance).  Returns the number of steps run.
        """
        machine = self.machine
        interrupt = machine.interrupt
        if machine.debug.is_enabled("m"):
            out = sys.stdout if self.output is None else self.output
            out.write(f"Starting to run at time {interrupt.stats.total_ticks}\n")
        interrupt.status = MachineStatus.USER_MODE

        steps = 0
        while max_steps is None or steps < max_steps:
            instr = self.fetch_instruction()
            if instr is not None:
                self.exec_instruction(instr)
            interrupt.one_tick()
            stepper = machine.single_stepper
            if stepper is not None and not stepper.step():
                machine.single_stepper = None
            steps += 1
        return steps