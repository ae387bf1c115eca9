"""The simulated workstation as user programs see it: registers, memory,
the MMU and the exception handlers that enter the kernel."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from nachosim.debug import Debug, debug as _global_debug
from nachosim.exception_type import ExceptionType, exception_type_to_string
from nachosim.interrupt import Interrupt, MachineStatus
from nachosim.mmu import DEFAULT_NUM_PHYS_PAGES, MMU, PAGE_SIZE, TranslationError

STACK_REG = 29
"""User stack pointer."""
RET_ADDR_REG = 31
"""Return address of procedure calls."""
HI_REG = 32
"""High word of a multiply or division result."""
LO_REG = 33
"""Low word of a multiply or division result."""
PC_REG = 34
"""Current program counter."""
NEXT_PC_REG = 35
"""Next program counter, for branch delay."""
PREV_PC_REG = 36
"""Previous program counter, for debugging."""
LOAD_REG = 37
"""Target register of a delayed load."""
LOAD_VALUE_REG = 38
"""Value to be loaded by a delayed load."""
BAD_VADDR_REG = 39
"""Failing virtual address of an exception."""
NUM_GP_REGS = 32
NUM_TOTAL_REGS = 40

ExceptionHandler = Callable[[ExceptionType], None]


def _to_int32(value: int) -> int:
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


class SingleStepper(ABC):
    """Something to drop into after each simulated instruction."""

    @abstractmethod
    def step(self) -> bool:
        """Return whether single-stepping should go on."""


class Machine:
    """CPU registers, physical memory and MMU of the simulated machine.

    Registers hold signed 32-bit values; register 0 is always zero.
    Exceptions are delivered to handlers registered with `set_handler`,
    run in system mode through `interrupt`.
    """

    def __init__(
        self,
        num_physical_pages: int = DEFAULT_NUM_PHYS_PAGES,
        single_stepper: Optional[SingleStepper] = None,
        *,
        interrupt: Optional[Interrupt] = None,
        use_tlb: bool = False,
        debug: Optional[Debug] = None,
    ) -> None:
        self.debug = _global_debug if debug is None else debug
        self.interrupt = Interrupt(debug=self.debug) if interrupt is None else interrupt
        if self.interrupt.before_handler is None:
            self.interrupt.before_handler = lambda: self.delayed_load(0, 0)
        self.single_stepper = single_stepper
        self.num_physical_pages = num_physical_pages
        self.main_memory = bytearray(num_physical_pages * PAGE_SIZE)
        self.mmu = MMU(
            num_physical_pages,
            self.main_memory,
            use_tlb=use_tlb,
            stats=self.interrupt.stats,
            debug=self.debug,
        )
        self.registers: list[int] = [0] * NUM_TOTAL_REGS
        self._handlers: dict[ExceptionType, ExceptionHandler] = {}

    @staticmethod
    def _check_register(num: int) -> None:
        if not 0 <= num < NUM_TOTAL_REGS:
            raise IndexError(f"register {num} does not exist")

    def read_register(self, num: int) -> int:
        """Contents of register `num`."""
        self._check_register(num)
        return self.registers[num]

    def write_register(self, num: int, value: int) -> None:
        """Store `value` (truncated to 32 bits) in register `num`.

        Writes to register 0 are ignored.
        """
        self._check_register(num)
        if num != 0:
            self.registers[num] = _to_int32(value)

    def read_mem(self, addr: int, size: int) -> Optional[int]:
        """Read user memory; on a failed translation raise the exception in
        the machine and return None."""
        try:
            return self.mmu.read_mem(addr, size)
        except TranslationError as error:
            self.raise_exception(error.exception_type, addr)
            return None

    def write_mem(self, addr: int, size: int, value: int) -> bool:
        """Write user memory; on a failed translation raise the exception in
        the machine and return False."""
        try:
            self.mmu.write_mem(addr, size, value)
        except TranslationError as error:
            self.raise_exception(error.exception_type, addr)
            return False
        return True

    def raise_exception(self, et: ExceptionType, bad_vaddr: int) -> None:
        """Trap to the kernel handler registered for `et`."""
        et = ExceptionType(et)
        handler = self._handlers.get(et)
        if handler is None:
            raise RuntimeError(
                f"no handler for exception {exception_type_to_string(et)!r}"
            )
        self.debug.print("m", "Exception: %s\n", exception_type_to_string(et))
        self.registers[BAD_VADDR_REG] = _to_int32(bad_vaddr)
        self.delayed_load(0, 0)
        self.interrupt.status = MachineStatus.SYSTEM_MODE
        handler(et)
        self.interrupt.status = MachineStatus.USER_MODE

    def set_handler(self, et: ExceptionType, handler: ExceptionHandler) -> None:
        """Register the kernel entry point for exceptions of type `et`."""
        et = ExceptionType(et)
        if not callable(handler):
            raise TypeError("exception handler must be callable")
        self._handlers[et] = handler

    def delayed_load(self, next_reg: int, next_value: int) -> None:
        """Finish the pending delayed load and record the next one."""
        regs = self.registers
        regs[regs[LOAD_REG]] = regs[LOAD_VALUE_REG]
        regs[LOAD_REG] = next_reg
        regs[LOAD_VALUE_REG] = _to_int32(next_value)
        regs[0] = 0