"""Kinds of exception a user program can raise on the simulated CPU."""

from enum import IntEnum


class ExceptionType(IntEnum):
    """Cause of a trap into the kernel."""

    NO_EXCEPTION = 0
    SYSCALL_EXCEPTION = 1
    PAGE_FAULT_EXCEPTION = 2
    READ_ONLY_EXCEPTION = 3
    BUS_ERROR_EXCEPTION = 4
    ADDRESS_ERROR_EXCEPTION = 5
    OVERFLOW_EXCEPTION = 6
    ILLEGAL_INSTR_EXCEPTION = 7


NUM_EXCEPTION_TYPES = len(ExceptionType)

_NAMES = {
    ExceptionType.NO_EXCEPTION: "no exception",
    ExceptionType.SYSCALL_EXCEPTION: "system call",
    ExceptionType.PAGE_FAULT_EXCEPTION: "page/TLB entry fault",
    ExceptionType.READ_ONLY_EXCEPTION: "read-only page",
    ExceptionType.BUS_ERROR_EXCEPTION: "memory bus error",
    ExceptionType.ADDRESS_ERROR_EXCEPTION: "address error",
    ExceptionType.OVERFLOW_EXCEPTION: "overflow",
    ExceptionType.ILLEGAL_INSTR_EXCEPTION: "illegal instruction",
}


def exception_type_to_string(et: ExceptionType) -> str:
    """A readable name for an exception type."""
    return _NAMES[ExceptionType(et)]