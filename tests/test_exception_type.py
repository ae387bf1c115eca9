import pytest

from nachosim.exception_type import (
    NUM_EXCEPTION_TYPES,
    ExceptionType,
    exception_type_to_string,
)


@pytest.mark.parametrize(
    "et, text",
    [
        (ExceptionType.NO_EXCEPTION, "no exception"),
        (ExceptionType.SYSCALL_EXCEPTION, "system call"),
        (ExceptionType.PAGE_FAULT_EXCEPTION, "page/TLB entry fault"),
        (ExceptionType.READ_ONLY_EXCEPTION, "read-only page"),
        (ExceptionType.BUS_ERROR_EXCEPTION, "memory bus error"),
        (ExceptionType.ADDRESS_ERROR_EXCEPTION, "address error"),
        (ExceptionType.OVERFLOW_EXCEPTION, "overflow"),
        (ExceptionType.ILLEGAL_INSTR_EXCEPTION, "illegal instruction"),
    ],
)
def test_names(et, text):
    assert exception_type_to_string(et) == text


def test_plain_int_accepted():
    assert exception_type_to_string(int(ExceptionType.OVERFLOW_EXCEPTION)) == "overflow"


def test_every_type_has_distinct_name():
    names = {exception_type_to_string(et) for et in ExceptionType}
    assert len(names) == NUM_EXCEPTION_TYPES


@pytest.mark.parametrize("bad", [-1, NUM_EXCEPTION_TYPES])
def test_unknown_type_rejected(bad):
    with pytest.raises(ValueError):
        exception_type_to_string(bad)