"""Conversion of words and half-words between host order and the simulated
machine's little-endian memory order."""

import sys

_WORD_MASK = 0xFFFFFFFF
_SHORT_MASK = 0xFFFF


def _swap_if_needed(value: int, width: int) -> int:
    return int.from_bytes(value.to_bytes(width, "little"), sys.byteorder)


def word_to_host(word: int) -> int:
    """Convert a 32-bit word from machine order to host order."""
    return _swap_if_needed(word & _WORD_MASK, 4)


def short_to_host(value: int) -> int:
    """Convert a 16-bit half-word from machine order to host order."""
    return _swap_if_needed(value & _SHORT_MASK, 2)


def word_to_machine(word: int) -> int:
    """Convert a 32-bit word from host order to machine order."""
    return word_to_host(word)


def short_to_machine(value: int) -> int:
    """Convert a 16-bit half-word from host order to machine order."""
    return short_to_host(value)