"""A fixed-size array of bits, for tracking which sectors or pages are in use."""

import sys
from typing import Optional, TextIO

from nachosim.utility import BITS_IN_BYTE, BITS_IN_WORD, div_round_up


class Bitmap:
    """Bits that can be set, cleared and tested independently.

    Storage is a whole number of 32-bit little-endian words, the layout used
    when the bitmap is saved to or loaded from a file.
    """

    def __init__(self, nitems: int) -> None:
        if nitems <= 0:
            raise ValueError("a bitmap needs at least one bit")
        self.num_bits = nitems
        self.num_words = div_round_up(nitems, BITS_IN_WORD)
        self._map = bytearray(self.num_words * BITS_IN_WORD // BITS_IN_BYTE)

    def __len__(self) -> int:
        return self.num_bits

    def _locate(self, which: int) -> tuple[int, int]:
        if not 0 <= which < self.num_bits:
            raise IndexError(f"bit {which} outside bitmap of {self.num_bits}")
        return which // BITS_IN_BYTE, 1 << (which % BITS_IN_BYTE)

    def mark(self, which: int) -> None:
        """Set bit `which`."""
        byte, mask = self._locate(which)
        self._map[byte] |= mask

    def clear(self, which: int) -> None:
        """Clear bit `which`."""
        byte, mask = self._locate(which)
        self._map[byte] &= ~mask & 0xFF

    def test(self, which: int) -> bool:
        """Whether bit `which` is set."""
        byte, mask = self._locate(which)
        return bool(self._map[byte] & mask)

    def find(self) -> Optional[int]:
        """Set the lowest clear bit and return its index, or None if all are set."""
        for which in range(self.num_bits):
            if not self.test(which):
                self.mark(which)
                return which
        return None

    def count_clear(self) -> int:
        """Number of clear bits."""
        return sum(1 for which in range(self.num_bits) if not self.test(which))

    def dump(self, file: Optional[TextIO] = None) -> None:
        """Write the indices of all set bits to `file` (stdout by default)."""
        out = sys.stdout if file is None else file
        out.write("Bitmap bits set:\n")
        for which in range(self.num_bits):
            if self.test(which):
                out.write(f"{which} ")
        out.write("\n")

    def to_bytes(self) -> bytes:
        """The stored words, as written to a file."""
        return bytes(self._map)

    def load_bytes(self, data: bytes) -> None:
        """Replace the contents with words previously produced by `to_bytes`."""
        if len(data) != len(self._map):
            raise ValueError(
                f"expected {len(self._map)} bytes of bitmap, got {len(data)}"
            )
        self._map[:] = data