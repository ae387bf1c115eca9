"""Memory management unit: translation of virtual addresses to physical ones.

Two translation schemes are supported.  With a linear page table the
virtual page number indexes the table directly.  With a translation
lookaside buffer (TLB) the entry is found by associative lookup, and a miss
traps to the kernel, which is expected to refill the TLB.
"""

from typing import Optional

from nachosim.debug import Debug, debug as _global_debug
from nachosim.disk import SECTOR_SIZE
from nachosim.exception_type import ExceptionType
from nachosim.statistics import Statistics
from nachosim.translation_entry import TranslationEntry

PAGE_SIZE = SECTOR_SIZE
"""Bytes per page, equal to the disk sector size for simplicity."""
DEFAULT_NUM_PHYS_PAGES = 32
"""Physical pages of a machine when no other number is given."""
TLB_SIZE = 4
"""Entries in the TLB, when there is one."""

_ACCESS_SIZES = (1, 2, 4)


class TranslationError(Exception):
    """A memory access could not be translated.

    `exception_type` is the trap the CPU should raise; `address` is the
    virtual address that failed.
    """

    def __init__(self, exception_type: ExceptionType, address: int) -> None:
        super().__init__(f"{exception_type.name} at virtual address {address:#x}")
        self.exception_type = exception_type
        self.address = address


class MMU:
    """Translates and performs 1, 2 and 4 byte accesses to `memory`.

    With `use_tlb` the MMU holds a TLB of `TLB_SIZE` entries; otherwise the
    kernel must install a page table in `page_table`.  Memory is the
    machine's little-endian physical memory; a fresh zeroed one is created
    when none is given.  Every translation attempt is counted in `stats`
    (reads as `num_disk_reads`, writes as `num_disk_writes`).
    """

    def __init__(
        self,
        num_physical_pages: int = DEFAULT_NUM_PHYS_PAGES,
        memory: Optional[bytearray] = None,
        *,
        use_tlb: bool = False,
        stats: Optional[Statistics] = None,
        debug: Optional[Debug] = None,
    ) -> None:
        self.num_physical_pages = num_physical_pages
        self.memory_size = num_physical_pages * PAGE_SIZE
        if memory is None:
            memory = bytearray(self.memory_size)
        elif len(memory) < self.memory_size:
            raise ValueError(
                f"memory of {len(memory)} bytes is smaller than "
                f"{self.memory_size}"
            )
        self.memory = memory
        self.stats = stats
        self.debug = _global_debug if debug is None else debug
        self.tlb: Optional[list[TranslationEntry]] = (
            [TranslationEntry() for _ in range(TLB_SIZE)] if use_tlb else None
        )
        self.last_tlb_entry = 0
        self.page_table: Optional[list[TranslationEntry]] = None

    @property
    def page_table_size(self) -> int:
        """Number of entries in the installed page table."""
        return 0 if self.page_table is None else len(self.page_table)

    def dump_tlb(self) -> None:
        """Print the TLB contents to standard output."""
        if self.tlb is None:
            print("TLB not present in the machine.")
            return
        print(f"TLB content ({TLB_SIZE} entries):")
        for index, entry in enumerate(self.tlb):
            flags = (
                ("readonly " if entry.read_only else "")
                + ("use " if entry.use else "")
                + ("dirty" if entry.dirty else "")
            )
            print(
                f"({index}) valid: {int(entry.valid)}, virt: {entry.virtual_page},"
                f" frame: {entry.physical_page}, flags: {flags}"
            )

    def read_mem(self, addr: int, size: int) -> int:
        """Read `size` bytes at virtual address `addr`.

        One byte is returned sign-extended, two bytes unsigned and four
        bytes as a signed 32-bit word.  Raises `TranslationError`.
        """
        self.debug.print("a", "Reading VA 0x%X, size %u\n", addr, size)
        physical = self._translate(addr, size, False)
        raw = bytes(self.memory[physical : physical + size])
        value = int.from_bytes(raw, "little", signed=size != 2)
        self.debug.print("a", "\tValue read: %8.8X\n", value & 0xFFFFFFFF)
        return value

    def write_mem(self, addr: int, size: int, value: int) -> None:
        """Write the low `size` bytes of `value` at virtual address `addr`.

        Raises `TranslationError`.
        """
        self.debug.print(
            "a", "Writing VA 0x%X, size %u, value 0x%X\n", addr, size,
            value & 0xFFFFFFFF,
        )
        physical = self._translate(addr, size, True)
        mask = (1 << (8 * size)) - 1
        self.memory[physical : physical + size] = (value & mask).to_bytes(
            size, "little"
        )

    def _retrieve_page_entry(self, vpn: int, addr: int) -> TranslationEntry:
        if self.tlb is None:
            if vpn >= self.page_table_size:
                self.debug.print_cont(
                    "a", "virtual page # %u too large for page table size %u!\n",
                    vpn, self.page_table_size,
                )
                raise TranslationError(ExceptionType.ADDRESS_ERROR_EXCEPTION, addr)
            entry = self.page_table[vpn]
            if not entry.valid:
                self.debug.print_cont(
                    "a", "virtual page # %u is not valid!\n", vpn
                )
                raise TranslationError(ExceptionType.PAGE_FAULT_EXCEPTION, addr)
            return entry

        for entry in self.tlb:
            if entry.valid and entry.virtual_page == vpn:
                return entry
        self.debug.print_cont(
            "a", "no valid TLB entry found for this virtual page!\n"
        )
        raise TranslationError(ExceptionType.PAGE_FAULT_EXCEPTION, addr)

    def _translate(self, virt_addr: int, size: int, writing: bool) -> int:
        if size not in _ACCESS_SIZES:
            raise ValueError(f"memory accesses are 1, 2 or 4 bytes, not {size}")
        if (self.tlb is None) == (self.page_table is None):
            raise RuntimeError("the MMU needs either a TLB or a page table")

        self.debug.print("a", "\tTranslate: ")
        virt_addr &= 0xFFFFFFFF
        if (size == 4 and virt_addr & 0x3) or (size == 2 and virt_addr & 0x1):
            self.debug.print_cont(
                "a", "alignment problem at %u, size %u!\n", virt_addr, size
            )
            raise TranslationError(ExceptionType.ADDRESS_ERROR_EXCEPTION, virt_addr)

        vpn, offset = divmod(virt_addr, PAGE_SIZE)
        try:
            entry = self._retrieve_page_entry(vpn, virt_addr)
        finally:
            if self.stats is not None:
                if writing:
                    self.stats.num_disk_writes += 1
                else:
                    self.stats.num_disk_reads += 1

        if entry.read_only and writing:
            self.debug.print_cont("a", "%u mapped read-only!\n", virt_addr)
            raise TranslationError(ExceptionType.READ_ONLY_EXCEPTION, virt_addr)

        frame = entry.physical_page
        if frame >= self.num_physical_pages:
            self.debug.print_cont(
                "a", "frame %u > %u!\n", frame, self.num_physical_pages
            )
            raise TranslationError(ExceptionType.BUS_ERROR_EXCEPTION, virt_addr)

        entry.use = True
        if writing:
            entry.dirty = True

        physical = frame * PAGE_SIZE + offset
        if physical + size > self.memory_size:
            raise RuntimeError(f"physical address {physical:#x} outside memory")
        self.debug.print_cont("a", "physical address 0x%X\n", physical)
        return physical

    def tlb_load_entry(self, entry: TranslationEntry) -> None:
        """Copy `entry` into the TLB, replacing entries round robin."""
        if self.tlb is None:
            raise RuntimeError("TLB not present in the machine")
        slot = self.tlb[self.last_tlb_entry]
        slot.virtual_page = entry.virtual_page
        slot.physical_page = entry.physical_page
        slot.valid = entry.valid
        slot.read_only = entry.read_only
        slot.use = entry.use
        slot.dirty = entry.dirty
        self.last_tlb_entry = (self.last_tlb_entry + 1) % TLB_SIZE