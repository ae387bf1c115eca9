"""An entry of a page table or TLB: one virtual page mapped to one frame."""

from dataclasses import dataclass


@dataclass
class TranslationEntry:
    """Mapping of `virtual_page` to `physical_page`, with access bits.

    `valid` says whether the entry may be used; `read_only` forbids writes;
    `use` and `dirty` are set by the hardware on access and on writes.
    """

    virtual_page: int = 0
    physical_page: int = 0
    valid: bool = False
    read_only: bool = False
    use: bool = False
    dirty: bool = False