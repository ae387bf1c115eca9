"""Counters describing the simulated machine's performance."""

import sys
from dataclasses import dataclass
from typing import Optional, TextIO

USER_TICK = 1
"""Time advanced for each user-level instruction."""
SYSTEM_TICK = 10
"""Time advanced each time interrupts are enabled."""
ROTATION_TIME = 500
"""Time the disk takes to rotate past one sector."""
SEEK_TIME = 500
"""Time the disk takes to seek past one track."""
CONSOLE_TIME = 100
"""Time to read or write one console character."""
TIMER_TICKS = 100
"""Average time between timer interrupts."""


@dataclass
class Statistics:
    """Performance counters, all starting at zero.

    `swap_enabled` adds the swap counters to the report.
    """

    total_ticks: int = 0
    idle_ticks: int = 0
    system_ticks: int = 0
    user_ticks: int = 0
    num_disk_reads: int = 0
    num_disk_writes: int = 0
    num_console_chars_read: int = 0
    num_console_chars_written: int = 0
    num_page_faults: int = 0
    num_swap_out_pages: int = 0
    num_swap_in_pages: int = 0
    tick_resets: int = 0
    swap_enabled: bool = False

    def report(self) -> str:
        """The statistics as printed at shutdown."""
        lines = []
        if self.tick_resets != 0:
            lines.append(
                f"WARNING: the tick counter was reset {self.tick_resets} times;"
                " the following statistics may be invalid.\n"
            )
        lines.append(
            f"Ticks: total {self.total_ticks}, idle {self.idle_ticks}, "
            f"system {self.system_ticks}, user {self.user_ticks}"
        )
        lines.append(
            f"Disk I/O: reads {self.num_disk_reads}, writes {self.num_disk_writes}"
        )
        lines.append(
            f"Console I/O: reads {self.num_console_chars_read}, "
            f"writes {self.num_console_chars_written}"
        )
        lines.append(f"Paging: faults {self.num_page_faults}")
        if self.swap_enabled:
            lines.append(
                f"Swap: pages in {self.num_swap_in_pages}, "
                f"pages out {self.num_swap_out_pages}"
            )
        return "\n".join(lines) + "\n"

    def dump(self, file: Optional[TextIO] = None) -> None:
        """Write the report to `file` (stdout by default)."""
        out = sys.stdout if file is None else file
        out.write(self.report())