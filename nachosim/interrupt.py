"""Simulation of hardware interrupts and of the passage of simulated time.

Time advances only when interrupts are re-enabled, when a user instruction
is executed, or when there is nothing ready to run.  Interrupts therefore
fire only at those points, never in the middle of other code.
"""

import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional, TextIO

from nachosim.debug import Debug, debug as _global_debug
from nachosim.itemlist import ItemList
from nachosim.statistics import SYSTEM_TICK, USER_TICK, Statistics

_UINT_MAX = 0xFFFFFFFF
_ULONG_MAX = 0xFFFFFFFFFFFFFFFF


class IntStatus(IntEnum):
    """Whether interrupts are disabled or enabled."""

    INT_OFF = 0
    INT_ON = 1

    @property
    def label(self) -> str:
        return "enabled" if self is IntStatus.INT_ON else "disabled"


class MachineStatus(IntEnum):
    """What the machine is running: nothing, kernel code or user code."""

    IDLE_MODE = 0
    SYSTEM_MODE = 1
    USER_MODE = 2


class IntType(IntEnum):
    """The hardware device that raised an interrupt."""

    TIMER_INT = 0
    DISK_INT = 1
    CONSOLE_WRITE_INT = 2
    CONSOLE_READ_INT = 3

    @property
    def label(self) -> str:
        return _INT_TYPE_NAMES[self]


_INT_TYPE_NAMES = {
    IntType.TIMER_INT: "timer",
    IntType.DISK_INT: "disk",
    IntType.CONSOLE_WRITE_INT: "console write",
    IntType.CONSOLE_READ_INT: "console read",
}


@dataclass
class PendingInterrupt:
    """An interrupt scheduled to fire at simulated time `when`."""

    handler: Callable[[], None]
    when: int
    type: IntType


class MachineHalted(Exception):
    """Raised when the simulated machine shuts down."""


class Interrupt:
    """Interrupt controller and simulated clock.

    * `stats` receives the tick counts (a fresh `Statistics` by default).
    * `yield_callback` is called when a handler asked for a context switch
      on return (the running thread's yield).
    * `before_handler` is called just before any handler runs (used to
      finish a pending delayed load in the CPU).
    * `dfs_ticks_fix` resets the tick counter instead of failing when it
      would overflow 32 bits.
    """

    def __init__(
        self,
        stats: Optional[Statistics] = None,
        *,
        output: Optional[TextIO] = None,
        yield_callback: Optional[Callable[[], None]] = None,
        before_handler: Optional[Callable[[], None]] = None,
        dfs_ticks_fix: bool = False,
        debug: Optional[Debug] = None,
    ) -> None:
        self.stats = Statistics() if stats is None else stats
        self.output = output
        self.yield_callback = yield_callback
        self.before_handler = before_handler
        self.dfs_ticks_fix = dfs_ticks_fix
        self.debug = _global_debug if debug is None else debug
        self.status = MachineStatus.SYSTEM_MODE
        self._level = IntStatus.INT_OFF
        self._pending = ItemList()
        self._in_handler = False
        self._yield_on_return = False

    def _out(self) -> TextIO:
        return sys.stdout if self.output is None else self.output

    @property
    def level(self) -> IntStatus:
        """Whether interrupts are currently enabled."""
        return self._level

    @property
    def in_handler(self) -> bool:
        """Whether an interrupt handler is running."""
        return self._in_handler

    @property
    def pending_interrupts(self) -> list[PendingInterrupt]:
        """The scheduled interrupts, earliest first."""
        return list(self._pending)

    def _change_level(self, now: IntStatus) -> None:
        self._level = IntStatus(now)
        self.debug.print("i", "Interrupts %s\n", self._level.label)

    def set_level(self, level: IntStatus) -> IntStatus:
        """Enable or disable interrupts and return the previous level.

        Enabling them advances simulated time by one tick.
        """
        level = IntStatus(level)
        old = self._level
        if level is IntStatus.INT_ON and self._in_handler:
            raise RuntimeError("interrupt handlers may not enable interrupts")
        self._change_level(level)
        if level is IntStatus.INT_ON and old is IntStatus.INT_OFF:
            self.one_tick()
        return old

    def enable(self) -> None:
        """Turn interrupts on."""
        self.set_level(IntStatus.INT_ON)

    def one_tick(self) -> None:
        """Advance simulated time and fire any interrupts now due."""
        old = self.status
        if self.status is MachineStatus.SYSTEM_MODE:
            self.stats.total_ticks += SYSTEM_TICK
            self.stats.system_ticks += SYSTEM_TICK
        else:
            self.stats.total_ticks += USER_TICK
            self.stats.user_ticks += USER_TICK
        self.debug.print("i", "== Tick %u ==\n", self.stats.total_ticks)

        self._change_level(IntStatus.INT_OFF)
        while self._check_if_due(False):
            pass
        self._change_level(IntStatus.INT_ON)
        if self._yield_on_return:
            self._yield_on_return = False
            self.status = MachineStatus.SYSTEM_MODE
            self.debug.print("i", "yieldOnReturn was set, yielding thread\n")
            if self.yield_callback is not None:
                self.yield_callback()
            self.status = old

    def yield_on_return(self) -> None:
        """Ask for a context switch once the current handler returns."""
        self._yield_on_return = True

    def idle(self) -> None:
        """Advance time to the next pending interrupt; halt if there is none."""
        self.debug.print("i", "Machine idling; checking for interrupts.\n")
        self.status = MachineStatus.IDLE_MODE
        if self._check_if_due(True):
            while self._check_if_due(False):
                pass
            self._yield_on_return = False
            self.status = MachineStatus.SYSTEM_MODE
            return

        self.debug.print("i", "Machine idle.  No interrupts to do.\n")
        out = self._out()
        out.write("No threads ready or runnable, and no pending interrupts.\n")
        out.write("Assuming the program completed.\n")
        self.halt()

    def halt(self) -> None:
        """Print the statistics and shut the machine down."""
        out = self._out()
        out.write("Machine halting!\n\n")
        self.stats.dump(out)
        raise MachineHalted()

    def _restart_ticks(self) -> None:
        old_pending = self._pending
        self._pending = ItemList()
        while (popped := old_pending.sorted_pop()) is not None:
            pending, old_when = popped
            new_when = old_when - self.stats.total_ticks
            pending.when = new_when
            self._pending.sorted_insert(pending, new_when)
            self.debug.print(
                "x",
                "Interrupt at time %u re-scheduled at new time %u.\n",
                old_when,
                new_when,
            )
        self.stats.total_ticks = 0
        self.stats.tick_resets += 1

    def schedule(
        self, handler: Callable[[], None], from_now: int, int_type: IntType
    ) -> None:
        """Arrange for `handler` to be called `from_now` ticks in the future."""
        if not callable(handler):
            raise TypeError("interrupt handler must be callable")
        if from_now <= 0:
            raise ValueError("an interrupt must be scheduled in the future")
        if not isinstance(int_type, IntType):
            raise ValueError(f"unknown interrupt type {int_type!r}")

        if self.dfs_ticks_fix:
            if _UINT_MAX - self.stats.total_ticks < from_now:
                self.debug.print(
                    "x", "WARNING: total tick count is too large and will be reset.\n"
                )
                self._restart_ticks()
        elif not _ULONG_MAX - self.stats.total_ticks > from_now:
            raise OverflowError("simulated tick counter overflowed")

        when = self.stats.total_ticks + from_now
        self.debug.print(
            "i",
            "Scheduling interrupt handler for the %s at time = %u\n",
            int_type.label,
            when,
        )
        self._pending.sorted_insert(PendingInterrupt(handler, when, int_type), when)

    def _check_if_due(self, advance_clock: bool) -> bool:
        old = self.status
        if self._level is not IntStatus.INT_OFF:
            raise RuntimeError("interrupts must be disabled to run handlers")
        if self.debug.is_enabled("i"):
            self.dump_state()
        popped = self._pending.sorted_pop()
        if popped is None:
            return False
        to_occur, when = popped

        if advance_clock and when > self.stats.total_ticks:
            self.stats.idle_ticks += when - self.stats.total_ticks
            self.stats.total_ticks = when
        elif when > self.stats.total_ticks:
            self._pending.sorted_insert(to_occur, when)
            return False

        if (
            self.status is MachineStatus.IDLE_MODE
            and to_occur.type is IntType.TIMER_INT
            and self._pending.is_empty()
        ):
            self._pending.sorted_insert(to_occur, when)
            return False

        self.debug.print(
            "i",
            "Invoking interrupt handler for the %s at time %u\n",
            to_occur.type.label,
            to_occur.when,
        )
        if self.before_handler is not None:
            self.before_handler()
        self._in_handler = True
        self.status = MachineStatus.SYSTEM_MODE
        try:
            to_occur.handler()
        finally:
            self.status = old
            self._in_handler = False
        return True

    def dump_state(self) -> None:
        """Print the clock, the interrupt level and every pending interrupt."""
        out = self._out()
        out.write(
            f"Time: {self.stats.total_ticks}, interrupts {self._level.label}\n"
        )
        if self._pending.is_empty():
            out.write("No pending interrupts\n")
        else:
            out.write("Pending interrupts:\n")
            for pending in self._pending:
                out.write(
                    f"    Handler {pending.type.label}, scheduled at {pending.when}\n"
                )