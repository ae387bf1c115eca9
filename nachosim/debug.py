"""Debug messages selected by single-character flags.

Pre-defined flags:

* ``+`` -- every debug message.
* ``t`` -- thread system.
* ``s`` -- semaphores, locks and conditions.
* ``i`` -- interrupt emulation.
* ``m`` -- machine emulation.
* ``d`` -- disk emulation.
* ``f`` -- file system.
* ``a`` -- address spaces.
* ``e`` -- exception handling.
"""

import inspect
import sys
import time
from dataclasses import dataclass, field
from typing import Optional, TextIO


@dataclass
class DebugOpts:
    """Options controlling how debug messages are printed."""

    location: bool = False
    """Print the file name and line number of the caller before the message."""
    function: bool = False
    """Print the calling function's name before the message."""
    sleep: bool = False
    """Sleep for a second after each message."""
    interactive: bool = False
    """Wait for a line of input after each message."""


@dataclass
class Debug:
    """Prints messages whose flag is among the enabled ones.

    No flag is enabled at first, so nothing is printed until `flags` is set.
    Output goes to `stream` (stdout when None); interactive waits read from
    `input_stream` (stdin when None).
    """

    flags: Optional[str] = ""
    opts: DebugOpts = field(default_factory=DebugOpts)
    stream: Optional[TextIO] = None
    input_stream: Optional[TextIO] = None

    def _out(self) -> TextIO:
        return sys.stdout if self.stream is None else self.stream

    def is_enabled(self, flag: str) -> bool:
        """Whether messages with `flag` are printed."""
        if self.flags is None:
            return False
        return flag in self.flags or "+" in self.flags

    def print(self, flag: str, fmt: str, *args: object) -> None:
        """Print a printf-style message prefixed with its flag, if enabled."""
        if fmt is None:
            raise TypeError("format must be a string")
        if not self.is_enabled(flag):
            return
        out = self._out()
        if self.opts.location or self.opts.function:
            caller = inspect.currentframe().f_back
            try:
                if self.opts.location:
                    out.write(
                        f"[location: {caller.f_code.co_filename}:{caller.f_lineno}]\n"
                    )
                if self.opts.function:
                    out.write(f"[function: {caller.f_code.co_name}]\n")
            finally:
                del caller
        out.write(f"[{flag}] ")
        out.write(fmt % args)
        out.flush()
        if self.opts.sleep:
            time.sleep(1)
        if self.opts.interactive:
            source = sys.stdin if self.input_stream is None else self.input_stream
            source.readline()

    def print_cont(self, flag: str, fmt: str, *args: object) -> None:
        """Like `print`, but without the flag prefix or any option effects."""
        if fmt is None:
            raise TypeError("format must be a string")
        if not self.is_enabled(flag):
            return
        out = self._out()
        out.write(fmt % args)
        out.flush()


debug = Debug()
"""Process-wide debug printer."""