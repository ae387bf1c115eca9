"""A hardware timer raising an interrupt at fixed or random intervals."""

import random
from typing import Callable, Optional

from nachosim.interrupt import Interrupt, IntType
from nachosim.statistics import TIMER_TICKS


class Timer:
    """Calls `handler` on every timer interrupt.

    With `do_random`, the delay between interrupts is drawn from `rng`
    between 1 and twice `TIMER_TICKS`; otherwise it is `TIMER_TICKS`.
    The first interrupt is scheduled on creation.
    """

    def __init__(
        self,
        interrupt: Interrupt,
        handler: Callable[[], None],
        do_random: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.interrupt = interrupt
        self.handler = handler
        self.randomize = do_random
        self._rng = random.Random() if rng is None else rng
        self.interrupt.schedule(
            self.timer_expired, self.time_of_next_interrupt(), IntType.TIMER_INT
        )

    def timer_expired(self) -> None:
        """Schedule the next timer interrupt, then call the handler."""
        self.interrupt.schedule(
            self.timer_expired, self.time_of_next_interrupt(), IntType.TIMER_INT
        )
        self.handler()

    def time_of_next_interrupt(self) -> int:
        """Ticks until the timer should next fire."""
        if self.randomize:
            return 1 + self._rng.randrange(TIMER_TICKS * 2)
        return TIMER_TICKS