import io
import random

from nachosim.interrupt import Interrupt, IntType
from nachosim.statistics import TIMER_TICKS
from nachosim.timer import Timer


def make_interrupt():
    return Interrupt(output=io.StringIO())


def test_fixed_interval():
    timer = Timer(make_interrupt(), lambda: None)
    assert timer.time_of_next_interrupt() == TIMER_TICKS


def test_first_interrupt_scheduled_on_creation():
    interrupt = make_interrupt()
    Timer(interrupt, lambda: None)
    pending = interrupt.pending_interrupts
    assert len(pending) == 1
    assert pending[0].type is IntType.TIMER_INT
    assert pending[0].when == TIMER_TICKS


def test_random_interval_in_range():
    timer = Timer(make_interrupt(), lambda: None, do_random=True,
                  rng=random.Random(7))
    delays = [timer.time_of_next_interrupt() for _ in range(500)]
    assert min(delays) >= 1
    assert max(delays) <= TIMER_TICKS * 2
    assert len(set(delays)) > 1


def test_expiry_calls_handler_and_reschedules():
    interrupt = make_interrupt()
    calls = []
    Timer(interrupt, lambda: calls.append(interrupt.stats.total_ticks))
    interrupt.stats.total_ticks = TIMER_TICKS - 1
    interrupt.one_tick()
    assert len(calls) == 1
    pending = interrupt.pending_interrupts
    assert len(pending) == 1
    assert pending[0].when == interrupt.stats.total_ticks + TIMER_TICKS


def test_timer_expired_direct_call():
    interrupt = make_interrupt()
    calls = []
    timer = Timer(interrupt, lambda: calls.append(1))
    timer.timer_expired()
    assert calls == [1]
    assert len(interrupt.pending_interrupts) == 2


def test_timer_with_other_interrupt_under_idle():
    interrupt = make_interrupt()
    ticks = []
    Timer(interrupt, lambda: ticks.append(interrupt.stats.total_ticks))
    interrupt.schedule(lambda: None, TIMER_TICKS * 3, IntType.DISK_INT)
    interrupt.idle()
    assert ticks == [TIMER_TICKS]
    assert interrupt.stats.idle_ticks == TIMER_TICKS