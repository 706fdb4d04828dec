"""Shared machine state, bus timing constants and the device interface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

# Bus cycle costs at 16 MHz (62.5 ns per cycle).
CPU_RDWR_CYC = 5
DMA_RDWR_CYC = 4
SPR_RDWR_CYC = 3

_MASK32 = 0xFFFFFFFF


class MemoryDevice(Protocol):
    """Anything that can sit on the system bus."""

    def peek(self, addr: int) -> int: ...

    def poke(self, addr: int, data: int) -> None: ...

    def read_cycle(self) -> int: ...

    def write_cycle(self) -> int: ...

    def object_size(self) -> int: ...


@dataclass
class SystemClock:
    """Global cycle counter and CPU/interrupt status lines."""

    cycle_count: int = 0
    next_timer_event: int = 0
    suzie_done_time: int = 0
    irq: bool = False
    nmi: bool = False
    cpu_sleep: bool = False
    halt: bool = False

    def add_cycles(self, count: int) -> int:
        """Advance the 32-bit cycle counter and return its new value."""
        self.cycle_count = (self.cycle_count + count) & _MASK32
        return self.cycle_count

    def reset(self) -> None:
        self.cycle_count = 0
        self.next_timer_event = 0
        self.suzie_done_time = 0
        self.irq = False
        self.nmi = False
        self.cpu_sleep = False
        self.halt = False