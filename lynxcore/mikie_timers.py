"""Mikey's hardware timers, audio channels and the stereo output mixer."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional, Sequence

_MASK32 = 0xFFFFFFFF
_SIGN32 = 0x80000000

# Audio register offsets inside each channel's eight-byte block.
AUD_VOL = 0
AUD_SHFTFB = 1
AUD_OUTVAL = 2
AUD_L8SHFT = 3
AUD_TBACK = 4
AUD_CTL = 5
AUD_COUNT = 6
AUD_MISC = 7

_LFSR_TAPS = (7, 0, 1, 2, 3, 4, 5, 10, 11)


def _to_int8(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // denominator
    return quotient if numerator >= 0 else -quotient


def lfsr_next(current: int) -> int:
    """Step the audio shift register.

    Bits 0-11 hold the register, bits 12-20 the feedback tap switches for
    register bits 7, 0, 1, 2, 3, 4, 5, 10 and 11.
    """
    switches = current >> 12
    lfsr = current & 0xFFF
    feedback = 0
    for position, tap in enumerate(_LFSR_TAPS):
        if (switches >> position) & 1:
            feedback ^= (lfsr >> tap) & 1
    new_bit = 0 if feedback else 1
    return (switches << 12) | ((lfsr << 1) & 0xFFE) | new_bit


class TimerMode(Enum):
    """How a timer counts, following the hardware's fixed roles."""

    GENERAL = "general"    # linkable, one-shot capable (timers 1, 3, 5, 7)
    UNLINKED = "unlinked"  # one-shot capable, never linked (timer 6)
    LINE = "line"          # always reloads, never linked (timer 0)
    FRAME = "frame"        # always reloads, always linked (timer 2)
    UART = "uart"          # serial baud clock (timer 4)


class Timer:
    """A down-counter clocked by the system clock or by its predecessor's borrow."""

    def __init__(self, mode: TimerMode = TimerMode.GENERAL) -> None:
        self.mode = mode
        self.reset()

    def reset(self) -> None:
        self.backup = 0
        self.enable_reload = False
        self.enable_count = False
        self.linking = 0
        self.current = 0
        self.timer_done = False
        self.last_clock = False
        self.borrow_in = False
        self.borrow_out = False
        self.last_link_carry = False
        self.last_count = 0

    def write_control_a(self, data: int, cycle_count: int) -> bool:
        """Write CTLA (interrupt enable excepted); True if the next event must be rescheduled now."""
        self.enable_reload = bool(data & 0x10)
        self.enable_count = bool(data & 0x08)
        self.linking = data & 0x07
        if data & 0x40:
            self.timer_done = False
        if data & 0x48:
            self.last_count = cycle_count & _MASK32
            return True
        return False

    def read_control_a(self, irq_enabled: bool) -> int:
        value = 0x80 if irq_enabled else 0x00
        if self.enable_reload:
            value |= 0x10
        if self.enable_count:
            value |= 0x08
        return value | self.linking

    def write_control_b(self, data: int) -> None:
        self.timer_done = bool(data & 0x08)
        self.last_clock = bool(data & 0x04)
        self.borrow_in = bool(data & 0x02)
        self.borrow_out = bool(data & 0x01)

    def read_control_b(self) -> int:
        value = 0
        if self.timer_done:
            value |= 0x08
        if self.last_clock:
            value |= 0x04
        if self.borrow_in:
            value |= 0x02
        if self.borrow_out:
            value |= 0x01
        return value

    def _counting(self) -> bool:
        if self.mode in (TimerMode.LINE, TimerMode.FRAME, TimerMode.UART):
            return self.enable_count
        return self.enable_count and (self.enable_reload or not self.timer_done)

    def _linked(self) -> bool:
        if self.mode is TimerMode.FRAME:
            return True
        if self.mode is TimerMode.GENERAL:
            return self.linking == 0x07
        return False

    def _divide(self) -> int:
        extra = 3 if self.mode is TimerMode.UART else 0
        return 4 + extra + self.linking

    def tick(self, cycle_count: int, carry_in: Optional[bool] = None) -> bool:
        """Bring the counter up to cycle_count; True when it underflowed.

        carry_in is the borrow of the timer this one is linked to, or None
        when there is no such source.
        """
        if not self._counting():
            return False
        if self._linked():
            if carry_in is None and self.mode is not TimerMode.FRAME:
                return False
            decval = 1 if carry_in else 0
            self.last_link_carry = bool(carry_in)
            divide = 0
        else:
            divide = self._divide()
            decval = ((cycle_count - self.last_count) & _MASK32) >> divide

        uart = self.mode is TimerMode.UART
        if not decval:
            if not uart:
                self.borrow_in = False
                self.borrow_out = False
            return False

        if self.mode is not TimerMode.FRAME:
            self.last_count = (self.last_count + (decval << divide)) & _MASK32
        self.current = (self.current - decval) & _MASK32
        underflow = bool(self.current & _SIGN32)
        if underflow:
            self.borrow_out = True
            self._underflow(cycle_count)
        elif not uart:
            self.borrow_out = False
        if not uart:
            self.borrow_in = True
        return underflow

    def _underflow(self, cycle_count: int) -> None:
        if self.mode is TimerMode.UART:
            self.current = (self.current + self.backup + 1) & _MASK32
            # Low reload values with late servicing can still leave it negative.
            if self.current & _SIGN32:
                self.current = self.backup
                self.last_count = cycle_count & _MASK32
            return
        if self.mode in (TimerMode.LINE, TimerMode.FRAME) or self.enable_reload:
            self.current = (self.current + self.backup + 1) & _MASK32
        else:
            self.current = 0
        self.timer_done = True

    def predict(self, cycle_count: int) -> Optional[int]:
        """Cycle at which this timer next needs service, or None if it cannot say."""
        if not self._counting() or self._linked():
            return None
        if self.current & _SIGN32:
            delay = 1
        else:
            delay = ((self.current + 1) << self._divide()) & _MASK32
        return (delay + cycle_count) & _MASK32


class AudioChannel(Timer):
    """A timer driving a shift-register waveform generator."""

    def __init__(self) -> None:
        super().__init__(TimerMode.GENERAL)

    def reset(self) -> None:
        super().reset()
        self.volume = 0
        self.output = 0
        self.integrate_enable = False
        self.waveshaper = 0

    def write_register(self, reg: int, data: int, cycle_count: int) -> bool:
        """Write one of the eight channel registers; True if the next event must be rescheduled now."""
        data &= 0xFF
        if reg == AUD_VOL:
            self.volume = _to_int8(data)
        elif reg == AUD_SHFTFB:
            self.waveshaper = (self.waveshaper & 0x001FFF) | (data << 13)
        elif reg == AUD_OUTVAL:
            self.output = _to_int8(data)
        elif reg == AUD_L8SHFT:
            self.waveshaper = (self.waveshaper & 0x1FFF00) | data
        elif reg == AUD_TBACK:
            self.backup = data
        elif reg == AUD_CTL:
            self.integrate_enable = bool(data & 0x20)
            self.waveshaper &= 0x1FEFFF
            if data & 0x80:
                self.waveshaper |= 0x001000
            return self.write_control_a(data, cycle_count)
        elif reg == AUD_COUNT:
            self.current = data
        elif reg == AUD_MISC:
            self.waveshaper = (self.waveshaper & 0x1FF0FF) | ((data & 0xF0) << 4)
            self.borrow_in = bool(data & 0x02)
            self.borrow_out = bool(data & 0x01)
            self.last_clock = bool(data & 0x04)
        else:
            raise ValueError(f"no audio register {reg}")
        return False

    def read_register(self, reg: int) -> int:
        if reg == AUD_VOL:
            return self.volume & 0xFF
        if reg == AUD_SHFTFB:
            return (self.waveshaper >> 13) & 0xFF
        if reg == AUD_OUTVAL:
            return self.output & 0xFF
        if reg == AUD_L8SHFT:
            return self.waveshaper & 0xFF
        if reg == AUD_TBACK:
            return self.backup & 0xFF
        if reg == AUD_CTL:
            value = 0x20 if self.integrate_enable else 0x00
            if self.enable_reload:
                value |= 0x10
            if self.enable_count:
                value |= 0x08
            if self.waveshaper & 0x001000:
                value |= 0x80
            return value | self.linking
        if reg == AUD_COUNT:
            return self.current & 0xFF
        if reg == AUD_MISC:
            value = 0x01 if self.borrow_out else 0x00
            if self.borrow_in:
                value |= 0x02
            if self.last_clock:
                value |= 0x08
            return value | ((self.waveshaper >> 4) & 0xF0)
        raise ValueError(f"no audio register {reg}")

    def shape(self) -> int:
        """Clock the waveform generator once and return the new output level."""
        if self.backup or self.linking:
            self.waveshaper = lfsr_next(self.waveshaper)
        high = bool(self.waveshaper & 0x0001)
        if self.integrate_enable:
            level = self.output + (self.volume if high else -self.volume)
            self.output = max(-128, min(127, level))
        else:
            self.output = _to_int8(self.volume if high else -self.volume)
        return self.output

    def _underflow(self, cycle_count: int) -> None:
        if self.enable_reload:
            self.current = (self.current + self.backup + 1) & _MASK32
            if self.current & _SIGN32:
                self.current = 0
        else:
            self.timer_done = True
            self.current = 0
        self.shape()


class SampleDelta(NamedTuple):
    """Change in each stereo side at a point in time."""

    time: int
    left: int
    right: int


class AudioMixer:
    """Combines the four channel outputs into left and right sample steps."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.left = 0
        self.right = 0

    def mix(
        self,
        time: int,
        outputs: Sequence[int],
        stereo: int,
        pan: int,
        atten: Sequence[int],
    ) -> SampleDelta:
        """Mix the channels; stereo has a bit set for each enabled channel side.

        Upper nibbles of stereo and pan select left, lower nibbles right;
        attenuation nibbles scale a panned channel by n/16.
        """
        left = 0
        right = 0
        for channel, (output, level) in enumerate(zip(outputs, atten)):
            left_bit = 0x10 << channel
            right_bit = 0x01 << channel
            if stereo & left_bit:
                if pan & left_bit:
                    left += _trunc_div(output * (level & 0xF0), 16 * 16)
                else:
                    left += output
            if stereo & right_bit:
                if pan & right_bit:
                    right += _trunc_div(output * (level & 0x0F), 16)
                else:
                    right += output
        delta = SampleDelta((time & _MASK32) >> 2, left - self.left, right - self.right)
        self.left = left
        self.right = right
        return delta