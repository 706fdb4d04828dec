"""The ComLynx serial port inside Mikey, clocked by timer 4 underflows."""

from __future__ import annotations

from collections import deque
from typing import Callable, Optional

UART_TX_INACTIVE = 0x80000000
UART_RX_INACTIVE = 0x80000000
UART_BREAK_CODE = 0x00008000
UART_MAX_RX_QUEUE = 32
UART_TX_TIME_PERIOD = 11
UART_RX_TIME_PERIOD = 11
UART_RX_NEXT_DELAY = 44

TxCallback = Callable[[int], None]


class ComLynx:
    """UART state: receive queue, transmit/receive countdowns and status flags.

    Transmit and receive share one wire, so everything sent is looped back
    into the front of the receive queue.
    """

    def __init__(self) -> None:
        self.cable_present = False
        self.tx_callback: Optional[TxCallback] = None
        self.rx_queue: deque[int] = deque()
        self.reset()

    def reset(self) -> None:
        self.rx_irq_enable = False
        self.tx_irq_enable = False
        self.tx_countdown = UART_TX_INACTIVE
        self.rx_countdown = UART_RX_INACTIVE
        self.rx_queue.clear()
        self.framing_error = False
        self.overrun_error = False
        self.sendbreak = False
        self.tx_data = 0
        self.rx_data = 0
        self.rx_ready = False
        self.parity_enable = False
        self.parity_even = False

    @property
    def rx_waiting(self) -> int:
        """Number of bytes queued for reception."""
        return len(self.rx_queue)

    def set_cable(self, status: bool) -> None:
        """Record whether a ComLynx cable is plugged in."""
        self.cable_present = bool(status)

    def _start_receive_if_idle(self) -> None:
        # A byte arriving on an empty queue must start the receive countdown,
        # otherwise it would never be picked up.
        if not self.rx_queue:
            self.rx_countdown = UART_RX_TIME_PERIOD

    def receive(self, data: int) -> None:
        """Queue a byte arriving from the cable; dropped when the queue is full."""
        if len(self.rx_queue) < UART_MAX_RX_QUEUE:
            self._start_receive_if_idle()
            self.rx_queue.append(data)

    def loopback(self, data: int) -> None:
        """Put a transmitted value at the front of the receive queue."""
        if len(self.rx_queue) < UART_MAX_RX_QUEUE:
            self._start_receive_if_idle()
            self.rx_queue.appendleft(data)

    def set_tx_callback(self, callback: Optional[TxCallback]) -> None:
        """Set the function called with each value sent down the cable."""
        self.tx_callback = callback

    def write_control(self, data: int) -> None:
        """Write the SERCTL register."""
        self.tx_irq_enable = bool(data & 0x80)
        self.rx_irq_enable = bool(data & 0x40)
        self.parity_enable = bool(data & 0x10)
        self.sendbreak = bool(data & 0x02)
        self.parity_even = bool(data & 0x01)

        if data & 0x08:
            self.overrun_error = False
            self.framing_error = False

        if self.sendbreak:
            # A break keeps re-triggering itself while the bit stays set.
            self.tx_countdown = UART_TX_TIME_PERIOD
            self.loopback(UART_BREAK_CODE)

    def read_control(self) -> int:
        """Read the SERCTL status register."""
        value = 0
        if self.tx_countdown & UART_TX_INACTIVE:
            value |= 0xA0  # TxDone and TxAllDone
        if self.rx_ready:
            value |= 0x40
        if self.overrun_error:
            value |= 0x08
        if self.framing_error:
            value |= 0x04
        if self.rx_data & UART_BREAK_CODE:
            value |= 0x02
        if self.rx_data & 0x0100:
            value |= 0x01
        return value

    def write_data(self, data: int) -> None:
        """Write SERDAT: start a transmission and loop it back."""
        self.tx_data = data & 0xFF
        self.tx_countdown = UART_TX_TIME_PERIOD
        self.loopback(self.tx_data)

    def read_data(self) -> int:
        """Read SERDAT, acknowledging the received byte."""
        self.rx_ready = False
        return self.rx_data & 0xFF

    def clock(self) -> None:
        """Advance the receive and transmit countdowns by one bit period."""
        if not self.rx_countdown:
            if self.rx_queue:
                self.rx_data = self.rx_queue.popleft()
            if self.rx_queue:
                self.rx_countdown = UART_RX_TIME_PERIOD + UART_RX_NEXT_DELAY
            else:
                self.rx_countdown = UART_RX_INACTIVE
            if self.rx_ready:
                self.overrun_error = True
            self.rx_ready = True
        elif not self.rx_countdown & UART_RX_INACTIVE:
            self.rx_countdown -= 1

        if not self.tx_countdown:
            if self.sendbreak:
                self.tx_data = UART_BREAK_CODE
                self.tx_countdown = UART_TX_TIME_PERIOD
                self.loopback(self.tx_data)
            else:
                self.tx_countdown = UART_TX_INACTIVE
            if self.tx_callback is not None:
                self.tx_callback(self.tx_data)
        elif not self.tx_countdown & UART_TX_INACTIVE:
            self.tx_countdown -= 1

    def irq_pending(self) -> bool:
        """Level-triggered serial interrupt condition."""
        if (self.tx_countdown & UART_TX_INACTIVE) and self.tx_irq_enable:
            return True
        return bool(self.rx_ready and self.rx_irq_enable)