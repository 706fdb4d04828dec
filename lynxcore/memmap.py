"""The $FFF9 register that decides which devices the CPU sees."""

from __future__ import annotations

from typing import Any, Mapping

SYSTEM_SIZE = 0x10000
MEMMAP_ADDR = 0xFFF9
MEMMAP_SIZE = 0x1

SUSIE_START = 0xFC00
SUSIE_SIZE = 0x100
MIKIE_START = 0xFD00
MIKIE_SIZE = 0x100
BROM_START = 0xFE00
BROM_SIZE = 0x200
VECTOR_START = 0xFFFA
VECTOR_SIZE = 0x6

_SUSIE_RANGE = range(SUSIE_START, SUSIE_START + SUSIE_SIZE)
_MIKIE_RANGE = range(MIKIE_START, MIKIE_START + MIKIE_SIZE)
_ROM_RANGE = range(BROM_START, BROM_START + BROM_SIZE - 8)
_VECTOR_RANGE = range(VECTOR_START, VECTOR_START + VECTOR_SIZE)

_STATE_KEYS = ("mikie_enabled", "susie_enabled", "rom_enabled", "vectors_enabled")


class MemoryMap:
    """Maintains the per-address handler table for the upper memory area."""

    def __init__(self, ram: Any, rom: Any, susie: Any, mikie: Any) -> None:
        self.ram = ram
        self.rom = rom
        self.susie = susie
        self.mikie = mikie
        self.handlers: list[Any] = [ram] * SYSTEM_SIZE
        self.susie_enabled: bool | None = None
        self.mikie_enabled: bool | None = None
        self.rom_enabled: bool | None = None
        self.vectors_enabled: bool | None = None
        self.reset()

    def reset(self) -> None:
        self.handlers = [self.ram] * SYSTEM_SIZE
        self.handlers[0xFFF8] = self.ram
        self.handlers[MEMMAP_ADDR] = self
        self._invalidate()
        self.poke(0, 0)

    def _invalidate(self) -> None:
        self.susie_enabled = None
        self.mikie_enabled = None
        self.rom_enabled = None
        self.vectors_enabled = None

    def _assign(self, span: range, device: Any) -> None:
        self.handlers[span.start:span.stop] = [device] * len(span)

    def poke(self, addr: int, data: int) -> None:
        """Write the map register; a clear bit enables the device."""
        enabled = not data & 0x01
        if enabled != self.susie_enabled:
            self.susie_enabled = enabled
            self._assign(_SUSIE_RANGE, self.susie if enabled else self.ram)

        enabled = not data & 0x02
        if enabled != self.mikie_enabled:
            self.mikie_enabled = enabled
            self._assign(_MIKIE_RANGE, self.mikie if enabled else self.ram)

        enabled = not data & 0x04
        if enabled != self.rom_enabled:
            self.rom_enabled = enabled
            self._assign(_ROM_RANGE, self.rom if enabled else self.ram)

        enabled = not data & 0x08
        if enabled != self.vectors_enabled:
            self.vectors_enabled = enabled
            self._assign(_VECTOR_RANGE, self.rom if enabled else self.ram)

    def peek(self, addr: int) -> int:
        """Read back the map register."""
        value = 0
        if not self.susie_enabled:
            value |= 0x01
        if not self.mikie_enabled:
            value |= 0x02
        if not self.rom_enabled:
            value |= 0x04
        if not self.vectors_enabled:
            value |= 0x08
        return value

    def read_cycle(self) -> int:
        return 5

    def write_cycle(self) -> int:
        return 5

    def object_size(self) -> int:
        return MEMMAP_SIZE

    def save_state(self) -> dict[str, bool]:
        return {
            "mikie_enabled": bool(self.mikie_enabled),
            "susie_enabled": bool(self.susie_enabled),
            "rom_enabled": bool(self.rom_enabled),
            "vectors_enabled": bool(self.vectors_enabled),
        }

    def load_state(self, state: Mapping[str, Any]) -> None:
        """Restore the flags and rebuild the handler table to match."""
        missing = [key for key in _STATE_KEYS if key not in state]
        if missing:
            raise KeyError(f"memory map state lacks {', '.join(missing)}")
        self.mikie_enabled = bool(state["mikie_enabled"])
        self.susie_enabled = bool(state["susie_enabled"])
        self.rom_enabled = bool(state["rom_enabled"])
        self.vectors_enabled = bool(state["vectors_enabled"])
        value = self.peek(0)
        self._invalidate()
        self.poke(0, value)