"""Mikey screen DMA: palette, colour lookup and line rendering onto a surface."""

from __future__ import annotations

from dataclasses import dataclass, field

from .bus import DMA_RDWR_CYC

SCREEN_WIDTH = 160
SCREEN_HEIGHT = 102
LINE_SIZE = SCREEN_WIDTH // 2

# 32-bit colour: XRGB8888
RED_SHIFT_32 = 16
GREEN_SHIFT_32 = 8
BLUE_SHIFT_32 = 0
ALPHA_SHIFT_32 = 24

_MASK32 = 0xFFFFFFFF


def make_color_32(r: int, g: int, b: int, a: int) -> int:
    """Pack an XRGB8888 pixel."""
    return (r << RED_SHIFT_32) | (g << GREEN_SHIFT_32) | (b << BLUE_SHIFT_32) | (a << ALPHA_SHIFT_32)


def make_color_16(r: int, g: int, b: int, a: int) -> int:
    """Pack an RGB565 pixel; alpha is ignored."""
    return ((r >> 3) << 11) | ((g >> 2) << 5) | (b >> 3)


def make_color_15(r: int, g: int, b: int, a: int) -> int:
    """Pack an RGB555 pixel; alpha is ignored."""
    return ((r >> 3) << 10) | ((g >> 3) << 5) | (b >> 3)


def make_color_15_1(r: int, g: int, b: int, a: int) -> int:
    """Pack a BGR555 pixel; alpha is ignored."""
    return (r >> 3) | ((g >> 3) << 5) | ((b >> 3) << 10)


@dataclass
class PaletteEntry:
    """One of the sixteen 12-bit palette colours."""

    green: int = 0
    red: int = 0
    blue: int = 0

    @property
    def index(self) -> int:
        """The packed 12-bit value used to look up the colour map."""
        return (self.green & 0xF) | ((self.red & 0xF) << 4) | ((self.blue & 0xF) << 8)

    @index.setter
    def index(self, value: int) -> None:
        self.green = value & 0xF
        self.red = (value >> 4) & 0xF
        self.blue = (value >> 8) & 0xF


@dataclass
class Surface:
    """A pixel buffer; pitch is counted in pixels."""

    width: int
    height: int
    pitch: int
    bpp: int
    pixels: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.pixels:
            self.pixels = [0] * (self.pitch * self.height)


def _default_palette() -> list[PaletteEntry]:
    entries = []
    for number in range(16):
        entry = PaletteEntry()
        entry.index = number
        entries.append(entry)
    return entries


class Display:
    """Display registers and the line-by-line screen DMA."""

    def __init__(self) -> None:
        self.surface: Surface | None = None
        self.current_line = 0
        self.skip_frame = False
        self.line_drawn = [False] * SCREEN_HEIGHT
        self.palette = _default_palette()
        self.colour_map = [0] * 4096
        self.reset()

    def reset(self) -> None:
        self.display_address = 0
        self.lynx_line = 0
        self.lynx_line_dma_counter = 0
        self.lynx_addr = 0
        self.rest_signal = False
        for number, entry in enumerate(self.palette):
            entry.index = number
        self.dma_enable = False
        self.flip = False
        self.four_colour = False
        self.colour = False

    def set_attributes(self, bpp: int) -> None:
        """Detach the surface and rebuild the colour map for 16 or 32 bits per pixel."""
        self.surface = None
        if bpp == 16:
            pack = make_color_16
        elif bpp == 32:
            pack = make_color_32
        else:
            return
        spot = PaletteEntry()
        for index in range(4096):
            spot.index = index
            r = spot.red * 15 + 30
            g = spot.green * 15 + 30
            b = spot.blue * 15 + 30
            self.colour_map[index] = pack(r, g, b, 0)

    def write_control(self, data: int) -> None:
        """Decode the DISPCTL register."""
        self.dma_enable = bool(data & 0x01)
        self.flip = bool(data & 0x02)
        self.four_colour = bool(data & 0x04)
        self.colour = bool(data & 0x08)

    def _pixel(self, nibble: int) -> int:
        return self.colour_map[self.palette[nibble].index]

    def copy_line(self, ram: bytes | bytearray) -> None:
        """Convert one line of packed 4-bit pixels from RAM onto the surface."""
        surface = self.surface
        if surface is None or self.current_line > SCREEN_HEIGHT:
            return
        if surface.bpp not in (16, 32):
            return
        row = self.current_line * surface.pitch
        if row + SCREEN_WIDTH > len(surface.pixels):
            return
        pixels = surface.pixels
        out = row
        for _ in range(LINE_SIZE):
            source = ram[self.lynx_addr & 0xFFFF]
            if self.flip:
                self.lynx_addr = (self.lynx_addr - 1) & _MASK32
                first, second = source & 0x0F, source >> 4
            else:
                self.lynx_addr = (self.lynx_addr + 1) & _MASK32
                first, second = source >> 4, source & 0x0F
            pixels[out] = self._pixel(first)
            pixels[out + 1] = self._pixel(second)
            out += 2

    def render_line(self, ram: bytes | bytearray, line_reload: int) -> int | None:
        """Advance the line counter; return DMA cycles used, or None when the display is idle.

        A None result means no line interrupt is due.
        """
        if self.surface is None or not self.dma_enable:
            return None
        work_done = 0

        self.rest_signal = self.lynx_line in (line_reload - 2, line_reload - 3, line_reload - 4)

        if self.lynx_line == line_reload - 3:
            self.lynx_addr = self.display_address & 0xFFFC
            if self.flip:
                self.lynx_addr += 3
            self.lynx_line_dma_counter = SCREEN_HEIGHT

        if self.lynx_line:
            self.lynx_line -= 1

        if self.lynx_line_dma_counter:
            self.lynx_line_dma_counter -= 1
            work_done += (80 + 80) * DMA_RDWR_CYC
            if not self.skip_frame:
                self.copy_line(ram)
                if self.current_line < SCREEN_HEIGHT:
                    self.line_drawn[self.current_line] = True
                self.current_line += 1
        return work_done

    def end_of_frame(self, line_reload: int) -> int:
        """Stop line DMA, reload the line counter and detach the surface."""
        self.lynx_line_dma_counter = 0
        self.lynx_line = line_reload
        self.surface = None
        return 0