"""Atari Lynx hardware pieces: memory map, ROM buffer, Mikey timers, audio, display and serial."""

__version__ = "0.1.0"

__all__ = [
    "memfile",
    "bus",
    "memmap",
    "mikie_display",
    "mikie_uart",
    "mikie_timers",
]