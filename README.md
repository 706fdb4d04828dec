# lynxcore

These are pure-Python pieces of Atari Lynx hardware: the memory map register,
the Mikey timers and audio, the screen DMA and the ComLynx serial port. The
package needs only the standard library.

## Modules

- `lynxcore.memfile.MemoryFile` is a read-only, seekable view of a byte
  buffer.
  - `MemoryFile.from_bytes(data)` rejects an empty buffer with `ValueError`.
  - `MemoryFile.from_path(path)` loads a whole file. It sets `ext` to the text
    after the last dot in the path.
  - `read(element_size, count)` returns at most `element_size * count` bytes.
  - `seek(offset, whence)` raises `ValueError` for a position past the data.
  - Used as a context manager, the file closes itself when the block ends.
- `lynxcore.bus` holds the shared machine state.
  - `SystemClock` holds a 32-bit `cycle_count`, with `add_cycles` and
    `reset`. It also holds the IRQ, NMI, CPU-sleep and halt lines.
  - The bus cycle costs are `CPU_RDWR_CYC`, `DMA_RDWR_CYC` and
    `SPR_RDWR_CYC`.
  - `MemoryDevice` is the protocol that every bus device follows:
    `peek`, `poke`, `read_cycle`, `write_cycle` and `object_size`.
- `lynxcore.memmap.MemoryMap(ram, rom, susie, mikie)` is the `$FFF9` register.
  - It keeps a `handlers` list with one device for each of the 65536
    addresses.
  - Writing a clear bit enables a device in its area, and writing a set bit
    swaps RAM in. Bit 0 is Suzy at `$FC00`, bit 1 is Mikey at `$FD00`, bit 2
    is the boot ROM at `$FE00` and bit 3 is the vectors at `$FFFA`.
  - `save_state()` and `load_state(state)` keep the flags in a dict and
    rebuild the table from it.
- `lynxcore.mikie_display` handles the screen.
  - `make_color_32`, `make_color_16`, `make_color_15` and `make_color_15_1`
    pack pixels.
  - `PaletteEntry` is a 12-bit palette colour with a packed `index`.
  - `Surface` is a pixel buffer.
  - `Display` holds the display registers and the line DMA:
    `set_attributes(bpp)`, `write_control(data)`, `copy_line(ram)`,
    `render_line(ram, line_reload)` and `end_of_frame(line_reload)`.
    `render_line` returns `None` when no surface is attached or DMA is off.
- `lynxcore.mikie_uart.ComLynx` is the serial port.
  - It holds a receive queue of at most 32 values.
  - Each transmitted value is looped back to the front of that queue.
  - `clock()` advances the receive and transmit countdowns by one bit period.
  - `irq_pending()` reports the level-triggered serial interrupt.
- `lynxcore.mikie_timers` holds the timers and audio.
  - `lfsr_next` steps the audio shift register.
  - `Timer` is a down-counter. It is clocked by cycles or by a linked
    timer's borrow, and `TimerMode` selects the fixed role of each timer.
  - `AudioChannel` is a timer driving a waveform generator, with the eight
    channel registers.
  - `AudioMixer.mix` combines the four channel outputs into a `SampleDelta`
    of left and right steps.

## Examples

```python
from lynxcore.memmap import MemoryMap

mm = MemoryMap(ram="ram", rom="rom", susie="susie", mikie="mikie")
assert mm.handlers[0xFD00] == "mikie"
mm.poke(0xFFF9, 0x02)               # hide Mikey, show RAM
assert mm.handlers[0xFD00] == "ram"
assert mm.peek(0xFFF9) == 0x02
```

```python
from lynxcore.mikie_uart import ComLynx

sent = []
port = ComLynx()
port.set_tx_callback(sent.append)
port.write_data(0x41)
for _ in range(12):
    port.clock()
assert sent == [0x41]
assert port.read_data() == 0x41     # the looped-back byte
```

```python
from lynxcore.mikie_timers import AudioMixer

mixer = AudioMixer()
delta = mixer.mix(0, [10, 0, 0, 0], stereo=0xFF, pan=0x00, atten=[0xFF] * 4)
assert (delta.left, delta.right) == (10, 10)
```

## What it does not do

The package has no CPU core and no Suzy sprite engine. It does not load or
decode cartridges, and it has no single Mikey register block that routes
addresses to the timers, audio, display and serial pieces. The caller wires
the pieces together and drives them from a `SystemClock`. The package has no
command-line program, and it does not output sound or video.

## Running the tests

```
pip install .[test]
pytest
```