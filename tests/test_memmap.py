import pytest

from lynxcore.memmap import MemoryMap


class _Device:
    def __init__(self, name):
        self.name = name


@pytest.fixture
def devices():
    return {
        "ram": _Device("ram"),
        "rom": _Device("rom"),
        "susie": _Device("susie"),
        "mikie": _Device("mikie"),
    }


@pytest.fixture
def memmap(devices):
    return MemoryMap(devices["ram"], devices["rom"], devices["susie"], devices["mikie"])


def test_reset_enables_everything(memmap, devices):
    assert memmap.peek(0) == 0
    assert memmap.handlers[0x0000] is devices["ram"]
    assert memmap.handlers[0xFC00] is devices["susie"]
    assert memmap.handlers[0xFCFF] is devices["susie"]
    assert memmap.handlers[0xFD00] is devices["mikie"]
    assert memmap.handlers[0xFE00] is devices["rom"]
    assert memmap.handlers[0xFFF7] is devices["rom"]
    assert memmap.handlers[0xFFF8] is devices["ram"]
    assert memmap.handlers[0xFFF9] is memmap
    assert memmap.handlers[0xFFFA] is devices["rom"]
    assert memmap.handlers[0xFFFF] is devices["rom"]


def test_poke_disables_all_devices(memmap, devices):
    memmap.poke(0xFFF9, 0x0F)
    assert memmap.peek(0xFFF9) == 0x0F
    for addr in (0xFC00, 0xFD00, 0xFE00, 0xFFFA):
        assert memmap.handlers[addr] is devices["ram"]
    assert memmap.handlers[0xFFF9] is memmap


def test_individual_bits(memmap, devices):
    memmap.poke(0, 0x02)
    assert memmap.handlers[0xFD80] is devices["ram"]
    assert memmap.handlers[0xFC80] is devices["susie"]
    memmap.poke(0, 0x08)
    assert memmap.handlers[0xFD80] is devices["mikie"]
    assert memmap.handlers[0xFFFC] is devices["ram"]
    assert memmap.handlers[0xFE10] is devices["rom"]


def test_reset_after_poke_restores(memmap, devices):
    memmap.poke(0, 0x0F)
    memmap.reset()
    assert memmap.peek(0) == 0
    assert memmap.handlers[0xFC00] is devices["susie"]


def test_state_round_trip(memmap, devices):
    memmap.poke(0, 0x05)
    state = memmap.save_state()
    other = MemoryMap(devices["ram"], devices["rom"], devices["susie"], devices["mikie"])
    other.load_state(state)
    assert other.peek(0) == 0x05
    assert other.handlers == [
        other if h is memmap else h for h in memmap.handlers
    ]


def test_load_state_rejects_incomplete(memmap):
    with pytest.raises(KeyError):
        memmap.load_state({"mikie_enabled": True})


def test_bus_timings(memmap):
    assert memmap.read_cycle() == 5
    assert memmap.write_cycle() == 5
    assert memmap.object_size() == 1