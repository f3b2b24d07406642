"""ROM loader tests."""

import pytest

from chip8 import BytesLoader, Chip8, FileLoader, LoadError
from chip8.constants import PROGRAM_START


class TestFileLoader:
    def test_reads_file(self, tmp_path):
        rom = tmp_path / "maze.ch8"
        rom.write_bytes(b"\xA2\x1E")
        assert FileLoader().load(rom) == b"\xA2\x1E"

    def test_rom_dir_and_suffix_lookup(self, tmp_path):
        (tmp_path / "pong.c8").write_bytes(b"\x6A\x02")
        loader = FileLoader(tmp_path)
        assert loader.load("pong") == b"\x6A\x02"

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError) as exc:
            FileLoader(tmp_path).load("nope.ch8")
        assert exc.value.source == "nope.ch8"
        assert "not found" in str(exc.value)

    def test_directory_is_not_a_rom(self, tmp_path):
        with pytest.raises(LoadError):
            FileLoader().load(tmp_path)

    def test_list_roms(self, tmp_path):
        for name in ("b.ch8", "a.c8", "notes.txt"):
            (tmp_path / name).write_bytes(b"")
        names = [p.name for p in FileLoader(tmp_path).list_roms()]
        assert names == ["a.c8", "b.ch8"]

    def test_emulator_loads_from_disk(self, tmp_path):
        (tmp_path / "add.ch8").write_bytes(bytes([0x60, 0x05, 0x70, 0x03]))
        emu = Chip8(loader=FileLoader(tmp_path))
        emu.load("add.ch8").start()
        emu.tick()
        emu.tick()
        assert emu.V[0] == 8
        assert emu.memory[PROGRAM_START] == 0x60


class TestBytesLoader:
    def test_named_images(self):
        loader = BytesLoader({"a": b"\x01"}, b=b"\x02")
        loader.add("c", bytearray(b"\x03"))
        assert loader.load("a") == b"\x01"
        assert loader.load("b") == b"\x02"
        assert loader.load("c") == b"\x03"

    def test_unknown_name(self):
        with pytest.raises(LoadError) as exc:
            BytesLoader().load("ghost")
        assert exc.value.reason == "no such image"
