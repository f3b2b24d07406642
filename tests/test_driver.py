"""Tick source tests using a fake clock."""

import logging

import pytest

from chip8 import Chip8, EmulatorConfig, UnknownOpcodeError
from chip8.driver import run_loop

from conftest import words


class TestRunLoop:
    def test_paces_at_cycle_hz(self, emu, clock):
        emu.load_bytes(words(0x1200)).start()
        ticks = run_loop(emu, clock, max_ticks=5)
        assert ticks == 5
        assert clock.calls == [30] * 5

    def test_timers_decrement_twice_per_tick(self, emu, clock):
        """60Hz timers under a 30Hz driver"""
        emu.load_bytes(words(0x600A, 0xF015, 0x1204)).start()
        run_loop(emu, clock, max_ticks=4)
        # tick 1 loads V0, tick 2 sets DT=10 then two decrements, two more ticks
        assert emu.state.delay_timer == 10 - 2 * 3

    def test_timers_can_be_disabled(self, clock):
        config = EmulatorConfig(decrement_timers=False)
        emu = Chip8(config=config)
        emu.load_bytes(words(0x600A, 0xF015, 0x1204)).start()
        run_loop(emu, clock, max_ticks=10)
        assert emu.state.delay_timer == 10

    def test_fractional_timer_rate(self, clock):
        """At 40Hz, three timer steps land every two ticks"""
        emu = Chip8(config=EmulatorConfig(cycle_hz=40))
        emu.load_bytes(words(0x1200)).start()
        emu.state.delay_timer = 100
        run_loop(emu, clock, max_ticks=4)
        assert emu.state.delay_timer == 94

    def test_stops_with_emulator(self, emu, clock):
        emu.load_bytes(words(0x6001)).start()
        with pytest.raises(UnknownOpcodeError):
            run_loop(emu, clock)
        assert not emu.running

    def test_fatal_error_logs_register_dump(self, emu, clock, caplog):
        emu.load_bytes(words(0x6A42, 0xF0FF)).start()
        with caplog.at_level(logging.ERROR, logger="chip8.driver"):
            with pytest.raises(UnknownOpcodeError):
                run_loop(emu, clock)
        messages = [r.getMessage() for r in caplog.records]
        assert "Emulation stopped: Unknown opcode $F0FF at $202" in messages
        assert any(m.startswith("PC=$204") and "42" in m for m in messages)

    def test_on_tick_can_end_loop(self, emu, clock):
        emu.load_bytes(words(0x1200)).start()
        seen = []

        def on_tick(e):
            seen.append(e.state.PC)
            return len(seen) < 3

        assert run_loop(emu, clock, on_tick=on_tick) == 2
        assert emu.running

    def test_run_while_stopped_keeps_ticking(self, emu, clock):
        emu.load_bytes(words(0x7001, 0x1200))
        run_loop(emu, clock, max_ticks=6, run_while_stopped=True)
        assert emu.V[0] == 0
        assert len(clock.calls) == 6

    def test_not_started(self, emu, clock):
        assert run_loop(emu, clock) == 0
        assert clock.calls == []


class TestConfig:
    @pytest.mark.parametrize("kwargs", [
        {"cycle_hz": 0}, {"cycles_per_tick": 0}, {"timer_hz": -1}, {"scale": 0},
    ])
    def test_rejects_bad_values(self, kwargs):
        with pytest.raises(ValueError):
            EmulatorConfig(**kwargs)

    def test_timer_steps(self):
        assert EmulatorConfig().timer_steps_per_tick == 2.0
        assert EmulatorConfig(decrement_timers=False).timer_steps_per_tick == 0.0
