"""Tests for the stateful engine and its collaborator hooks."""

import io

import numpy as np
import pytest
from chip8vm import (
    Engine, EngineConfig, Quirks, UnknownOpcode, StackUnderflow, OutOfBoundsLoad,
    InvalidQuirkKey, InvalidKey, PROGRAM_START, SCREEN_WIDTH, SCREEN_HEIGHT
)
from chip8vm.constants import FONT_DATA
from chip8vm.logging import EmulatorLogger
from conftest import program


class TestLifecycle:
    """Construction, reset and program loading."""

    def test_initial_state(self, engine):
        assert engine.pc == PROGRAM_START
        assert engine.registers == (0,) * 16
        assert engine.index == 0
        assert engine.delay_timer == 0
        assert engine.sound_timer == 0
        assert engine.stack == ()
        assert not engine.awaiting_key
        assert not engine.sound_active
        assert engine.display.shape == (SCREEN_WIDTH, SCREEN_HEIGHT)
        assert not engine.display.any()
        assert [int(b) for b in engine.state.memory[:80]] == FONT_DATA

    def test_load_program(self, engine):
        engine.load_program(bytes([0x12, 0x34, 0x56]))

        assert [int(b) for b in engine.state.memory[0x200:0x204]] == [0x12, 0x34, 0x56, 0x00]
        assert engine.pc == PROGRAM_START

    def test_load_program_keeps_other_state(self, engine):
        engine.load_program(program(0x6A05))
        engine.step()
        engine.load_program(program(0x6B07))

        assert engine.registers[0xA] == 0x05
        assert engine.pc == 0x202

    def test_load_program_fills_memory_exactly(self, engine):
        engine.load_program(bytes([0xAB]) * (0x1000 - PROGRAM_START))

        assert engine.state.memory[0xFFF] == 0xAB

    def test_load_program_out_of_bounds_is_atomic(self, engine):
        before = np.array(engine.state.memory)

        with pytest.raises(OutOfBoundsLoad):
            engine.load_program(bytes([0xAB]) * (0x1000 - PROGRAM_START + 1))

        assert np.array_equal(np.array(engine.state.memory), before)

    def test_load_rom(self, engine, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(program(0x6042))

        engine.load_rom(rom)
        engine.step()

        assert engine.registers[0] == 0x42

    def test_reset(self, engine):
        engine.load_program(program(0x6042, 0xA123, 0x2300))
        engine.step()
        engine.step()
        engine.step()
        engine.press_key(3)

        engine.reset()

        assert engine.pc == PROGRAM_START
        assert engine.registers == (0,) * 16
        assert engine.index == 0
        assert engine.stack == ()
        assert engine.state.memory[0x200] == 0
        assert not engine.state.keypad.any()
        assert [int(b) for b in engine.state.memory[:80]] == FONT_DATA


class TestStep:
    """Fetch-decode-execute through the engine."""

    def test_step_advances_pc(self, engine):
        engine.load_program(program(0x6105, 0x7103))

        assert engine.step() is None
        assert engine.pc == 0x202
        assert engine.step() is None
        assert engine.pc == 0x204
        assert engine.registers[1] == 0x08
        assert engine.steps_executed == 2

    def test_call_and_return(self, engine):
        """CALL 0x202 followed by RET at 0x202 leaves PC at 0x202 with an empty stack."""
        engine.load_program(program(0x2202, 0x00EE))

        engine.step()
        assert engine.stack == (0x202,)
        engine.step()

        assert engine.pc == 0x202
        assert engine.stack == ()

    def test_skip_adds_to_advanced_pc(self, engine):
        engine.load_program(program(0x3000, 0x6001, 0x6102))

        engine.step()  # V0 == 0, skip
        engine.step()

        assert engine.registers[0] == 0
        assert engine.registers[1] == 2

    def test_unknown_opcode_is_returned(self, engine):
        engine.load_program(program(0x6001, 0xFFFF))
        engine.step()

        error = engine.step()

        assert isinstance(error, UnknownOpcode)
        assert error.opcode == 0xFFFF
        assert error.address == 0x202
        assert engine.pc == 0x202  # Nothing committed
        assert engine.steps_executed == 1

    def test_fault_commits_nothing(self, engine):
        """The 0000 word at the call target faults without disturbing the stack."""
        engine.load_program(program(0x2202, 0x0000, 0x1204, 0x0000, 0x00EE))

        assert engine.step() is None
        error = engine.step()

        assert isinstance(error, UnknownOpcode)
        assert engine.pc == 0x202
        assert engine.stack == (0x202,)

    def test_stack_underflow_is_returned(self, engine):
        engine.load_program(program(0x00EE))

        error = engine.step()

        assert isinstance(error, StackUnderflow)
        assert error.address == 0x200
        assert engine.pc == 0x200

    def test_on_clear_notification(self):
        cleared = []
        engine = Engine(on_clear=lambda: cleared.append(True))
        engine.load_program(program(0x00E0, 0x6000, 0x00E0))

        for _ in range(3):
            engine.step()

        assert len(cleared) == 2
        assert not engine.display.any()

    def test_display_snapshot_is_a_copy(self, engine):
        frame = engine.display
        frame[0, 0] = True

        assert not engine.pixel(0, 0)

    def test_draw_through_engine(self, engine):
        engine.load_program(program(0x6003, 0xF029, 0x6105, 0x6207, 0xD125))

        for _ in range(5):
            engine.step()

        # Glyph "3" top row is F0
        assert engine.pixel(5, 7)
        assert engine.pixel(8, 7)
        assert not engine.pixel(9, 7)


class TestQuirks:
    """Quirk configuration through the engine."""

    def test_quirk_mapping(self):
        engine = Engine(quirks={"originalShiftBehavior": True, "incrementIndex": False})

        assert engine.quirks == Quirks(original_shift_behavior=True)

    def test_invalid_quirk_key(self):
        with pytest.raises(InvalidQuirkKey) as excinfo:
            Engine(quirks={"originalShiftBehavior": True, "vfReset": True})
        assert excinfo.value.keys == ("vfReset",)

    @pytest.mark.parametrize("quirk,expected", [(False, (0x40, 0)), (True, (0x00, 1))])
    def test_shift_quirk(self, quirk, expected):
        engine = Engine(quirks={"originalShiftBehavior": quirk})
        engine.load_program(program(0x6180, 0x6201, 0x8126))

        for _ in range(3):
            engine.step()

        assert (engine.registers[1], engine.registers[0xF]) == expected

    @pytest.mark.parametrize("quirk", [False, True])
    def test_store_load_round_trip(self, quirk):
        engine = Engine(quirks={"incrementIndex": quirk})
        engine.load_program(program(
            0x6011, 0x6122, 0x6233,  # V0..V2
            0xA400, 0xF255,          # store
            0x6000, 0x6100, 0x6200,  # zero
            0xA400, 0xF265,          # load
        ))

        for _ in range(10):
            assert engine.step() is None

        assert engine.registers[:3] == (0x11, 0x22, 0x33)
        assert engine.index == (0x400 + 3 if quirk else 0x400)


class TestCycle:
    """Stepping at the configured speed and ticking."""

    def test_cycle_runs_speed_steps_then_ticks(self):
        engine = Engine(EngineConfig(speed=4))
        engine.load_program(program(0x6005, 0xF015, 0x7101, 0x7101, 0x7101, 0x7101))

        assert engine.cycle() is None

        assert engine.pc == 0x208
        assert engine.registers[1] == 2
        assert engine.delay_timer == 4

    def test_cycle_stops_on_fault(self):
        engine = Engine(EngineConfig(speed=8))
        engine.load_program(program(0x7001, 0xFFFF, 0x7001))

        error = engine.cycle()

        assert isinstance(error, UnknownOpcode)
        assert engine.registers[0] == 1
        assert engine.pc == 0x202

    def test_sound_active_follows_timer(self, engine):
        engine.load_program(program(0x6002, 0xF018))
        engine.step()
        engine.step()

        assert engine.sound_active
        engine.tick()
        assert engine.sound_active
        engine.tick()
        assert not engine.sound_active

    def test_timers_never_go_negative(self, engine):
        for _ in range(5):
            engine.tick()
        assert engine.delay_timer == 0
        assert engine.sound_timer == 0


class TestKeyboard:
    """Keypad and key-wait handling."""

    def test_wait_for_key(self):
        engine = Engine(EngineConfig(speed=4))
        engine.load_program(program(0x6903, 0xF918, 0xF20A, 0x6301))

        engine.cycle()  # Sets ST = 3, then parks on FX0A without ticking
        assert engine.awaiting_key
        assert engine.pc == 0x206
        assert engine.sound_timer == 3

        assert engine.step() is None
        assert engine.cycle() is None
        assert engine.pc == 0x206
        assert engine.sound_timer == 3

        engine.press_key(9)

        assert not engine.awaiting_key
        assert engine.registers[2] == 9
        engine.step()
        assert engine.registers[3] == 1

    def test_deliver_key_leaves_keypad(self, engine):
        engine.load_program(program(0xF00A))
        engine.step()

        engine.deliver_key(5)

        assert engine.registers[0] == 5
        assert not engine.state.keypad.any()

    def test_key_without_wait_only_updates_keypad(self, engine):
        engine.press_key(7)

        assert engine.registers == (0,) * 16
        assert engine.state.keypad[7]

        engine.release_key(7)
        assert not engine.state.keypad[7]

    def test_key_skip(self, engine):
        engine.load_program(program(0x6004, 0xE09E, 0x6101, 0x6202))
        engine.press_key(4)

        engine.step()
        engine.step()
        engine.step()

        assert engine.registers[1] == 0
        assert engine.registers[2] == 2

    @pytest.mark.parametrize("key", [-1, 16, 255])
    def test_invalid_key(self, engine, key):
        with pytest.raises(InvalidKey):
            engine.press_key(key)


class TestLogging:
    """Engine log output."""

    def test_trace_and_fault_logging(self):
        stream = io.StringIO()
        engine = Engine(logger=EmulatorLogger(log_level="DEBUG", stream=stream, show_timestamps=False))
        engine.load_program(program(0x00E0, 0xFFFF))

        engine.step()
        engine.step()

        output = stream.getvalue()
        assert "00E0  CLS" in output
        assert "UnknownOpcode" in output
        assert "0xFFFF" in output

    def test_quiet_by_default(self, capsys):
        engine = Engine()
        engine.load_program(program(0x00E0))
        engine.step()

        assert capsys.readouterr().out == ""
