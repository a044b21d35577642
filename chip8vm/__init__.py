"""CHIP-8 virtual machine package."""

from chip8vm.state import EmulatorState, StackState, create_state
from chip8vm.emulator import execute, dispatch, fetch, step, tick, deliver_key, set_key, load_program, load_rom, read_rom
from chip8vm.decode import DecodedInstruction, Op, decode
from chip8vm.quirks import Quirks
from chip8vm.config import EngineConfig, load_config
from chip8vm.engine import Engine
from chip8vm.errors import (
    EmulatorError, UnknownOpcode, StackUnderflow, OutOfBoundsLoad, InvalidQuirkKey, InvalidKey
)
from chip8vm.constants import *
from chip8vm.rendering import chip8_display_to_rgb, create_color_scheme, save_frame

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "dispatch",
    "step",
    "tick",
    "deliver_key",
    "set_key",
    "load_program",
    "load_rom",
    "read_rom",
    "DecodedInstruction",
    "Op",
    "decode",
    "Quirks",
    "EngineConfig",
    "load_config",
    "Engine",
    "EmulatorError",
    "UnknownOpcode",
    "StackUnderflow",
    "OutOfBoundsLoad",
    "InvalidQuirkKey",
    "InvalidKey",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "save_frame",
]
