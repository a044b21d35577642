"""Main CHIP-8 emulator execution engine."""

from typing import Callable, Union
import os

import jax.numpy as jnp
from chip8vm.state import EmulatorState, write_register
from chip8vm.decode import DecodedInstruction, Op, decode
from chip8vm.constants import PROGRAM_START, MEMORY_SIZE, ADDRESS_MASK, NUM_KEYS
from chip8vm.errors import OutOfBoundsLoad, InvalidKey
from chip8vm.instructions.system import execute_clear_screen, execute_return
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8vm.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

Handler = Callable[[EmulatorState, DecodedInstruction], EmulatorState]

HANDLERS: dict[Op, Handler] = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_BYTE: execute_skip_if_equal_immediate,
    Op.SNE_BYTE: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_BYTE: execute_set,
    Op.ADD_BYTE: execute_add,
    Op.LD_REG: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REG: execute_alu_add,
    Op.SUB: execute_alu_sub_xy,
    Op.SHR: execute_alu_shift_right,
    Op.SUBN: execute_alu_sub_yx,
    Op.SHL: execute_alu_shift_left,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I_VX: execute_add_to_index,
    Op.LD_F_VX: execute_font_character,
    Op.LD_B_VX: execute_bcd_conversion,
    Op.LD_I_VX: execute_store_registers,
    Op.LD_VX_I: execute_load_registers,
}


def dispatch(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Apply an already decoded instruction."""
    return HANDLERS[instruction.op](state, instruction)


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Raises:
        UnknownOpcode: if the word matches no instruction form
        StackUnderflow: on 00EE with an empty stack
    """
    return dispatch(state, decode(instruction))


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> int:
    """Pack two bytes into a 16-bit word."""
    return (int(high) << 8) | int(low)


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next instruction from memory and advance PC past it."""
    pc = int(state.pc)
    instruction = _pack_u16(state.memory[pc & ADDRESS_MASK], state.memory[(pc + 1) & ADDRESS_MASK])
    return state.replace(pc=state.pc + 2), instruction


def step(state: EmulatorState) -> EmulatorState:
    """Run one fetch-decode-execute cycle; a paused state is returned unchanged."""
    if state.awaiting_key:
        return state
    state, instruction = fetch(state)
    return execute(state, instruction)


def tick(state: EmulatorState) -> EmulatorState:
    """Decrement the delay and sound timers, stopping at zero."""
    return state.replace(
        delay_timer=jnp.maximum(state.delay_timer, 1) - 1,
        sound_timer=jnp.maximum(state.sound_timer, 1) - 1,
    )


def _check_key(key: int) -> int:
    if isinstance(key, bool) or not 0 <= int(key) < NUM_KEYS:
        raise InvalidKey(key)
    return int(key)


def deliver_key(state: EmulatorState, key: int) -> EmulatorState:
    """Resolve a pending FX0A wait with ``key``; no-op when nothing waits."""
    key = _check_key(key)
    if not state.awaiting_key:
        return state
    state = write_register(state, state.key_wait_register, key)
    return state.replace(key_wait_register=None)


def set_key(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Record whether ``key`` is currently held."""
    key = _check_key(key)
    return state.replace(keypad=state.keypad.at[key].set(pressed))


def load_program(state: EmulatorState, program: Union[bytes, bytearray, list]) -> EmulatorState:
    """Copy a program image into memory starting at 0x200.

    Raises:
        OutOfBoundsLoad: if the image runs past the end of memory; memory is untouched
    """
    program = bytes(program)
    capacity = MEMORY_SIZE - PROGRAM_START
    if len(program) > capacity:
        raise OutOfBoundsLoad(len(program), capacity)
    if not program:
        return state
    rom_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(rom_array)
    return state.replace(memory=new_memory)


def read_rom(filename: Union[str, os.PathLike]) -> bytes:
    """Read a ROM image from disk."""
    with open(filename, 'rb') as f:
        return f.read()


def load_rom(state: EmulatorState, filename: Union[str, os.PathLike]) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    return load_program(state, read_rom(filename))
