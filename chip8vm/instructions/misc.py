"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState, write_register
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FONT_START, FONT_GLYPH_SIZE, ADDRESS_MASK


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return write_register(state, instruction.x, int(state.delay_timer))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Pause until a key is delivered into VX."""
    return state.replace(key_wait_register=instruction.x)


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register.

    I is kept as a 16-bit value here; it is masked to 12 bits when it addresses memory.
    """
    new_i = (int(state.I) + int(state.V[instruction.x])) & 0xFFFF
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + int(state.V[instruction.x]) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def _addresses(state: EmulatorState, count: int) -> jnp.ndarray:
    return (int(state.I) + jnp.arange(count)) & ADDRESS_MASK


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = jnp.array([value // 100, (value // 10) % 10, value % 10], dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[_addresses(state, 3)].set(digits))


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    if not state.quirks.increment_index:
        return state
    return state.replace(I=jnp.astype((int(state.I) + instruction.x + 1) & 0xFFFF, jnp.uint16))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    new_memory = state.memory.at[_addresses(state, count)].set(state.V[:count])
    return _advance_index(state.replace(memory=new_memory), instruction)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    new_V = state.V.at[:count].set(state.memory[_addresses(state, count)])
    return _advance_index(state.replace(V=new_V), instruction)
