"""CHIP-8 emulator state structures."""

from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE, NUM_REGISTERS, NUM_KEYS,
    FLAG_REGISTER
)
from chip8vm.quirks import Quirks


@dataclass(frozen=True)
class StackState:
    """Return addresses for subroutine calls, most recent last."""
    data: tuple = ()

    @property
    def depth(self) -> int:
        return len(self.data)


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state."""
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    key_wait_register: Optional[int] = field(pytree_node=False, default=None)
    quirks: Quirks = field(pytree_node=False, default=Quirks())

    @property
    def awaiting_key(self) -> bool:
        return self.key_wait_register is not None


def create_state(seed: int = 0, quirks: Quirks = Quirks()) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(jax.random.PRNGKey(seed), quirks=quirks)
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def write_register(state: EmulatorState, index: int, value: int) -> EmulatorState:
    """Store ``value`` modulo 256 in register ``index``."""
    return state.replace(V=state.V.at[index].set(int(value) & 0xFF))


def write_flag(state: EmulatorState, value: int) -> EmulatorState:
    """Store ``value`` in VF."""
    return write_register(state, FLAG_REGISTER, value)
