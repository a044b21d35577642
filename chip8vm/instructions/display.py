"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState, write_flag
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, ADDRESS_MASK

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_mask(memory: jnp.ndarray, index: int, x: int, y: int, height: int) -> jnp.ndarray:
    """Boolean screen mask of the sprite pixels drawn at (x, y).

    Pixels past the right or bottom edge fall outside the grid and are clipped.
    """
    in_sprite = (xx >= x) & (xx < x + SPRITE_WIDTH) & (yy >= y) & (yy < y + height)

    row_offset = jnp.clip(yy - y, 0, 15)
    col_offset = jnp.clip(xx - x, 0, SPRITE_WIDTH - 1)
    sprite_bytes = memory[(index + row_offset) & ADDRESS_MASK]
    bits = (sprite_bytes >> (SPRITE_WIDTH - 1 - col_offset)) & 1
    return jnp.astype(bits, jnp.bool_) & in_sprite


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    sprite_x = int(state.V[instruction.x]) % SCREEN_WIDTH
    sprite_y = int(state.V[instruction.y]) % SCREEN_HEIGHT

    sprite = sprite_mask(state.memory, int(state.I), sprite_x, sprite_y, instruction.n)
    collision = bool(jnp.any(state.display & sprite))

    state = state.replace(display=state.display ^ sprite)
    return write_flag(state, int(collision))
