"""Test configuration and fixtures for CHIP-8 engine tests."""

import pytest
import jax.numpy as jnp
from chip8vm import create_state, Engine, Quirks
from chip8vm.quirks import LEGACY, MODERN


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def modern_state():
    """Provide a fresh state with both quirks off."""
    return create_state(quirks=MODERN)


@pytest.fixture
def legacy_state():
    """Provide a fresh state with both quirks on."""
    return create_state(quirks=LEGACY)


@pytest.fixture
def engine():
    """Provide an engine with default settings."""
    return Engine()


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to preset registers, e.g. ``set_registers(state, V1=0x10, VF=1)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def program(*words):
    """Assemble 16-bit words into a big-endian program image."""
    return b"".join(word.to_bytes(2, "big") for word in words)
