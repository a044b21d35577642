"""Stateful CHIP-8 engine.

:class:`Engine` owns one :class:`~chip8vm.state.EmulatorState` and advances it
through the pure functions of :mod:`chip8vm.emulator`. Every mutating method
builds the next state first and commits it only on success, so a faulting
instruction leaves the machine exactly as it was before the step.

Collaborators reach the engine through narrow hooks: the display reads
:attr:`Engine.display` and may register ``on_clear``, the keyboard calls
:meth:`Engine.press_key` / :meth:`Engine.release_key`, the speaker polls
:attr:`Engine.sound_active` and a ROM loader calls :meth:`Engine.load_program`.
"""

import os
from typing import Callable, Mapping, Optional, Union

import numpy as np

from chip8vm import emulator
from chip8vm.config import EngineConfig
from chip8vm.decode import Op, decode
from chip8vm.errors import EmulatorError
from chip8vm.logging import EmulatorLogger
from chip8vm.quirks import Quirks
from chip8vm.state import EmulatorState, create_state


class Engine:
    """A single CHIP-8 virtual machine.

    Args:
        config: Engine settings; defaults to ``EngineConfig()``
        quirks: Overrides ``config.quirks``, either a ``Quirks`` or a mapping such as
            ``{"originalShiftBehavior": True}``
        on_clear: Called after every 00E0
        logger: Destination for engine logs
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        quirks: Union[Quirks, Mapping[str, bool], None] = None,
        on_clear: Optional[Callable[[], None]] = None,
        logger: Optional[EmulatorLogger] = None,
    ):
        config = config or EngineConfig()
        if quirks is not None:
            if not isinstance(quirks, Quirks):
                quirks = Quirks.from_mapping(quirks)
            config = config.replace(quirks=quirks)
        self.config = config
        self.on_clear = on_clear
        self.logger = logger or EmulatorLogger()
        self.state: EmulatorState = create_state(config.seed, config.quirks)
        self.steps_executed = 0

    @property
    def quirks(self) -> Quirks:
        return self.config.quirks

    @property
    def speed(self) -> int:
        return self.config.speed

    def reset(self):
        """Return to power-on state; the loaded program is discarded."""
        self.state = create_state(self.config.seed, self.config.quirks)
        self.steps_executed = 0
        self.logger.debug("Engine reset")

    def load_program(self, program: bytes):
        """Install a program image at 0x200.

        Raises:
            OutOfBoundsLoad: if the image does not fit; nothing is written
        """
        self.state = emulator.load_program(self.state, program)
        self.logger.debug(f"Loaded {len(program)} byte program")

    def load_rom(self, filename: Union[str, os.PathLike]):
        """Read a ROM file and install it at 0x200."""
        self.load_program(emulator.read_rom(filename))

    def step(self) -> Optional[EmulatorError]:
        """Run one fetch-decode-execute cycle.

        Returns:
            ``None`` on success, otherwise the fault (``UnknownOpcode`` or
            ``StackUnderflow``). A faulting step commits no change.
        """
        if self.state.awaiting_key:
            return None

        address = int(self.state.pc)
        try:
            state, instruction = emulator.fetch(self.state)
            decoded = decode(instruction)
            self.logger.log_instruction(address, instruction, decoded.op.name)
            state = emulator.dispatch(state, decoded)
        except EmulatorError as error:
            error = error.at(address)
            self.logger.log_fault(error)
            self.logger.log_registers(self.registers, self.index, address, level="ERROR")
            return error

        self.state = state
        self.steps_executed += 1
        if decoded.op is Op.CLS and self.on_clear is not None:
            self.on_clear()
        if decoded.op is Op.LD_VX_K:
            self.logger.debug(f"Waiting for key into V{decoded.x:X}")
        return None

    def tick(self):
        """Decrement both timers once (60 Hz in a real-time driver)."""
        self.state = emulator.tick(self.state)

    def cycle(self) -> Optional[EmulatorError]:
        """Run ``speed`` steps then one timer tick.

        Stepping stops early at a key wait or a fault; timers do not tick while
        the engine is waiting for a key.

        Returns:
            The fault that stopped the cycle, or ``None``.
        """
        for _ in range(self.config.speed):
            if self.state.awaiting_key:
                break
            error = self.step()
            if error is not None:
                return error

        if not self.state.awaiting_key:
            self.tick()
        return None

    def press_key(self, key: int):
        """Mark ``key`` held and hand it to a pending FX0A wait."""
        self.state = emulator.set_key(self.state, key, True)
        self.deliver_key(key)

    def release_key(self, key: int):
        """Mark ``key`` released."""
        self.state = emulator.set_key(self.state, key, False)

    def deliver_key(self, key: int):
        """Resolve a pending FX0A wait without touching the keypad."""
        if self.state.awaiting_key:
            self.logger.debug(f"Key {key:X} delivered to V{self.state.key_wait_register:X}")
        self.state = emulator.deliver_key(self.state, key)

    @property
    def awaiting_key(self) -> bool:
        return self.state.awaiting_key

    @property
    def sound_active(self) -> bool:
        """Whether the speaker should be sounding right now."""
        return int(self.state.sound_timer) > 0

    @property
    def display(self) -> np.ndarray:
        """Copy of the frame buffer as a ``(64, 32)`` boolean array indexed ``[x, y]``."""
        return np.array(self.state.display, dtype=np.bool_)

    def pixel(self, x: int, y: int) -> bool:
        return bool(self.state.display[x, y])

    @property
    def registers(self) -> tuple:
        return tuple(int(v) for v in self.state.V)

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def stack(self) -> tuple:
        return self.state.stack.data
