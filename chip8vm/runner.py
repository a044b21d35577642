"""Headless driver that runs an engine for a fixed number of frames."""

from typing import Optional

from flax.struct import dataclass

from chip8vm.engine import Engine
from chip8vm.errors import EmulatorError
from chip8vm.logging import build_progress_bar


@dataclass(frozen=True)
class RunSummary:
    """Outcome of :func:`run_frames`.

    Attributes:
        frames: Cycles completed
        steps: Instructions executed
        sound_frames: Cycles that ended with the sound timer active
        awaiting_key: Whether the run ended parked on FX0A
        error: The fault that stopped the run, if any
    """
    frames: int = 0
    steps: int = 0
    sound_frames: int = 0
    awaiting_key: bool = False
    error: Optional[EmulatorError] = None

    def as_dict(self) -> dict:
        return {
            "frames": self.frames,
            "steps": self.steps,
            "sound_frames": self.sound_frames,
            "awaiting_key": self.awaiting_key,
            "error": None if self.error is None else str(self.error),
        }


def run_frames(engine: Engine, frames: int, progress: bool = False, desc: Optional[str] = None) -> RunSummary:
    """Call ``engine.cycle()`` up to ``frames`` times.

    The run stops at the first fault, and also when the program waits for a key
    since nothing can deliver one.
    """
    start_steps = engine.steps_executed
    sound_frames = 0
    completed = 0
    error = None

    with build_progress_bar(frames, desc=desc, enabled=progress) as bar:
        for _ in range(frames):
            pc_before = engine.pc
            error = engine.cycle()
            if error is not None:
                break
            completed += 1
            if engine.sound_active:
                sound_frames += 1
            bar.update(1)
            if engine.awaiting_key:
                engine.logger.info(f"Program waiting for a key after 0x{pc_before:03X}")
                break

    summary = RunSummary(
        frames=completed,
        steps=engine.steps_executed - start_steps,
        sound_frames=sound_frames,
        awaiting_key=engine.awaiting_key,
        error=error,
    )
    engine.logger.log_run_end(summary.as_dict())
    return summary
