"""Console logging utilities for chip8vm.

A small levelled logger that prints to a stream: coloured level tags,
elapsed-time stamps and helpers for emulator runs.
"""

import sys
import time
from typing import Any, Dict, Optional

from tqdm import tqdm

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ANSI_COLORS = {
    "DEBUG": "\033[36m",  # cyan
    "INFO": "\033[32m",  # green
    "WARNING": "\033[33m",  # yellow
    "ERROR": "\033[31m",  # red
    "CRITICAL": "\033[35m",  # magenta
}
ANSI_RESET = "\033[0m"


class ConsoleLogger:
    """Print-based logger filtering on a minimum level.

    Args:
        name: Tag printed on every line
        log_level: Minimum level emitted, one of ``LEVELS``
        use_colors: Colour level tags when the stream is a terminal
        show_timestamps: Prefix seconds elapsed since construction
        stream: File object to write to; ``sys.stdout`` when ``None``
    """

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.stream = stream
        target = stream if stream is not None else sys.stdout
        self.use_colors = use_colors and getattr(target, "isatty", lambda: False)()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def is_enabled_for(self, level: str) -> bool:
        return LEVELS.index(level.upper()) >= LEVELS.index(self.log_level)

    def _format_message(self, level: str, message: str) -> str:
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{ANSI_COLORS[level]}{tag}{ANSI_RESET}"
        prefix = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        return f"{prefix}{tag}[{self.name}] {message}"

    def log(self, level: str, message: str):
        level = level.upper()
        if self.is_enabled_for(level):
            print(self._format_message(level, message), file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)

class EmulatorLogger(ConsoleLogger):
    """Logger with helpers for engine runs."""

    def __init__(self, name: str = "Engine", **kwargs):
        kwargs.setdefault("log_level", "WARNING")
        super().__init__(name, **kwargs)

    def log_run_start(self, config: Dict[str, Any]):
        """Log run configuration."""
        self.info("=" * 60)
        self.info("Starting run with configuration:")
        for key, value in config.items():
            self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_instruction(self, address: int, instruction: int, mnemonic: str):
        if self.is_enabled_for("DEBUG"):
            self.debug(f"0x{address:03X}: {instruction:04X}  {mnemonic}")

    def log_registers(self, registers, index: int, pc: int, level: str = "DEBUG"):
        """Dump the register file on one line."""
        if not self.is_enabled_for(level):
            return
        regs = " ".join(f"V{i:X}={value:02X}" for i, value in enumerate(registers))
        self.log(level, f"PC={pc:03X} I={index:04X} {regs}")

    def log_fault(self, error: Exception):
        self.error(f"{type(error).__name__}: {error}")

    def log_run_end(self, summary: Dict[str, Any]):
        """Log run completion with final figures."""
        elapsed = time.time() - self.start_time
        self.info("=" * 60)
        self.info(f"Run finished in {elapsed:.1f}s")
        for key, value in summary.items():
            self.info(f"  {key}: {value}")
        self.info("=" * 60)


def build_progress_bar(n: int, desc: Optional[str] = None, enabled: bool = True, **kwargs) -> tqdm:
    """Build a tqdm progress bar over ``n`` frames."""
    if desc is None:
        desc = f"Running ({n:,} frames)"

    for kwarg in ("total", "disable"):
        kwargs.pop(kwarg, None)

    return tqdm(total=n, desc=desc, unit="frame", disable=not enabled, **kwargs)
