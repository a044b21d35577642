"""Engine configuration."""

import os
from typing import Any, Mapping, Union

from flax.struct import dataclass, field
from omegaconf import OmegaConf

from chip8vm.constants import DEFAULT_SPEED
from chip8vm.quirks import Quirks


@dataclass(frozen=True)
class EngineConfig:
    """Settings fixed for the lifetime of an engine.

    Attributes:
        speed: Instructions executed per ``cycle`` (the original driver used 8)
        seed: Seed of the random source behind CXNN
        quirks: Compatibility quirks
    """
    speed: int = DEFAULT_SPEED
    seed: int = 0
    quirks: Quirks = field(default_factory=Quirks)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "EngineConfig":
        """Build a config from plain data such as a parsed YAML document.

        ``quirks`` may be a mapping of quirk names or a ``Quirks`` instance.
        """
        mapping = dict(mapping)
        unknown = set(mapping) - {"speed", "seed", "quirks"}
        if unknown:
            raise ValueError(f"Unknown config key(s): {sorted(unknown)}")

        quirks = mapping.pop("quirks", None) or {}
        if not isinstance(quirks, Quirks):
            quirks = Quirks.from_mapping(quirks)

        speed = int(mapping.pop("speed", DEFAULT_SPEED))
        if speed < 1:
            raise ValueError(f"speed must be at least 1, got {speed}")
        return cls(speed=speed, seed=int(mapping.pop("seed", 0)), quirks=quirks)


def load_config(path: Union[str, os.PathLike], **overrides) -> EngineConfig:
    """Read an engine config from a YAML file, applying keyword overrides."""
    cfg = OmegaConf.load(path)
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.create(overrides))
    return EngineConfig.from_mapping(OmegaConf.to_container(cfg, resolve=True))
