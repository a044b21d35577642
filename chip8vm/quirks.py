"""Configurable CHIP-8 compatibility quirks."""

from typing import Mapping

from flax.struct import dataclass

from chip8vm.errors import InvalidQuirkKey


@dataclass(frozen=True)
class Quirks:
    """Historical behaviours toggled per engine.

    Attributes:
        original_shift_behavior: 8XY6/8XYE copy VY into VX before shifting
        increment_index: FX55/FX65 advance I once per register processed
    """
    original_shift_behavior: bool = False
    increment_index: bool = False

    # Mapping key -> attribute name
    KEYS = {
        "originalShiftBehavior": "original_shift_behavior",
        "incrementIndex": "increment_index",
    }

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, bool]) -> "Quirks":
        """Build quirks from ``{"originalShiftBehavior": bool, "incrementIndex": bool}``.

        Raises:
            InvalidQuirkKey: if the mapping holds any other key
        """
        unknown = set(mapping) - set(cls.KEYS)
        if unknown:
            raise InvalidQuirkKey(unknown)
        return cls(**{cls.KEYS[key]: bool(value) for key, value in mapping.items()})

    def to_mapping(self) -> dict:
        return {key: getattr(self, attr) for key, attr in self.KEYS.items()}


MODERN = Quirks()
LEGACY = Quirks(original_shift_behavior=True, increment_index=True)
