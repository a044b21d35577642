"""Tests for engine configuration and quirk mappings."""

import pytest
from chip8vm import EngineConfig, Quirks, load_config, InvalidQuirkKey
from chip8vm.constants import DEFAULT_SPEED


def test_defaults():
    config = EngineConfig()

    assert config.speed == DEFAULT_SPEED
    assert config.seed == 0
    assert config.quirks == Quirks()


def test_quirks_from_mapping():
    quirks = Quirks.from_mapping({"originalShiftBehavior": True, "incrementIndex": 1})

    assert quirks.original_shift_behavior is True
    assert quirks.increment_index is True
    assert quirks.to_mapping() == {"originalShiftBehavior": True, "incrementIndex": True}


def test_quirks_partial_mapping():
    assert Quirks.from_mapping({"incrementIndex": True}) == Quirks(increment_index=True)
    assert Quirks.from_mapping({}) == Quirks()


def test_quirks_unknown_key():
    with pytest.raises(InvalidQuirkKey) as excinfo:
        Quirks.from_mapping({"original_shift_behavior": True, "clipSprites": False})
    assert excinfo.value.keys == ("clipSprites", "original_shift_behavior")


def test_config_from_mapping():
    config = EngineConfig.from_mapping({
        "speed": 12,
        "seed": 7,
        "quirks": {"originalShiftBehavior": True},
    })

    assert config.speed == 12
    assert config.seed == 7
    assert config.quirks == Quirks(original_shift_behavior=True)


def test_config_accepts_quirks_instance():
    config = EngineConfig.from_mapping({"quirks": Quirks(increment_index=True)})
    assert config.quirks.increment_index


@pytest.mark.parametrize("mapping,error", [
    ({"speed": 0}, ValueError),
    ({"fps": 60}, ValueError),
    ({"quirks": {"vfReset": True}}, InvalidQuirkKey),
])
def test_config_rejects(mapping, error):
    with pytest.raises(error):
        EngineConfig.from_mapping(mapping)


def test_load_config(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text(
        "speed: 10\n"
        "seed: 3\n"
        "quirks:\n"
        "  originalShiftBehavior: true\n"
        "  incrementIndex: false\n"
    )

    config = load_config(path)

    assert config.speed == 10
    assert config.seed == 3
    assert config.quirks == Quirks(original_shift_behavior=True)


def test_load_config_overrides(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("speed: 10\nseed: 3\n")

    config = load_config(path, speed=20)

    assert config.speed == 20
    assert config.seed == 3
