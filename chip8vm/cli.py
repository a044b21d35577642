"""Command line entry point: load a ROM, run it headlessly for a number of
frames and optionally save the final screen.
"""

import argparse

from chip8vm import Engine, EngineConfig, Quirks, load_config
from chip8vm.logging import EmulatorLogger, LEVELS
from chip8vm.rendering import save_frame, COLOR_SCHEMES
from chip8vm.runner import run_frames


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a CHIP-8 ROM headlessly")
    parser.add_argument("rom", help="Path to the ROM image")
    parser.add_argument("--frames", type=int, default=600, help="Cycles to run (60 per emulated second)")
    parser.add_argument("--speed", type=int, default=None, help="Instructions per cycle")
    parser.add_argument("--seed", type=int, default=None, help="Seed for CXNN")
    parser.add_argument("--original-shift", action="store_true", help="8XY6/8XYE shift VY into VX")
    parser.add_argument("--increment-index", action="store_true", help="FX55/FX65 advance I")
    parser.add_argument("--config", default=None, help="YAML file with speed, seed and quirks")
    parser.add_argument("--snapshot", default=None, help="Write the final screen to this image file")
    parser.add_argument("--color-scheme", default="fuchsia", choices=sorted(COLOR_SCHEMES))
    parser.add_argument("--log-level", default="INFO", type=str.upper, choices=LEVELS)
    parser.add_argument("--no-progress", action="store_true")
    return parser.parse_args(argv)


def build_config(args) -> EngineConfig:
    overrides = {}
    if args.speed is not None:
        overrides["speed"] = args.speed
    if args.seed is not None:
        overrides["seed"] = args.seed

    if args.config:
        config = load_config(args.config, **overrides)
    else:
        config = EngineConfig.from_mapping(overrides)

    if args.original_shift or args.increment_index:
        config = config.replace(quirks=Quirks(
            original_shift_behavior=args.original_shift or config.quirks.original_shift_behavior,
            increment_index=args.increment_index or config.quirks.increment_index,
        ))
    return config


def main(argv=None) -> int:
    args = parse_args(argv)
    logger = EmulatorLogger(log_level=args.log_level)
    config = build_config(args)

    engine = Engine(config, logger=logger)
    engine.load_rom(args.rom)

    logger.log_run_start({
        "rom": args.rom,
        "frames": args.frames,
        "speed": config.speed,
        "seed": config.seed,
        **config.quirks.to_mapping(),
    })

    summary = run_frames(engine, args.frames, progress=not args.no_progress)

    if args.snapshot:
        save_frame(engine.display, args.snapshot, color_scheme=args.color_scheme)
        logger.info(f"Screen saved: {args.snapshot}")

    return 1 if summary.error is not None else 0
