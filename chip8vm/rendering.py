"""Frame buffer rasterization for display collaborators."""
import os
from typing import Tuple, Union

import numpy as np
from PIL import Image

Color = Tuple[int, int, int]

COLOR_SCHEMES = {
    "fuchsia": ((232, 121, 249), (0, 0, 0)),  # #E879F9 on black
    "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
    "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
    "white": ((255, 255, 255), (0, 0, 0)),  # White on black
    "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
}

DEFAULT_SCALE = 15


def create_color_scheme(scheme: str = "fuchsia") -> Tuple[Color, Color]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name (one of ``COLOR_SCHEMES``)

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES.keys())}"
        )

    return COLOR_SCHEMES[scheme]


def chip8_display_to_rgb(
    display,
    scale: int = DEFAULT_SCALE,
    on_color: Color = COLOR_SCHEMES["fuchsia"][0],
    off_color: Color = COLOR_SCHEMES["fuchsia"][1],
) -> np.ndarray:
    """Convert the boolean frame buffer to an RGB array with optional upscaling.

    Args:
        display: Boolean array of shape (64, 32) indexed ``[x, y]``
        scale: Edge length in pixels of one CHIP-8 pixel
        on_color: RGB color for set pixels
        off_color: RGB color for clear pixels

    Returns:
        RGB array of shape (32*scale, 64*scale, 3) with uint8 values
    """
    if scale < 1:
        raise ValueError(f"scale must be at least 1, got {scale}")

    # (64 width, 32 height) -> image rows are y
    pixels = np.array(display, dtype=np.bool_).T
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def save_frame(
    display,
    filename: Union[str, os.PathLike],
    scale: int = DEFAULT_SCALE,
    color_scheme: str = "fuchsia",
) -> None:
    """Write the frame buffer to an image file (format taken from the extension)."""
    on_color, off_color = create_color_scheme(color_scheme)
    frame = chip8_display_to_rgb(display, scale, on_color, off_color)
    Image.fromarray(frame).save(filename)
