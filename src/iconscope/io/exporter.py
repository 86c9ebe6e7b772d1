"""
Image export for finished renders.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def frame_array(framebuffer) -> np.ndarray:
    """Return the framebuffer contents as an (H, W, 3) uint8 array."""
    if hasattr(framebuffer, "to_array"):
        return framebuffer.to_array()
    return np.asarray(framebuffer, dtype=np.uint8)


def save_png(framebuffer, output_path: Union[str, Path]) -> Path:
    """
    Write the framebuffer to a PNG file.

    Args:
        framebuffer: Object with ``to_array()`` or an (H, W, 3) uint8 array.
        output_path: Destination path; parent directories are created.

    Returns:
        Path to the written file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    Image.fromarray(frame_array(framebuffer), mode="RGB").save(output_path)
    logger.info("Saved %s", output_path)
    return output_path
