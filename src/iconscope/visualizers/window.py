"""
Interactive pygame viewer.

Hosts a RenderLoop in a window: the loop writes into the display surface,
each tick is flipped to the screen, and closing the window stops the run.
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
import pygame

from iconscope.runner import RenderLoop, RunConfig

logger = logging.getLogger(__name__)


class PygameFramebuffer:
    """Framebuffer over a pygame Surface."""

    def __init__(self, surface: pygame.Surface):
        self.surface = surface
        self.width, self.height = surface.get_size()

    def write(self, x: int, y: int, color: Tuple[int, int, int]) -> None:
        self.surface.set_at((x, y), color)

    def write_rgb(self, rgb: np.ndarray) -> None:
        # pygame indexes surfaces as (x, y); numpy frames are (row, col)
        pygame.surfarray.blit_array(self.surface, np.ascontiguousarray(rgb.transpose(1, 0, 2)))

    def fill(self, color: Sequence[int]) -> None:
        self.surface.fill(color)

    def to_array(self) -> np.ndarray:
        return pygame.surfarray.array3d(self.surface).transpose(1, 0, 2).copy()

    def present(self) -> None:
        pygame.display.flip()


def run_window(
    config: RunConfig,
    size: Tuple[int, int] = (1000, 1000),
    title: str = "iconscope",
    wait_for_close: bool = True,
) -> Optional[np.ndarray]:
    """
    Render ``config`` in a window until the iteration budget is spent or the
    window is closed.

    Returns:
        The final frame as (H, W, 3) uint8, or None if the window was closed
        before the first tick.
    """
    pygame.init()
    try:
        screen = pygame.display.set_mode(size)
        pygame.display.set_caption(title)

        framebuffer = PygameFramebuffer(screen)
        loop = RenderLoop(framebuffer, present=framebuffer.present)
        loop.start(config)

        closed = False
        ticks = 0
        while loop.running():
            loop.tick()
            ticks += 1
            pygame.display.set_caption(f"{title} - {loop.progress * 100:5.1f}%")
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    loop.stop()
                    closed = True

        logger.info("Done after %d iterations", loop.iterations_done)
        frame = framebuffer.to_array() if ticks else None

        while wait_for_close and not closed:
            if pygame.event.wait().type == pygame.QUIT:
                closed = True

        return frame
    finally:
        pygame.quit()
