"""
CLI entry point for the symmetric icon renderer.

Usage:
    iconscope <dataset> [options]
    iconscope --list
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from iconscope.exceptions import ConfigurationError
from iconscope.io.datasets import get_dataset, load_datasets
from iconscope.io.encoder import encode_video, ffmpeg_available
from iconscope.io.exporter import save_png
from iconscope.io.framebuffer import ArrayFramebuffer
from iconscope.runner import RenderLoop


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = min(current / max(total, 1), 1.0) * 100
    filled = int(width * pct / 100)
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  {current:,}/{total:,} iterations")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        print(f"{pct:5.1f}%  {current:,}/{total:,} iterations", flush=True)


def _run_ticks(loop: RenderLoop, total: int):
    """Tick the loop to completion, yielding after every tick."""
    last_report = 0
    while loop.running():
        loop.tick()
        yield
        if loop.iterations_done - last_report >= total / 20 or not loop.running():
            _progress_bar(loop.iterations_done, total)
            last_report = loop.iterations_done


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iconscope",
        description="Render symmetric chaotic attractors (symmetry icons)",
    )

    parser.add_argument("dataset", nargs="?", help="Dataset name")
    parser.add_argument(
        "--datasets", type=Path, default=None,
        help="JSON file of named datasets (default: bundled presets)",
    )
    parser.add_argument("--list", action="store_true", help="List dataset names and exit")

    # Raster
    parser.add_argument("--size", type=int, default=1000, help="Square raster size (default: 1000)")
    parser.add_argument("--width", type=int, default=None, help="Raster width (overrides --size)")
    parser.add_argument("--height", type=int, default=None, help="Raster height (overrides --size)")

    # Run budget
    parser.add_argument("--max-hit", type=int, default=None, help="Hit-count saturation cap (default: 1200)")
    parser.add_argument("--tick-iterations", type=int, default=None, help="Iterations per tick")
    parser.add_argument("--total-iterations", type=int, default=None, help="Iterations for the whole run")

    # Output
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output PNG path (default: <dataset>.png)",
    )
    parser.add_argument("--video", type=Path, default=None, help="Also write a time-lapse MP4, one frame per tick")
    parser.add_argument("-f", "--fps", type=int, default=30, help="Time-lapse frames per second (default: 30)")
    parser.add_argument(
        "-q", "--quality", type=str, default="medium",
        choices=["high", "medium", "fast"],
        help="Time-lapse encoding quality (default: medium)",
    )
    parser.add_argument("--window", action="store_true", help="Show the render in a window instead of writing a PNG")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output (-vv for debug)")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.list:
            for name in sorted(load_datasets(args.datasets)):
                print(name)
            return 0

        if not args.dataset:
            parser.print_help()
            return 1

        config = get_dataset(
            args.dataset,
            args.datasets,
            max_hit=args.max_hit,
            tick_iterations=args.tick_iterations,
            total_iterations=args.total_iterations,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    width = args.width or args.size
    height = args.height or args.size

    if args.window:
        from iconscope.visualizers.window import run_window

        try:
            run_window(config, size=(width, height), title=f"iconscope - {args.dataset}")
        except ConfigurationError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        return 0

    if args.video is not None and not ffmpeg_available():
        print("Error: ffmpeg not found on PATH (needed for --video)", file=sys.stderr)
        return 1

    framebuffer = ArrayFramebuffer(width, height)
    loop = RenderLoop(framebuffer)
    try:
        loop.start(config)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    total = config.total_iterations
    print(f"Rendering '{args.dataset}' at {width}x{height}: n={config.n}, {total:,} iterations")
    t0 = time.time()

    if args.video is not None:
        ticks = -(-max(total, 1) // config.tick_iterations)
        frames = (framebuffer.to_array() for _ in _run_ticks(loop, total))
        try:
            encode_video(
                frame_iterator=frames,
                output_path=args.video,
                width=width,
                height=height,
                fps=args.fps,
                quality=args.quality,
                total_frames=ticks,
            )
        except RuntimeError as exc:
            print(f"\nError: {exc}", file=sys.stderr)
            return 1
        print(f"  Time-lapse: {args.video}")
    else:
        for _ in _run_ticks(loop, total):
            pass

    elapsed = time.time() - t0
    output = args.output or Path(f"{args.dataset}.png")
    save_png(framebuffer, output)

    canvas = loop.canvas
    print(f"\nDone! {loop.iterations_done:,} iterations in {elapsed:.1f}s")
    print(f"  Pixels hit: {canvas.occupied:,} / {canvas.width * canvas.height:,}")
    print(f"  Output: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
