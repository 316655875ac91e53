"""
CLI entry point for the Buddhabrot renderer.

Usage:
    buddhascope [options]
    python -m buddhascope [options]
"""

import argparse
import multiprocessing as mp
import sys
import time
from pathlib import Path

from buddhascope.config import PROFILES, from_profile
from buddhascope.core.errors import ConfigurationError
from buddhascope.core.viewport import Viewport
from buddhascope.io.exporter import export, save_vertices
from buddhascope.pipeline import BuddhabrotPipeline


def _progress_bar(label: str, current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r{label:>5} [{bar}] {pct:5.1f}%  {current}/{total} samples")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{label:>5} {pct:5.1f}%  {current}/{total} samples", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buddhascope",
        description="Monte Carlo Buddhabrot density renderer",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("buddhabrot.png"),
        help="Output image path; a .json sidecar is written next to it (default: buddhabrot.png)",
    )

    # Resolution & profile
    parser.add_argument(
        "-p", "--profile", type=str, default="standard",
        choices=sorted(PROFILES),
        help="Preset resolution, iteration budgets and sample density (default: standard)",
    )
    parser.add_argument("--width", type=int, default=None, help="Image width (overrides profile)")
    parser.add_argument("--height", type=int, default=None, help="Image height (overrides profile)")

    # Sampling
    parser.add_argument("--red-iters", type=int, default=None, help="Red channel iteration budget")
    parser.add_argument("--green-iters", type=int, default=None, help="Green channel iteration budget")
    parser.add_argument("--blue-iters", type=int, default=None, help="Blue channel iteration budget")
    parser.add_argument(
        "-n", "--samples", type=int, default=None,
        help="Samples per channel (default: width * height * profile samples-per-pixel)",
    )
    parser.add_argument(
        "--viewport", type=float, nargs=4, default=None,
        metavar=("MIN_R", "MIN_I", "MAX_R", "MAX_I"),
        help="Complex-plane region (default: -2 -2 2 2)",
    )
    parser.add_argument(
        "--normalization", type=str, default="shared",
        choices=["shared", "per-channel"],
        help="Divide all channels by one shared maximum, or each by its own (default: shared)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible renders")
    parser.add_argument(
        "-j", "--workers", type=int, default=max(1, mp.cpu_count() - 1),
        help="Parallel sampling workers (default: CPU count - 1)",
    )

    # Extra outputs
    parser.add_argument(
        "--vertices", type=Path, default=None,
        help="Also dump the (x, y, r, g, b) vertex array to this .npy path",
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    iterations = None
    if any(v is not None for v in (args.red_iters, args.green_iters, args.blue_iters)):
        base = PROFILES[args.profile]["iterations"]
        iterations = (
            args.red_iters if args.red_iters is not None else base[0],
            args.green_iters if args.green_iters is not None else base[1],
            args.blue_iters if args.blue_iters is not None else base[2],
        )

    try:
        viewport = Viewport.from_bounds(*args.viewport) if args.viewport else None
        config = from_profile(
            args.profile,
            width=args.width,
            height=args.height,
            iterations=iterations,
            samples=args.samples,
            viewport=viewport,
            normalization=args.normalization.replace("-", "_"),
            seed=args.seed,
            workers=args.workers,
        )
        pipeline = BuddhabrotPipeline(config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    cfg = pipeline.config
    print(f"Rendering {cfg.width}x{cfg.height} Buddhabrot ({args.profile} profile)")
    min_r, min_i, max_r, max_i = cfg.viewport.as_tuple()
    print(f"  Viewport: [{min_r}, {max_r}] x [{min_i}, {max_i}]i")
    for ch in cfg.channels:
        print(f"  {ch.name.capitalize()} channel: {ch.iterations} iterations, {ch.samples} samples")
    print(f"  Normalization: {cfg.normalization}, workers: {cfg.workers}")

    t0 = time.time()
    result = pipeline.run(progress_callback=_progress_bar)
    elapsed = time.time() - t0

    paths = export(result, args.output)
    if args.vertices is not None:
        paths["vertices"] = save_vertices(result, args.vertices)

    print(f"\nDone in {elapsed:.1f}s")
    for ch in result.channels:
        print(f"  {ch.name:>5}: max count {ch.grid.max()}, normalized by {result.max_values[ch.name]:.0f}")
    for kind, path in paths.items():
        print(f"  {kind.capitalize()}: {path}")


if __name__ == "__main__":
    main()
