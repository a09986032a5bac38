#!/usr/bin/env python3
"""
pixelize.py
Turn images into palette-constrained pixel art.

Usage:
  python pixelize.py INPUT --grid W --palette NAME --algorithm NAME [--base] [--debug]
  python pixelize.py --list

Input:
  A Pillow-readable image, or a folder of them. Alpha is carried through.

Output:
  PNG files named <stem>-pixelized-<algorithm>-<W>xW-<palette>.png next to the
  input (or in --outdir). --base also writes the W x W grid as
  <stem>-pixelized-base-....png.

Notes:
  Palettes come from the built-in table and any .gpl / .hex files in
  --palette-dir. Folder mode processes --jobs files in parallel and prints
  each file's log in input order.
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from bitcrush.algorithms import Algorithm
from bitcrush.constants import DISPLAY_SIZE, GRID_SIZES
from bitcrush.core_types import hex_to_rgb, rgb_to_hex
from bitcrush.errors import BitcrushError
from bitcrush.image_io import IMAGE_SUFFIXES, load_image_rgba, save_image_rgba
from bitcrush.palette_data import (
    BUILTIN_PALETTES,
    DEFAULT_PALETTE_NAME,
    ColorPalette,
    find_palette,
)
from bitcrush.palette_files import load_palettes_from_dir
from bitcrush.params import PixelizationParams
from bitcrush.pipeline import pixelize
from bitcrush.sampler import CROP_MODES
from bitcrush.utils import (
    capture_output,
    colour_usage_report,
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)

OUTPUT_MARKER = "-pixelized-"


# CLI args & small helpers


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder (None with --list)
        outdir: optional Path for outputs
        grid: grid side W
        palette: palette name
        palette_dir: optional folder of .gpl / .hex palettes
        algorithm: algorithm name or slug
        crop: "stretch" | "center"
        display_size: preview canvas side
        no_upscale: write the grid without enlarging it
        base: also write the W x W base render
        jobs: parallel file workers
        list: print palettes and algorithms, then exit
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="pixelize",
        description="Convert image(s) to palette-constrained pixel art.",
    )
    parser.add_argument("src", type=Path, nargs="?", help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--grid", type=int, choices=GRID_SIZES, default=32, help="Grid side W"
    )
    parser.add_argument(
        "--palette", default=DEFAULT_PALETTE_NAME, help="Palette name (see --list)"
    )
    parser.add_argument(
        "--palette-dir",
        type=Path,
        default=None,
        help="Folder with extra .gpl / .hex palettes",
    )
    parser.add_argument(
        "--algorithm",
        default=Algorithm.STANDARD.value,
        help='Algorithm name or slug, e.g. "Bayer" or "floyd-steinberg"',
    )
    parser.add_argument(
        "--crop",
        choices=CROP_MODES,
        default="stretch",
        help="stretch the whole image or centre-crop it to a square first",
    )
    parser.add_argument(
        "--display-size",
        type=int,
        default=DISPLAY_SIZE,
        help="Side of the preview canvas",
    )
    parser.add_argument(
        "--no-upscale", action="store_true", help="Write the grid at W x W"
    )
    parser.add_argument(
        "--base", action="store_true", help="Also write the W x W base render"
    )
    parser.add_argument(
        "--jobs", type=int, default=2, help="Files processed in parallel"
    )
    parser.add_argument(
        "--list", action="store_true", help="List palettes and algorithms"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    args = parser.parse_args(argv)
    if args.src is None and not args.list:
        parser.error("the following arguments are required: src")
    if args.display_size <= 0:
        parser.error("--display-size must be positive")
    if args.jobs < 1:
        parser.error("--jobs must be at least 1")
    return args


def _print_catalog(extra: List[ColorPalette]) -> None:
    print_banner("Palettes")
    for pal in list(BUILTIN_PALETTES) + extra:
        log(f"  {pal.name}  ({len(pal)} colours)")
    print_banner("Algorithms")
    for algo in Algorithm:
        log(f"  {algo.value:<22} {algo.description}")


def _name_of_hex(palette: ColorPalette) -> Dict[str, str]:
    names: Dict[str, str] = {}
    for i, hx in enumerate(palette.colors):
        names.setdefault(rgb_to_hex(hex_to_rgb(hx)), f"{palette.name} #{i + 1}")
    return names


def _output_path(src_path: Path, outdir: Optional[Path], name: str) -> Path:
    folder = outdir if outdir is not None else src_path.parent
    return folder / f"{src_path.stem}-{name}"


def _is_output_artifact(path: Path) -> bool:
    return OUTPUT_MARKER in path.name


# Per-file processing


def _process_single_image(
    src_path: Path,
    outdir: Optional[Path],
    params: PixelizationParams,
    display_size: int,
    write_base: bool,
    debug: bool,
) -> bool:
    """
    Process a single image path end-to-end:
      load -> resample -> quantize -> composite -> save -> report.
    Returns False if the file failed.
    """
    t_start = time.perf_counter()
    print_banner(src_path.name)

    try:
        rgba = load_image_rgba(src_path)
        if debug:
            debug_log(
                key_value_pairs_to_string(
                    [("Loaded", f"{rgba.shape[1]}x{rgba.shape[0]}")]
                )
            )
        result = pixelize(rgba, params, display_size, debug=debug)

        if outdir is not None:
            outdir.mkdir(parents=True, exist_ok=True)
        written = [
            save_image_rgba(
                _output_path(src_path, outdir, result.filename()), result.preview
            )
        ]
        if write_base:
            written.append(
                save_image_rgba(
                    _output_path(src_path, outdir, result.filename(base=True)),
                    result.base,
                )
            )
    except (BitcrushError, OSError) as e:
        error(f"{src_path.name}: {e}")
        return False

    for path in written:
        log(f"Wrote {path.name}")
    layout = result.layout
    log(
        f"Grid {params.grid_size}x{params.grid_size} | algorithm={params.algorithm.value} "
        f"| palette={params.palette.name} | canvas={layout.canvas} x{layout.scale}"
    )
    log("Colours used:")
    for hex_code, name, count in colour_usage_report(
        result.grid, _name_of_hex(params.palette)
    ):
        log(f"  {hex_code}  {name}: {count:,}")
    log(f"Total time {format_total_duration_compact(time.perf_counter() - t_start)}")
    return True


def _process_one_captured(
    path: Path,
    outdir: Optional[Path],
    params: PixelizationParams,
    display_size: int,
    write_base: bool,
    debug: bool,
) -> Tuple[str, bool]:
    """
    Process a single file with log capture.

    Useful for concurrent execution where output should be printed in order.
    """
    with capture_output() as buf:
        ok = _process_single_image(
            path, outdir, params, display_size, write_base, debug
        )
    return buf.getvalue(), ok


def _list_images(folder: Path) -> List[Path]:
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_SUFFIXES
        and not _is_output_artifact(p)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering.

    Returns 0 on success, 1 if any file failed, 2 on bad arguments.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    extra: List[ColorPalette] = []
    if args.palette_dir is not None:
        extra = load_palettes_from_dir(args.palette_dir)

    if args.list:
        _print_catalog(extra)
        return 0

    try:
        palette = find_palette(args.palette, extra)
    except KeyError:
        error(f"unknown palette: {args.palette} (see --list)")
        return 2
    try:
        params = PixelizationParams(
            grid_size=args.grid,
            palette=palette,
            algorithm=Algorithm.from_key(args.algorithm),
            no_upscale=args.no_upscale,
            crop=args.crop,
        )
    except BitcrushError as e:
        error(str(e))
        return 2

    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    print_config_line(
        "run",
        [
            ("Grid", args.grid),
            ("Palette", palette.name),
            ("Algorithm", params.algorithm.value),
            ("Jobs", args.jobs),
        ],
        debug=False,
    )
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("CPU cores", os.cpu_count() or 1),
                    ("Crop", args.crop),
                    ("Display", args.display_size),
                    ("Upscale", not args.no_upscale),
                    ("Base", args.base),
                    ("Extra palettes", len(extra)),
                ]
            )
        )

    if not src.is_dir():
        ok = _process_single_image(
            src, args.outdir, params, args.display_size, args.base, args.debug
        )
        return 0 if ok else 1

    files = _list_images(src)
    if args.debug:
        debug_log(key_value_pairs_to_string([("Images", len(files)), ("Jobs", args.jobs)]))

    results: List[bool] = []
    if args.jobs == 1:
        for p in files:
            results.append(
                _process_single_image(
                    p, args.outdir, params, args.display_size, args.base, args.debug
                )
            )
    else:
        with ThreadPoolExecutor(max_workers=args.jobs) as ex:
            futures = [
                ex.submit(
                    _process_one_captured,
                    p,
                    args.outdir,
                    params,
                    args.display_size,
                    args.base,
                    args.debug,
                )
                for p in files
            ]
            blocks = [f.result() for f in futures]
        print("".join(text for text, _ in blocks), end="", flush=True)
        results = [ok for _, ok in blocks]

    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
