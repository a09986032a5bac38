# bitcrush/utils.py
from __future__ import annotations

"""
Shared utilities for bitcrush.

Includes time formatting, colour usage reporting for quantized grids, and
tidy print-based logging used by the pipeline and the CLI.
"""

import io
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterable, Iterator, List, Mapping, Optional, TextIO, Tuple

import numpy as np

from .core_types import U8Grid


#  Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Grid reports


def colour_usage_report(
    grid: U8Grid, name_of: Mapping[str, str] | None = None
) -> List[Tuple[str, str, int]]:
    """
    Count the colours of visible (alpha > 0) cells in an RGBA grid.

    Returns a list of (hex, name, count) sorted by count descending, then hex.
    """
    name_of = name_of or {}
    visible_mask = grid[..., 3] > 0
    if not np.any(visible_mask):
        return []
    flat = grid[..., :3][visible_mask].reshape(-1, 3)
    uniques, counts = np.unique(flat, axis=0, return_counts=True)
    report: List[Tuple[str, str, int]] = []
    for rgb_row, count in zip(uniques, counts):
        hex_str = f"#{int(rgb_row[0]):02x}{int(rgb_row[1]):02x}{int(rgb_row[2]):02x}"
        report.append((hex_str, name_of.get(hex_str, "?"), int(count)))
    report.sort(key=lambda row: (-row[2], row[0]))
    return report


#  CLI output


def enable_line_buffered_stdout() -> None:
    """
    Enable line-buffered stdout when supported.
    Helps live progress printing in terminals that expose .reconfigure().
    """
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


# Pretty logging

# Per-thread capture target for the log helpers (None -> sys.stdout).
_capture: ContextVar[Optional[io.StringIO]] = ContextVar("bitcrush_log_capture", default=None)


def _stream() -> TextIO:
    buf = _capture.get()
    return buf if buf is not None else sys.stdout


@contextmanager
def capture_output() -> Iterator[io.StringIO]:
    """
    Route log lines of the current thread into a buffer.
    Lets parallel jobs keep their output together and print it in order.
    """
    buf = io.StringIO()
    token = _capture.set(buf)
    try:
        yield buf
    finally:
        _capture.reset(token)


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, bool):
        return format_bool_on_off(value)
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [run] Grid: 32  Palette: Flying Tiger  Algorithm: Bayer  Jobs: 2
    Routes to debug() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", file=_stream(), flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, file=_stream(), flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", file=_stream(), flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", file=_stream(), flush=True)


def error(message: str) -> None:
    """Error log line to stderr, or to the capture buffer while one is active."""
    buf = _capture.get()
    print(f"[error] {message}", file=buf if buf is not None else sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "format_total_duration_compact",
    "colour_usage_report",
    "enable_line_buffered_stdout",
    "capture_output",
    "format_bool_on_off",
    "format_number_compact",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
