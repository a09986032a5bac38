"""
Tunables used across the project.

- Grid sizes and display canvas
- Colour metric constants (sRGB / D65 / CIE Lab)
- Per-algorithm thresholds, diffusion scales and threshold matrices
"""
from __future__ import annotations

from typing import Tuple

# =========================
# Grid / canvas
# =========================

# Supported logical grid sizes (side length W of the W x W grid).
GRID_SIZES: Tuple[int, ...] = (8, 16, 32, 64, 80, 96, 128, 192, 256, 288, 384, 512)

# Side of the square preview canvas the quantized grid is composited onto.
DISPLAY_SIZE = 640

# Enhanced mode renders the source at this multiple of W before block averaging.
SUPERSAMPLE_FACTOR = 4

# Samples per axis inside each supersampled block (3 x 3 = 9 samples).
SUPERSAMPLE_TAPS = 3

# =========================
# Colour metric (sRGB, D65)
# =========================

SRGB_LINEAR_CUTOFF = 0.04045
LAB_EPSILON = 0.008856
LAB_KAPPA_SLOPE = 7.787
WHITE_D65: Tuple[float, float, float] = (0.95047, 1.00000, 1.08883)

# Rec. 601 luma weights for perceived brightness.
LUMA_WEIGHTS: Tuple[float, float, float] = (0.299, 0.587, 0.114)

# Enhanced distance: sqrt(WL*dL^2 + WA*da^2 + WB*db^2)
ENHANCED_WEIGHTS: Tuple[float, float, float] = (2.0, 4.0, 1.0)

# =========================
# Artistic
# =========================

ARTISTIC_CONTRAST = 1.2
ARTISTIC_NOISE_X = 0.7
ARTISTIC_NOISE_Y = 0.5
ARTISTIC_NOISE_GAIN = 2.0

# =========================
# Ordered matrices
# =========================

BAYER_MATRIX_4X4: Tuple[Tuple[int, ...], ...] = (
    (0, 8, 2, 10),
    (12, 4, 14, 6),
    (3, 11, 1, 9),
    (15, 7, 13, 5),
)

# Bayer picks the runner-up only if it is within this multiple of the nearest's brightness gap.
BAYER_SECOND_SLACK = 1.5

ORDERED_MATRIX_8X8: Tuple[Tuple[int, ...], ...] = (
    (0, 32, 8, 40, 2, 34, 10, 42),
    (48, 16, 56, 24, 50, 18, 58, 26),
    (12, 44, 4, 36, 14, 46, 6, 38),
    (60, 28, 52, 20, 62, 30, 54, 22),
    (3, 35, 11, 43, 1, 33, 9, 41),
    (51, 19, 59, 27, 49, 17, 57, 25),
    (15, 47, 7, 39, 13, 45, 5, 37),
    (63, 31, 55, 23, 61, 29, 53, 21),
)

# =========================
# Error diffusion
# =========================

# Floyd-Steinberg kernel as (dx, dy, weight); weights sum to 1.
KERNEL_FS: Tuple[Tuple[int, int, float], ...] = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)

# Dual colour: pick nearest above this brightness, runner-up otherwise.
DUAL_BRIGHTNESS_SPLIT = 0.5
DUAL_ERROR_SCALE = 0.6

# Edge detection: sum of |dR|+|dG|+|dB| against any 4-neighbour.
EDGE_DIFF_THRESHOLD = 80

# Selective: only pixels farther than this (Lab units) from the palette diffuse.
SELECTIVE_THRESHOLD = 25.0
SELECTIVE_ERROR_SCALE = 0.5

# =========================
# Ordered / randomized selective
# =========================

ORDERED_SELECTIVE_THRESHOLD = 25.0

RANDOMIZED_SELECTIVE_THRESHOLD = 30.0
BLUE_NOISE_SEED = 12345
# Brightness jitter amplitude: (noise - 0.5) * 0.3 -> +/-0.15
BLUE_NOISE_AMPLITUDE = 0.3
RANDOMIZED_BRIGHTNESS_SPLIT = 0.5

# Octaves of the integer hash: (x mult, y mult, seed mult, weight)
BLUE_NOISE_OCTAVES: Tuple[Tuple[int, int, int, float], ...] = (
    (73, 37, 1, 0.5),
    (113, 67, 2, 0.3),
    (151, 97, 3, 0.2),
)
