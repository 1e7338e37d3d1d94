"""Density image formatter (binary PPM).

WHY: A picture of the non-zero pattern shows bands, blocks and stray
entries at a glance, and PPM is a format every image tool reads with no
extra dependencies.

HOW: The matrix is binned into a width × height grid of pixels. Each
pixel counts the entries that fall into it; counts are log-scaled with
log2(1 + count), normalised so the densest pixel is 255, and drawn dark on
a white background (grey channels equal). Header comments record the
source shape, the approximate number of matrix cells per pixel, and a
legend mapping pixel values back to entry counts.

RULES:
- Size: explicit width and/or height; a missing side follows the matrix
  aspect ratio; with neither, the longer side is max_dim pixels
- Pixel of entry (i, j): px = floor(j / ncols * width), py = floor(i / nrows * height),
  clamped into the image
- An empty pixel is white (255, 255, 255)
- Output suffix: "-density.ppm"
- Media type: "image/x-portable-pixmap"
"""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

import numpy as np

from matrix_market.config import IMAGE_MAX_DIM
from matrix_market.core.ir import CoordinateMatrix
from matrix_market.formatters.base import BaseFormatter, FormatterOutput

MAXVAL = 255


def image_size(
    nrows: int,
    ncols: int,
    width: Optional[int] = None,
    height: Optional[int] = None,
    max_dim: int = IMAGE_MAX_DIM,
) -> Tuple[int, int]:
    """Resolve the (width, height) of the image for an nrows × ncols matrix.

    Raises ValueError if the resolved size is not positive.
    """
    if width is None and height is None:
        if nrows > ncols:
            height = max_dim
        else:
            width = max_dim
    if width is None:
        width = int(ncols * height / nrows + 0.5) if nrows else 0
    if height is None:
        height = int(nrows * width / ncols + 0.5) if ncols else 0
    if width <= 0 or height <= 0:
        raise ValueError(
            "image size must be positive, got {} x {}".format(width, height)
        )
    return width, height


def density_histogram(matrix: CoordinateMatrix, width: int, height: int) -> np.ndarray:
    """Entry counts per pixel as a (height, width) array."""
    hist = np.zeros((height, width), dtype=np.float64)
    if not matrix.nnz:
        return hist
    rows, cols, _ = matrix.to_arrays()
    px = np.clip((cols.astype(np.float64) / matrix.ncols * width).astype(np.int64), 0, width - 1)
    py = np.clip((rows.astype(np.float64) / matrix.nrows * height).astype(np.int64), 0, height - 1)
    np.add.at(hist, (py, px), 1.0)
    return hist


def _legend(h_max: float) -> str:
    """Pixel value → approximate entry count table, ten values per line."""
    field = max(1, int(math.ceil(math.log10(2.0 ** h_max + 1))))
    lines: List[str] = []
    for value in range(MAXVAL + 1):
        if value % 10 == 0:
            lines.append("{:>3}: ".format(value))
        level = (MAXVAL - value) / MAXVAL * h_max
        count = int(2.0 ** level - 1 + 0.5)
        lines[-1] += " {:>{w}}".format(count, w=field)
    return "\n".join(lines)


class DensityPPMFormatter(BaseFormatter):
    """Formatter that renders the non-zero density as a binary PPM image."""

    def __init__(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        max_dim: int = IMAGE_MAX_DIM,
    ) -> None:
        self.width = width
        self.height = height
        self.max_dim = max_dim

    @property
    def name(self) -> str:
        return "Density PPM"

    def render(self, matrix: CoordinateMatrix) -> Tuple[np.ndarray, List[str]]:
        """Return the (height, width, 3) uint8 pixel array and header comments."""
        width, height = image_size(
            matrix.nrows, matrix.ncols, self.width, self.height, self.max_dim
        )
        levels = np.log2(1.0 + density_histogram(matrix, width, height))
        h_max = float(levels.max())
        if h_max > 0:
            shade = np.clip(levels / h_max * MAXVAL, 0, MAXVAL)
        else:
            shade = np.zeros_like(levels)
        grey = (MAXVAL - shade + 0.5).astype(np.uint8)
        pixels = np.repeat(grey[:, :, np.newaxis], 3, axis=2)

        comments = [
            "source matrix: {} x {} w/ {} nnz".format(matrix.nrows, matrix.ncols, matrix.nnz),
            "each pixel approx {} x {} entries".format(
                int(matrix.nrows / height + 0.5), int(matrix.ncols / width + 0.5)
            ),
            "approx pixel's nnz count vs value",
        ]
        comments.extend(_legend(h_max).split("\n"))
        return pixels, comments

    def format(self, matrix: CoordinateMatrix, source_name: str = "") -> list[FormatterOutput]:
        """Render the matrix as a P6 PPM file."""
        pixels, comments = self.render(matrix)
        height, width = pixels.shape[:2]

        banner = ["P6"]
        if source_name:
            banner.append("# {}".format(source_name))
        banner.extend("# {}".format(c) for c in comments)
        banner.append("{} {} {}".format(width, height, MAXVAL))
        content = ("\n".join(banner) + "\n").encode("ascii", errors="replace") + pixels.tobytes()

        return [
            FormatterOutput(
                suffix="-density.ppm",
                content=content,
                media_type="image/x-portable-pixmap",
            )
        ]
