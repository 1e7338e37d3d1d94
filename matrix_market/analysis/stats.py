"""Structural statistics of a sparse matrix.

WHY: When choosing storage formats and kernels for a matrix collection,
the shape of the non-zero pattern matters more than the values: how
uneven the rows are, how far entries stray from the diagonal, whether
they cluster. These statistics summarise that for one matrix.

HOW: All statistics are computed from the numpy arrays of the
CoordinateMatrix. The Hopkins clustering statistic compares nearest-entry
distances from uniformly random positions with nearest-other-entry
distances from randomly chosen entries; sampling uses a seeded numpy
Generator so results are reproducible.

RULES:
- max_abs: largest |e| over stored entries
- max_row_nnz / avg_row_nnz: entries per row (avg = nnz / rows)
- diagonals: number of entries with i == j
- bandwidth: max |i - j|, -1 for a matrix without entries
- diagness: Pearson correlation of the entries' row and column coordinates
- hopkins: u / (u + w); ~0.5 for random patterns, towards 1 when clustered
- Values that are undefined for the matrix (no entries, zero variance,
  fewer than two entries for Hopkins) are None
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from matrix_market.config import HOPKINS_SAMPLES, HOPKINS_SEED
from matrix_market.core.ir import CoordinateMatrix

STATS_COLUMNS = [
    "rows",
    "cols",
    "nnz",
    "max abs",
    "max nnz/row",
    "avg nnz/row",
    "diags",
    "bandwidth",
    "diagness",
    "hopkins",
]
"""CSV column names for MatrixStats.as_row(), in order."""


@dataclass
class MatrixStats:
    """Structural statistics for one matrix (see module RULES)."""

    rows: int
    cols: int
    nnz: int
    max_abs: Optional[float]
    max_row_nnz: int
    avg_row_nnz: Optional[float]
    diagonals: int
    bandwidth: int
    diagness: Optional[float]
    hopkins: Optional[float]

    def as_row(self) -> List[str]:
        """Cells for one CSV row; undefined values become empty cells."""
        values = [
            self.rows, self.cols, self.nnz, self.max_abs, self.max_row_nnz,
            self.avg_row_nnz, self.diagonals, self.bandwidth, self.diagness,
            self.hopkins,
        ]
        return [_cell(v) for v in values]


def _cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return "{:.10g}".format(value)
    return str(value)


def pearson(x: np.ndarray, y: np.ndarray) -> Optional[float]:
    """Pearson correlation coefficient, None when either side has no variance."""
    if len(x) == 0:
        return None
    dx = x - x.mean()
    dy = y - y.mean()
    denom = np.sqrt(np.sum(dx * dx)) * np.sqrt(np.sum(dy * dy))
    if denom == 0:
        return None
    r = float(np.sum(dx * dy) / denom)
    return max(-1.0, min(1.0, r))


def _nearest_distance(i: float, j: float, rows: np.ndarray, cols: np.ndarray) -> float:
    return float(np.min(np.hypot(rows - i, cols - j)))


def hopkins(
    rows: np.ndarray,
    cols: np.ndarray,
    nrows: int,
    ncols: int,
    samples: int = HOPKINS_SAMPLES,
    seed: int = HOPKINS_SEED,
) -> Optional[float]:
    """Hopkins statistic of the entry positions.

    WHY: Distinguishes clustered non-zero patterns (blocks, bands) from
    scattered ones, which drives block-format decisions.

    HOW: u sums, over `samples` uniformly random integer positions, the
    distance to the nearest entry. w sums, over `samples` randomly chosen
    entries, the distance to the nearest *other* entry. The statistic is
    u / (u + w).

    RULES:
    - Returns None with fewer than two entries or when u + w == 0
    - Distances are Euclidean in (row, col) space
    - The same seed always gives the same result
    """
    nnz = len(rows)
    if nnz < 2 or samples <= 0:
        return None

    rng = np.random.default_rng(seed)
    r = rows.astype(np.float64)
    c = cols.astype(np.float64)

    u = 0.0
    for pi, pj in zip(rng.integers(0, nrows, samples), rng.integers(0, ncols, samples)):
        u += _nearest_distance(pi, pj, r, c)

    w = 0.0
    for k in rng.integers(0, nnz, samples):
        others = np.arange(nnz) != k
        w += _nearest_distance(r[k], c[k], r[others], c[others])

    if u + w == 0:
        return None
    return u / (u + w)


def compute_stats(
    matrix: CoordinateMatrix,
    samples: int = HOPKINS_SAMPLES,
    seed: int = HOPKINS_SEED,
) -> MatrixStats:
    """Compute MatrixStats for a CoordinateMatrix.

    Args:
        matrix: The matrix to analyse.
        samples: Number of samples per Hopkins half.
        seed: Seed for the Hopkins sampling.

    Returns:
        The statistics; see module RULES for undefined values.
    """
    rows, cols, values = matrix.to_arrays()
    nnz = matrix.nnz
    r = rows.astype(np.int64)
    c = cols.astype(np.int64)

    row_counts = np.bincount(r, minlength=matrix.nrows) if matrix.nrows else np.zeros(0, np.int64)

    return MatrixStats(
        rows=matrix.nrows,
        cols=matrix.ncols,
        nnz=nnz,
        max_abs=float(np.max(np.abs(values))) if nnz else None,
        max_row_nnz=int(row_counts.max()) if len(row_counts) else 0,
        avg_row_nnz=nnz / matrix.nrows if matrix.nrows else None,
        diagonals=int(np.count_nonzero(r == c)),
        bandwidth=int(np.max(np.abs(r - c))) if nnz else -1,
        diagness=pearson(r.astype(np.float64), c.astype(np.float64)),
        hopkins=hopkins(r, c, matrix.nrows, matrix.ncols, samples=samples, seed=seed),
    )
