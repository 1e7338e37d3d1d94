"""Compressed sparse row (CSR) conversion.

WHY: Solvers and SpMV kernels consume CSR, not coordinate lists. The
reader deliberately keeps entries in read order, so the row-major sort
and the row-pointer construction live here, outside the parsing core.

HOW: Entries are exported as numpy arrays, stably sorted by (row, col),
and the row pointer is the prefix sum of per-row counts. Duplicates are
either kept (default) or summed.

RULES:
- row_ptr has nrows + 1 elements, row_ptr[0] == 0, row_ptr[-1] == nnz
- Within a row, columns are ascending; equal coordinates keep read order
- sum_duplicates=True merges entries with equal (i, j) by addition
- Index and value dtypes follow the CoordinateMatrix
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np

from matrix_market.core.ir import CoordinateMatrix


@dataclass(frozen=True)
class CSRMatrix:
    """A sparse matrix in compressed sparse row form."""

    nrows: int
    ncols: int
    row_ptr: np.ndarray
    col_ind: np.ndarray
    values: np.ndarray

    @property
    def nnz(self) -> int:
        return int(self.row_ptr[-1])

    def row(self, i: int) -> Tuple[np.ndarray, np.ndarray]:
        """Column indices and values stored in row i."""
        if not 0 <= i < self.nrows:
            raise IndexError("row {} outside 0..{}".format(i, self.nrows - 1))
        start, stop = self.row_ptr[i], self.row_ptr[i + 1]
        return self.col_ind[start:stop], self.values[start:stop]


def coo_to_csr(
    matrix: CoordinateMatrix,
    offset_type: Any = np.int64,
    sum_duplicates: bool = False,
) -> CSRMatrix:
    """Convert a CoordinateMatrix to CSR.

    Args:
        matrix: The coordinate matrix to convert.
        offset_type: Integer dtype of row_ptr.
        sum_duplicates: Merge entries that share (i, j) by summing them.

    Returns:
        The CSRMatrix.
    """
    rows, cols, values = matrix.to_arrays()

    # lexsort sorts by the last key first and is stable
    order = np.lexsort((cols, rows))
    rows, cols, values = rows[order], cols[order], values[order]

    if sum_duplicates and len(rows):
        starts = np.flatnonzero(
            np.concatenate(([True], (rows[1:] != rows[:-1]) | (cols[1:] != cols[:-1])))
        )
        values = np.add.reduceat(values, starts).astype(matrix.scalar_dtype, copy=False)
        rows, cols = rows[starts], cols[starts]

    counts = np.bincount(rows.astype(np.intp), minlength=matrix.nrows)
    row_ptr = np.zeros(matrix.nrows + 1, dtype=offset_type)
    row_ptr[1:] = np.cumsum(counts)

    return CSRMatrix(
        nrows=matrix.nrows,
        ncols=matrix.ncols,
        row_ptr=row_ptr,
        col_ind=cols,
        values=values,
    )
