"""CSR numpy archive formatter.

WHY: Benchmarks and GPU kernels load CSR arrays directly. Converting once
and saving the arrays avoids re-parsing large text files on every run.

HOW: Converts the matrix with coo_to_csr() and writes row_ptr, col_ind,
values and shape into an uncompressed .npz archive (numpy.savez) held in
memory.

RULES:
- Array names: row_ptr, col_ind, values, shape
- Dtypes follow the matrix (index / scalar) and offset_type for row_ptr
- Output suffix: "-csr.npz"
- Media type: "application/octet-stream"
"""

from __future__ import annotations

import io
from typing import Any

import numpy as np

from matrix_market.core.csr import coo_to_csr
from matrix_market.core.ir import CoordinateMatrix
from matrix_market.formatters.base import BaseFormatter, FormatterOutput


class CSRArchiveFormatter(BaseFormatter):
    """Formatter that saves the CSR arrays as a numpy .npz archive."""

    def __init__(self, offset_type: Any = np.int64, sum_duplicates: bool = False) -> None:
        self.offset_type = offset_type
        self.sum_duplicates = sum_duplicates

    @property
    def name(self) -> str:
        return "CSR NumPy archive"

    def format(self, matrix: CoordinateMatrix, source_name: str = "") -> list[FormatterOutput]:
        csr = coo_to_csr(matrix, offset_type=self.offset_type, sum_duplicates=self.sum_duplicates)
        buffer = io.BytesIO()
        np.savez(
            buffer,
            row_ptr=csr.row_ptr,
            col_ind=csr.col_ind,
            values=csr.values,
            shape=np.array([csr.nrows, csr.ncols], dtype=np.int64),
        )
        return [
            FormatterOutput(
                suffix="-csr.npz",
                content=buffer.getvalue(),
                media_type="application/octet-stream",
            )
        ]
