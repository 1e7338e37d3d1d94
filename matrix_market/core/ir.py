"""Intermediate representation dataclasses for parsed Matrix Market files.

WHY: A .mtx file overlays three independent axes (storage format, scalar
kind and symmetry kind) on top of a list of 1-indexed triples. Downstream
consumers (CSR conversion, statistics, image rendering) should never see
any of that. The IR gives them one well-typed, 0-indexed form.

HOW: Three enums describe the banner axes. Three frozen dataclasses form
the data model:
  Header: dimensions plus the three banner kinds
  Entry: one stored (i, j, e) triple, 0-based
  CoordinateMatrix: dimensions plus the ordered entry sequence

RULES:
- Header defaults are -1 / UNKNOWN; the assembler rejects unknown kinds
- Entry equality is structural on (i, j, e)
- entries keep insertion order: read order, each mirror right after its source
- Every Entry.i is in [0, nrows) and every Entry.j is in [0, ncols)
- A CoordinateMatrix is immutable once returned (entries is a tuple)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Tuple

import numpy as np


class MatrixFormat(str, enum.Enum):
    """Storage layout declared in the banner."""

    UNKNOWN = "unknown"
    COORDINATE = "coordinate"
    ARRAY = "array"


class ScalarKind(str, enum.Enum):
    """Value encoding declared in the banner."""

    UNKNOWN = "unknown"
    PATTERN = "pattern"
    REAL = "real"
    COMPLEX = "complex"
    INTEGER = "integer"


class SymmetryKind(str, enum.Enum):
    """Which triangle(s) the file stores and how the other is derived."""

    UNKNOWN = "unknown"
    SYMMETRIC = "symmetric"
    SKEW = "skew-symmetric"
    HERMITIAN = "hermitian"
    GENERAL = "general"


@dataclass(frozen=True)
class Header:
    """Banner and dimension line of a Matrix Market file.

    WHY: The banner decides how every data line is parsed and expanded.
    Keeping it as a value object lets the reader check it once and hand
    it to the assembler unchanged.

    RULES:
    - nrows / ncols / nnz_hint: from the dimension line, -1 when absent
    - nnz_hint counts stored lines, not entries after symmetry expansion
    - format / scalar_kind / symmetry_kind: UNKNOWN when the banner is
      missing or uses an unrecognised token
    """

    nrows: int = -1
    ncols: int = -1
    nnz_hint: int = -1
    format: MatrixFormat = MatrixFormat.UNKNOWN
    scalar_kind: ScalarKind = ScalarKind.UNKNOWN
    symmetry_kind: SymmetryKind = SymmetryKind.UNKNOWN

    def is_present(self) -> bool:
        """True if any field differs from the default header.

        This is deliberately weak: a file with only a dimension line, or a
        banner with a single recognised token, counts as present.
        """
        return self != Header()

    def is_complete(self) -> bool:
        """True if the dimensions are known and no kind is UNKNOWN."""
        return (
            self.nrows >= 0
            and self.ncols >= 0
            and self.format is not MatrixFormat.UNKNOWN
            and self.scalar_kind is not ScalarKind.UNKNOWN
            and self.symmetry_kind is not SymmetryKind.UNKNOWN
        )


@dataclass(frozen=True)
class Entry:
    """One stored matrix element.

    i and j are numpy scalars of the matrix's index dtype, e is a numpy
    scalar of its scalar dtype.
    """

    i: Any
    j: Any
    e: Any


@dataclass(frozen=True)
class CoordinateMatrix:
    """A sparse matrix in coordinate (COO) form.

    WHY: COO is the natural shape of a Matrix Market file and the common
    input of every collaborator (CSR conversion, statistics, rendering).

    HOW: Built once per read by the assembler. to_arrays() exposes the
    entries as numpy arrays for vectorised consumers.

    RULES:
    - nrows / ncols fixed at construction
    - entries: insertion-ordered tuple, never sorted
    - index_dtype / scalar_dtype record the types the entries were built with
    - Consumers must not assume any ordering beyond "stable per read"
    """

    nrows: int
    ncols: int
    entries: Tuple[Entry, ...] = ()
    index_dtype: np.dtype = field(default_factory=lambda: np.dtype(np.int64))
    scalar_dtype: np.dtype = field(default_factory=lambda: np.dtype(np.float64))

    @property
    def nnz(self) -> int:
        """Number of stored entries (after zero elision and expansion)."""
        return len(self.entries)

    def num_rows(self) -> int:
        return self.nrows

    def num_cols(self) -> int:
        return self.ncols

    def to_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return (rows, cols, values) arrays in entry order."""
        rows = np.fromiter((e.i for e in self.entries), dtype=self.index_dtype, count=self.nnz)
        cols = np.fromiter((e.j for e in self.entries), dtype=self.index_dtype, count=self.nnz)
        values = np.array([e.e for e in self.entries], dtype=self.scalar_dtype)
        return rows, cols, values
