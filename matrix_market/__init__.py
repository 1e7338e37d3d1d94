"""Matrix Market tools: sparse matrix ingestion and structural analysis.

WHY: Matrix Market (.mtx) is the plain-text interchange format used by the
SuiteSparse collection and most sparse solvers. Numerical tooling needs
those files as typed in-memory data, with symmetric storage expanded and
values converted to whatever scalar type the caller computes in.

HOW: Three-stage pipeline: read (header parsing, entry assembly with
scalar coercion and symmetry expansion), convert (CSR), report (statistics,
block density, pluggable formatters). Each stage is independently testable.

RULES:
- The CoordinateMatrix IR is the stable contract between reading and reporting
- Index and scalar types are numpy dtypes chosen by the caller
- Adding a new output format = one new formatter module, no core changes
"""

from matrix_market.core.ir import (
    CoordinateMatrix,
    Entry,
    Header,
    MatrixFormat,
    ScalarKind,
    SymmetryKind,
)
from matrix_market.core.reader import MtxReader, parse_coo, read_coo, read_header
from matrix_market.errors import (
    EntryIndexError,
    FormatError,
    HeaderError,
    MatrixMarketError,
)

__version__ = "0.1.0"

__all__ = [
    "CoordinateMatrix",
    "Entry",
    "EntryIndexError",
    "FormatError",
    "Header",
    "HeaderError",
    "MatrixFormat",
    "MatrixMarketError",
    "MtxReader",
    "ScalarKind",
    "SymmetryKind",
    "parse_coo",
    "read_coo",
    "read_header",
]
