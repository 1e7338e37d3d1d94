"""Entry assembly: data lines + Header → CoordinateMatrix.

WHY: Matrix Market data lines are 1-indexed, carry a kind-dependent
value payload, may hold explicit zeros, and for symmetric storage only
describe one triangle. Consumers want 0-indexed entries in their own
scalar type with the full matrix materialised. This module is the bridge
between the raw lines and the structured IR.

HOW: After checking the header preconditions, each data line is split
into tokens. The row and column are rebased to 0 and range-checked, the
value payload is parsed according to the scalar kind, explicit zeros are
dropped, and the value is coerced to the target type through the
NumericFromMarket converter. Off-diagonal entries of symmetric, skew and
Hermitian matrices get a mirror entry appended right after them.

RULES:
- ARRAY format → FormatError before any line is read; an unrecognised
  format token is read as coordinate data
- UNKNOWN scalar or symmetry kind → HeaderError
- Lines starting with "%" and blank lines are skipped
- Missing / non-numeric tokens → FormatError with the line number
- Index outside [0, nrows) × [0, ncols) after rebasing → EntryIndexError
- Raw value exactly zero → line dropped, no mirror (pattern is never zero)
- Mirrors only for i != j: SYMMETRIC (j, i, v), SKEW (j, i, v) or
  (j, i, -v) with negate_skew, HERMITIAN (j, i, conj(v))
- Any failure aborts the whole read; no partial matrix
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Tuple

import numpy as np

from matrix_market.core.coercion import NumericFromMarket, coercion_for, index_dtype
from matrix_market.core.ir import (
    CoordinateMatrix,
    Entry,
    Header,
    MatrixFormat,
    ScalarKind,
    SymmetryKind,
)
from matrix_market.core.lines import NumberedLines, numbered
from matrix_market.errors import EntryIndexError, FormatError, HeaderError

logger = logging.getLogger(__name__)

_INT64 = np.iinfo(np.int64)

# Number of value tokens that follow "row col" for each scalar kind.
_VALUE_TOKENS = {
    ScalarKind.PATTERN: 0,
    ScalarKind.REAL: 1,
    ScalarKind.INTEGER: 1,
    ScalarKind.COMPLEX: 2,
}


def check_header(header: Header, index_type: Any = np.int64) -> None:
    """Validate that a header can drive entry assembly.

    RULES:
    - format must not be ARRAY; an unrecognised format token is read as
      coordinate data
    - scalar and symmetry kinds must be known
    - dimensions must be non-negative and fit the index type
    """
    if header.format is MatrixFormat.ARRAY:
        raise FormatError("array format not supported")
    if header.scalar_kind is ScalarKind.UNKNOWN:
        raise HeaderError("unknown scalar kind in banner")
    if header.symmetry_kind is SymmetryKind.UNKNOWN:
        raise HeaderError("unknown symmetry kind in banner")
    if header.nrows < 0 or header.ncols < 0:
        raise FormatError("missing or negative matrix dimensions")

    limit = np.iinfo(index_dtype(index_type)).max
    if header.nrows > limit or header.ncols > limit:
        raise FormatError(
            "dimensions {} x {} do not fit index type {}".format(
                header.nrows, header.ncols, np.dtype(index_type)
            )
        )


def _parse_int(token: str, what: str, line_no: int) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise FormatError(
            "line {}: non-integer {} {!r}".format(line_no, what, token)
        ) from exc


def _parse_float(token: str, what: str, line_no: int) -> float:
    try:
        return float(token)
    except ValueError as exc:
        raise FormatError(
            "line {}: non-numeric {} {!r}".format(line_no, what, token)
        ) from exc


def _parse_coordinates(tokens: List[str], header: Header, line_no: int) -> Tuple[int, int]:
    """Parse and rebase the row/column of a data line."""
    if len(tokens) < 2:
        raise FormatError("line {}: expected 'row col', got {} token(s)".format(line_no, len(tokens)))
    i = _parse_int(tokens[0], "row", line_no) - 1
    j = _parse_int(tokens[1], "column", line_no) - 1
    if i < 0 or j < 0:
        raise EntryIndexError(
            "line {}: row/col {} {} is too small (not 1-indexed?)".format(
                line_no, tokens[0], tokens[1]
            )
        )
    if i >= header.nrows or j >= header.ncols:
        raise EntryIndexError(
            "line {}: entry ({}, {}) outside {} x {} matrix".format(
                line_no, tokens[0], tokens[1], header.nrows, header.ncols
            )
        )
    return i, j


def _parse_value(
    tokens: List[str],
    kind: ScalarKind,
    coercion: NumericFromMarket,
    line_no: int,
) -> Any:
    """Parse the value payload of a data line.

    Returns None for an explicit zero (the line is dropped), otherwise the
    value coerced to the target type.
    """
    needed = _VALUE_TOKENS[kind]
    if len(tokens) < 2 + needed:
        raise FormatError(
            "line {}: {} matrix needs {} value token(s)".format(line_no, kind.value, needed)
        )

    if kind is ScalarKind.PATTERN:
        return coercion.from_pattern()

    if kind is ScalarKind.REAL:
        re = _parse_float(tokens[2], "value", line_no)
        if re == 0.0:
            return None
        return coercion.from_real(re)

    if kind is ScalarKind.INTEGER:
        n = _parse_int(tokens[2], "value", line_no)
        if not _INT64.min <= n <= _INT64.max:
            raise FormatError("line {}: integer value {} out of range".format(line_no, n))
        if n == 0:
            return None
        return coercion.from_integer(n)

    real = _parse_float(tokens[2], "real part", line_no)
    imag = _parse_float(tokens[3], "imaginary part", line_no)
    if real == 0.0 and imag == 0.0:
        return None
    return coercion.from_complex(complex(real, imag))


def _mirror(
    symmetry: SymmetryKind,
    value: Any,
    coercion: NumericFromMarket,
    negate_skew: bool,
) -> Any:
    """Value stored at (j, i) for an off-diagonal entry, or None for GENERAL."""
    if symmetry is SymmetryKind.GENERAL:
        return None
    if symmetry is SymmetryKind.SYMMETRIC:
        return value
    if symmetry is SymmetryKind.SKEW:
        return -value if negate_skew else value
    return coercion.conjugate(value)


def assemble_entries(
    lines: Iterable[str],
    header: Header,
    index_type: Any = np.int64,
    scalar_type: Any = np.float64,
    negate_skew: bool = False,
) -> CoordinateMatrix:
    """Build a CoordinateMatrix from the data lines that follow the header.

    WHY: This is the state machine at the heart of the reader. Every
    structural rule of the format (rebasing, zero elision, symmetry
    expansion, scalar coercion) is applied here, once, for all target
    types.

    HOW: Validates the header, then walks the remaining lines. Each line
    produces zero entries (comment, blank, explicit zero), one entry, or
    two entries (off-diagonal line of a symmetric matrix).

    RULES:
    - lines must continue right after the dimension line; pass the same
      NumberedLines used by parse_header() for accurate line numbers
    - Entries are appended in read order, each mirror right after its source
    - negate_skew=False keeps the mirrored skew value unchanged

    Args:
        lines: Remaining text lines of the file.
        header: The already parsed Header.
        index_type: Integer type for i and j (np.int32, "int64", ...).
        scalar_type: Target type for e (np.float32, np.complex64, ...).
        negate_skew: Negate mirrored values of skew-symmetric matrices.

    Returns:
        The assembled CoordinateMatrix.
    """
    check_header(header, index_type)
    idx = index_dtype(index_type)
    to_index = idx.type
    coercion = coercion_for(scalar_type)
    kind = header.scalar_kind
    symmetry = header.symmetry_kind

    stream: NumberedLines = numbered(lines)
    entries: List[Entry] = []
    stored_lines = 0

    for line in stream:
        if line.startswith("%"):
            continue
        tokens = line.split()
        if not tokens:
            continue

        line_no = stream.line_no
        i, j = _parse_coordinates(tokens, header, line_no)
        stored_lines += 1

        value = _parse_value(tokens, kind, coercion, line_no)
        if value is None:
            continue

        entries.append(Entry(to_index(i), to_index(j), value))

        if i != j:
            mirrored = _mirror(symmetry, value, coercion, negate_skew)
            if mirrored is not None:
                entries.append(Entry(to_index(j), to_index(i), mirrored))

    if header.nnz_hint >= 0 and stored_lines != header.nnz_hint:
        logger.warning(
            "Dimension line declares %d entries but %d data lines were read",
            header.nnz_hint, stored_lines,
        )
    logger.debug(
        "Assembled %d entries (%s, %s) as %s[%s]",
        len(entries), kind.value, symmetry.value, coercion.dtype, idx,
    )

    return CoordinateMatrix(
        nrows=header.nrows,
        ncols=header.ncols,
        entries=tuple(entries),
        index_dtype=idx,
        scalar_dtype=coercion.dtype,
    )
