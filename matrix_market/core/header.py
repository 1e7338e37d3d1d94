"""Banner and dimension-line parsing.

WHY: The first lines of a .mtx file decide how everything after them is
read: coordinate vs array layout, the value encoding, and which triangle
is stored. The header parser turns those lines into a Header value and
leaves the line iterator at the first data line for the assembler.

HOW: Lines are consumed in order. A line starting with "%%" is the banner;
its third, fourth and fifth whitespace-separated tokens are the format,
scalar kind and symmetry kind. Other "%" lines are comments. The first
remaining line holds the three dimension integers and ends the header.

RULES:
- Format: "coordinate" → COORDINATE, "array" → ARRAY, anything else UNKNOWN
- Scalar kind: exact, case-sensitive "pattern" / "real" / "complex" / "integer"
- Symmetry: exact "symmetric" and "general"; lower-cased "skew-symmetric"
  → SKEW; lower-cased "hermitian" → GENERAL (default mapping) or
  HERMITIAN when hermitian_mapping="hermitian"
- Blank lines are skipped
- Dimension line: "rows cols [nnz]" integers, else FormatError; a missing
  nnz (array layout) leaves nnz_hint at -1
- Parsing stops right after the dimension line
- No cross-field validation (an ARRAY header is returned as-is)
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from matrix_market.config import HERMITIAN_MAPPING, check_hermitian_mapping
from matrix_market.core.ir import Header, MatrixFormat, ScalarKind, SymmetryKind
from matrix_market.core.lines import numbered
from matrix_market.errors import FormatError

_FORMATS = {
    "coordinate": MatrixFormat.COORDINATE,
    "array": MatrixFormat.ARRAY,
}

_SCALAR_KINDS = {
    "pattern": ScalarKind.PATTERN,
    "real": ScalarKind.REAL,
    "complex": ScalarKind.COMPLEX,
    "integer": ScalarKind.INTEGER,
}


def _symmetry_kind(token: str, hermitian_mapping: str) -> SymmetryKind:
    """Interpret the symmetry token of the banner."""
    if token == "symmetric":
        return SymmetryKind.SYMMETRIC
    if token == "general":
        return SymmetryKind.GENERAL
    lowered = token.lower()
    if lowered == "hermitian":
        if hermitian_mapping == "hermitian":
            return SymmetryKind.HERMITIAN
        return SymmetryKind.GENERAL
    if lowered == "skew-symmetric":
        return SymmetryKind.SKEW
    return SymmetryKind.UNKNOWN


def _parse_banner(line: str, hermitian_mapping: str) -> dict:
    # tokens[0] is "%%MatrixMarket", tokens[1] the object ("matrix")
    tokens = line.split()[2:5]
    tokens += [""] * (3 - len(tokens))
    format_token, scalar_token, symmetry_token = tokens
    return {
        "format": _FORMATS.get(format_token, MatrixFormat.UNKNOWN),
        "scalar_kind": _SCALAR_KINDS.get(scalar_token, ScalarKind.UNKNOWN),
        "symmetry_kind": _symmetry_kind(symmetry_token, hermitian_mapping),
    }


def _parse_dimensions(line: str, line_no: int) -> dict:
    tokens = line.split()
    if len(tokens) < 2:
        raise FormatError(
            "line {}: expected 'rows cols [nnz]', got {!r}".format(line_no, line.strip())
        )
    try:
        sizes = [int(t) for t in tokens[:3]]
    except ValueError as exc:
        raise FormatError(
            "line {}: non-integer dimension in {!r}".format(line_no, line.strip())
        ) from exc
    # array files carry no entry count
    nnz_hint = sizes[2] if len(sizes) > 2 else -1
    return {"nrows": sizes[0], "ncols": sizes[1], "nnz_hint": nnz_hint}


def parse_header(
    lines: Iterable[str],
    hermitian_mapping: Optional[str] = None,
) -> Header:
    """Parse the banner, comments and dimension line from a line iterator.

    WHY: The reader needs the Header before it can interpret any data line,
    and the assembler must continue from exactly where the header ended.

    HOW: Pulls lines from the iterator until the dimension line has been
    consumed. The banner contributes the three kinds, the dimension line
    the sizes. If the stream ends first, the sizes stay at -1.

    RULES:
    - Pass a NumberedLines to keep the position (and line numbering) for
      the assembler; plain iterables are wrapped
    - hermitian_mapping defaults to config.HERMITIAN_MAPPING
    - Raises FormatError for a malformed dimension line
    - Raises ValueError for an unknown hermitian_mapping

    Args:
        lines: Text lines of a Matrix Market file.
        hermitian_mapping: "general" or "hermitian".

    Returns:
        The parsed Header.
    """
    mapping = check_hermitian_mapping(
        HERMITIAN_MAPPING if hermitian_mapping is None else hermitian_mapping
    )

    stream = numbered(lines)
    fields: dict = {}
    for line in stream:
        if line.startswith("%%"):
            fields.update(_parse_banner(line, mapping))
        elif line.startswith("%") or not line.strip():
            continue
        else:
            fields.update(_parse_dimensions(line, stream.line_no))
            break

    return Header(**fields)


def read_header(
    path: str | Path,
    hermitian_mapping: Optional[str] = None,
) -> Header:
    """Open a .mtx file and parse its header.

    Raises OSError (FileNotFoundError, PermissionError, ...) if the file
    cannot be opened.
    """
    with open(path, encoding="utf-8") as f:
        return parse_header(f, hermitian_mapping=hermitian_mapping)
