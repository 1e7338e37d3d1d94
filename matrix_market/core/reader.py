"""File-level entry points: MtxReader, read_coo, parse_coo.

WHY: Callers think in files, not line iterators. The reader opens the
file, runs the header parser and the assembler over one shared line
stream, and closes the file again for every read, so a path can be
read repeatedly (and from several threads) without shared state.

HOW: parse_coo() is the whole pipeline over any iterable of lines.
read_coo() opens a path and delegates to parse_coo(). MtxReader keeps the
options for one path, parses the header once at construction for a cheap
presence check, and re-reads everything on each read_coo() call.

RULES:
- Each read opens, fully consumes and closes its own file handle
- The header is parsed fresh on every read_coo() call
- OSError from open() propagates unchanged
- Defaults for types, Hermitian mapping and skew negation come from config
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from matrix_market.config import (
    DEFAULT_INDEX_TYPE,
    DEFAULT_SCALAR_TYPE,
    NEGATE_SKEW,
    resolve_dtype,
)
from matrix_market.core.assembler import assemble_entries
from matrix_market.core.header import parse_header, read_header
from matrix_market.core.ir import CoordinateMatrix, Header
from matrix_market.core.lines import NumberedLines

logger = logging.getLogger(__name__)


def _default_index_type() -> Any:
    return resolve_dtype(DEFAULT_INDEX_TYPE, index=True)


def _default_scalar_type() -> Any:
    return resolve_dtype(DEFAULT_SCALAR_TYPE)


def parse_coo(
    lines: Iterable[str],
    index_type: Any = None,
    scalar_type: Any = None,
    hermitian_mapping: Optional[str] = None,
    negate_skew: Optional[bool] = None,
) -> CoordinateMatrix:
    """Parse Matrix Market text into a CoordinateMatrix.

    Args:
        lines: Text lines (an open file, io.StringIO, a list of strings).
        index_type: Integer type for indices (default config.DEFAULT_INDEX_TYPE).
        scalar_type: Target value type (default config.DEFAULT_SCALAR_TYPE).
        hermitian_mapping: "general" or "hermitian" (default from config).
        negate_skew: Negate mirrored skew values (default config.NEGATE_SKEW).

    Returns:
        The assembled CoordinateMatrix.

    Raises:
        FormatError, HeaderError, EntryIndexError: on malformed input.
    """
    stream = NumberedLines(lines)
    header = parse_header(stream, hermitian_mapping=hermitian_mapping)
    return assemble_entries(
        stream,
        header,
        index_type=_default_index_type() if index_type is None else index_type,
        scalar_type=_default_scalar_type() if scalar_type is None else scalar_type,
        negate_skew=NEGATE_SKEW if negate_skew is None else negate_skew,
    )


def read_coo(
    path: str | Path,
    index_type: Any = None,
    scalar_type: Any = None,
    hermitian_mapping: Optional[str] = None,
    negate_skew: Optional[bool] = None,
) -> CoordinateMatrix:
    """Read a .mtx file into a CoordinateMatrix (see parse_coo for arguments)."""
    logger.debug("Reading %s", path)
    with open(path, encoding="utf-8") as f:
        return parse_coo(
            f,
            index_type=index_type,
            scalar_type=scalar_type,
            hermitian_mapping=hermitian_mapping,
            negate_skew=negate_skew,
        )


class MtxReader:
    """Reader bound to one .mtx path and one choice of numeric types.

    WHY: Batch tools check a file before committing to a full read, and
    some read the same path with several target types. Binding the options
    to an object keeps those call sites short.

    HOW: The constructor parses the header (raising OSError if the file
    cannot be opened). bool(reader) reports whether anything header-like
    was found. read_coo() reopens the file and runs the full pipeline.

    RULES:
    - bool(reader) uses Header.is_present(): true if *any* header field
      was recognised, not only when all are
    - read_coo() never reuses the constructor's header
    """

    def __init__(
        self,
        path: str | Path,
        index_type: Any = None,
        scalar_type: Any = None,
        hermitian_mapping: Optional[str] = None,
        negate_skew: Optional[bool] = None,
    ) -> None:
        self.path = Path(path)
        self.index_type = _default_index_type() if index_type is None else index_type
        self.scalar_type = _default_scalar_type() if scalar_type is None else scalar_type
        self.hermitian_mapping = hermitian_mapping
        self.negate_skew = negate_skew
        self._header = read_header(self.path, hermitian_mapping=hermitian_mapping)

    @property
    def header(self) -> Header:
        """Header parsed when the reader was created."""
        return self._header

    def __bool__(self) -> bool:
        return self._header.is_present()

    def read_coo(self) -> CoordinateMatrix:
        return read_coo(
            self.path,
            index_type=self.index_type,
            scalar_type=self.scalar_type,
            hermitian_mapping=self.hermitian_mapping,
            negate_skew=self.negate_skew,
        )
