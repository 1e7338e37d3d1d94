"""Error taxonomy for Matrix Market reading.

WHY: Batch tools read hundreds of files and must report *why* a file was
rejected without stopping the batch. A small exception hierarchy lets them
catch one base class per file while tests can still assert the exact kind.

HOW: MatrixMarketError is the common base. Files that cannot be opened are
not wrapped: the OSError raised by open() propagates unchanged.

RULES:
- FormatError: malformed banner, dimension or entry line; unsupported format
- HeaderError: scalar or symmetry kind still unknown when entries are assembled
- EntryIndexError: index outside the declared dimensions after 1→0 rebasing;
  also an IndexError so generic handlers catch it
- Every error aborts the whole read; no partial matrix is returned
"""

from __future__ import annotations


class MatrixMarketError(Exception):
    """Base class for all errors raised while reading a Matrix Market file."""


class FormatError(MatrixMarketError):
    """The text does not follow the Matrix Market coordinate layout."""


class HeaderError(MatrixMarketError):
    """The banner did not declare a usable scalar or symmetry kind."""


class EntryIndexError(MatrixMarketError, IndexError):
    """An entry's row or column lies outside the declared dimensions."""
