"""Shared test fixtures for the matrix_market test suite.

WHY: Most test modules need the same small, hand-checked .mtx files: one
per symmetry kind plus a few malformed ones. Centralizing them here avoids
duplication and keeps expected values next to the input text.

HOW: Module-level constants hold the file texts and one fixture per sample
hands them to tests. write_mtx writes them into tmp_path for tests that
need real paths, and general_matrix / diagonal_matrix build small
assembled CoordinateMatrix values for the analysis and formatter tests.

RULES:
- Every sample is small enough to verify by hand
- Expected entries in comments are 0-based (i, j, e)
"""

from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from matrix_market.core.reader import parse_coo


# ---------------------------------------------------------------------------
# Sample files
# ---------------------------------------------------------------------------

# 3x3 general real, one explicit zero:
#   (0, 0, 1.5), (2, 1, -2.0)  -- the "2 2 0.0" line is dropped
GENERAL_REAL = """\
%%MatrixMarket matrix coordinate real general
% a comment line
3 3 3
1 1 1.5
2 2 0.0
3 2 -2.0
"""

# 3x3 symmetric integer:
#   (0, 0, 4), (1, 0, 7), (0, 1, 7), (2, 2, -1)
SYMMETRIC_INTEGER = """\
%%MatrixMarket matrix coordinate integer symmetric
3 3 3
1 1 4
2 1 7
3 3 -1
"""

# 2x2 skew-symmetric real: (1, 0, 3.0) plus its mirror
SKEW_REAL = """\
%%MatrixMarket matrix coordinate real skew-symmetric
2 2 1
2 1 3.0
"""

# 2x2 hermitian complex: (0, 0, 2+0j), (1, 0, 1+2j) plus its mirror
HERMITIAN_COMPLEX = """\
%%MatrixMarket matrix coordinate complex hermitian
2 2 2
1 1 2.0 0.0
2 1 1.0 2.0
"""

# 4x5 general pattern: four entries, all 1
PATTERN_GENERAL = """\
%%MatrixMarket matrix coordinate pattern general
4 5 4
1 1
2 3
4 5
3 2
"""

ARRAY_REAL = """\
%%MatrixMarket matrix array real general
2 2
1.0
2.0
3.0
4.0
"""

OUT_OF_RANGE = """\
%%MatrixMarket matrix coordinate real general
2 2 1
3 1 1.0
"""

ZERO_INDEXED = """\
%%MatrixMarket matrix coordinate real general
2 2 1
0 1 1.0
"""


@pytest.fixture
def write_mtx(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory fixture: write text to tmp_path/<name> and return the path."""

    def _write(text: str, name: str = "sample.mtx") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def general_matrix():
    """The GENERAL_REAL sample assembled as float64 / int64."""
    return parse_coo(
        GENERAL_REAL.splitlines(), index_type=np.int64, scalar_type=np.float64
    )


@pytest.fixture
def diagonal_matrix():
    """An 8x8 float64 identity matrix read from text."""
    lines = ["%%MatrixMarket matrix coordinate real general", "8 8 8"]
    lines += ["{0} {0} 1.0".format(k) for k in range(1, 9)]
    return parse_coo(lines, index_type=np.int64, scalar_type=np.float64)


@pytest.fixture
def general_real():
    return GENERAL_REAL


@pytest.fixture
def symmetric_integer():
    return SYMMETRIC_INTEGER


@pytest.fixture
def skew_real():
    return SKEW_REAL


@pytest.fixture
def hermitian_complex():
    return HERMITIAN_COMPLEX


@pytest.fixture
def pattern_general():
    return PATTERN_GENERAL


@pytest.fixture
def array_real():
    """Dense array-layout file; its dimension line has no entry count."""
    return ARRAY_REAL


@pytest.fixture
def out_of_range():
    return OUT_OF_RANGE


@pytest.fixture
def zero_indexed():
    return ZERO_INDEXED
