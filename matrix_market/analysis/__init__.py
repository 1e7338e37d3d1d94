"""Structural analysis of coordinate matrices.

WHY: The reader exists to feed analysis tooling. These modules compute
the per-matrix numbers the batch commands report: structural statistics
(stats.py) and dense-block counts (blocks.py).

RULES:
- Inputs are CoordinateMatrix values; nothing here reads files
- Results are plain dataclasses so formatters and the CLI can serialize them
"""

from matrix_market.analysis.blocks import BlockCount, count_dense_blocks
from matrix_market.analysis.stats import STATS_COLUMNS, MatrixStats, compute_stats

__all__ = [
    "BlockCount",
    "MatrixStats",
    "STATS_COLUMNS",
    "compute_stats",
    "count_dense_blocks",
]
