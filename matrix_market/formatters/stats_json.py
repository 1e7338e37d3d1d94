"""Structure report JSON formatter.

WHY: Batch CSV output is handy for spreadsheets, but pipelines that
catalogue matrix collections want one machine-readable document per
matrix, with a stable, validated shape.

HOW: Runs the statistics and dense-block analyses on the matrix and
serialises them together with the shape and numeric types. The document
is validated with jsonschema against the bundled stats_schema.json
before returning.

RULES:
- Schema version is "1.0.0" (matches the $id of stats_schema.json)
- Undefined statistics are JSON null
- Output suffix: "-stats.json"
- Validate output against the schema before returning; raise on failure
"""

from __future__ import annotations

import functools
import json
from pathlib import Path
from typing import Any, Sequence

import jsonschema

from matrix_market.analysis.blocks import count_dense_blocks
from matrix_market.analysis.stats import compute_stats
from matrix_market.config import BLOCK_DENSITIES, BLOCK_SIZE, HOPKINS_SAMPLES, HOPKINS_SEED
from matrix_market.core.ir import CoordinateMatrix
from matrix_market.formatters.base import BaseFormatter, FormatterOutput

_SCHEMA_PATH = Path(__file__).resolve().parent / "stats_schema.json"

SCHEMA_VERSION = "1.0.0"


@functools.lru_cache(maxsize=None)
def report_validator() -> jsonschema.Draft7Validator:
    """Draft-07 validator for stats reports, built once per process."""
    schema = json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))
    return jsonschema.Draft7Validator(schema)


class StatsJSONFormatter(BaseFormatter):
    """Formatter that produces a validated JSON structure report."""

    def __init__(
        self,
        samples: int = HOPKINS_SAMPLES,
        seed: int = HOPKINS_SEED,
        block_size: int = BLOCK_SIZE,
        densities: Sequence[float] = BLOCK_DENSITIES,
    ) -> None:
        self.samples = samples
        self.seed = seed
        self.block_size = block_size
        self.densities = tuple(densities)

    @property
    def name(self) -> str:
        return "Statistics JSON"

    def build_report(self, matrix: CoordinateMatrix, source_name: str = "") -> dict[str, Any]:
        """Build the report dict (not yet validated)."""
        stats = compute_stats(matrix, samples=self.samples, seed=self.seed)
        blocks = count_dense_blocks(matrix, block_size=self.block_size, densities=self.densities)
        return {
            "version": SCHEMA_VERSION,
            "source": source_name,
            "shape": [matrix.nrows, matrix.ncols],
            "nnz": matrix.nnz,
            "index_type": str(matrix.index_dtype),
            "scalar_type": str(matrix.scalar_dtype),
            "stats": {
                "max_abs": stats.max_abs,
                "max_row_nnz": stats.max_row_nnz,
                "avg_row_nnz": stats.avg_row_nnz,
                "diagonals": stats.diagonals,
                "bandwidth": stats.bandwidth,
                "diagness": stats.diagness,
                "hopkins": stats.hopkins,
            },
            "blocks": {
                "block_size": self.block_size,
                "counts": [
                    {"density": b.density, "blocks": b.blocks, "nnz": b.nnz}
                    for b in blocks
                ],
            },
        }

    def format(self, matrix: CoordinateMatrix, source_name: str = "") -> list[FormatterOutput]:
        """Convert the matrix into a validated JSON report.

        Raises:
            jsonschema.ValidationError: If the report does not match the schema.
        """
        report = self.build_report(matrix, source_name)
        report_validator().validate(report)

        return [
            FormatterOutput(
                suffix="-stats.json",
                content=json.dumps(report, indent=2) + "\n",
                media_type="application/json",
            )
        ]
