"""Output formatter registry, a pluggable format hub.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new formats: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["stats_json"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags, config, etc.)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from matrix_market.formatters.csr_npz import CSRArchiveFormatter
from matrix_market.formatters.density_ppm import DensityPPMFormatter
from matrix_market.formatters.stats_json import StatsJSONFormatter

if TYPE_CHECKING:
    from matrix_market.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "stats_json": StatsJSONFormatter,
    "density_ppm": DensityPPMFormatter,
    "csr_npz": CSRArchiveFormatter,
}
