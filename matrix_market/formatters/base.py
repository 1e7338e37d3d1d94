"""Abstract base formatter and output container.

WHY: Every output format consumes the same CoordinateMatrix but produces
different file content. This base class enforces a consistent interface
so the CLI can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content (string or bytes) and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; formatters may produce several files
- ``suffix`` starts with a hyphen, e.g. ``"-stats.json"``
- The caller is responsible for prepending the source filename stem
- Formatters take their options as constructor keywords with defaults,
  so ``FORMATTERS[key]()`` always works
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from matrix_market.core.ir import CoordinateMatrix


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-stats.json"`` → ``"bcsstk01-stats.json"``.
        content: The file content as a string (JSON) or bytes (images,
                 numpy archives).
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str | bytes
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Statistics JSON'."""

    @abstractmethod
    def format(self, matrix: CoordinateMatrix, source_name: str = "") -> list[FormatterOutput]:
        """Convert the matrix into one or more output files.

        Args:
            matrix: The coordinate matrix read from the source file.
            source_name: Name of the source file, for formats that record it.

        Returns:
            List of FormatterOutput objects, each containing a file suffix,
            content string/bytes, and MIME type.
        """
