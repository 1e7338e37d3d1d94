"""Unit tests for all output formatters.

WHY: Each formatter produces a different file type for different
consumers (catalogue pipelines, image viewers, benchmark loaders). These
tests verify the output matches each format's structure.

HOW: Tests run each formatter on small matrices from conftest.py and
inspect the generated content: JSON is validated with jsonschema, the PPM
banner and pixels are parsed by hand, the .npz archive is loaded back
with numpy.

RULES:
- Every formatter is reachable through the FORMATTERS registry
"""

import io
import json

import jsonschema
import numpy as np
import pytest

from matrix_market.formatters import FORMATTERS
from matrix_market.formatters.base import BaseFormatter
from matrix_market.formatters.csr_npz import CSRArchiveFormatter
from matrix_market.formatters.density_ppm import (
    DensityPPMFormatter,
    density_histogram,
    image_size,
)
from matrix_market.formatters.stats_json import StatsJSONFormatter, report_validator
from matrix_market.core.reader import parse_coo


def _split_ppm(content):
    """Return (banner lines, pixel bytes) of a P6 file without comments in pixels."""
    lines = []
    pos = 0
    while True:
        end = content.index(b"\n", pos)
        line = content[pos:end].decode("ascii")
        pos = end + 1
        lines.append(line)
        if not line.startswith("#") and line != "P6":
            return lines, content[pos:]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_keys(self):
        assert set(FORMATTERS) == {"stats_json", "density_ppm", "csr_npz"}

    @pytest.mark.parametrize("key", sorted(FORMATTERS))
    def test_default_construction(self, key, general_matrix):
        formatter = FORMATTERS[key]()
        assert isinstance(formatter, BaseFormatter)
        outputs = formatter.format(general_matrix, "general.mtx")
        assert len(outputs) == 1
        assert outputs[0].suffix.startswith("-")


# ---------------------------------------------------------------------------
# Statistics JSON
# ---------------------------------------------------------------------------


class TestStatsJSONFormatter:
    def test_schema_validation(self, general_matrix):
        output = StatsJSONFormatter().format(general_matrix, "general.mtx")[0]
        report = json.loads(output.content)
        report_validator().validate(report)

    def test_report_fields(self, general_matrix):
        report = StatsJSONFormatter(block_size=2, densities=(0.25,)).build_report(
            general_matrix, "general.mtx"
        )
        assert report["source"] == "general.mtx"
        assert report["shape"] == [3, 3]
        assert report["nnz"] == 2
        assert report["index_type"] == "int64"
        assert report["scalar_type"] == "float64"
        assert report["stats"]["bandwidth"] == 1
        assert report["blocks"] == {
            "block_size": 2,
            "counts": [{"density": 0.25, "blocks": 2, "nnz": 2}],
        }

    def test_undefined_values_are_null(self):
        matrix = parse_coo(["%%MatrixMarket matrix coordinate real general", "2 2 0"])
        output = StatsJSONFormatter().format(matrix)[0]
        stats = json.loads(output.content)["stats"]
        assert stats["max_abs"] is None
        assert stats["hopkins"] is None
        assert stats["bandwidth"] == -1

    def test_output_suffix_and_media_type(self, general_matrix):
        output = StatsJSONFormatter().format(general_matrix)[0]
        assert output.suffix == "-stats.json"
        assert output.media_type == "application/json"
        assert output.content.endswith("\n")

    def test_invalid_report_rejected(self, general_matrix, monkeypatch):
        formatter = StatsJSONFormatter()
        report = formatter.build_report(general_matrix)
        report["version"] = "0.9"
        monkeypatch.setattr(formatter, "build_report", lambda *args: report)
        with pytest.raises(jsonschema.ValidationError):
            formatter.format(general_matrix)


# ---------------------------------------------------------------------------
# Density PPM
# ---------------------------------------------------------------------------


class TestImageSize:
    def test_wide_matrix_uses_max_dim_for_width(self):
        assert image_size(100, 200, max_dim=50) == (50, 25)

    def test_tall_matrix_uses_max_dim_for_height(self):
        assert image_size(200, 100, max_dim=50) == (25, 50)

    def test_explicit_width_keeps_aspect(self):
        assert image_size(10, 20, width=8) == (8, 4)

    def test_explicit_both(self):
        assert image_size(10, 20, width=3, height=7) == (3, 7)

    def test_empty_dimensions_rejected(self):
        with pytest.raises(ValueError):
            image_size(0, 0)


class TestDensityPPMFormatter:
    def test_histogram_counts(self, diagonal_matrix):
        hist = density_histogram(diagonal_matrix, 4, 4)
        assert hist.sum() == 8
        assert np.diag(hist).tolist() == [2.0, 2.0, 2.0, 2.0]

    def test_banner_and_size(self, diagonal_matrix):
        output = DensityPPMFormatter(width=4, height=4).format(diagonal_matrix, "eye.mtx")[0]
        lines, pixels = _split_ppm(output.content)
        assert lines[0] == "P6"
        assert lines[1] == "# eye.mtx"
        assert "# source matrix: 8 x 8 w/ 8 nnz" in lines
        assert lines[-1] == "4 4 255"
        assert len(pixels) == 4 * 4 * 3

    def test_pixels_dark_on_white(self, diagonal_matrix):
        pixels, _ = DensityPPMFormatter(width=4, height=4).render(diagonal_matrix)
        assert pixels.shape == (4, 4, 3)
        assert pixels.dtype == np.uint8
        assert pixels[0, 0].tolist() == [0, 0, 0]
        assert pixels[0, 1].tolist() == [255, 255, 255]

    def test_empty_matrix_is_white(self):
        matrix = parse_coo(["%%MatrixMarket matrix coordinate real general", "4 4 0"])
        pixels, _ = DensityPPMFormatter(width=2, height=2).render(matrix)
        assert (pixels == 255).all()

    def test_output_suffix_and_media_type(self, diagonal_matrix):
        output = DensityPPMFormatter(max_dim=8).format(diagonal_matrix)[0]
        assert output.suffix == "-density.ppm"
        assert output.media_type == "image/x-portable-pixmap"
        assert isinstance(output.content, bytes)


# ---------------------------------------------------------------------------
# CSR archive
# ---------------------------------------------------------------------------


class TestCSRArchiveFormatter:
    def test_archive_arrays(self, general_matrix):
        output = CSRArchiveFormatter().format(general_matrix)[0]
        archive = np.load(io.BytesIO(output.content))
        assert archive["row_ptr"].tolist() == [0, 1, 1, 2]
        assert archive["col_ind"].tolist() == [0, 1]
        assert archive["values"].tolist() == [1.5, -2.0]
        assert archive["shape"].tolist() == [3, 3]

    def test_offset_type(self, general_matrix):
        output = CSRArchiveFormatter(offset_type=np.int32).format(general_matrix)[0]
        archive = np.load(io.BytesIO(output.content))
        assert archive["row_ptr"].dtype == np.int32

    def test_output_suffix_and_media_type(self, general_matrix):
        output = CSRArchiveFormatter().format(general_matrix)[0]
        assert output.suffix == "-csr.npz"
        assert output.media_type == "application/octet-stream"
