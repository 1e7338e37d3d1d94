"""Tests for the command-line interface.

WHY: The CLI is how matrix collections are processed in bulk. A single
bad file must not stop a batch, and output files must never overwrite
earlier results.

HOW: main() is called with explicit argv lists; stdout/stderr are read
with capsys and CSV output is parsed with the csv module.
"""

import csv
import io
import json

import pytest

from matrix_market.analysis.stats import STATS_COLUMNS
from matrix_market.cli import _resolve_output_path, build_parser, main


def _csv_rows(text):
    return list(csv.reader(io.StringIO(text)))


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class TestParser:
    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_reader_options_after_subcommand(self):
        args = build_parser().parse_args(
            ["stats", "a.mtx", "--index-type", "int32", "--scalar-type", "complex64",
             "--hermitian", "hermitian", "--negate-skew"]
        )
        assert args.index_type == "int32"
        assert args.scalar_type == "complex64"
        assert args.hermitian == "hermitian"
        assert args.negate_skew is True

    def test_no_negate_skew(self):
        args = build_parser().parse_args(["info", "a.mtx", "--no-negate-skew"])
        assert args.negate_skew is False

    def test_densities_parsed(self):
        args = build_parser().parse_args(["blocks", "a.mtx", "--densities", "0.5,1"])
        assert args.densities == (0.5, 1.0)

    def test_bad_densities_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["blocks", "a.mtx", "--densities", "0,2"])


# ---------------------------------------------------------------------------
# stats / blocks
# ---------------------------------------------------------------------------


class TestStatsCommand:
    def test_one_row_per_file(self, write_mtx, capsys, general_real, symmetric_integer):
        a = write_mtx(general_real, "a.mtx")
        b = write_mtx(symmetric_integer, "b.mtx")
        main(["stats", str(a), str(b)])
        rows = _csv_rows(capsys.readouterr().out)
        assert rows[0] == ["file"] + STATS_COLUMNS + ["err"]
        assert rows[1][:4] == [str(a), "3", "3", "2"]
        assert rows[2][:4] == [str(b), "3", "3", "4"]
        assert rows[1][-1] == ""

    def test_failed_file_reported_and_batch_continues(self, write_mtx, capsys, array_real, general_real):
        bad = write_mtx(array_real, "bad.mtx")
        good = write_mtx(general_real, "good.mtx")
        with pytest.raises(SystemExit) as excinfo:
            main(["stats", str(bad), str(good)])
        assert excinfo.value.code == 1
        rows = _csv_rows(capsys.readouterr().out)
        assert rows[1][0] == str(bad)
        assert rows[1][-1] == "array format not supported"
        assert len(rows[1]) == len(rows[0])
        assert rows[2][0] == str(good)
        assert rows[2][-1] == ""

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["stats", str(tmp_path / "missing.mtx")])
        rows = _csv_rows(capsys.readouterr().out)
        assert "No such file" in rows[1][-1]


class TestBlocksCommand:
    def test_columns_and_counts(self, write_mtx, capsys, skew_real):
        path = write_mtx(skew_real)
        main(["blocks", str(path), "--block-size", "2", "--densities", "0.5,1"])
        rows = _csv_rows(capsys.readouterr().out)
        assert rows[0] == [
            "file", "rows", "cols", "nnz",
            "blocks (0.5)", "nnz (0.5)", "blocks (1)", "nnz (1)", "err",
        ]
        assert rows[1] == [str(path), "2", "2", "2", "1", "2", "0", "0", ""]


# ---------------------------------------------------------------------------
# convert
# ---------------------------------------------------------------------------


class TestConvertCommand:
    def test_writes_all_formats(self, write_mtx, capsys, general_real):
        path = write_mtx(general_real, "general.mtx")
        main(["convert", str(path), "--max-dim", "16"])
        out_dir = path.parent
        assert (out_dir / "general-stats.json").is_file()
        assert (out_dir / "general-density.ppm").is_file()
        assert (out_dir / "general-csr.npz").is_file()
        assert "Saved 3 file(s)" in capsys.readouterr().err

    def test_selected_format_and_output_dir(self, write_mtx, tmp_path, general_real):
        path = write_mtx(general_real, "general.mtx")
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        main(["convert", str(path), "--formats", "stats_json", "--output-dir", str(out_dir)])
        report = json.loads((out_dir / "general-stats.json").read_text(encoding="utf-8"))
        assert report["source"] == "general.mtx"
        assert report["scalar_type"] == "float32"
        assert not (out_dir / "general-csr.npz").exists()

    def test_no_overwrite(self, write_mtx, general_real):
        path = write_mtx(general_real, "general.mtx")
        main(["convert", str(path), "--formats", "stats_json"])
        main(["convert", str(path), "--formats", "stats_json"])
        assert (path.parent / "general-stats-2.json").is_file()

    def test_unknown_format(self, write_mtx, capsys, general_real):
        path = write_mtx(general_real)
        with pytest.raises(SystemExit):
            main(["convert", str(path), "--formats", "svg"])
        assert "Unknown format 'svg'" in capsys.readouterr().err

    def test_read_error_exits(self, write_mtx, capsys, array_real):
        path = write_mtx(array_real)
        with pytest.raises(SystemExit) as excinfo:
            main(["convert", str(path)])
        assert excinfo.value.code == 1
        assert "array format not supported" in capsys.readouterr().err


class TestResolveOutputPath:
    def test_counter_increments(self, tmp_path):
        (tmp_path / "m-stats.json").write_text("{}")
        (tmp_path / "m-stats-2.json").write_text("{}")
        assert _resolve_output_path("m", "-stats.json", tmp_path).name == "m-stats-3.json"

    def test_free_name_unchanged(self, tmp_path):
        assert _resolve_output_path("m", "-csr.npz", tmp_path).name == "m-csr.npz"

    def test_suffix_without_extension(self, tmp_path):
        (tmp_path / "m-raw").write_text("")
        assert _resolve_output_path("m", "-raw", tmp_path).name == "m-raw-2"


# ---------------------------------------------------------------------------
# info
# ---------------------------------------------------------------------------


class TestInfoCommand:
    def test_prints_header(self, write_mtx, capsys, skew_real):
        path = write_mtx(skew_real)
        main(["info", str(path)])
        out = capsys.readouterr().out
        assert "format: coordinate" in out
        assert "symmetry: skew-symmetric" in out
        assert "rows: 2" in out
        assert "complete: yes" in out

    def test_bad_scalar_type_from_environment(self, write_mtx, monkeypatch, capsys, skew_real):
        monkeypatch.setattr("matrix_market.cli.DEFAULT_SCALAR_TYPE", "float128x")
        with pytest.raises(SystemExit):
            main(["info", str(write_mtx(skew_real))])
        assert "Unknown scalar type" in capsys.readouterr().err


class TestSizeOptions:
    @pytest.mark.parametrize("argv", [
        ["blocks", "a.mtx", "--block-size", "0"],
        ["convert", "a.mtx", "--width", "-3"],
        ["convert", "a.mtx", "--max-dim", "big"],
    ])
    def test_non_positive_rejected(self, argv):
        with pytest.raises(SystemExit):
            build_parser().parse_args(argv)
