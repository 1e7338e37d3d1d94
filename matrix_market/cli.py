"""Command-line interface for the Matrix Market tools.

WHY: Matrix collections are analysed in bulk from the terminal. The CLI
wires together the full pipeline (reading with the chosen numeric types,
statistics, dense-block counting, formatter output and file saving)
behind one command with a subcommand per tool.

HOW: Uses argparse subcommands that share the reader options (index and
scalar type, Hermitian mapping, skew negation). Batch commands (stats,
blocks) write CSV to stdout and keep going when a file fails, reporting
the reason in the last column. convert runs the selected formatters and
saves their output next to the source (or to --output-dir). Status
messages go to stderr.

RULES:
- stats FILE...: one CSV row per file (see STATS_COLUMNS)
- blocks FILE...: rows/cols/nnz plus (blocks, nnz) per density threshold
- convert FILE: --formats comma-separated formatter keys (default: all)
- info FILE: print the parsed header
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-stats-2.json)
- A failed file never stops a batch; exit code 1 if any file failed
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import csv
import itertools
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from matrix_market.analysis.blocks import count_dense_blocks
from matrix_market.analysis.stats import STATS_COLUMNS, compute_stats
from matrix_market.config import (
    BLOCK_DENSITIES,
    BLOCK_SIZE,
    DEFAULT_INDEX_TYPE,
    DEFAULT_SCALAR_TYPE,
    HERMITIAN_MAPPING,
    HERMITIAN_MAPPINGS,
    HOPKINS_SAMPLES,
    HOPKINS_SEED,
    IMAGE_MAX_DIM,
    INDEX_TYPE_NAMES,
    NEGATE_SKEW,
    SCALAR_TYPE_NAMES,
    check_hermitian_mapping,
    resolve_dtype,
)
from matrix_market.core.ir import CoordinateMatrix
from matrix_market.core.reader import read_coo, read_header
from matrix_market.errors import MatrixMarketError
from matrix_market.formatters import FORMATTERS
from matrix_market.formatters.base import FormatterOutput

logger = logging.getLogger(__name__)

# Errors that mark one file as failed without stopping a batch.
READ_ERRORS = (MatrixMarketError, OSError, UnicodeDecodeError)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so CSV output can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _error(msg: str) -> int:
    print("Error: {}".format(msg), file=sys.stderr)
    return 1


def _read(path: str, args: argparse.Namespace) -> CoordinateMatrix:
    """Read one file with the reader options from the command line."""
    return read_coo(
        path,
        index_type=resolve_dtype(args.index_type, index=True),
        scalar_type=resolve_dtype(args.scalar_type),
        hermitian_mapping=args.hermitian,
        negate_skew=args.negate_skew,
    )


def _check_options(args: argparse.Namespace) -> None:
    """Fail early (ValueError) on unknown names, e.g. taken from the environment."""
    resolve_dtype(args.index_type, index=True)
    resolve_dtype(args.scalar_type)
    check_hermitian_mapping(args.hermitian)


def _parse_densities(value: str) -> tuple:
    try:
        densities = tuple(float(part) for part in value.split(",") if part.strip())
    except ValueError:
        raise argparse.ArgumentTypeError("densities must be comma-separated numbers")
    if not densities or any(not 0 < d <= 1 for d in densities):
        raise argparse.ArgumentTypeError("densities must lie in (0, 1]")
    return densities


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("expected an integer, got {!r}".format(value))
    if number <= 0:
        raise argparse.ArgumentTypeError("must be positive, got {}".format(number))
    return number


def _format_density(density: float) -> str:
    return "{:g}".format(density)


# ---------------------------------------------------------------------------
# Batch commands
# ---------------------------------------------------------------------------


def _run_stats(args: argparse.Namespace) -> int:
    """Write one statistics CSV row per input file.

    RULES:
    - Header: file, the STATS_COLUMNS, err
    - On failure: file name, blank statistic cells, error message in err
    """
    writer = csv.writer(sys.stdout, lineterminator="\n")
    writer.writerow(["file"] + STATS_COLUMNS + ["err"])
    failures = 0

    for path in args.files:
        try:
            matrix = _read(path, args)
        except READ_ERRORS as e:
            logger.info("Failed to read %s: %s", path, e)
            writer.writerow([path] + [""] * len(STATS_COLUMNS) + [str(e)])
            failures += 1
            continue
        stats = compute_stats(matrix, samples=args.samples, seed=args.seed)
        writer.writerow([path] + stats.as_row() + [""])
        sys.stdout.flush()

    return 1 if failures else 0


def _run_blocks(args: argparse.Namespace) -> int:
    """Write one dense-block CSV row per input file."""
    density_columns: List[str] = []
    for density in args.densities:
        label = _format_density(density)
        density_columns += ["blocks ({})".format(label), "nnz ({})".format(label)]

    writer = csv.writer(sys.stdout, lineterminator="\n")
    writer.writerow(["file", "rows", "cols", "nnz"] + density_columns + ["err"])
    failures = 0

    for path in args.files:
        try:
            matrix = _read(path, args)
        except READ_ERRORS as e:
            logger.info("Failed to read %s: %s", path, e)
            writer.writerow([path] + [""] * (3 + len(density_columns)) + [str(e)])
            failures += 1
            continue
        counts = count_dense_blocks(matrix, block_size=args.block_size, densities=args.densities)
        cells = [str(matrix.nrows), str(matrix.ncols), str(matrix.nnz)]
        for count in counts:
            cells += [str(count.blocks), str(count.nnz)]
        writer.writerow([path] + cells + [""])
        sys.stdout.flush()

    return 1 if failures else 0


# ---------------------------------------------------------------------------
# convert
# ---------------------------------------------------------------------------


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """First free path for ``<stem><suffix>`` in output_dir.

    A taken name gets ``-2``, ``-3``, ... inserted before the extension of
    the suffix, so bcsstk01-stats.json becomes bcsstk01-stats-2.json.
    Suffixes without an extension get the counter appended.
    """
    candidate = output_dir / (stem + suffix)
    if not candidate.exists():
        return candidate

    name, dot, ext = suffix.rpartition(".")
    if not name:
        name, dot, ext = suffix, "", ""

    for counter in itertools.count(2):
        candidate = output_dir / "{}{}-{}{}{}".format(stem, name, counter, dot, ext)
        if not candidate.exists():
            return candidate


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Write one formatter output next to earlier runs and return its path.

    Text reports are written as UTF-8; .npz archives and PPM images are bytes.
    """
    path = _resolve_output_path(stem, output.suffix, output_dir)

    if isinstance(output.content, bytes):
        path.write_bytes(output.content)
    else:
        path.write_text(output.content, encoding="utf-8")

    return path


def _formatter_options(key: str, args: argparse.Namespace) -> Dict[str, Any]:
    """Constructor keywords for a formatter, taken from the command line."""
    if key == "stats_json":
        return {
            "samples": args.samples,
            "seed": args.seed,
            "block_size": args.block_size,
            "densities": args.densities,
        }
    if key == "density_ppm":
        return {"width": args.width, "height": args.height, "max_dim": args.max_dim}
    return {}


def _run_convert(args: argparse.Namespace) -> int:
    """Read one file and save the output of the selected formatters.

    RULES:
    - Validate input file, output directory and format keys before reading
    - Save each formatter's output files with conflict avoidance
    """
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        return _error("File not found: {}".format(input_path))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        return _error("Output directory does not exist: {}".format(output_dir))

    if args.formats:
        format_keys = [f.strip() for f in args.formats.split(",") if f.strip()]
        for key in format_keys:
            if key not in FORMATTERS:
                available = ", ".join(sorted(FORMATTERS.keys()))
                return _error("Unknown format '{}'. Available formats: {}".format(key, available))
    else:
        format_keys = list(FORMATTERS.keys())

    _status("Reading {}...".format(input_path.name))
    try:
        matrix = _read(str(input_path), args)
    except READ_ERRORS as e:
        return _error(str(e))
    _status("  {} x {}, {} entries".format(matrix.nrows, matrix.ncols, matrix.nnz))

    stem = input_path.stem
    saved_files: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key](**_formatter_options(key, args))
        _status("  Running {} formatter...".format(formatter.name))
        try:
            outputs = formatter.format(matrix, input_path.name)
        except ValueError as e:
            return _error("{} failed: {}".format(formatter.name, e))
        for output in outputs:
            saved_path = _save_output(output, stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return 0


def _run_info(args: argparse.Namespace) -> int:
    """Print the parsed header of one file."""
    try:
        header = read_header(args.input_file, hermitian_mapping=args.hermitian)
    except (MatrixMarketError, OSError, UnicodeDecodeError) as e:
        return _error(str(e))

    print("file: {}".format(args.input_file))
    print("format: {}".format(header.format.value))
    print("scalar: {}".format(header.scalar_kind.value))
    print("symmetry: {}".format(header.symmetry_kind.value))
    print("rows: {}".format(header.nrows))
    print("cols: {}".format(header.ncols))
    print("nnz: {}".format(header.nnz_hint))
    print("complete: {}".format("yes" if header.is_complete() else "no"))
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _reader_arguments() -> argparse.ArgumentParser:
    """Options shared by every subcommand (added via parents=)."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--index-type",
        default=DEFAULT_INDEX_TYPE,
        choices=sorted(INDEX_TYPE_NAMES),
        help="Integer type for row/column indices (default: %(default)s).",
    )
    common.add_argument(
        "--scalar-type",
        default=DEFAULT_SCALAR_TYPE,
        choices=sorted(SCALAR_TYPE_NAMES),
        help="Numeric type for values (default: %(default)s).",
    )
    common.add_argument(
        "--hermitian",
        default=HERMITIAN_MAPPING,
        choices=HERMITIAN_MAPPINGS,
        help="How a 'hermitian' banner is expanded (default: %(default)s).",
    )
    common.add_argument(
        "--negate-skew",
        action=argparse.BooleanOptionalAction,
        default=NEGATE_SKEW,
        help="Negate mirrored values of skew-symmetric matrices (default: %(default)s).",
    )
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug messages to stderr.",
    )
    return common


def _add_stats_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--samples",
        type=int,
        default=HOPKINS_SAMPLES,
        help="Samples per half of the Hopkins statistic (default: %(default)s).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=HOPKINS_SEED,
        help="Random seed for the Hopkins statistic (default: %(default)s).",
    )


def _add_block_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--block-size",
        type=_positive_int,
        default=BLOCK_SIZE,
        help="Edge length of the aligned blocks (default: %(default)s).",
    )
    parser.add_argument(
        "--densities",
        type=_parse_densities,
        default=BLOCK_DENSITIES,
        help="Comma-separated density thresholds in (0, 1].",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running anything.

    RULES:
    - Subcommands: stats, blocks, convert, info
    - Reader options are accepted after every subcommand
    """
    common = _reader_arguments()
    parser = argparse.ArgumentParser(
        prog="matrix_market",
        description="Read Matrix Market (.mtx) files and report on their structure.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    stats = subparsers.add_parser(
        "stats", parents=[common], help="Structural statistics as CSV, one row per file."
    )
    stats.add_argument("files", nargs="+", help="Matrix Market files to analyse.")
    _add_stats_options(stats)
    stats.set_defaults(handler=_run_stats)

    blocks = subparsers.add_parser(
        "blocks", parents=[common], help="Dense aligned block counts as CSV, one row per file."
    )
    blocks.add_argument("files", nargs="+", help="Matrix Market files to analyse.")
    _add_block_options(blocks)
    blocks.set_defaults(handler=_run_blocks)

    convert = subparsers.add_parser(
        "convert", parents=[common], help="Write formatter outputs for one file."
    )
    convert.add_argument("input_file", help="Path to the Matrix Market file.")
    convert.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    convert.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )
    convert.add_argument("--width", type=_positive_int, default=None, help="Density image width in pixels.")
    convert.add_argument("--height", type=_positive_int, default=None, help="Density image height in pixels.")
    convert.add_argument(
        "--max-dim",
        type=_positive_int,
        default=IMAGE_MAX_DIM,
        help="Longer image side when neither --width nor --height is given (default: %(default)s).",
    )
    _add_stats_options(convert)
    _add_block_options(convert)
    convert.set_defaults(handler=_run_convert)

    info = subparsers.add_parser("info", parents=[common], help="Print the parsed header of a file.")
    info.add_argument("input_file", help="Path to the Matrix Market file.")
    info.set_defaults(handler=_run_info)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Exits with status 1 when the command reports a failure
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        _check_options(args)
    except ValueError as e:
        sys.exit(_error(str(e)))

    code = args.handler(args)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
