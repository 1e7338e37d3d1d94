"""Configuration constants, dtype names, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Default index/scalar types, the Hermitian banner
mapping, and analysis parameters are plain module-level values, not
buried in logic, so both the CLI and library callers share one source
of defaults.

HOW: python-dotenv loads the .env file on import. Constants are read from
environment variables with fallbacks. resolve_dtype() turns a dtype name
from the environment or the command line into a numpy dtype and gives a
clear error for unknown names.

RULES:
- MTX_INDEX_TYPE / MTX_SCALAR_TYPE name numpy dtypes ("int32", "complex64", ...)
- MTX_HERMITIAN_MAPPING is "general" (compatible default) or "hermitian"
- Boolean variables accept "true"/"false" (case-insensitive)
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

import numpy as np
from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def _env_floats(name: str, default: str) -> tuple[float, ...]:
    raw = os.getenv(name, default)
    return tuple(float(part) for part in raw.split(",") if part.strip())


# ---------------------------------------------------------------------------
# Numeric types
# ---------------------------------------------------------------------------

INDEX_TYPE_NAMES: dict[str, type] = {
    "int8": np.int8,
    "int16": np.int16,
    "int32": np.int32,
    "int64": np.int64,
    "uint8": np.uint8,
    "uint16": np.uint16,
    "uint32": np.uint32,
    "uint64": np.uint64,
}

SCALAR_TYPE_NAMES: dict[str, type] = {
    **INDEX_TYPE_NAMES,
    "float16": np.float16,
    "float32": np.float32,
    "float64": np.float64,
    "complex64": np.complex64,
    "complex128": np.complex128,
}

DEFAULT_INDEX_TYPE = os.getenv("MTX_INDEX_TYPE", "int64")
DEFAULT_SCALAR_TYPE = os.getenv("MTX_SCALAR_TYPE", "float32")


def resolve_dtype(name: str, index: bool = False) -> np.dtype:
    """Map a dtype name to a numpy dtype.

    WHY: Dtype names arrive as strings from the environment and the CLI.
    A fixed table keeps the accepted set explicit (no "object" or "str"
    scalars sneaking in through np.dtype()).

    RULES:
    - index=True accepts only integer names (INDEX_TYPE_NAMES)
    - Lookup is case-insensitive
    - Raises ValueError listing the accepted names on a miss
    """
    table = INDEX_TYPE_NAMES if index else SCALAR_TYPE_NAMES
    key = name.strip().lower()
    if key not in table:
        raise ValueError(
            "Unknown {} type '{}'. Available: {}".format(
                "index" if index else "scalar", name, ", ".join(table)
            )
        )
    return np.dtype(table[key])


# ---------------------------------------------------------------------------
# Banner interpretation
# ---------------------------------------------------------------------------

HERMITIAN_MAPPINGS = ("general", "hermitian")
"""Accepted values for how a "hermitian" banner token is interpreted."""

HERMITIAN_MAPPING = os.getenv("MTX_HERMITIAN_MAPPING", "general").strip().lower()
NEGATE_SKEW = _env_bool("MTX_NEGATE_SKEW", "false")


def check_hermitian_mapping(mapping: str) -> str:
    """Validate a Hermitian mapping name; raises ValueError if unknown."""
    if mapping not in HERMITIAN_MAPPINGS:
        raise ValueError(
            "Unknown hermitian mapping '{}'. Available: {}".format(
                mapping, ", ".join(HERMITIAN_MAPPINGS)
            )
        )
    return mapping


# ---------------------------------------------------------------------------
# Analysis defaults
# ---------------------------------------------------------------------------

BLOCK_SIZE = int(os.getenv("MTX_BLOCK_SIZE", "16"))
BLOCK_DENSITIES = _env_floats("MTX_BLOCK_DENSITIES", "0.1,0.25,0.5,0.6,0.7,0.8,0.9,1.0")
HOPKINS_SAMPLES = int(os.getenv("MTX_HOPKINS_SAMPLES", "100"))
HOPKINS_SEED = int(os.getenv("MTX_HOPKINS_SEED", "0"))
IMAGE_MAX_DIM = int(os.getenv("MTX_IMAGE_MAX_DIM", "512"))
