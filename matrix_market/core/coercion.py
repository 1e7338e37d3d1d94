"""Conversion of Matrix Market values into the caller's scalar type.

WHY: The caller picks the in-memory scalar type independently of the
file's declared value encoding. A pattern file may be read as complex64,
a complex file as float32. Every (file kind → target type) pair must have
a defined result.

HOW: NumericFromMarket is a small interface with one implementation per
family of numpy scalar types (real, integer, complex). An instance is
bound to one concrete dtype and converts the four native encodings
(pattern, real, integer, complex) into scalars of that dtype.
coercion_for() picks the implementation for a dtype; register_coercion()
lets callers plug in a new target type without touching the assembler.

RULES:
- from_pattern() is the multiplicative identity (1) of the target type
- from_real() / from_integer() are plain numeric casts (truncating,
  wrapping like a C cast for narrow integer targets)
- from_complex() keeps both parts for complex targets and collapses to
  the magnitude |v| for real and integer targets
- conjugate() is the identity for non-complex targets
- Precision loss is silent; callers needing lossless values must match
  the target type to the file's scalar kind
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

import numpy as np


class NumericFromMarket(ABC):
    """Converter from Matrix Market value encodings to one numpy scalar type.

    To support a new target type:
    1. Subclass NumericFromMarket (or one of the implementations below)
    2. Implement from_complex() and, if needed, conjugate()
    3. Register it with register_coercion(dtype, YourClass)
    """

    def __init__(self, dtype: Any) -> None:
        self.dtype = np.dtype(dtype)

    def _cast(self, value: np.generic) -> Any:
        # numpy scalar casts never raise on overflow, matching C semantics
        with np.errstate(invalid="ignore", over="ignore"):
            return value.astype(self.dtype)

    def from_pattern(self) -> Any:
        return self.dtype.type(1)

    def from_real(self, v: float) -> Any:
        return self._cast(np.float64(v))

    def from_integer(self, v: int) -> Any:
        return self._cast(np.int64(v))

    @abstractmethod
    def from_complex(self, v: complex) -> Any:
        """Convert a complex file value to the target type."""

    def conjugate(self, v: Any) -> Any:
        return v


class RealFromMarket(NumericFromMarket):
    """Floating-point targets (float16, float32, float64, longdouble)."""

    def from_complex(self, v: complex) -> Any:
        return self._cast(np.float64(abs(v)))


class IntegerFromMarket(NumericFromMarket):
    """Signed and unsigned integer targets."""

    def from_complex(self, v: complex) -> Any:
        return self._cast(np.float64(abs(v)))


class ComplexFromMarket(NumericFromMarket):
    """Complex targets (complex64, complex128, clongdouble)."""

    def from_complex(self, v: complex) -> Any:
        return self._cast(np.complex128(v))

    def conjugate(self, v: Any) -> Any:
        return np.conj(v)


# numpy dtype.kind → implementation
_KIND_COERCIONS: Dict[str, type] = {
    "f": RealFromMarket,
    "i": IntegerFromMarket,
    "u": IntegerFromMarket,
    "c": ComplexFromMarket,
}

# Explicit per-dtype registrations take precedence over the kind table.
_REGISTERED: Dict[np.dtype, type] = {}


def register_coercion(dtype: Any, implementation: type) -> None:
    """Register a NumericFromMarket subclass for a specific dtype."""
    if not issubclass(implementation, NumericFromMarket):
        raise TypeError(
            "{} is not a NumericFromMarket subclass".format(implementation.__name__)
        )
    _REGISTERED[np.dtype(dtype)] = implementation


def coercion_for(scalar_type: Any) -> NumericFromMarket:
    """Return the converter for a target scalar type.

    WHY: The assembler is written once against NumericFromMarket; this is
    the single place that maps a concrete type to its conversion rules.

    HOW: Normalises scalar_type with np.dtype() (so np.float32, "complex64"
    and the builtin float all work), then looks for an explicit
    registration, then falls back to the dtype kind.

    RULES:
    - Supported kinds: float, signed/unsigned integer, complex
    - bool, object, string and datetime types raise TypeError

    Args:
        scalar_type: Anything np.dtype() accepts.

    Returns:
        A NumericFromMarket bound to that dtype.
    """
    dtype = np.dtype(scalar_type)
    implementation = _REGISTERED.get(dtype) or _KIND_COERCIONS.get(dtype.kind)
    if implementation is None:
        raise TypeError("unsupported scalar type: {}".format(dtype))
    return implementation(dtype)


def index_dtype(index_type: Any) -> np.dtype:
    """Normalise an index (ordinal) type; only integer dtypes are allowed."""
    dtype = np.dtype(index_type)
    if dtype.kind not in ("i", "u"):
        raise TypeError("index type must be an integer type, got {}".format(dtype))
    return dtype
