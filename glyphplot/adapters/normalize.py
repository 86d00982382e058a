from __future__ import annotations

from collections.abc import Sequence
import math
from typing import Any

import numpy as np

from glyphplot.errors import GlyphConfigError


SetColumn = tuple[tuple[float, ...], ...]


def is_set_column(values: Any) -> bool:
    """True when the cells are themselves sequences (e.g. per-index outlier sets)."""
    if isinstance(values, np.ndarray):
        return values.dtype == object and any(_is_cell_sequence(v) for v in values.tolist())
    if isinstance(values, Sequence) and not isinstance(values, (str, bytes, bytearray)):
        return any(_is_cell_sequence(v) for v in values)
    return False


def coerce_numeric_column(value: Any, *, label: str) -> np.ndarray:
    """1-D float64 array with NaN standing in for null cells."""
    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise GlyphConfigError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _coerce_ndarray(np.asarray(list(value), dtype=object), label=label)

    raise GlyphConfigError(f"unsupported {label} input type: {type(value)!r}")


def coerce_set_column(value: Any, *, label: str) -> SetColumn:
    """Tuple of per-index value sets; null and non-finite members are dropped."""
    if isinstance(value, np.ndarray):
        cells = value.tolist()
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        cells = list(value)
    else:
        raise GlyphConfigError(f"unsupported {label} input type: {type(value)!r}")

    out: list[tuple[float, ...]] = []
    for i, cell in enumerate(cells):
        if cell is None:
            out.append(())
            continue
        if not _is_cell_sequence(cell):
            raise GlyphConfigError(f"{label} expects a sequence at index {i}, got {cell!r}")
        members: list[float] = []
        for raw in cell:
            if raw is None:
                continue
            number = _to_float(raw, label=label, index=i)
            if math.isfinite(number):
                members.append(number)
        out.append(tuple(members))
    return tuple(out)


def _is_cell_sequence(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.ndim == 1
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        out[i] = np.nan if raw is None else _to_float(raw, label=label, index=i)
    return out


def _to_float(raw: Any, *, label: str, index: int) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise GlyphConfigError(f"{label} contains non-numeric value at index {index}: {raw!r}") from exc
