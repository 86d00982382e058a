from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

import numpy as np

from glyphplot.adapters import SetColumn, coerce_numeric_column, coerce_set_column, is_set_column
from glyphplot.errors import GlyphConfigError


Column = np.ndarray | SetColumn
FieldIndex = Mapping[str, int]


@dataclass(frozen=True)
class SeriesArray:
    """Column 0 is the shared x axis; columns 1..N are index-aligned values.

    Numeric columns are float64 arrays with NaN marking a null cell. Columns whose
    cells are sequences (outlier sets) are kept as tuples of tuples.
    """

    columns: tuple[Column, ...]

    @classmethod
    def from_columns(cls, columns: Sequence[Any]) -> "SeriesArray":
        if len(columns) == 0:
            raise GlyphConfigError("series array needs at least the x column")
        coerced: list[Column] = []
        for idx, raw in enumerate(columns):
            label = "x" if idx == 0 else f"column {idx}"
            if idx > 0 and is_set_column(raw):
                coerced.append(coerce_set_column(raw, label=label))
            else:
                coerced.append(coerce_numeric_column(raw, label=label))

        length = len(coerced[0])
        for idx, col in enumerate(coerced[1:], start=1):
            if len(col) != length:
                raise GlyphConfigError(f"column {idx} length mismatch: {len(col)} != {length} (x)")

        x = coerced[0]
        assert isinstance(x, np.ndarray)
        if not np.all(np.isfinite(x)):
            raise GlyphConfigError("x column must not contain null or non-finite values")
        if x.size > 1 and np.any(np.diff(x) < 0):
            raise GlyphConfigError("x column must be non-decreasing")
        return cls(columns=tuple(coerced))

    def __len__(self) -> int:
        return len(self.columns[0])

    @property
    def x(self) -> np.ndarray:
        return self.columns[0]  # type: ignore[return-value]

    @property
    def width(self) -> int:
        return len(self.columns)

    def numeric(self, idx: int) -> np.ndarray | None:
        if idx < 0 or idx >= len(self.columns):
            return None
        col = self.columns[idx]
        return col if isinstance(col, np.ndarray) else None

    def sets(self, idx: int) -> SetColumn | None:
        if idx < 0 or idx >= len(self.columns):
            return None
        col = self.columns[idx]
        return col if isinstance(col, tuple) else None


def build_field_index(field_names: Sequence[str], *, first_column: int = 1) -> FieldIndex:
    """Immutable field-name -> column-index table; fields start after the x column."""
    table: dict[str, int] = {}
    for offset, name in enumerate(field_names):
        if not isinstance(name, str) or not name:
            raise GlyphConfigError(f"field names must be non-empty strings, got {name!r}")
        if name in table:
            raise GlyphConfigError(f"duplicate field name: {name}")
        table[name] = first_column + offset
    return MappingProxyType(table)
