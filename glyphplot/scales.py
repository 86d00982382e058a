from __future__ import annotations

from dataclasses import dataclass
from bisect import bisect_left, bisect_right
from decimal import Decimal
import math

import numpy as np


@dataclass(frozen=True)
class AxisScale:
    """Value range of one axis mapped onto a pixel span of the plot box."""

    vmin: float
    vmax: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.vmin) and math.isfinite(self.vmax)):
            raise ValueError("scale bounds must be finite")

    @property
    def span(self) -> float:
        return self.vmax - self.vmin

    def to_pixel(self, value: float, *, origin: float, length: float, invert: bool = False) -> float:
        span = self.span
        frac = 0.5 if span == 0 else (float(value) - self.vmin) / span
        if invert:
            frac = 1.0 - frac
        return origin + frac * length


def finite_extent(columns: list[np.ndarray]) -> tuple[float, float] | None:
    chunks = [col[np.isfinite(col)] for col in columns if col.size]
    chunks = [c for c in chunks if c.size]
    if not chunks:
        return None
    values = np.concatenate(chunks)
    return (float(np.min(values)), float(np.max(values)))


def range_num(vmin: float, vmax: float, pad_ratio: float = 0.1, *, snap: bool = True) -> tuple[float, float]:
    """Pad ``[vmin, vmax]`` outward by ``pad_ratio`` and optionally snap to the span's magnitude.

    Both sides move by ``pad_ratio`` of the data span, so values far from zero
    (epoch milliseconds, say) keep a range proportional to their spread. A flat
    range pads by its own magnitude instead. Snapping rounds outward to the
    span's power of ten. Non-negative data keeps a floor of zero and
    negative data a ceiling of zero.
    """
    lo = float(min(vmin, vmax))
    hi = float(max(vmin, vmax))
    delta = hi - lo
    non_zero = delta or abs(hi) or 1.0
    pad = pad_ratio * non_zero
    new_lo = lo - pad
    new_hi = hi + pad
    if snap:
        incr = 10.0 ** math.floor(math.log10(non_zero))
        new_lo = math.floor(new_lo / incr) * incr
        new_hi = math.ceil(new_hi / incr) * incr
    if lo >= 0 and new_lo < 0:
        new_lo = 0.0
    if hi < 0 and new_hi > 0:
        new_hi = 0.0
    if new_hi <= new_lo:
        new_hi = new_lo + 1.0
    return (new_lo, new_hi)


_NICE_FRACTIONS = (1.0, 2.0, 5.0, 10.0)
_ROUNDED_CUTOFFS = (1.5, 3.0, 7.0)
_CEILING_CUTOFFS = (1.0, 2.0, 5.0)


def nice_number(value: float, *, round_result: bool) -> float:
    """Closest (``round_result``) or next-larger 1/2/5 x 10^k value."""
    exp = math.floor(math.log10(value))
    frac = value / 10.0**exp
    if round_result:
        idx = bisect_right(_ROUNDED_CUTOFFS, frac)
    else:
        idx = bisect_left(_CEILING_CUTOFFS, frac)
    return _NICE_FRACTIONS[idx] * 10.0**exp


def nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    """Multiples of a nice step lying inside [vmin, vmax], about ``target`` of them."""
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)
    span = nice_number(vmax - vmin, round_result=False)
    step = nice_number(span / max(target - 1, 1), round_result=True)
    first = math.ceil(vmin / step - 1e-9)
    last = math.floor(vmax / step + 1e-9)
    ticks = np.arange(first, last + 1, dtype=np.float64) * step
    # Turn -0.0 into 0.0 so labels never read "-0".
    ticks[ticks == 0.0] = 0.0
    return ticks


def tick_step(ticks: np.ndarray) -> float | None:
    if ticks.size < 2:
        return None
    return float(abs(ticks[1] - ticks[0]))


def tick_decimals(step: float | None) -> int:
    if step is None or not math.isfinite(step) or step <= 0:
        return 6
    exponent = Decimal(repr(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))


def format_tick(value: float, *, step: float | None = None) -> str:
    if not math.isfinite(value):
        return str(value)
    if step is not None and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    magnitude = abs(value)
    if magnitude and (magnitude >= 1e6 or magnitude < 1e-6 or (step is not None and step < 1e-4)):
        return f"{value:.4e}"
    text = f"{value:.{tick_decimals(step)}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    step = tick_step(ticks)
    return [format_tick(float(v), step=step) for v in ticks]
