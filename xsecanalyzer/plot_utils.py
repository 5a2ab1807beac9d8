"""Helpers for legend titles and pgfplots table output."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import MutableMapping, Sequence

Table = MutableMapping[str, list]


@dataclass
class Histogram1D:
    """A one-dimensional histogram with underflow and overflow bins.

    Bin indices follow the usual convention: 0 is underflow, 1..n are the
    ordinary bins and n + 1 is overflow. ``contents`` and ``errors`` may hold
    either the n ordinary bins or all n + 2 bins. Errors default to the
    square root of the absolute contents.
    """

    edges: Sequence[float]
    contents: Sequence[float] | None = None
    errors: Sequence[float] | None = None

    def __post_init__(self) -> None:
        self.edges = [float(e) for e in self.edges]
        if len(self.edges) < 2:
            raise ValueError("a histogram needs at least two bin edges")
        if any(high <= low for low, high in zip(self.edges, self.edges[1:])):
            raise ValueError("bin edges must be strictly increasing")
        n = self.num_bins
        self.contents = _with_flow_bins(self.contents, n, "contents")
        if self.errors is None:
            self.errors = [math.sqrt(abs(c)) for c in self.contents]
        else:
            self.errors = _with_flow_bins(self.errors, n, "errors")

    @property
    def num_bins(self) -> int:
        return len(self.edges) - 1

    def _in_range(self, index: int) -> bool:
        return 0 <= index <= self.num_bins + 1

    def bin_content(self, index: int) -> float:
        return self.contents[index] if self._in_range(index) else 0.0

    def bin_error(self, index: int) -> float:
        return self.errors[index] if self._in_range(index) else 0.0

    def bin_low_edge(self, index: int) -> float:
        n = self.num_bins
        if 1 <= index <= n:
            return self.edges[index - 1]
        width = (self.edges[-1] - self.edges[0]) / n
        return self.edges[0] + (index - 1) * width

    def bin_width(self, index: int) -> float:
        clamped = min(max(index, 1), self.num_bins)
        return self.edges[clamped] - self.edges[clamped - 1]


def _with_flow_bins(values: Sequence[float] | None, n: int, what: str) -> list[float]:
    if values is None:
        return [0.0] * (n + 2)
    values = [float(v) for v in values]
    if len(values) == n:
        return [0.0, *values, 0.0]
    if len(values) == n + 2:
        return values
    raise ValueError(f"{what} must have {n} or {n + 2} entries, got {len(values)}")


def _num(value: float) -> str:
    return f"{value:f}"


def get_legend_title(bnb_pot: float) -> str:
    """Return the standard plot legend title showing the BNB POT exposure."""
    digits, _, exponent = f"{bnb_pot:.3e}".partition("e")
    exponent = exponent.removeprefix("+")
    return f"MicroBooNE {digits} #times 10^{{{exponent}}} POT, INTERNAL"


def dump_1d_histogram(
    hist_col_prefix: str,
    hist: Histogram1D,
    table: Table,
    include_yerror: bool = True,
    include_x_coords: bool = False,
) -> Table:
    """Add the histogram's ordinary and overflow bins to a pgfplots column table.

    The table is updated in place and also returned.
    """
    bin_col = "bin"
    if include_x_coords:
        table[bin_col] = []

    y_col = hist_col_prefix
    table[y_col] = []

    yerror_col = f"{hist_col_prefix}_error"
    if include_yerror:
        table[yerror_col] = []

    x_col = f"{hist_col_prefix}_x" if hist_col_prefix else "x"
    x_hw_col = f"{x_col}_halfwidth"

    for b in range(1, hist.num_bins + 2):
        table[y_col].append(_num(hist.bin_content(b)))
        if include_yerror:
            table[yerror_col].append(_num(hist.bin_error(b)))
        if include_x_coords:
            table[bin_col].append(str(b))
            table.setdefault(x_col, []).append(_num(hist.bin_low_edge(b)))
            table.setdefault(x_hw_col, []).append(_num(0.5 * hist.bin_width(b)))
    return table


def dump_graph(
    col_prefix: str, xs: Sequence[float], ys: Sequence[float], table: Table
) -> Table:
    """Add graph points to a pgfplots column table as ``<prefix>_x``/``<prefix>_y``."""
    if len(xs) != len(ys):
        raise ValueError("x and y coordinates must have the same length")
    table[f"{col_prefix}_x"] = [_num(x) for x in xs]
    table[f"{col_prefix}_y"] = [_num(y) for y in ys]
    return table


def write_pgfplots_file(out_filename: str, table: Table) -> None:
    """Write a column table in pgfplotstable format, columns in sorted order."""
    if not table:
        raise ValueError("cannot write an empty table")
    names = sorted(table)
    num_rows = len(table[names[0]])
    if any(len(table[name]) < num_rows for name in names):
        raise ValueError("all columns must have at least as many rows as the first")
    with open(out_filename, "w") as out_file:
        out_file.write("".join(f"  {name}" for name in names) + "\n")
        for r in range(num_rows):
            out_file.write("".join(f"  {table[name][r]}" for name in names) + "\n")