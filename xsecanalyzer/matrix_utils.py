"""Matrix inversion, direct sums and plain-text matrix storage."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

import numpy as np

DEFAULT_INVERSION_TOLERANCE = 1e-4

# Digits after the decimal point needed to round-trip a double exactly
_FULL_PRECISION = 17


def _as_matrix(matrix) -> np.ndarray:
    arr = np.asarray(matrix, dtype=float)
    if arr.ndim == 1:
        return arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise ValueError(f"expected a two-dimensional matrix, got {arr.ndim} dimensions")
    return arr


def _format_element(value: float) -> str:
    return f"{value:.{_FULL_PRECISION}e}"


def invert_matrix(mat, inversion_tolerance: float = DEFAULT_INVERSION_TOLERANCE) -> np.ndarray:
    """Invert a square matrix, checking that the product with the input is a unit matrix.

    The matrix is pre-scaled so that its smallest nonzero element has an
    absolute value of one, then inverted with a QR decomposition.
    Raises ValueError for a null matrix and numpy.linalg.LinAlgError when the
    inversion fails the unit-matrix check.
    """
    arr = _as_matrix(mat)
    rows, cols = arr.shape
    if rows != cols:
        raise ValueError(f"cannot invert a non-square {rows}x{cols} matrix")

    nonzero = np.abs(arr[arr != 0.0])
    if nonzero.size == 0:
        raise ValueError("Cannot invert a null matrix")
    scaling_factor = 1.0 / nonzero.min()

    with np.errstate(all="ignore"):
        q, r = np.linalg.qr(arr * scaling_factor)
        try:
            inverse = np.linalg.solve(r, q.T)
        except np.linalg.LinAlgError as err:
            raise np.linalg.LinAlgError("Matrix inversion failed") from err
        inverse *= scaling_factor
        unit = arr @ inverse

    deviation = np.abs(unit - np.eye(rows))
    if not np.all(deviation <= inversion_tolerance):
        raise np.linalg.LinAlgError("Matrix inversion failed")
    return inverse


def dump_text_matrix(output_file_name: str | Path, matrix) -> None:
    """Write a matrix as a text table of zero-based (row, column, value) entries."""
    arr = _as_matrix(matrix)
    num_x_bins, num_y_bins = arr.shape
    lines = [
        f"numXbins {num_x_bins}",
        f"numYbins {num_y_bins}",
        "xbin  ybin  z",
    ]
    lines.extend(
        f"{xb}  {yb}  {_format_element(arr[xb, yb])}"
        for xb in range(num_x_bins)
        for yb in range(num_y_bins)
    )
    Path(output_file_name).write_text("\n".join(lines) + "\n")


def dump_text_column_vector(output_file_name: str | Path, matrix) -> None:
    """Write a column vector as a text table of zero-based (row, value) entries."""
    arr = _as_matrix(matrix)
    num_x_bins, num_y_bins = arr.shape
    if num_y_bins != 1:
        raise ValueError("Input matrix is not a column vector")
    parts = [f"numXbins {num_x_bins}"]
    parts.extend(f"{xb}  {_format_element(arr[xb, 0])}" for xb in range(num_x_bins))
    Path(output_file_name).write_text("\n".join(parts))


def _parse_entry(line: str, is_matrix: bool) -> tuple[int, int, float] | None:
    fields = line.split()
    needed = 3 if is_matrix else 2
    if len(fields) < needed:
        return None
    try:
        row = int(fields[0])
        col = int(fields[1]) if is_matrix else 0
        value = float(fields[needed - 1])
    except ValueError:
        return None
    return row, col, value


def load_matrix(input_file_name: str | Path) -> np.ndarray:
    """Load a matrix or column vector written by the dump functions.

    Column vectors come back with shape (n, 1). Entries whose indices lie
    outside the declared dimensions are ignored.
    """
    text = Path(input_file_name).read_text()
    tokens = text.split()
    if len(tokens) < 2:
        raise ValueError(f"{input_file_name}: missing matrix dimensions")

    is_matrix = len(tokens) >= 3 and tokens[2] == "numYbins"
    try:
        num_x_bins = int(tokens[1])
        num_y_bins = int(tokens[3]) if is_matrix else 1
    except (IndexError, ValueError) as err:
        raise ValueError(f"{input_file_name}: invalid matrix dimensions") from err

    matrix = np.zeros((num_x_bins, num_y_bins))
    for line in text.splitlines():
        entry = _parse_entry(line, is_matrix)
        if entry is None:
            continue
        row, col, value = entry
        if 0 <= row < num_x_bins and 0 <= col < num_y_bins:
            matrix[row, col] = value
    return matrix


def direct_sum(*args) -> np.ndarray:
    """Return the block-diagonal direct sum of the given matrices.

    Accepts the matrices as separate arguments or as a single sequence.
    """
    matrices: Iterable
    if len(args) == 1 and isinstance(args[0], Sequence) and not isinstance(args[0], np.ndarray):
        matrices = args[0]
    else:
        matrices = args
    blocks = [_as_matrix(m) for m in matrices]

    num_rows = sum(b.shape[0] for b in blocks)
    num_cols = sum(b.shape[1] for b in blocks)
    result = np.zeros((num_rows, num_cols))

    start_row = start_col = 0
    for block in blocks:
        rows, cols = block.shape
        result[start_row:start_row + rows, start_col:start_col + cols] = block
        start_row += rows
        start_col += cols
    return result