"""Smearing-matrix helpers used when choosing reco bins for a measurement."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np


def _cut_value(value: float) -> str:
    return f"{float(value):f}"


def smearing_cuts(mc_event_weight: str, signal_cuts: str, selection: str) -> str:
    """Return the weighted cut expression used to fill the smearing matrix."""
    return f"{mc_event_weight} * (is_mc && {signal_cuts} && {selection})"


def reco_bin_cuts(
    mc_event_weight: str,
    signal_cuts: str,
    selection: str,
    branchexpr: str,
    reco_bin_min: float,
    reco_bin_max: float,
) -> str:
    """Return the weighted cut expression for selected signal events in one reco bin."""
    return (
        f"{mc_event_weight} * (is_mc && {signal_cuts} && {selection}"
        f" && {branchexpr} >= {_cut_value(reco_bin_min)}"
        f" && {branchexpr} < {_cut_value(reco_bin_max)})"
    )


def normalize_smearing_matrix(matrix, floor: float) -> np.ndarray:
    """Normalize each true-bin row of a smearing matrix so that it sums to one.

    Rows are true bins and columns reco bins, under/overflow included.
    Normalized elements are raised to at least ``floor``; rows whose sum is
    not positive become all zeros. The input is left unchanged.
    """
    arr = np.array(matrix, dtype=float)
    if arr.ndim != 2:
        raise ValueError("a smearing matrix must be two-dimensional")
    result = np.zeros_like(arr)
    row_sums = arr.sum(axis=1)
    for row, (values, y_sum) in enumerate(zip(arr, row_sums)):
        if y_sum <= 0.0:
            continue
        result[row] = np.maximum(values / y_sum, floor)
    return result


def expected_reco_counts(
    counts, expected_pot: float, total_simulated_pot: float
) -> tuple[np.ndarray, np.ndarray]:
    """Scale simulated reco-bin counts to the expected exposure.

    Returns the scaled counts and their expected statistical errors, the
    square root of each (non-negative) scaled count.
    """
    if total_simulated_pot <= 0.0:
        raise ValueError("the total simulated POT must be positive")
    scaled = np.asarray(counts, dtype=float) * (expected_pot / total_simulated_pot)
    errors = np.sqrt(np.maximum(0.0, scaled))
    return scaled, errors


def first_background_bin(true_bin_is_background: Iterable[bool]) -> int:
    """Return the index of the first background true bin.

    When there is none, the number of true bins is returned.
    """
    flags = list(true_bin_is_background)
    return next((index for index, is_bkgd in enumerate(flags) if is_bkgd), len(flags))


def diagonal_report(
    variable_title: str,
    low_edges: Sequence[float],
    smear_matrix,
    dimension: int = 1,
) -> str:
    """Describe the diagonal of a normalized smearing matrix, one reco bin per line.

    ``smear_matrix`` includes under/overflow bins, so ordinary bin ``b``
    (one-based) is at ``[b, b]``; ``low_edges[b - 1]`` is its low edge.
    """
    if dimension not in (1, 2):
        raise ValueError("dimension must be 1 or 2")
    arr = np.asarray(smear_matrix, dtype=float)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1] or arr.shape[0] < 2:
        raise ValueError("the smearing matrix must be square and include flow bins")
    num_reco_bins = arr.shape[0] - 2
    if len(low_edges) < num_reco_bins:
        raise ValueError("not enough low edges for the reco bins")

    edge_format = "6.3f" if dimension == 1 else "6f"
    lines = [
        f"Diagonal of {dimension}D {num_reco_bins}x{num_reco_bins} smear matrix of "
        f"{variable_title} is as follows.",
        "index  | Low Edge | Diag ",
    ]
    lines.extend(
        f"bin #{bb:2d}: {float(low_edges[bb - 1]):{edge_format}}, {arr[bb, bb]:8.3f} "
        for bb in range(1, num_reco_bins + 1)
    )
    return "\n".join(lines) + "\n"