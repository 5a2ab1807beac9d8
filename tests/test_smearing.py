import numpy as np
import pytest

from xsecanalyzer.smearing import (
    diagonal_report,
    expected_reco_counts,
    first_background_bin,
    normalize_smearing_matrix,
    reco_bin_cuts,
    smearing_cuts,
)


def test_smearing_cuts_layout():
    assert smearing_cuts("w", "sig", "sel") == "w * (is_mc && sig && sel)"


def test_reco_bin_cuts_layout():
    cuts = reco_bin_cuts("w", "sig", "sel", "x", 0.5, 1.0)
    assert cuts == "w * (is_mc && sig && sel && x >= 0.500000 && x < 1.000000)"


def test_reco_bin_cuts_extends_smearing_cuts():
    cuts = reco_bin_cuts("w", "sig", "sel", "x", 2.0, 3.0)
    assert cuts.startswith(smearing_cuts("w", "sig", "sel")[:-1])
    assert cuts.endswith(")")


def test_normalize_rows_sum_to_one():
    matrix = np.array([[1.0, 2.0, 3.0], [4.0, 0.0, 4.0], [0.5, 0.5, 1.0]])
    result = normalize_smearing_matrix(matrix, 0.0)
    assert np.allclose(result.sum(axis=1), 1.0)
    assert np.allclose(result[1], [0.5, 0.0, 0.5])


def test_normalize_zero_row_and_input_untouched():
    matrix = np.array([[0.0, 0.0], [1.0, 3.0]])
    original = matrix.copy()
    result = normalize_smearing_matrix(matrix, 0.1)
    assert np.array_equal(result[0], [0.0, 0.0])
    assert np.array_equal(matrix, original)


def test_normalize_applies_floor():
    result = normalize_smearing_matrix([[0.0, 2.0]], 1e-3)
    assert result[0, 0] == pytest.approx(1e-3)
    assert result[0, 1] == pytest.approx(1.0)


def test_normalize_rejects_vector():
    with pytest.raises(ValueError):
        normalize_smearing_matrix([1.0, 2.0], 0.0)


def test_expected_reco_counts_scale_and_errors():
    scaled, errors = expected_reco_counts([2.0, 8.0, -1.0], 2.0, 1.0)
    assert np.allclose(scaled, [4.0, 16.0, -2.0])
    assert np.allclose(errors ** 2, np.maximum(scaled, 0.0))
    assert errors[2] == 0.0


def test_expected_reco_counts_rejects_zero_pot():
    with pytest.raises(ValueError):
        expected_reco_counts([1.0], 1.0, 0.0)


def test_first_background_bin():
    assert first_background_bin([False, False, True, True]) == 2
    assert first_background_bin([False, False]) == 2
    assert first_background_bin([]) == 0


def test_diagonal_report_1d():
    smear = np.eye(4)
    report = diagonal_report("muon p", [0.0, 0.5], smear, 1)
    lines = report.splitlines()
    assert lines[0] == "Diagonal of 1D 2x2 smear matrix of muon p is as follows."
    assert lines[1] == "index  | Low Edge | Diag "
    assert lines[2] == "bin # 1:  0.000,    1.000 "
    assert len(lines) == 4


def test_diagonal_report_2d_edge_format():
    report = diagonal_report("bin", [0.0, 1.0], np.eye(4), 2)
    assert report.splitlines()[0].startswith("Diagonal of 2D 2x2")
    assert "1.000000," in report.splitlines()[3]


def test_diagonal_report_rejects_bad_dimension():
    with pytest.raises(ValueError):
        diagonal_report("x", [0.0], np.eye(3), 3)


def test_diagonal_report_rejects_missing_edges():
    with pytest.raises(ValueError):
        diagonal_report("x", [0.0], np.eye(4), 1)