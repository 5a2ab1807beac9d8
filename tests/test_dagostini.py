import numpy as np
import pytest

from xsecanalyzer.dagostini import (
    DAGOSTINI_MAX_ITERATIONS,
    ConvergenceCriterion,
    DAgostiniUnfolder,
)

SMEAR = np.array([[0.7, 0.1], [0.2, 0.6]])
TRUE = np.array([[100.0], [50.0]])
DATA = SMEAR @ TRUE
COV = np.diag(DATA[:, 0])
PRIOR = np.array([[80.0], [80.0]])


def test_identity_response_returns_data():
    unfolder = DAgostiniUnfolder(num_iterations=1)
    data = np.array([[5.0], [7.0], [3.0]])
    cov = np.diag([5.0, 7.0, 3.0])
    result = unfolder.unfold(data, cov, np.eye(3), np.ones((3, 1)))
    np.testing.assert_allclose(result.unfolded_signal, data)
    np.testing.assert_allclose(result.cov_matrix, cov)
    np.testing.assert_allclose(result.unfolding_matrix, np.eye(3))
    assert result.iterations == 1


def test_converges_to_inverse_solution():
    unfolder = DAgostiniUnfolder(num_iterations=5000)
    result = unfolder.unfold(DATA, COV, SMEAR, PRIOR)
    np.testing.assert_allclose(result.unfolded_signal, TRUE, rtol=1e-3)
    np.testing.assert_allclose(SMEAR @ result.unfolded_signal, DATA, rtol=1e-3)


def test_fixed_iterations_count_and_shapes():
    unfolder = DAgostiniUnfolder(num_iterations=4)
    result = unfolder.unfold(DATA, COV, SMEAR, PRIOR)
    assert result.iterations == 4
    assert result.unfolded_signal.shape == (2, 1)
    assert result.cov_matrix.shape == (2, 2)
    np.testing.assert_allclose(
        result.add_smear_matrix, result.unfolding_matrix @ SMEAR
    )
    np.testing.assert_allclose(result.response_matrix, SMEAR)


def test_covariance_is_symmetric_and_propagated():
    result = DAgostiniUnfolder(num_iterations=3).unfold(DATA, COV, SMEAR, PRIOR)
    np.testing.assert_allclose(result.cov_matrix, result.cov_matrix.T)
    expected = result.err_prop_matrix @ COV @ result.err_prop_matrix.T
    np.testing.assert_allclose(result.cov_matrix, expected)


def test_zero_iterations_keeps_prior():
    result = DAgostiniUnfolder(num_iterations=0).unfold(DATA, COV, SMEAR, PRIOR)
    np.testing.assert_allclose(result.unfolded_signal, PRIOR)
    assert result.iterations == 0


def test_figure_of_merit_criterion_stops_early():
    unfolder = DAgostiniUnfolder(
        criterion=ConvergenceCriterion.FIGURE_OF_MERIT, fig_merit_target=1e-6
    )
    result = unfolder.unfold(DATA, COV, SMEAR, PRIOR)
    assert 0 < result.iterations < DAGOSTINI_MAX_ITERATIONS
    np.testing.assert_allclose(result.unfolded_signal, TRUE, rtol=1e-3)


def test_respmat_covariance_adds_variance():
    plain = DAgostiniUnfolder(num_iterations=3).unfold(DATA, COV, SMEAR, PRIOR)
    with_mc = DAgostiniUnfolder(
        num_iterations=3, include_respmat_covariance=True
    ).unfold(DATA, COV, SMEAR, PRIOR)
    np.testing.assert_allclose(with_mc.unfolded_signal, plain.unfolded_signal)
    np.testing.assert_allclose(with_mc.cov_matrix, with_mc.cov_matrix.T, atol=1e-9)
    assert np.all(np.diag(with_mc.cov_matrix) >= np.diag(plain.cov_matrix) - 1e-9)
    assert np.any(np.diag(with_mc.cov_matrix) > np.diag(plain.cov_matrix))


def test_calc_figure_of_merit_value():
    unfolder = DAgostiniUnfolder()
    assert unfolder.calc_figure_of_merit([[1.0], [2.0]], [[2.0], [2.0]]) == pytest.approx(0.25)
    assert unfolder.calc_figure_of_merit([[3.0], [4.0]], [[3.0], [4.0]]) == 0.0


def test_calc_figure_of_merit_row_mismatch():
    with pytest.raises(ValueError):
        DAgostiniUnfolder().calc_figure_of_merit([[1.0], [2.0]], [[1.0]])


@pytest.mark.parametrize(
    "data, cov, smear, prior",
    [
        (np.ones((3, 1)), np.eye(2), SMEAR, PRIOR),
        (DATA, np.eye(3), SMEAR, PRIOR),
        (DATA, COV, SMEAR, np.ones((3, 1))),
        (np.ones((2, 2)), COV, SMEAR, PRIOR),
    ],
)
def test_dimension_mismatch_raises(data, cov, smear, prior):
    with pytest.raises(ValueError):
        DAgostiniUnfolder().unfold(data, cov, smear, prior)