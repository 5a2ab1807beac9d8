"""Iterative D'Agostini unfolding with propagation of data and MC uncertainties."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass

import numpy as np

# Hard upper limit on the number of iterations, whatever the criterion
DAGOSTINI_MAX_ITERATIONS = 30000


class ConvergenceCriterion(enum.Enum):
    """How the unfolder decides when to stop iterating."""

    FIXED_ITERATIONS = enum.auto()
    FIGURE_OF_MERIT = enum.auto()


@dataclass
class UnfoldedMeasurement:
    """Result of an unfolding.

    Vectors are column matrices of shape (n, 1). ``unfolding_matrix`` has
    true bins as rows and reco bins as columns.
    """

    unfolded_signal: np.ndarray
    cov_matrix: np.ndarray
    unfolding_matrix: np.ndarray
    err_prop_matrix: np.ndarray
    add_smear_matrix: np.ndarray
    response_matrix: np.ndarray
    iterations: int = 0


def _column(matrix, what: str) -> np.ndarray:
    arr = np.asarray(matrix, dtype=float)
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2 or arr.shape[1] != 1:
        raise ValueError(f"{what} must be a column vector")
    return arr


class DAgostiniUnfolder:
    """Unfolds background-subtracted data with the iterative D'Agostini method."""

    def __init__(
        self,
        num_iterations: int = 1,
        criterion: ConvergenceCriterion = ConvergenceCriterion.FIXED_ITERATIONS,
        fig_merit_target: float = 0.025,
        include_respmat_covariance: bool = False,
    ) -> None:
        if num_iterations < 0:
            raise ValueError("the number of iterations cannot be negative")
        self.num_iterations = num_iterations
        self.criterion = ConvergenceCriterion(criterion)
        self.fig_merit_target = fig_merit_target
        self.include_respmat_covariance = include_respmat_covariance

    @staticmethod
    def _check_matrices(data_signal, data_covmat, smearcept, prior_true_signal):
        data = _column(data_signal, "data signal")
        prior = _column(prior_true_signal, "prior true signal")
        smear = np.asarray(smearcept, dtype=float)
        cov = np.asarray(data_covmat, dtype=float)
        if smear.ndim != 2:
            raise ValueError("smearceptance matrix must be two-dimensional")
        num_reco, num_true = smear.shape
        if data.shape[0] != num_reco:
            raise ValueError("data signal does not match the smearceptance reco bins")
        if cov.shape != (num_reco, num_reco):
            raise ValueError("data covariance matrix does not match the reco bins")
        if prior.shape[0] != num_true:
            raise ValueError("prior does not match the smearceptance true bins")
        return data[:, 0], cov, smear, prior[:, 0]

    def unfold(
        self, data_signal, data_covmat, smearcept, prior_true_signal
    ) -> UnfoldedMeasurement:
        """Unfold the data and propagate its covariance to true space."""
        data, cov, smear, prior = self._check_matrices(
            data_signal, data_covmat, smearcept, prior_true_signal
        )
        num_reco, num_true = smear.shape

        true_signal = prior.copy()
        eff = smear.sum(axis=0)
        unfold_mat = np.zeros((num_true, num_reco))
        err_prop = np.zeros((num_true, num_reco))
        # err_prop_mc[t] has reco bins as rows and true bins as columns
        err_prop_mc = np.zeros((num_true, num_reco, num_true))

        it = 0
        fm = sys.float_info.max
        with np.errstate(all="ignore"):
            while True:
                if self.criterion is ConvergenceCriterion.FIXED_ITERATIONS:
                    if it >= self.num_iterations:
                        break
                elif it >= DAGOSTINI_MAX_ITERATIONS:
                    break
                if it >= DAGOSTINI_MAX_ITERATIONS:
                    break
                if fm < self.fig_merit_target:
                    break

                reco_expected = smear @ true_signal
                unfold_mat = (smear.T * true_signal[:, None]) / (
                    eff[:, None] * reco_expected[None, :]
                )

                old_true_signal = true_signal
                true_signal = unfold_mat @ data

                positive = old_true_signal > 0.0
                safe_old = np.where(positive, old_true_signal, 1.0)
                minus_eff_over_old = np.where(positive, -eff / safe_old, 0.0)
                new_over_old = np.where(positive, true_signal / safe_old, 0.0)

                temp1 = err_prop * new_over_old[:, None]
                temp2 = unfold_mat.T * data[:, None] * minus_eff_over_old[None, :]
                temp3 = temp2 @ err_prop
                err_prop = unfold_mat @ temp3 + unfold_mat + temp1

                if self.include_respmat_covariance:
                    err_prop_mc = self._update_mc_tensor(
                        err_prop_mc, data, eff, unfold_mat,
                        old_true_signal, true_signal, reco_expected,
                    )

                if self.criterion is ConvergenceCriterion.FIGURE_OF_MERIT:
                    fm = self.calc_figure_of_merit(old_true_signal, true_signal)

                it += 1

            print(f"\t\tD'Agostini unfolding stopped after {it} iterations.")

            true_covmat = err_prop @ cov @ err_prop.T

            if self.include_respmat_covariance:
                true_covmat = true_covmat + self._mc_covariance(err_prop_mc, smear, prior)

            add_smear = unfold_mat @ smear

        return UnfoldedMeasurement(
            unfolded_signal=true_signal.reshape(-1, 1),
            cov_matrix=true_covmat,
            unfolding_matrix=unfold_mat,
            err_prop_matrix=err_prop,
            add_smear_matrix=add_smear,
            response_matrix=smear.copy(),
            iterations=it,
        )

    @staticmethod
    def _update_mc_tensor(
        old_mc, data, eff, unfold_mat, old_true_signal, true_signal, reco_expected
    ) -> np.ndarray:
        num_true = old_mc.shape[0]
        ratio = data / reco_expected

        # Kronecker-delta term
        aux = (np.outer(old_true_signal, ratio) - true_signal[:, None]) / eff[:, None]
        new_mc = np.zeros_like(old_mc)
        idx = np.arange(num_true)
        new_mc[idx, :, idx] += aux

        new_mc -= (unfold_mat * ratio[None, :])[:, :, None] * old_true_signal[None, None, :]
        new_mc += (true_signal / old_true_signal)[:, None, None] * old_mc

        weights = (unfold_mat * data[None, :]) @ unfold_mat.T
        weights = weights * (eff / old_true_signal)[None, :]
        new_mc -= np.einsum("ts,srk->trk", weights, old_mc)
        return new_mc

    @staticmethod
    def _mc_covariance(err_prop_mc, smear, prior) -> np.ndarray:
        num_true = smear.shape[1]
        mc_covmat = np.zeros((num_true, num_true))
        for t3 in range(num_true):
            prior_sig = prior[t3]
            if prior_sig <= 0.0:
                continue
            column = smear[:, t3]
            # Independent multinomial distribution for each true bin
            covariance = (np.diag(column) - np.outer(column, column)) / prior_sig
            block = err_prop_mc[:, :, t3]
            mc_covmat += block @ covariance @ block.T
        return mc_covmat

    def calc_figure_of_merit(self, old_true_signal, new_true_signal) -> float:
        """Mean relative change of the true signal between two iterations."""
        old = _column(old_true_signal, "old true signal")[:, 0]
        new = _column(new_true_signal, "new true signal")[:, 0]
        if old.shape[0] != new.shape[0]:
            raise ValueError("Row mismatch in calc_figure_of_merit")
        with np.errstate(all="ignore"):
            return float(np.sum(np.abs(new - old) / new) / old.shape[0])