# xsecanalyzer

Building blocks for a neutrino cross-section analysis, written in Python on top of numpy.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `xsecanalyzer.file_properties` keeps a register of the analysis ntuple files.
  - `NtupleFileType` lists the file types. `TriggersAndPOT` holds a trigger count and a POT exposure.
  - The predicates `ntuple_type_is_detvar`, `ntuple_type_is_altcv`, `ntuple_type_is_mc` and `ntuple_type_is_reweightable_mc` classify file types.
  - `FilePropertiesManager` reads a whitespace-separated table of files. Each line holds a file name, a run number and a type name such as `onBNB`, `extBNB`, `numuMC` or `detVarCV`. Data lines (`onBNB`, `extBNB`) also hold a trigger count and a POT value. Lines that start with `#` are skipped.
  - The environment variable `XSEC_ANALYZER_DIR` must be set, because it becomes `analysis_path`. An empty file name selects `$XSEC_ANALYZER_DIR/configs/file_properties.txt`.
  - `FilePropertiesManager.instance()` returns a shared manager built from that default table.
  - The manager offers the properties `ntuple_file_map` and `data_norm_map`, and the methods `get_ntuple_file_type`, `ntuple_type_to_string` and `string_to_ntuple_type`. The last of these returns `UNKNOWN` for names it does not recognise.
- `xsecanalyzer.event_categories` defines the `EventCategoryXp` enum. `category_label` and `category_color` give the plot label and colour index of a category. Both raise `KeyError` for a category with no table entry; this is the case for `NUMU_CC0P1PI_CCQE`.
- `xsecanalyzer.plot_utils` covers legend titles and pgfplots tables.
  - `get_legend_title(pot)` builds the legend title, for example `MicroBooNE 1.234 #times 10^{20} POT, INTERNAL`.
  - `Histogram1D` is a small histogram with underflow and overflow bins.
  - `dump_1d_histogram` and `dump_graph` add columns to a dict-of-lists table. `write_pgfplots_file` writes such a table, with its columns in sorted order.
- `xsecanalyzer.matrix_utils` holds the matrix helpers.
  - `invert_matrix(mat, tolerance)` pre-scales the matrix and inverts it. It raises `ValueError` for a null matrix. It raises `numpy.linalg.LinAlgError` when the product of the input and its inverse is not a unit matrix within the tolerance.
  - `direct_sum` builds a block-diagonal matrix.
  - `dump_text_matrix` and `dump_text_column_vector` write matrices as text, and `load_matrix` reads both formats back. Column vectors come back with shape `(n, 1)`.
- `xsecanalyzer.dagostini` provides `DAgostiniUnfolder`, which does iterative D'Agostini unfolding.
  - The number of iterations is either fixed or set by a figure-of-merit target, chosen with `ConvergenceCriterion`.
  - The data covariance is propagated to true space. With `include_respmat_covariance=True`, the covariance also takes in the MC statistical uncertainty on the response matrix.
  - The result is an `UnfoldedMeasurement`.
- `xsecanalyzer.blocks` defines `Block1D` and `Block2D`. They parse `name;unit` style names and titles (with `#;` as an escaped semicolon, see `split_fields`) and turn bin edges into cut strings held in `bin_defs`.
- `xsecanalyzer.smearing` has helpers for choosing reco bins.
  - `reco_bin_cuts` and `smearing_cuts` build weighted cut expressions.
  - `normalize_smearing_matrix` normalises each true-bin row to unit sum, with a floor on the elements.
  - `expected_reco_counts` scales counts to an expected POT and gives their statistical errors.
  - `first_background_bin` returns the index of the first background true bin.
  - `diagonal_report` formats the diagonal of a smearing matrix as text.

## Example

```python
import numpy as np
from xsecanalyzer.matrix_utils import invert_matrix, direct_sum
from xsecanalyzer.dagostini import DAgostiniUnfolder, ConvergenceCriterion

cov = np.array([[4.0, 1.0], [1.0, 3.0]])
inverse = invert_matrix(cov, 1e-4)
block = direct_sum(cov, np.eye(1))  # 3x3

unfolder = DAgostiniUnfolder(num_iterations=3)
result = unfolder.unfold(
    data_signal=np.array([[10.0], [20.0]]),
    data_covmat=np.diag([10.0, 20.0]),
    smearcept=np.array([[0.5, 0.1], [0.1, 0.6]]),
    prior_true_signal=np.array([[15.0], [25.0]]),
)
print(result.unfolded_signal, result.cov_matrix, result.iterations)
```

## What this package does not do

- It has no event selections. No selection classes are provided, and nothing applies cuts to events.
- It does not read ntuple or histogram files.
- It does not fill histograms and does not draw plots. It produces numpy arrays, cut strings and text tables only.
- It provides no command-line programs. Everything is used as a library.