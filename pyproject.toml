[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xsecanalyzer"
version = "0.1.0"
description = "Cross-section analysis helpers: ntuple file bookkeeping, event categories, pgfplots tables, matrix utilities, D'Agostini unfolding, binning blocks and smearing-matrix tools."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["physics", "neutrino", "cross-section", "unfolding", "covariance", "histogram", "pgfplots"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["xsecanalyzer"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
