"""Cross-section analysis helpers: file bookkeeping, event categories, pgfplots tables, matrices, unfolding and binning."""

__version__ = "0.1.0"