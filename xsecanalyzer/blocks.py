"""One- and two-dimensional binning blocks used to build bin configurations."""

from __future__ import annotations

from typing import Mapping, Sequence

_ESCAPED_SEMICOLON = "#semicolon"

_FORMAT_1D = "<branch title>;<unit>"
_FORMAT_2D = "<branch title>; <unit>; <y branch title>; <y unit>"


def _escape(text: str) -> str:
    return str(text).replace("#;", _ESCAPED_SEMICOLON)


def split_fields(text: str) -> list[str]:
    """Split a ``;``-separated description into its fields.

    An escaped semicolon ``#;`` is kept inside its field as ``#semicolon``.
    """
    return _escape(text).split(";")


def _fields_1d(text: str, what: str) -> tuple[str, str]:
    fields = split_fields(text)
    if len(fields) == 2:
        return fields[0], fields[1]
    if len(fields) == 1:
        return fields[0], ""
    raise ValueError(
        f"Wrong {what} -> {_escape(text)}. The format of the {what} of 1D block"
        f" must be {_FORMAT_1D}."
    )


def _fields_2d(text: str, what: str) -> tuple[str, str, str, str]:
    fields = split_fields(text)
    if len(fields) == 4:
        return fields[0], fields[1], fields[2], fields[3]
    if len(fields) == 2:
        return fields[0], "", fields[1], ""
    raise ValueError(
        f"Wrong {what} -> {_escape(text)}. The format of the {what} of 2D block"
        f" must be {_FORMAT_2D}."
    )


def _cut_prefix(selection: str) -> str:
    return f"{selection} && " if selection else ""


class Block1D:
    """Binning of one branch expression, with one bin definition per bin."""

    is_1d = True

    def __init__(
        self,
        name: str,
        title: str,
        tex_title: str,
        edges: Sequence[float],
        selection: str = "",
    ) -> None:
        self.edges = [float(e) for e in edges]
        if not self.edges:
            raise ValueError("a 1D block needs at least one bin edge")
        self.selection = selection

        self.name = self.title = self.tex_title = ""
        self.x_name = self.x_name_unit = self.y_name = self.y_name_unit = ""
        self.x_title = self.x_title_unit = self.y_title = self.y_title_unit = ""
        self.x_tex_title = self.x_tex_title_unit = ""
        self.y_tex_title = self.y_tex_title_unit = ""

        self.set_title(title)
        self.set_name(name)
        self.set_tex_title(tex_title)

        prefix = _cut_prefix(selection)
        self.bin_defs = [
            f"{prefix}{self.x_name} >= {low:f} && {self.x_name} < {high:f}"
            for low, high in zip(self.edges, self.edges[1:])
        ]

    @property
    def num_bins(self) -> int:
        return len(self.bin_defs)

    def set_title(self, title: str) -> None:
        """Set the plot title from ``<title>`` or ``<title>;<unit>``."""
        self.x_title, self.x_title_unit = _fields_1d(title, "title")
        self.title = _escape(title)
        self.y_title, self.y_title_unit = "Events", ""

    def set_tex_title(self, tex_title: str) -> None:
        """Set the TeX title from ``<title>`` or ``<title>;<unit>``."""
        self.x_tex_title, self.x_tex_title_unit = _fields_1d(tex_title, "title")
        self.tex_title = _escape(tex_title)
        self.y_tex_title, self.y_tex_title_unit = "Events", ""

    def set_name(self, name: str) -> None:
        """Set the branch expression from ``<name>`` or ``<name>;<unit>``."""
        self.x_name, self.x_name_unit = _fields_1d(name, "name")
        self.name = _escape(name)
        self.y_name, self.y_name_unit = "Events", ""


class Block2D:
    """Binning of two branch expressions: slices in x, each with its own y bins.

    ``edges`` maps each x slice edge to the y bin edges used in the slice
    that starts there; the entry at the largest x edge only closes the last
    slice.
    """

    is_1d = False

    def __init__(
        self,
        name: str,
        title: str,
        tex_title: str,
        edges: Mapping[float, Sequence[float]],
        selection: str = "",
    ) -> None:
        self.edges = {float(x): [float(y) for y in ys] for x, ys in edges.items()}
        self.selection = selection

        self.name = self.title = self.tex_title = ""
        self.x_name = self.x_name_unit = self.y_name = self.y_name_unit = ""
        self.x_title = self.x_title_unit = self.y_title = self.y_title_unit = ""
        self.x_tex_title = self.x_tex_title_unit = ""
        self.y_tex_title = self.y_tex_title_unit = ""

        self.set_title(title)
        self.set_name(name)
        self.set_tex_title(tex_title)

        self.x_edges = sorted(self.edges)
        self.y_edges: list[list[float]] = []
        self.bin_defs: list[list[str]] = []
        prefix = _cut_prefix(selection)
        for slice_low, slice_high in zip(self.x_edges, self.x_edges[1:]):
            y_edges = self.edges[slice_low]
            if not y_edges:
                raise ValueError(f"the slice starting at {slice_low} has no y bin edges")
            self.y_edges.append(y_edges)
            self.bin_defs.append(
                [
                    f"{prefix}{self.x_name} >= {slice_low:f} && "
                    f"{self.x_name} < {slice_high:f} && "
                    f"{self.y_name} >= {bin_low:f} && {self.y_name} < {bin_high:f} "
                    for bin_low, bin_high in zip(y_edges, y_edges[1:])
                ]
            )

    @property
    def num_bins_x(self) -> int:
        return len(self.y_edges)

    def set_title(self, title: str) -> None:
        """Set the plot titles from ``x;y`` or ``x;x unit;y;y unit``."""
        if ";" not in _escape(title):
            raise ValueError(
                f"Wrong title -> {_escape(title)}. The format of the title of 2D"
                f" block must be {_FORMAT_2D}."
            )
        (self.x_title, self.x_title_unit,
         self.y_title, self.y_title_unit) = _fields_2d(title, "title")
        self.title = _escape(title)

    def set_tex_title(self, tex_title: str) -> None:
        """Set the TeX titles; a value without ``;`` leaves them unchanged."""
        self.tex_title = _escape(tex_title)
        if ";" not in self.tex_title:
            return
        (self.x_tex_title, self.x_tex_title_unit,
         self.y_tex_title, self.y_tex_title_unit) = _fields_2d(tex_title, "title")

    def set_name(self, name: str) -> None:
        """Set the branch expressions from ``x;y`` or ``x;x unit;y;y unit``."""
        if ";" not in _escape(name):
            raise ValueError(
                f"Wrong name -> {_escape(name)}. The format of the name of 2D"
                f" block must be {_FORMAT_2D}."
            )
        (self.x_name, self.x_name_unit,
         self.y_name, self.y_name_unit) = _fields_2d(name, "name")
        self.name = _escape(name)