"""Registry of analysis ntuple files, their run numbers, types and normalization."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

ANALYSIS_DIR_ENV_VAR = "XSEC_ANALYZER_DIR"


class NtupleFileType(enum.Enum):
    """Kinds of analysis ntuple files."""

    ON_BNB = enum.auto()
    EXT_BNB = enum.auto()
    NUMU_MC = enum.auto()
    INTRINSIC_NUE_MC = enum.auto()
    DIRT_MC = enum.auto()
    DETVAR_CV = enum.auto()
    DETVAR_LY_ATTEN = enum.auto()
    DETVAR_LY_DOWN = enum.auto()
    DETVAR_LY_RAYL = enum.auto()
    DETVAR_RECOMB2 = enum.auto()
    DETVAR_SCE = enum.auto()
    DETVAR_WM_ANGLE_XZ = enum.auto()
    DETVAR_WM_ANGLE_YZ = enum.auto()
    DETVAR_WM_DEDX = enum.auto()
    DETVAR_WM_X = enum.auto()
    DETVAR_WM_YZ = enum.auto()
    DETVAR_CV_EXTRA = enum.auto()
    ALT_CV_MC = enum.auto()
    UNKNOWN = enum.auto()


_DETVAR_TYPES = frozenset(
    {
        NtupleFileType.DETVAR_CV,
        NtupleFileType.DETVAR_LY_ATTEN,
        NtupleFileType.DETVAR_LY_DOWN,
        NtupleFileType.DETVAR_LY_RAYL,
        NtupleFileType.DETVAR_RECOMB2,
        NtupleFileType.DETVAR_SCE,
        NtupleFileType.DETVAR_WM_ANGLE_XZ,
        NtupleFileType.DETVAR_WM_ANGLE_YZ,
        NtupleFileType.DETVAR_WM_DEDX,
        NtupleFileType.DETVAR_WM_X,
        NtupleFileType.DETVAR_WM_YZ,
        NtupleFileType.DETVAR_CV_EXTRA,
    }
)

_DATA_TYPES = frozenset({NtupleFileType.ON_BNB, NtupleFileType.EXT_BNB})

_REWEIGHTABLE_TYPES = frozenset(
    {NtupleFileType.NUMU_MC, NtupleFileType.INTRINSIC_NUE_MC, NtupleFileType.DIRT_MC}
)

_STRING_TO_TYPE: dict[str, NtupleFileType] = {
    "onBNB": NtupleFileType.ON_BNB,
    "extBNB": NtupleFileType.EXT_BNB,
    "numuMC": NtupleFileType.NUMU_MC,
    "nueMC": NtupleFileType.INTRINSIC_NUE_MC,
    "dirtMC": NtupleFileType.DIRT_MC,
    "detVarCV": NtupleFileType.DETVAR_CV,
    "detVarLYatten": NtupleFileType.DETVAR_LY_ATTEN,
    "detVarLYdown": NtupleFileType.DETVAR_LY_DOWN,
    "detVarLYrayl": NtupleFileType.DETVAR_LY_RAYL,
    "detVarRecomb2": NtupleFileType.DETVAR_RECOMB2,
    "detVarSCE": NtupleFileType.DETVAR_SCE,
    "detVarWMAngleXZ": NtupleFileType.DETVAR_WM_ANGLE_XZ,
    "detVarWMAngleYZ": NtupleFileType.DETVAR_WM_ANGLE_YZ,
    "detVarWMdEdx": NtupleFileType.DETVAR_WM_DEDX,
    "detVarWMX": NtupleFileType.DETVAR_WM_X,
    "detVarWMYZ": NtupleFileType.DETVAR_WM_YZ,
    "detVarCVExtra": NtupleFileType.DETVAR_CV_EXTRA,
    "altCVMC": NtupleFileType.ALT_CV_MC,
}


def ntuple_type_is_detvar(file_type: NtupleFileType) -> bool:
    """Return True for detector-variation MC file types."""
    return file_type in _DETVAR_TYPES


def ntuple_type_is_altcv(file_type: NtupleFileType) -> bool:
    """Return True for the alternate central-value MC file type."""
    return file_type is NtupleFileType.ALT_CV_MC


def ntuple_type_is_mc(file_type: NtupleFileType) -> bool:
    """Return True for every file type that is not beam-on or beam-off data."""
    return file_type not in _DATA_TYPES


def ntuple_type_is_reweightable_mc(file_type: NtupleFileType) -> bool:
    """Return True for the MC file types that carry systematic event weights."""
    return file_type in _REWEIGHTABLE_TYPES


@dataclass(frozen=True)
class TriggersAndPOT:
    """Trigger count and POT exposure of a data ntuple."""

    trigger_count: int = 0
    pot: float = 0.0


class FilePropertiesManager:
    """Keeps track of the ntuple files to be analyzed.

    A shared instance is available through :meth:`instance`; separate
    instances may be built from an explicit table file.
    """

    _instance: ClassVar[FilePropertiesManager | None] = None

    def __init__(self, input_table_file_name: str = "") -> None:
        self._ntuple_file_map: dict[int, dict[NtupleFileType, set[str]]] = {}
        self._data_norm_map: dict[str, TriggersAndPOT] = {}
        self._analysis_path = ""
        self._config_file_name = ""
        self.load_file_properties(input_table_file_name)

    @classmethod
    def instance(cls) -> FilePropertiesManager:
        """Return the shared manager, loading the default table on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def ntuple_file_map(self) -> dict[int, dict[NtupleFileType, set[str]]]:
        """Run number -> file type -> set of file names."""
        return self._ntuple_file_map

    @property
    def data_norm_map(self) -> dict[str, TriggersAndPOT]:
        """Data file name -> trigger count and POT exposure."""
        return self._data_norm_map

    @property
    def analysis_path(self) -> str:
        return self._analysis_path

    @property
    def config_file_name(self) -> str:
        return self._config_file_name

    def load_file_properties(self, input_table_file_name: str = "") -> None:
        """(Re)load the table of file properties.

        An empty name selects ``configs/file_properties.txt`` under the
        directory named by the ``XSEC_ANALYZER_DIR`` environment variable.
        """
        self._ntuple_file_map = {}
        self._data_norm_map = {}

        path = os.environ.get(ANALYSIS_DIR_ENV_VAR)
        if path is None:
            raise RuntimeError(
                f"The environment variable {ANALYSIS_DIR_ENV_VAR} is not set."
                " Please set it and try again."
            )
        self._analysis_path = path

        in_file_name = str(input_table_file_name)
        if not in_file_name:
            in_file_name = f"{path}/configs/file_properties.txt"
            print(f"Provided FPM_CONFIG name is empty. Using default: {in_file_name}")

        self._config_file_name = in_file_name

        try:
            text = Path(in_file_name).read_text()
        except OSError as err:
            raise RuntimeError(
                f'The file properties configuration file "{in_file_name}"'
                " could not be opened."
            ) from err

        for line_number, line in enumerate(text.splitlines(), start=1):
            if line.startswith("#") or not line.strip():
                continue
            self._parse_line(line, line_number)

    def _parse_line(self, line: str, line_number: int) -> None:
        fields = line.split()
        if len(fields) < 3:
            raise ValueError(f"line {line_number}: expected file name, run and type")
        file_name, run_text, type_str = fields[:3]
        try:
            run = int(run_text)
        except ValueError as err:
            raise ValueError(f"line {line_number}: invalid run number {run_text!r}") from err

        file_type = _STRING_TO_TYPE.get(type_str)
        if file_type is None:
            raise ValueError(f"line {line_number}: unrecognized ntuple file type {type_str!r}")

        run_map = self._ntuple_file_map.setdefault(run, {})
        run_map.setdefault(file_type, set()).add(file_name)

        if file_type in _DATA_TYPES:
            if len(fields) < 5:
                raise ValueError(
                    f"line {line_number}: data files need a trigger count and POT"
                )
            try:
                norm = TriggersAndPOT(int(fields[3]), float(fields[4]))
            except ValueError as err:
                raise ValueError(
                    f"line {line_number}: invalid trigger count or POT"
                ) from err
            self._data_norm_map[file_name] = norm

    def get_ntuple_file_type(self, file_name: str) -> NtupleFileType:
        """Return the type of a registered ntuple file."""
        for run in sorted(self._ntuple_file_map):
            type_map = self._ntuple_file_map[run]
            for file_type in sorted(type_map, key=lambda t: t.value):
                if file_name in type_map[file_type]:
                    return file_type
        raise LookupError(f"ntuple file not found: {file_name}")

    def ntuple_type_to_string(self, file_type: NtupleFileType) -> str:
        """Return the table name of a file type, or an empty string."""
        for name in sorted(_STRING_TO_TYPE):
            if _STRING_TO_TYPE[name] is file_type:
                return name
        return ""

    def string_to_ntuple_type(self, text: str) -> NtupleFileType:
        """Return the file type named by ``text``, or ``UNKNOWN``."""
        return _STRING_TO_TYPE.get(text, NtupleFileType.UNKNOWN)