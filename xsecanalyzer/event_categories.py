"""Event categories for the CC0pi 1p/2p/Np/Xp analyses and their plot styles."""

from __future__ import annotations

import enum

# Plot color indices of the standard palette
_GRAY = 920
_GREEN = 416
_CYAN = 432
_BLUE = 600
_RED = 632
_ORANGE = 800
_AZURE = 860
_VIOLET = 880


class EventCategoryXp(enum.IntEnum):
    """Categories used to label events in analysis plots."""

    UNKNOWN = 0

    NUMU_CC0P0PI_CCQE = 1
    NUMU_CC0P0PI_CCMEC = 2
    NUMU_CC0P0PI_CCRES = 3
    NUMU_CC0P0PI_OTHER = 4

    NUMU_CC1P0PI_CCQE = 5
    NUMU_CC1P0PI_CCMEC = 6
    NUMU_CC1P0PI_CCRES = 7
    NUMU_CC1P0PI_OTHER = 8

    NUMU_CC2P0PI_CCQE = 9
    NUMU_CC2P0PI_CCMEC = 10
    NUMU_CC2P0PI_CCRES = 11
    NUMU_CC2P0PI_OTHER = 12

    # M means more than two protons
    NUMU_CCMP0PI_CCQE = 13
    NUMU_CCMP0PI_CCMEC = 14
    NUMU_CCMP0PI_CCRES = 15
    NUMU_CCMP0PI_OTHER = 16

    NUMU_CC0P1PI_CCQE = 17
    NUMU_CC0P1PI_CCCOH = 18
    NUMU_CC0P1PI_CCMEC = 19
    NUMU_CC0P1PI_CCRES = 20
    NUMU_CC0P1PI_CCDIS = 21
    NUMU_CC0P1PI_OTHER = 22

    NUMU_CC_NPI = 23
    NUMU_CC_OTHER = 24
    NUE_CC = 25
    NC = 26
    OOFV = 27
    OTHER = 28


_C = EventCategoryXp

# The shared table lists the CC0p1pi CCQE entry under the CCMp0pi CCQE key,
# which is already taken, so CC0p1pi CCQE has no entry.
CC1MUXP_MAP: dict[int, tuple[str, int]] = {
    _C.UNKNOWN: ("Unknown", _GRAY),
    _C.NUMU_CC0P0PI_CCQE: ("CCmu0p0pi (CCQE)", _BLUE - 2),
    _C.NUMU_CC0P0PI_CCMEC: ("CCmu0p0pi (CCMEC)", _BLUE - 6),
    _C.NUMU_CC0P0PI_CCRES: ("CCmu0p0pi (CCRES)", _BLUE - 9),
    _C.NUMU_CC0P0PI_OTHER: ("CCmu0p0pi (Other)", _BLUE - 10),
    _C.NUMU_CC1P0PI_CCQE: ("CCmu1p0pi (CCQE)", _ORANGE + 4),
    _C.NUMU_CC1P0PI_CCMEC: ("CCmu1p0pi (CCMEC)", _ORANGE + 5),
    _C.NUMU_CC1P0PI_CCRES: ("CCmu1p0pi (CCRES)", _ORANGE + 6),
    _C.NUMU_CC1P0PI_OTHER: ("CCmu1p0pi (Other)", _ORANGE + 7),
    _C.NUMU_CC2P0PI_CCQE: ("CCmu2p0pi (CCQE)", _CYAN - 3),
    _C.NUMU_CC2P0PI_CCMEC: ("CCmu2p0pi (CCMEC)", _CYAN - 6),
    _C.NUMU_CC2P0PI_CCRES: ("CCmu2p0pi (CCRES)", _CYAN - 4),
    _C.NUMU_CC2P0PI_OTHER: ("CCmu2p0pi (Other)", _CYAN - 9),
    _C.NUMU_CCMP0PI_CCQE: ("CCmuMp0pi (CCQE)", _GREEN),
    _C.NUMU_CCMP0PI_CCMEC: ("CCmuMp0pi (CCMEC)", _GREEN + 1),
    _C.NUMU_CCMP0PI_CCRES: ("CCmuMp0pi (CCRES)", _GREEN + 2),
    _C.NUMU_CCMP0PI_OTHER: ("CCmuMp0pi (Other)", _GREEN + 3),
    _C.NUMU_CC0P1PI_CCCOH: ("CCmu0p1pi (CCCOH)", _RED + 1),
    _C.NUMU_CC0P1PI_CCMEC: ("CCmu0p1pi (CCMEC)", _RED + 2),
    _C.NUMU_CC0P1PI_CCRES: ("CCmu0p1pi (CCRES)", _RED + 3),
    _C.NUMU_CC0P1PI_CCDIS: ("CCmu0p1pi (CCDIS)", _RED + 4),
    _C.NUMU_CC0P1PI_OTHER: ("CCmu0p1pi (Other)", _RED + 5),
    _C.NUMU_CC_NPI: ("#nu_{#mu} CCN#pi", _AZURE - 2),
    _C.NUMU_CC_OTHER: ("Other #nu_{#mu} CC", _AZURE),
    _C.NUE_CC: ("#nu_{e} CC", _VIOLET),
    _C.NC: ("NC", _ORANGE),
    _C.OOFV: ("Out FV", _RED + 3),
    _C.OTHER: ("Other", _RED + 1),
}


def category_label(category: int) -> str:
    """Return the plot label of a category; KeyError if it has none."""
    return CC1MUXP_MAP[int(category)][0]


def category_color(category: int) -> int:
    """Return the plot color index of a category; KeyError if it has none."""
    return CC1MUXP_MAP[int(category)][1]