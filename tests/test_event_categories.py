import pytest

from xsecanalyzer.event_categories import (
    CC1MUXP_MAP,
    EventCategoryXp,
    category_color,
    category_label,
)


def test_category_values_are_contiguous():
    assert [int(c) for c in EventCategoryXp] == list(range(len(EventCategoryXp)))
    assert EventCategoryXp(0) is EventCategoryXp.UNKNOWN
    assert category_label(EventCategoryXp(0)) == "Unknown"


def test_labels_from_table():
    assert category_label(EventCategoryXp.NC) == "NC"
    assert category_label(EventCategoryXp.OOFV) == "Out FV"
    assert category_label(EventCategoryXp.NUMU_CCMP0PI_CCQE) == "CCmuMp0pi (CCQE)"


def test_plain_integers_are_accepted():
    assert category_label(int(EventCategoryXp.NUE_CC)) == category_label(EventCategoryXp.NUE_CC)
    assert category_color(int(EventCategoryXp.NUE_CC)) == category_color(EventCategoryXp.NUE_CC)


def test_shadowed_category_has_no_entry():
    assert len(CC1MUXP_MAP) == len(EventCategoryXp) - 1
    with pytest.raises(KeyError):
        category_label(EventCategoryXp.NUMU_CC0P1PI_CCQE)
    with pytest.raises(KeyError):
        category_color(EventCategoryXp.NUMU_CC0P1PI_CCQE)


def test_unknown_integer_raises():
    with pytest.raises(KeyError):
        category_label(999)


def test_labels_are_unique():
    labels = [category_label(c) for c in CC1MUXP_MAP]
    assert len(set(labels)) == len(labels)


def test_color_relations():
    assert category_color(EventCategoryXp.OOFV) == category_color(EventCategoryXp.NUMU_CC0P1PI_CCRES)
    assert category_color(EventCategoryXp.OTHER) == category_color(EventCategoryXp.NUMU_CC0P1PI_CCCOH)
    assert category_color(EventCategoryXp.NC) + 4 == category_color(EventCategoryXp.NUMU_CC1P0PI_CCQE)
    assert category_color(EventCategoryXp.NUMU_CC_OTHER) - 2 == category_color(EventCategoryXp.NUMU_CC_NPI)