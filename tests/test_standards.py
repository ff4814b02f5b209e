import dataclasses

import pytest
from poolcheck.standards import (
    BROMINE_STANDARDS,
    CHLORINE_STANDARDS,
    ComplianceStandards,
    RiskCategory,
    WaterType,
    standards_for,
)


def test_catalog_has_one_chlorine_row_per_risk_category():
    assert set(CHLORINE_STANDARDS) == set(RiskCategory)


@pytest.mark.parametrize("risk", list(RiskCategory))
def test_bromine_water_ignores_risk_category(risk):
    assert standards_for(risk, WaterType.BROMINE) is BROMINE_STANDARDS


@pytest.mark.parametrize("risk", list(RiskCategory))
def test_chlorine_water_uses_risk_row(risk):
    assert standards_for(risk, WaterType.CHLORINE) is CHLORINE_STANDARDS[risk]


def test_chlorine_row_values():
    s = CHLORINE_STANDARDS[RiskCategory.HIGH]
    assert (s.ph_min, s.ph_max) == (7.2, 7.8)
    assert s.free_chlorine_min == 1.0
    assert s.free_chlorine_max is None
    assert s.bromine_min is None
    assert (s.alkalinity_min, s.alkalinity_max) == (80, 200)
    assert s.turbidity_max == 1.0
    assert s.cyanuric_acid_max == 50


def test_bromine_table_values():
    s = BROMINE_STANDARDS
    assert (s.ph_min, s.ph_max) == (7.2, 8.0)
    assert (s.bromine_min, s.bromine_max) == (6.0, 8.0)
    assert s.free_chlorine_min is None


def test_catalog_cannot_be_mutated():
    with pytest.raises(TypeError):
        CHLORINE_STANDARDS[RiskCategory.LOW] = BROMINE_STANDARDS
    with pytest.raises(dataclasses.FrozenInstanceError):
        BROMINE_STANDARDS.ph_min = 6.0


@pytest.mark.parametrize("pair", [
    dict(ph_min=8.0, ph_max=7.0),
    dict(alkalinity_min=300),
    dict(bromine_min=9.0, bromine_max=8.0),
    dict(free_chlorine_min=3.0, free_chlorine_max=1.0),
])
def test_inverted_bounds_raise(pair):
    """min must not exceed max for any fully defined pair."""
    base = dict(ph_min=7.2, ph_max=7.8, alkalinity_min=80, alkalinity_max=200, turbidity_max=1.0)
    base.update(pair)
    with pytest.raises(ValueError):
        ComplianceStandards(**base)


@pytest.mark.parametrize("label, expected", [
    ("bromine", WaterType.BROMINE),
    (" Bromine ", WaterType.BROMINE),
    ("saltwater", WaterType.CHLORINE),
    ("freshwater", WaterType.CHLORINE),
    ("chlorine", WaterType.CHLORINE),
])
def test_water_type_from_label(label, expected):
    assert WaterType.from_label(label) is expected


@pytest.mark.parametrize("label", ["mineral", "", None])
def test_unknown_water_type_falls_back_to_chlorine(label, caplog):
    assert WaterType.from_label(label) is WaterType.CHLORINE
    assert "Unrecognized water type" in caplog.text
