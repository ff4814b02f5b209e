import pytest
from poolcheck.risk import classify_risk
from poolcheck.standards import RiskCategory


@pytest.mark.parametrize("unit_type", ["main_spa", "rooftop_spa", "plunge_pool"])
def test_spa_like_units_are_high_risk(unit_type):
    assert classify_risk(unit_type) is RiskCategory.HIGH


@pytest.mark.parametrize("unit_type", ["main_pool", "kids_pool", "villa_pool", "residential_pool"])
def test_pool_like_units_are_medium_risk(unit_type):
    assert classify_risk(unit_type) is RiskCategory.MEDIUM


@pytest.mark.parametrize("unit_type", ["water_feature", "", "MAIN_SPA", "main spa"])
def test_unrecognized_units_are_low_risk(unit_type):
    """Unknown tags are never rejected."""
    assert classify_risk(unit_type) is RiskCategory.LOW
