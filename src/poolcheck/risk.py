"""
Risk classifier.

Maps a unit type tag to the risk category that selects its standards row.
"""

from .standards import RiskCategory

# Spa-like units
HIGH_RISK_UNIT_TYPES = frozenset({"main_spa", "rooftop_spa", "plunge_pool"})
# Pool-like units
MEDIUM_RISK_UNIT_TYPES = frozenset({"main_pool", "kids_pool", "villa_pool", "residential_pool"})

KNOWN_UNIT_TYPES = HIGH_RISK_UNIT_TYPES | MEDIUM_RISK_UNIT_TYPES


def classify_risk(unit_type: str) -> RiskCategory:
    """
    Classify a unit type. Unrecognized tags are LOW, never an error.
    """
    if unit_type in HIGH_RISK_UNIT_TYPES:
        return RiskCategory.HIGH
    if unit_type in MEDIUM_RISK_UNIT_TYPES:
        return RiskCategory.MEDIUM
    return RiskCategory.LOW
