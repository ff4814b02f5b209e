"""
Standards catalog.

Defines the risk categories, sanitizer chemistries and the static tables of
acceptable water-chemistry ranges used by the validators.

The chlorine tables follow QLD Health Guidelines Tables A2.1-A2.3 (one row
per risk category); spas on bromine use Table A2.2 regardless of risk.
"""

import logging
import types
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class RiskCategory(Enum):
    """
    How stringent the water-quality bounds must be for a unit.
    Derived from the unit type, never stored.
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WaterType(Enum):
    """
    Sanitizer chemistry of a unit. A unit uses exactly one.
    """
    CHLORINE = "chlorine"
    BROMINE = "bromine"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "WaterType":
        """
        Resolve the application's water type labels ('saltwater', 'freshwater',
        'bromine', ...) to a sanitizer chemistry.
        Only bromine units are treated as bromine; everything else, including
        unknown or empty labels, falls back to chlorine.
        """
        key = str(label or "").strip().lower()
        if key == "bromine":
            return cls.BROMINE
        if key not in KNOWN_WATER_TYPE_LABELS:
            logger.warning(f"Unrecognized water type {label!r}; treating as chlorine")
        return cls.CHLORINE


# Labels the application stores on a unit
KNOWN_WATER_TYPE_LABELS = {"saltwater", "freshwater", "chlorine", "bromine"}


@dataclass(frozen=True)
class ComplianceStandards:
    """
    Acceptable ranges for each measured parameter.

    Attributes:
        ph_min, ph_max: pH band.
        free_chlorine_min, free_chlorine_max: free chlorine (mg/L), absent for bromine water.
        bromine_min, bromine_max: bromine (mg/L), absent for chlorine water.
        combined_chlorine_max: combined chlorine ceiling (mg/L), optional.
        alkalinity_min, alkalinity_max: total alkalinity (mg/L).
        turbidity_max: turbidity ceiling (NTU).
        cyanuric_acid_max: stabilizer ceiling (mg/L), optional.
    """

    ph_min: float
    ph_max: float
    alkalinity_min: float
    alkalinity_max: float
    turbidity_max: float
    free_chlorine_min: Optional[float] = None
    free_chlorine_max: Optional[float] = None
    bromine_min: Optional[float] = None
    bromine_max: Optional[float] = None
    combined_chlorine_max: Optional[float] = None
    cyanuric_acid_max: Optional[float] = None

    def __post_init__(self):
        # Every bound pair that is fully defined must be ordered
        for name, low, high in (
            ("ph", self.ph_min, self.ph_max),
            ("free_chlorine", self.free_chlorine_min, self.free_chlorine_max),
            ("bromine", self.bromine_min, self.bromine_max),
            ("alkalinity", self.alkalinity_min, self.alkalinity_max),
        ):
            if low is not None and high is not None and low > high:
                raise ValueError(f"{name}_min ({low}) exceeds {name}_max ({high})")


_POOL_CHLORINE_ROW = dict(
    ph_min=7.2,
    ph_max=7.8,
    free_chlorine_min=1.0,
    alkalinity_min=80,
    alkalinity_max=200,
    turbidity_max=1.0,
    cyanuric_acid_max=50,
)

# One row per risk category. The values are currently identical; keep them as
# separate rows so a category can be tightened without touching the code.
CHLORINE_STANDARDS = types.MappingProxyType({
    RiskCategory.LOW: ComplianceStandards(**_POOL_CHLORINE_ROW),
    RiskCategory.MEDIUM: ComplianceStandards(**_POOL_CHLORINE_ROW),
    RiskCategory.HIGH: ComplianceStandards(**_POOL_CHLORINE_ROW),
})

BROMINE_STANDARDS = ComplianceStandards(
    ph_min=7.2,
    ph_max=8.0,
    bromine_min=6.0,
    bromine_max=8.0,
    alkalinity_min=80,
    alkalinity_max=200,
    turbidity_max=1.0,
)


def standards_for(risk_category: RiskCategory, water_type: WaterType) -> ComplianceStandards:
    """
    Select the standards table for a unit.
    Bromine water always uses the bromine table, whatever the risk category.
    """
    if water_type is WaterType.BROMINE:
        return BROMINE_STANDARDS
    return CHLORINE_STANDARDS[risk_category]
