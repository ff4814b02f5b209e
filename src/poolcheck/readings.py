"""
Water test domain model.

Defines the reading set submitted for a unit (WaterTestParams), the verdict
for a single parameter (ComplianceResult), and the WaterTestRecord built by
the workbook mapper.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Optional

# Parameters in the order they are evaluated and reported
PARAMETER_NAMES = (
    "ph",
    "chlorine",
    "bromine",
    "salt",
    "alkalinity",
    "calcium",
    "cyanuric",
    "turbidity",
    "temperature",
)


class ComplianceStatus(Enum):
    """
    Verdict for a parameter. WARNING is part of the vocabulary consumers
    render, but no validator currently produces it.
    """
    COMPLIANT = "compliant"
    WARNING = "warning"
    VIOLATION = "violation"


@dataclass(frozen=True)
class WaterTestParams:
    """
    Measured values for one water test. A field left as None was not
    measured and is not validated.

    Attributes:
        ph: pH.
        chlorine: Free chlorine (mg/L).
        bromine: Bromine (mg/L).
        salt: Salt (ppm).
        alkalinity: Total alkalinity (mg/L).
        calcium: Calcium hardness (mg/L).
        cyanuric: Cyanuric acid (mg/L).
        turbidity: Turbidity (NTU).
        temperature: Water temperature (°C).
    """

    ph: Optional[float] = None
    chlorine: Optional[float] = None
    bromine: Optional[float] = None
    salt: Optional[float] = None
    alkalinity: Optional[float] = None
    calcium: Optional[float] = None
    cyanuric: Optional[float] = None
    turbidity: Optional[float] = None
    temperature: Optional[float] = None

    @classmethod
    def from_mapping(cls, values: dict) -> "WaterTestParams":
        """Build from a dict, ignoring keys that are not parameters."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})

    def measured(self) -> dict[str, float]:
        """Parameters that were actually measured, in evaluation order."""
        return {
            name: getattr(self, name)
            for name in PARAMETER_NAMES
            if getattr(self, name) is not None
        }


@dataclass(frozen=True)
class ComplianceResult:
    """
    Outcome of validating one parameter.

    `recommendation` and `chemical` carry the same product name; both are
    kept because consumers read either one. Set only on violation.
    """

    status: ComplianceStatus
    message: str
    recommendation: Optional[str] = None
    chemical: Optional[str] = None
    dosage: Optional[str] = None

    @property
    def is_violation(self) -> bool:
        return self.status is ComplianceStatus.VIOLATION

    def to_dict(self) -> dict:
        out = {"status": self.status.value, "message": self.message}
        for key in ("recommendation", "chemical", "dosage"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


@dataclass
class WaterTestRecord:
    """
    One row of a water-test log.

    Attributes:
        unit_ID: Identifier of the pool or spa.
        unit_type: Unit type tag (e.g. 'main_spa').
        water_type: Water type label as stored ('saltwater', 'freshwater', 'bromine').
        test_time: Optional timestamp string of the test.
        params: The measured values.
    """

    unit_ID: str
    unit_type: str
    water_type: str
    test_time: Optional[str] = None
    params: WaterTestParams = field(default_factory=WaterTestParams)

    def __post_init__(self):
        if not str(self.unit_ID).strip():
            raise ValueError("unit_ID must not be empty")
