"""
Water-test evaluator.

Runs the parameter validators over a full reading set for one unit and
aggregates an overall verdict. This is the entry point used by the service
flow and by the workbook report.
"""

import logging
from dataclasses import dataclass, field

from .readings import ComplianceResult, ComplianceStatus, WaterTestParams
from .risk import classify_risk
from .standards import ComplianceStandards, RiskCategory, WaterType, standards_for
from .validators import VALIDATORS

logger = logging.getLogger(__name__)

# The sanitizer reading each chemistry validates; the other one is ignored
_SANITIZER_PARAMETER = {
    WaterType.CHLORINE: "chlorine",
    WaterType.BROMINE: "bromine",
}


@dataclass(frozen=True)
class WaterTestEvaluation:
    """
    Result of evaluating one water test.

    Attributes:
        overall: VIOLATION if any evaluated parameter is in violation, else COMPLIANT.
        results: Per-parameter results; only measured, validated parameters appear.
        risk_category: Category the unit type classified as.
        water_type: Sanitizer chemistry used to pick the standards.
        standards: The standards table the values were compared against.
    """

    overall: ComplianceStatus
    results: dict[str, ComplianceResult]
    risk_category: RiskCategory
    water_type: WaterType
    standards: ComplianceStandards = field(repr=False)

    @property
    def all_parameters_ok(self) -> bool:
        """Value to persist as the test's compliance flag."""
        return self.overall is ComplianceStatus.COMPLIANT

    def violations(self) -> list[tuple[str, ComplianceResult]]:
        """(parameter, result) pairs in violation, in evaluation order."""
        return [(name, result) for name, result in self.results.items() if result.is_violation]

    def to_dict(self) -> dict:
        return {
            "overall": self.overall.value,
            "results": {name: result.to_dict() for name, result in self.results.items()},
        }


def evaluate(params: WaterTestParams, unit_type: str, water_type) -> WaterTestEvaluation:
    """
    Evaluate a reading set for a unit.

    `water_type` may be a WaterType or the label stored on the unit
    ('saltwater', 'freshwater', 'bromine'). Parameters without a validator
    (salt, calcium, cyanuric, temperature) are accepted but not reported.
    """
    chemistry = water_type if isinstance(water_type, WaterType) else WaterType.from_label(water_type)
    risk_category = classify_risk(unit_type)
    standards = standards_for(risk_category, chemistry)
    logger.debug(f"Unit type {unit_type!r} -> {risk_category.value} risk, {chemistry.value} standards")

    skipped_sanitizer = _SANITIZER_PARAMETER[
        WaterType.CHLORINE if chemistry is WaterType.BROMINE else WaterType.BROMINE
    ]

    results: dict[str, ComplianceResult] = {}
    for name, value in params.measured().items():
        validator = VALIDATORS.get(name)
        if validator is None or name == skipped_sanitizer:
            continue
        results[name] = validator(value, standards)
        logger.debug(f"{name}={value}: {results[name].status.value}")

    has_violations = any(result.is_violation for result in results.values())
    return WaterTestEvaluation(
        overall=ComplianceStatus.VIOLATION if has_violations else ComplianceStatus.COMPLIANT,
        results=results,
        risk_category=risk_category,
        water_type=chemistry,
        standards=standards,
    )
