"""
Remediation plan.

Joins each violation of an evaluation to its catalog entry so the technician
sees the full action: chemical, dosage, retest window and safety note.
"""

from dataclasses import dataclass

from .evaluator import WaterTestEvaluation
from .readings import WaterTestParams
from .recommendations import lookup_recommendation
from .validators import assess, describe_target


@dataclass(frozen=True)
class Remediation:
    """
    One remediation card.

    Attributes:
        parameter: Parameter in violation (e.g. 'ph').
        value: Measured value.
        target: Target band as shown to the technician (e.g. '7.2-7.8').
        chemical, dosage, retest, safety: Copied from the catalog entry.
    """

    parameter: str
    value: float
    target: str
    chemical: str
    dosage: str
    retest: str
    safety: str


def remediation_plan(params: WaterTestParams, evaluation: WaterTestEvaluation) -> list[Remediation]:
    """
    Build remediation cards for every violation in `evaluation`, in
    evaluation order. Compliant parameters produce nothing.
    """
    measured = params.measured()
    plan: list[Remediation] = []
    for parameter, _ in evaluation.violations():
        value = measured[parameter]
        _, key = assess(parameter, value, evaluation.standards)
        recommendation = lookup_recommendation(key)
        if recommendation is None:
            continue
        plan.append(
            Remediation(
                parameter=parameter,
                value=value,
                target=describe_target(parameter, evaluation.standards),
                chemical=recommendation.chemical,
                dosage=recommendation.dosage,
                retest=recommendation.retest,
                safety=recommendation.safety,
            )
        )
    return plan
