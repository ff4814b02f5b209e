"""
Parameter validators.

Every threshold decision goes through `assess`, which returns the verdict and
the recommendation catalog key for a single measured value. The per-parameter
validators (full ComplianceResult) and `chemical_recommendation_for`
(product name only) are thin wrappers around it, so bounds are compared in
exactly one place.

Bounds are inclusive: a value equal to a limit is compliant.
"""

from typing import Callable, Optional, Tuple

from .readings import ComplianceResult, ComplianceStatus
from .recommendations import lookup_recommendation, recommendation_key
from .standards import ComplianceStandards

Bounds = Tuple[Optional[float], Optional[float]]


def _chlorine_bounds(standards: ComplianceStandards) -> Optional[Bounds]:
    # chlorine is only checked when the chemistry defines a minimum
    if standards.free_chlorine_min is None:
        return None
    return standards.free_chlorine_min, standards.free_chlorine_max


def _bromine_bounds(standards: ComplianceStandards) -> Optional[Bounds]:
    # bromine is a mandatory band: both ends or nothing
    if standards.bromine_min is None or standards.bromine_max is None:
        return None
    return standards.bromine_min, standards.bromine_max


# parameter -> (lower, upper) for a standards table, or None when the
# sanitizer chemistry does not use that parameter
_BOUNDS: dict[str, Callable[[ComplianceStandards], Optional[Bounds]]] = {
    "ph": lambda s: (s.ph_min, s.ph_max),
    "chlorine": _chlorine_bounds,
    "bromine": _bromine_bounds,
    "alkalinity": lambda s: (s.alkalinity_min, s.alkalinity_max),
    "turbidity": lambda s: (None, s.turbidity_max),
}

# parameter -> (display label, unit suffix)
_LABELS = {
    "ph": ("pH", ""),
    "chlorine": ("Chlorine", "mg/L"),
    "bromine": ("Bromine", "mg/L"),
    "alkalinity": ("Alkalinity", "mg/L"),
    "turbidity": ("Turbidity", "NTU"),
}

# violation messages for these name the crossed limit (≥min / ≤max), not the band
_CROSSED_LIMIT_ONLY = frozenset({"chlorine"})


def _fmt(value: float) -> str:
    """Render numbers as entered, minus a trailing .0 (7.0 -> '7', 7.1234567 -> '7.1234567')."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def bounds_for(parameter: str, standards: ComplianceStandards) -> Optional[Bounds]:
    """
    The (lower, upper) limits that apply to `parameter`, or None when the
    parameter has no validator or is not used by this chemistry.
    """
    getter = _BOUNDS.get(parameter)
    if getter is None:
        return None
    return getter(standards)


def assess(
    parameter: str, value: float, standards: ComplianceStandards
) -> Tuple[ComplianceStatus, Optional[str]]:
    """
    Compare one value against its limits.
    Returns (status, recommendation key); the key is None unless in violation.
    Parameters without limits are compliant.
    """
    bounds = bounds_for(parameter, standards)
    if bounds is None:
        return ComplianceStatus.COMPLIANT, None
    lower, upper = bounds
    if lower is not None and value < lower:
        return ComplianceStatus.VIOLATION, recommendation_key(parameter, "low")
    if upper is not None and value > upper:
        return ComplianceStatus.VIOLATION, recommendation_key(parameter, "high")
    return ComplianceStatus.COMPLIANT, None


def describe_target(parameter: str, standards: ComplianceStandards) -> Optional[str]:
    """
    Human-readable target band, e.g. '7.2-7.8', '80-200mg/L', '≤1NTU', '≥1mg/L'.
    """
    bounds = bounds_for(parameter, standards)
    if bounds is None:
        return None
    lower, upper = bounds
    unit = _LABELS[parameter][1]
    if lower is not None and upper is not None:
        return f"{_fmt(lower)}-{_fmt(upper)}{unit}"
    if lower is not None:
        return f"≥{_fmt(lower)}{unit}"
    return f"≤{_fmt(upper)}{unit}"


def _violation_target(parameter: str, direction: str, standards: ComplianceStandards) -> str:
    lower, upper = bounds_for(parameter, standards)
    unit = _LABELS[parameter][1]
    # chlorine and one-sided limits cite only the side that was crossed
    if parameter in _CROSSED_LIMIT_ONLY or lower is None or upper is None:
        limit = lower if direction == "low" else upper
        return f"{'≥' if direction == 'low' else '≤'}{_fmt(limit)}{unit}"
    return describe_target(parameter, standards)


def _validate(parameter: str, value: float, standards: ComplianceStandards) -> ComplianceResult:
    label, unit = _LABELS[parameter]
    if bounds_for(parameter, standards) is None:
        return ComplianceResult(
            status=ComplianceStatus.COMPLIANT,
            message=f"{label} not required for this water type",
        )

    status, key = assess(parameter, value, standards)
    if status is not ComplianceStatus.VIOLATION:
        return ComplianceResult(
            status=status,
            message=f"{label} within range ({_fmt(value)}{unit})",
        )

    direction = key.rsplit("_", 1)[1]
    target = _violation_target(parameter, direction, standards)
    recommendation = lookup_recommendation(key)
    return ComplianceResult(
        status=status,
        message=f"{label} too {direction} ({_fmt(value)}{unit}), target: {target}",
        recommendation=recommendation.chemical,
        chemical=recommendation.chemical,
        dosage=recommendation.dosage,
    )


def validate_ph(ph: float, standards: ComplianceStandards) -> ComplianceResult:
    return _validate("ph", ph, standards)


def validate_chlorine(chlorine: float, standards: ComplianceStandards) -> ComplianceResult:
    """Free chlorine; compliant with an explanation when the water uses bromine."""
    return _validate("chlorine", chlorine, standards)


def validate_bromine(bromine: float, standards: ComplianceStandards) -> ComplianceResult:
    """Bromine; needs both ends of the band, otherwise not required."""
    return _validate("bromine", bromine, standards)


def validate_alkalinity(alkalinity: float, standards: ComplianceStandards) -> ComplianceResult:
    return _validate("alkalinity", alkalinity, standards)


def validate_turbidity(turbidity: float, standards: ComplianceStandards) -> ComplianceResult:
    """Turbidity only has a ceiling."""
    return _validate("turbidity", turbidity, standards)


VALIDATORS: dict[str, Callable[[float, ComplianceStandards], ComplianceResult]] = {
    "ph": validate_ph,
    "chlorine": validate_chlorine,
    "bromine": validate_bromine,
    "alkalinity": validate_alkalinity,
    "turbidity": validate_turbidity,
}


def chemical_recommendation_for(
    parameter: str, value: float, standards: ComplianceStandards
) -> Optional[str]:
    """
    Name of the chemical to add for an out-of-range value, or None when the
    value is within range (or the parameter is not validated).
    """
    _, key = assess(parameter, value, standards)
    recommendation = lookup_recommendation(key)
    return recommendation.chemical if recommendation else None
