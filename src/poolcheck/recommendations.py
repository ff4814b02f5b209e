"""
Recommendation catalog.

Defines the ChemicalRecommendation dataclass and the static remediation
table keyed by violation type ('<parameter>_low' / '<parameter>_high').
Dosages are given per 10,000 litres of water.
"""

import types
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ChemicalRecommendation:
    """
    Remedial action for one violation type.

    Attributes:
        chemical: Product to add (e.g. 'pH Plus (Soda Ash)').
        dosage: Amount per 10,000L (e.g. '100g per 10,000L').
        retest: How long to wait before testing again.
        safety: Handling caution for the technician.
    """

    chemical: str
    dosage: str
    retest: str
    safety: str


CHEMICAL_RECOMMENDATIONS = types.MappingProxyType({
    "ph_high": ChemicalRecommendation(
        chemical="pH Minus (Muriatic Acid)",
        dosage="50mL per 10,000L",
        retest="2-4 hours",
        safety="Wear protective equipment, add slowly to deep end",
    ),
    "ph_low": ChemicalRecommendation(
        chemical="pH Plus (Soda Ash)",
        dosage="100g per 10,000L",
        retest="2-4 hours",
        safety="Dissolve in bucket first, add to deep end",
    ),
    "chlorine_low": ChemicalRecommendation(
        chemical="Chlorine (Sodium Hypochlorite)",
        dosage="200mL per 10,000L",
        retest="30 minutes",
        safety="Add to deep end, avoid mixing with other chemicals",
    ),
    "chlorine_high": ChemicalRecommendation(
        chemical="Chlorine Neutralizer",
        dosage="50mL per 10,000L",
        retest="2-4 hours",
        safety="Add slowly, test frequently",
    ),
    "alkalinity_low": ChemicalRecommendation(
        chemical="Alkalinity Increaser (Sodium Bicarbonate)",
        dosage="500g per 10,000L",
        retest="4-6 hours",
        safety="Add to deep end, brush to dissolve",
    ),
    "alkalinity_high": ChemicalRecommendation(
        chemical="pH Minus (Muriatic Acid)",
        dosage="100mL per 10,000L",
        retest="2-4 hours",
        safety="Add slowly, test pH frequently",
    ),
    "bromine_low": ChemicalRecommendation(
        chemical="Bromine Tablets",
        dosage="2-3 tablets per 10,000L",
        retest="2-4 hours",
        safety="Use bromine feeder, avoid direct contact",
    ),
    "bromine_high": ChemicalRecommendation(
        chemical="Bromine Neutralizer",
        dosage="50mL per 10,000L",
        retest="2-4 hours",
        safety="Add slowly, test frequently",
    ),
    "turbidity_high": ChemicalRecommendation(
        chemical="Clarifier (Aluminum Sulfate)",
        dosage="100mL per 10,000L",
        retest="24 hours",
        safety="Run filter continuously, backwash when needed",
    ),
})


def recommendation_key(parameter: str, direction: str) -> str:
    """Build a catalog key such as 'ph_low' or 'turbidity_high'."""
    return f"{parameter}_{direction}"


def lookup_recommendation(key: Optional[str]) -> Optional[ChemicalRecommendation]:
    if key is None:
        return None
    return CHEMICAL_RECOMMENDATIONS.get(key)
