import pandas as pd
import pytest

from poolcheck.standards import (
    BROMINE_STANDARDS,
    CHLORINE_STANDARDS,
    ComplianceStandards,
    RiskCategory,
)


@pytest.fixture(scope="session")
def chlorine_standards() -> ComplianceStandards:
    """
    The medium-risk chlorine row (main pools, kids pools, villa pools).
    """
    return CHLORINE_STANDARDS[RiskCategory.MEDIUM]


@pytest.fixture(scope="session")
def bromine_standards() -> ComplianceStandards:
    return BROMINE_STANDARDS


@pytest.fixture
def water_test_frame() -> pd.DataFrame:
    """
    A small water-test log as technicians keep it: first column is the unit,
    headers in their field spelling.
    """
    return pd.DataFrame(
        {
            "Unit Type": ["main_pool", "main_spa", "kids_pool", "villa_pool"],
            "Water Type": ["freshwater", "bromine", "saltwater", "freshwater"],
            "pH": [7.5, 7.4, 6.9, 7.6],
            "Free Chlorine (ppm)": [2.0, 1.5, 1.2, 3.0],
            "Bromine": [None, 9.0, None, None],
            "TA": [120, 100, 90, 110],
            "Turbidity": [0.5, 0.3, 1.5, 0.2],
        },
        index=pd.Index(["POOL1", "SPA1", "KIDS1", "VILLA7"], name="Unit"),
    )


@pytest.fixture
def water_test_workbook(tmp_path, water_test_frame) -> str:
    """
    Path to an .xlsx with a 'water_tests' sheet and an unrelated 'notes' sheet.
    """
    path = tmp_path / "water_tests.xlsx"
    notes = pd.DataFrame({"note": ["filter backwashed"]}, index=pd.Index(["POOL1"], name="Unit"))
    with pd.ExcelWriter(path, engine="openpyxl") as w:
        water_test_frame.to_excel(w, sheet_name="water_tests")
        notes.to_excel(w, sheet_name="notes")
    return str(path)
