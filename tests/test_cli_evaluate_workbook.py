import json
import re

import pandas as pd
import pytest
from click.testing import CliRunner
from poolcheck.__main__ import main


def test_evaluate_workbook_writes_unit_reports(water_test_workbook, tmp_path):
    """
    Runs `poolcheck evaluate-workbook` on the sample log and checks the
    summary lines and the per-unit JSON reports.
    """
    out_dir = tmp_path / "out"
    runner = CliRunner()
    result = runner.invoke(main, ["evaluate-workbook", "-e", water_test_workbook, "-o", str(out_dir)])
    assert result.exit_code == 0, result.output

    assert re.search(r"Evaluated 4 water tests", result.output), result.output
    # SPA1 bromine too high, KIDS1 pH low + turbidity high
    assert re.search(r"Found 2 with violations", result.output), result.output

    reports = list(out_dir.glob("poolcheck_reports/*/*.json"))
    assert sorted(p.stem for p in reports) == ["KIDS1", "POOL1", "SPA1", "VILLA7"]

    spa = json.loads(next(p for p in reports if p.stem == "SPA1").read_text(encoding="utf-8"))
    test = spa["tests"][0]
    assert test["risk_category"] == "high"
    assert test["all_parameters_ok"] is False
    assert test["overall"] == "violation"
    assert "chlorine" not in test["results"]
    assert test["remediation"][0]["chemical"] == "Bromine Neutralizer"


def test_evaluate_workbook_reports_issues(tmp_path):
    path = tmp_path / "log.csv"
    pd.DataFrame({
        "unit": ["P1", "P2"],
        "unit_type": ["main_pool", "lagoon"],
        "water_type": ["freshwater", "freshwater"],
        "ph": ["7.5", "murky"],
    }).to_csv(path, index=False)

    runner = CliRunner()
    result = runner.invoke(main, ["evaluate-workbook", "-e", str(path), "-o", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Errors found in water-test log" in result.output
    assert "Warnings found in water-test log" in result.output
    assert "Evaluated 2 water tests" in result.output


def test_output_dir_from_environment(water_test_workbook, tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        main, ["evaluate-workbook", "-e", water_test_workbook], env={"POOLCHECK_OUTPUT_DIR": str(tmp_path)}
    )
    assert result.exit_code == 0, result.output
    assert list(tmp_path.glob("poolcheck_reports/*/POOL1.json"))


def _run_on_csv(tmp_path, frame):
    path = tmp_path / "log.csv"
    frame.to_csv(path, index=False)
    out_dir = tmp_path / "out"
    result = CliRunner().invoke(main, ["evaluate-workbook", "-e", str(path), "-o", str(out_dir)])
    assert result.exit_code == 0, result.output
    return list(out_dir.glob("poolcheck_reports/*/*.json"))


def test_unit_ids_with_same_file_name_get_separate_reports(tmp_path):
    reports = _run_on_csv(tmp_path, pd.DataFrame({
        "unit": ["Spa 1", "Spa/1"],
        "unit_type": ["main_spa", "main_spa"],
        "water_type": ["bromine", "bromine"],
        "bromine": [7.0, 9.0],
    }))

    assert sorted(p.name for p in reports) == ["Spa_1.json", "Spa_1_2.json"]
    units = {json.loads(p.read_text(encoding="utf-8"))["unit_ID"] for p in reports}
    assert units == {"Spa 1", "Spa/1"}


def test_unit_report_carries_compliance_summary(tmp_path):
    reports = _run_on_csv(tmp_path, pd.DataFrame({
        "unit": ["POOL1", "POOL1", "POOL1", "KIDS1"],
        "unit_type": ["main_pool", "main_pool", "main_pool", "kids_pool"],
        "water_type": ["freshwater"] * 4,
        "ph": [6.9, 7.4, 7.5, 8.4],
    }))
    by_name = {p.stem: json.loads(p.read_text(encoding="utf-8")) for p in reports}

    assert by_name["POOL1"]["summary"] == {
        "latest_compliant": True,
        "compliant": 2,
        "total": 3,
        "compliance_rate": pytest.approx(200 / 3),
    }
    assert by_name["KIDS1"]["summary"] == {
        "latest_compliant": False,
        "compliant": 0,
        "total": 1,
        "compliance_rate": 0.0,
    }
