"""
Command-line interface for the poolcheck compliance engine.
Evaluates single water tests from options, or whole water-test logs from an
Excel workbook / CSV file, and prints violations with remediation steps.
"""

import click
import json
import logging
import pathlib
import re
import sys
import typing

from collections import defaultdict, namedtuple
from dataclasses import asdict
from datetime import datetime
from stairval.notepad import create_notepad

from .evaluator import WaterTestEvaluation, evaluate
from .loader import load_sheets_as_tables
from .mapper import DefaultMapper
from .readings import ComplianceStatus, WaterTestParams, WaterTestRecord
from .recommendations import CHEMICAL_RECOMMENDATIONS
from .remediation import Remediation, remediation_plan
from .standards import BROMINE_STANDARDS, CHLORINE_STANDARDS

AuditEntry = namedtuple("AuditEntry", ["step", "sheet", "message", "level"])

# Exit code for `check --fail-on-violation`
VIOLATION_EXIT_CODE = 2

_STATUS_COLORS = {
    ComplianceStatus.COMPLIANT: "green",
    ComplianceStatus.WARNING: "yellow",
    ComplianceStatus.VIOLATION: "red",
}


@click.group()
@click.option(
    "--verbose-logging",
    is_flag=True,
    help="Also emit debug logs to stderr",
)
@click.option(
    "--log-file-path",
    type=click.Path(dir_okay=False, writable=True),
    help="Append timestamped logs to this file",
)
def main(verbose_logging: bool = False, log_file_path: typing.Optional[str] = None):
    """poolcheck: water-chemistry compliance checks for pools and spas."""
    _configure_logging(verbose_logging, log_file_path)


def _configure_logging(verbose_logging: bool, log_file_path: typing.Optional[str]) -> None:
    handlers: list[logging.Handler] = []
    if log_file_path:
        handlers.append(logging.FileHandler(log_file_path, mode="a", encoding="utf-8"))
    if verbose_logging:
        handlers.append(logging.StreamHandler(sys.stderr))
    if handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose_logging else logging.INFO,
            format="%(asctime)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
        )


@main.command(name="check")
@click.option("--unit-type", required=True, help="unit type tag, e.g. main_pool or main_spa")
@click.option("--water-type", required=True, help="saltwater, freshwater or bromine")
@click.option("--ph", type=float, default=None)
@click.option("--chlorine", type=float, default=None, help="free chlorine (mg/L)")
@click.option("--bromine", type=float, default=None, help="bromine (mg/L)")
@click.option("--salt", type=float, default=None, help="salt (ppm)")
@click.option("--alkalinity", type=float, default=None, help="total alkalinity (mg/L)")
@click.option("--calcium", type=float, default=None, help="calcium hardness (mg/L)")
@click.option("--cyanuric", type=float, default=None, help="cyanuric acid (mg/L)")
@click.option("--turbidity", type=float, default=None, help="turbidity (NTU)")
@click.option("--temperature", type=float, default=None, help="water temperature (°C)")
@click.option("--json", "as_json", is_flag=True, help="Print the evaluation as JSON")
@click.option("--fail-on-violation", is_flag=True, help=f"Exit with status {VIOLATION_EXIT_CODE} on any violation")
def check(unit_type: str, water_type: str, as_json: bool, fail_on_violation: bool, **readings):
    """
    Evaluate one water test given on the command line.
    """
    params = WaterTestParams.from_mapping(readings)
    evaluation = evaluate(params, unit_type, water_type)

    if as_json:
        click.echo(json.dumps(evaluation.to_dict(), indent=2, ensure_ascii=False))
    else:
        click.echo(
            f"Unit type {unit_type} ({evaluation.risk_category.value} risk, "
            f"{evaluation.water_type.value} standards)"
        )
        _echo_evaluation(evaluation)
        for remediation in remediation_plan(params, evaluation):
            _echo_remediation(remediation)

    if fail_on_violation and not evaluation.all_parameters_ok:
        sys.exit(VIOLATION_EXIT_CODE)


@main.command(name="evaluate-workbook")
@click.option(
    "-e",
    "--excel-path",
    "excel_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="path to the water-test workbook (.xlsx) or CSV file",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False),
    envvar="POOLCHECK_OUTPUT_DIR",
    default=None,
    help="where to write reports (default: current directory; env POOLCHECK_OUTPUT_DIR)",
)
@click.option(
    "--strict/--no-strict",
    default=False,
    envvar="POOLCHECK_STRICT",
    help="Skip rows with implausible readings instead of dropping the value (env POOLCHECK_STRICT)",
)
@click.option("--verbose", is_flag=True, help="Show preprocessing audit before evaluating")
def evaluate_workbook(excel_file: str, output_dir: typing.Optional[str] = None, strict: bool = False,
                      verbose: bool = False):
    """
    Read a water-test log, evaluate every test and write one JSON report
    per unit into a timestamped folder.
    """
    # 1) Read all sheets into DataFrames
    tables = load_sheets_as_tables(excel_file)
    logging.info(f"Loaded sheets {list(tables)} from '{excel_file}'")

    # optionally audit preprocessing
    if verbose:
        for entry in preprocess(tables):
            _echo_audit_entry(entry)
        click.echo("")

    # 2) Map rows to water-test records and collect issues
    notepad = create_notepad("water-tests")
    records = DefaultMapper(strict=strict).apply_mapping(tables, notepad)

    # 3) Report any errors or warnings
    _report_issues(notepad)

    # 4) Evaluate and group by unit
    evaluated = [(record, evaluate(record.params, record.unit_type, record.water_type)) for record in records]
    reports_by_unit = _group_reports_by_unit(evaluated)

    # 5) Write reports
    report_dir = _prepare_output_dir(output_dir)
    _write_reports(reports_by_unit, report_dir)

    # 6) Final summary
    with_violations = sum(1 for _, evaluation in evaluated if not evaluation.all_parameters_ok)
    click.echo(f"Wrote {len(reports_by_unit)} unit reports to {report_dir}")
    click.echo(f"Evaluated {len(evaluated)} water tests")
    click.echo(f"Found {with_violations} with violations")


@main.command(name="audit-workbook")
@click.option(
    "-e",
    "--excel-path",
    "excel_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="path to the water-test workbook (.xlsx) or CSV file",
)
@click.option("-r", "--raw", "as_json", is_flag=True, help="Print the audit as JSON")
def audit_workbook(excel_file: str, as_json: bool = False):
    """
    Show how each sheet would be treated, without evaluating anything.
    """
    entries = preprocess(load_sheets_as_tables(excel_file))
    if as_json:
        click.echo(json.dumps([entry._asdict() for entry in entries], indent=2))
        return

    click.echo(f"{'SHEET':20}  {'STEP':20}  {'LEVEL':7}  MESSAGE")
    for entry in entries:
        click.echo(f"{entry.sheet:20}  {entry.step:20}  {entry.level:7}  {entry.message}")


@main.command(name="standards")
def show_standards():
    """Print the standards catalog."""
    rows = [(category.value, "chlorine", standards) for category, standards in CHLORINE_STANDARDS.items()]
    rows.append(("any", "bromine", BROMINE_STANDARDS))
    for risk, chemistry, standards in rows:
        click.echo(click.style(f"{risk} risk / {chemistry}", bold=True))
        for key, value in asdict(standards).items():
            if value is not None:
                click.echo(f"  {key:22} {value:g}")


@main.command(name="recommendations")
def show_recommendations():
    """Print the remediation catalog."""
    for key, recommendation in CHEMICAL_RECOMMENDATIONS.items():
        click.echo(click.style(key, bold=True))
        click.echo(f"  Chemical: {recommendation.chemical}")
        click.echo(f"  Dosage:   {recommendation.dosage}")
        click.echo(f"  Retest:   {recommendation.retest}")
        click.echo(f"  Safety:   {recommendation.safety}")


def _echo_evaluation(evaluation: WaterTestEvaluation) -> None:
    for name, result in evaluation.results.items():
        status = click.style(f"{result.status.value:10}", fg=_STATUS_COLORS[result.status])
        click.echo(f"  {name:12} {status} {result.message}")
    label = "All Parameters OK" if evaluation.all_parameters_ok else "Parameters Need Attention"
    click.echo(click.style(label, fg=_STATUS_COLORS[evaluation.overall], bold=True))


def _echo_remediation(remediation: Remediation) -> None:
    click.echo("")
    click.echo(f"Recommended action for {remediation.parameter} "
               f"(current {remediation.value:g}, target {remediation.target}):")
    click.echo(f"  Chemical: {remediation.chemical}")
    click.echo(f"  Dosage:   {remediation.dosage}")
    click.echo(f"  Retest:   {remediation.retest}")
    click.echo(click.style(f"  Safety:   {remediation.safety}", fg="yellow"))


def _echo_audit_entry(entry: AuditEntry) -> None:
    # indent every line…
    indent = "              "
    line = f"{entry.step:20} {entry.sheet:15} {entry.message}"
    # color by level
    if entry.level == "error":
        colored = click.style(line, fg="red")
    elif entry.level in ("warn", "warning"):
        colored = click.style(line, fg="yellow")
    else:
        colored = click.style(line, fg="cyan")
    click.echo(indent + colored)


def _report_issues(notepad):
    # if there were errors, show them
    if notepad.has_errors(include_subsections=True):
        click.echo("Errors found in water-test log:")
        for err in notepad.errors():
            click.echo(f"- {err}")
    # show any warnings but keep going
    if notepad.has_warnings(include_subsections=True):
        click.echo("Warnings found in water-test log:")
        for w in notepad.warnings():
            click.echo(f"- {w}")


def _build_report(record: WaterTestRecord, evaluation: WaterTestEvaluation) -> dict:
    return {
        "test_time": record.test_time,
        "unit_type": record.unit_type,
        "water_type": record.water_type,
        "risk_category": evaluation.risk_category.value,
        "readings": record.params.measured(),
        "all_parameters_ok": evaluation.all_parameters_ok,
        **evaluation.to_dict(),
        "remediation": [asdict(r) for r in remediation_plan(record.params, evaluation)],
    }


def _group_reports_by_unit(
    evaluated: list[tuple[WaterTestRecord, WaterTestEvaluation]]
) -> dict[str, list[dict]]:
    # Group test reports by unit ID, keeping log order
    reports = defaultdict(list)
    for record, evaluation in evaluated:
        reports[record.unit_ID].append(_build_report(record, evaluation))
    return reports


def _prepare_output_dir(output_dir: typing.Optional[str] = None) -> pathlib.Path:
    # use YYYY-MM-DD_HH-MM-SS for human-readable timestamps
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    base = pathlib.Path(output_dir) if output_dir else pathlib.Path.cwd()
    report_dir = base / "poolcheck_reports" / timestamp
    report_dir.mkdir(parents=True, exist_ok=True)
    return report_dir


def _summarize_unit(tests: list[dict]) -> dict:
    # tests are in log order, so the last one is the latest
    compliant = sum(1 for test in tests if test["all_parameters_ok"])
    return {
        "latest_compliant": tests[-1]["all_parameters_ok"],
        "compliant": compliant,
        "total": len(tests),
        "compliance_rate": 100.0 * compliant / len(tests),
    }


def _report_file_name(unit_id: str, taken: set[str]) -> str:
    # unit IDs that sanitize to the same name get _2, _3, ...
    stem = re.sub(r"[^A-Za-z0-9_.-]", "_", unit_id)
    name, n = stem, 1
    while name.lower() in taken:
        n += 1
        name = f"{stem}_{n}"
    taken.add(name.lower())
    return f"{name}.json"


def _write_reports(reports_by_unit: dict[str, list[dict]], report_dir: pathlib.Path):
    # One JSON file per unit
    taken: set[str] = set()
    for unit_id, tests in reports_by_unit.items():
        report_path = report_dir / _report_file_name(unit_id, taken)
        report = {"unit_ID": unit_id, "summary": _summarize_unit(tests), "tests": tests}
        with open(report_path, "w", encoding="utf-8") as out_f:
            json.dump(report, out_f, indent=2, ensure_ascii=False)


def preprocess(tables: dict) -> list[AuditEntry]:
    """
    Run lightweight audits on each sheet:
      - header normalization
      - sheet classification
      - required / parameter column presence
    """
    from .mapper import KNOWN_SHEET_ALIASES, PARAMETER_COLUMNS, WATER_TEST_KEY_COLUMNS

    entries: list[AuditEntry] = []

    # Step 1: header counts
    for name, df in tables.items():
        entries.append(AuditEntry(
            step="normalize-headers",
            sheet=name,
            message=f"{len(df.columns)} cols",
            level="info",
        ))

    # Step 2: classify
    for name, df in tables.items():
        cols = set(df.columns)
        by_alias = name.strip().casefold() in KNOWN_SHEET_ALIASES
        by_columns = WATER_TEST_KEY_COLUMNS.issubset(cols)
        kind = "water-tests" if by_alias or by_columns else "skip"
        entries.append(AuditEntry(
            step="classify-sheet",
            sheet=name,
            message=kind + (f" ({'alias' if by_alias else 'columns'})" if kind != "skip" else ""),
            level="info",
        ))

    # Step 3: columns
    for name, df in tables.items():
        cols = set(df.columns)
        if not (name.strip().casefold() in KNOWN_SHEET_ALIASES or WATER_TEST_KEY_COLUMNS & cols):
            continue
        missing = sorted(WATER_TEST_KEY_COLUMNS - cols)
        if missing:
            entries.append(AuditEntry(
                step="column-check",
                sheet=name,
                message=f"missing {', '.join(missing)}",
                level="error",
            ))
        found = sorted(PARAMETER_COLUMNS & cols)
        entries.append(AuditEntry(
            step="column-check",
            sheet=name,
            message=f"parameters: {', '.join(found)}" if found else "no parameter columns",
            level="info" if found else "error",
        ))
    return entries


if __name__ == "__main__":
    main()
