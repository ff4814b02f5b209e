import abc
import logging
import typing

import pandas as pd
from dataclasses import dataclass
from stairval.notepad import Notepad

from .readings import PARAMETER_NAMES, WaterTestParams, WaterTestRecord
from .risk import KNOWN_UNIT_TYPES
from .standards import KNOWN_WATER_TYPE_LABELS

logger = logging.getLogger(__name__)

# Minimal required columns (after renaming) to identify a water-test sheet
WATER_TEST_KEY_COLUMNS = {"unit_type", "water_type"}

# A sheet needs at least one of these to be worth evaluating
PARAMETER_COLUMNS = set(PARAMETER_NAMES)

# Input limits enforced by the application's water test form.
# Values outside are data-entry mistakes, not chemistry.
PLAUSIBLE_RANGES: dict[str, tuple[float, float]] = {
    "ph": (0, 14),
    "chlorine": (0, 20),
    "bromine": (0, 20),
    "salt": (0, 50000),
    "alkalinity": (0, 500),
    "calcium": (0, 1000),
    "cyanuric": (0, 200),
    "turbidity": (0, 100),
    "temperature": (0, 50),
}

# Friendly aliases → reduces friction while keeping behavior explicit
KNOWN_SHEET_ALIASES: set[str] = {
    "water_tests",
    "water tests",
    "water_test",
    "tests",
    "readings",
    "log",
    "test_log",
}


@dataclass
class SelectedTable:
    """
    The sheet chosen for mapping. `table` is None if nothing usable was found.
    """
    sheet_name: str | None
    table: pd.DataFrame | None


class TableMapper(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def apply_mapping(
            self, tables: dict[str, pd.DataFrame], notepad: Notepad
    ) -> typing.Sequence[WaterTestRecord]:
        raise NotImplementedError


class DefaultMapper(TableMapper):
    def __init__(self, strict: bool = False):
        """
        - False: implausible values are logged as WARNINGS and dropped from the row
        - True : implausible values are logged as ERRORS and the row is skipped
        """
        self.strict = strict

    def apply_mapping(
            self, tables: dict[str, pd.DataFrame], notepad: Notepad
    ) -> list[WaterTestRecord]:
        """
        Process:
        1) choose the water-test table
        2) check required columns
        3) map rows to WaterTestRecord
        """
        selected = self._choose_named_table(tables, notepad)
        return self._map_water_test_table(selected.sheet_name, selected.table, notepad)

    def _prepare_sheet(self, df: pd.DataFrame) -> pd.DataFrame:
        """Bring the index into a column named 'unit_ID'."""
        working = df.reset_index()
        original = working.columns[0]
        return working.rename(columns={original: "unit_ID"})

    @staticmethod
    def _to_float(value: typing.Any) -> float | None:
        """
        Numeric cell parsing:
        - None, NaN and empty/whitespace-only strings -> None (not measured)
        - numbers -> float
        - strings are trimmed, a trailing unit ('7.4 ppm') is tolerated
        - anything else raises ValueError
        """
        if isinstance(value, bool):
            raise ValueError(f"not a number: {value!r}")
        if value is None:
            return None
        if isinstance(value, (int, float)):
            return None if pd.isna(value) else float(value)
        s = str(value).strip()
        if not s:
            return None
        token = s.split()[0]
        try:
            return float(token)
        except ValueError:
            raise ValueError(f"not a number: {value!r}")

    @staticmethod
    def _normalize_time_like(value: typing.Any) -> str | None:
        """
        Test timestamps:
        - datetimes -> ISO 8601 string
        - strings are trimmed
        - empty/NaN -> None
        """
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return None
        if isinstance(value, pd.Timestamp):
            return value.isoformat()
        s = str(value).strip()
        return s or None

    @staticmethod
    def _normalize_label(value: typing.Any) -> str:
        """Unit and water type tags: trimmed, lowercased, blank/NaN -> ''."""
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return ""
        return str(value).strip().lower()

    def parse_water_test_row(self, row: pd.Series, sheet_name: str, notepad: Notepad) -> list[WaterTestRecord]:
        """
        Parse a single row into a WaterTestRecord.
        Returns [] if the row cannot be used.
        """
        unit_id = str(row.get("unit_ID", "")).strip()
        unit_type = self._normalize_label(row.get("unit_type"))
        water_type = self._normalize_label(row.get("water_type"))

        if not unit_id or unit_id.lower() == "nan":
            notepad.add_error(f"Sheet {sheet_name!r}: row without a unit identifier")
            return []

        if not unit_type:
            notepad.add_warning(
                f"Sheet {sheet_name!r}, unit {unit_id!r}: missing unit type, using low-risk standards")
        elif unit_type not in KNOWN_UNIT_TYPES:
            notepad.add_warning(
                f"Sheet {sheet_name!r}, unit {unit_id!r}: unrecognized unit type {unit_type!r}, using low-risk standards")
        if not water_type:
            notepad.add_warning(
                f"Sheet {sheet_name!r}, unit {unit_id!r}: missing water type, treating as chlorine")
        elif water_type not in KNOWN_WATER_TYPE_LABELS:
            notepad.add_warning(
                f"Sheet {sheet_name!r}, unit {unit_id!r}: unrecognized water type {water_type!r}, treating as chlorine")

        values: dict[str, float] = {}
        for name in PARAMETER_NAMES:
            if name not in row.index:
                continue
            try:
                value = self._to_float(row.get(name))
            except ValueError as e:
                notepad.add_error(f"Sheet {sheet_name!r}, unit {unit_id!r}, {name}: {e}")
                continue
            if value is None:
                continue

            limits = PLAUSIBLE_RANGES.get(name)
            if limits is not None and not (limits[0] <= value <= limits[1]):
                msg = (f"Sheet {sheet_name!r}, unit {unit_id!r}: {name} value {value:g} "
                       f"outside plausible range {limits[0]:g}-{limits[1]:g}")
                if self.strict:
                    notepad.add_error(msg)
                    return []  # bail on this row
                notepad.add_warning(msg)
                continue
            values[name] = value

        try:
            record = WaterTestRecord(
                unit_ID=unit_id,
                unit_type=unit_type,
                water_type=water_type,
                test_time=self._normalize_time_like(row.get("test_time")),
                params=WaterTestParams(**values),
            )
        except (ValueError, TypeError) as e:
            notepad.add_error(f"Sheet {sheet_name!r}: {e}")
            return []

        return [record]

    def _choose_named_table(self, tables: dict[str, pd.DataFrame], notepad: Notepad) -> SelectedTable:
        """
        Prefer explicit sheet names (plus common aliases), otherwise the first
        sheet that carries the key columns.
        """
        for sheet_name, df in tables.items():
            if sheet_name.strip().casefold() in KNOWN_SHEET_ALIASES:
                return SelectedTable(sheet_name=sheet_name, table=df)

        for sheet_name, df in tables.items():
            if WATER_TEST_KEY_COLUMNS.issubset(set(df.columns)):
                logger.debug(f"Using sheet {sheet_name!r} by its columns")
                return SelectedTable(sheet_name=sheet_name, table=df)

        notepad.add_error("Missing required sheet: no 'water_tests' sheet or sheet with unit_type/water_type columns.")
        return SelectedTable(sheet_name=None, table=None)

    def _map_water_test_table(self, sheet_name: str | None, df: pd.DataFrame | None,
                              notepad: Notepad) -> list[WaterTestRecord]:
        """
        Sheet-level wrapper for water-test rows:
          - normalize index to 'unit_ID'
          - require the key columns and at least one parameter column
          - delegate row conversion to parse_water_test_row
        """
        if df is None:
            return []
        working = self._prepare_sheet(df)

        have = set(working.columns)
        missing = sorted(WATER_TEST_KEY_COLUMNS - have)
        if missing:
            notepad.add_error(f"Sheet {sheet_name!r}: missing required columns: {missing}")
            return []
        if not PARAMETER_COLUMNS & have:
            notepad.add_error(f"Sheet {sheet_name!r}: no water test parameter columns found")
            return []

        records: list[WaterTestRecord] = []
        for _, row in working.iterrows():
            records.extend(self.parse_water_test_row(row, sheet_name, notepad))
        return records
