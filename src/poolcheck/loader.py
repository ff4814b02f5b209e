import pathlib

import pandas as pd

# Column spellings seen in field logs → WaterTestParams / record fields
RENAME_MAP = {
    # sanitizers
    "free_chlorine": "chlorine",
    "fc": "chlorine",
    "cl": "chlorine",
    "br": "bromine",
    # balance
    "ta": "alkalinity",
    "total_alkalinity": "alkalinity",
    "calcium_hardness": "calcium",
    "ch": "calcium",
    "cya": "cyanuric",
    "cyanuric_acid": "cyanuric",
    "stabilizer": "cyanuric",
    "salinity": "salt",
    # physical
    "ntu": "turbidity",
    "temp": "temperature",
    # unit / test columns
    "type": "unit_type",
    "sanitizer": "water_type",
    "tested_at": "test_time",
    "test_date": "test_time",
}


def _normalize_headers(df: pd.DataFrame) -> pd.DataFrame:
    # CLEAN & NORMALIZE headers:
    df.columns = (
        df.columns.astype(str)
        .str.strip()
        .str.replace(r"\s*\(.*?\)", "", regex=True)  # drop units like "(ppm)"
        .str.replace(r"[\s\-]+", "_", regex=True)  # spaces/hyphens → underscore
        .str.replace(":", "", regex=False)  # drop colons
        .str.lower()
    )

    # apply specific renames (e.g. "fc" → "chlorine")
    return df.rename(
        columns={
            orig: target
            for orig, target in RENAME_MAP.items()
            if orig in df.columns and target not in df.columns
        }
    )


def load_sheets_as_tables(workbook_path: str) -> dict[str, pd.DataFrame]:
    """
    Read each worksheet (or a single CSV file) into a DataFrame:
      - first row = header
      - first column = index (the unit identifier)
      - normalize all headers to snake_case lowercase
      - apply renames from RENAME_MAP
    A CSV file yields one table named after the file stem.
    """
    path = pathlib.Path(workbook_path)
    tables: dict[str, pd.DataFrame] = {}

    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path, header=0, index_col=0)
        tables[path.stem] = _normalize_headers(df)
        return tables

    excel = pd.ExcelFile(path, engine="openpyxl")
    for sheet_name in excel.sheet_names:
        df = pd.read_excel(
            excel, sheet_name=sheet_name, header=0, index_col=0, engine="openpyxl"
        )
        tables[sheet_name] = _normalize_headers(df)

    return tables
