"""Preference spreadsheets, as CSV files or Excel workbooks.

`read_preference_table(path)`
    Raw string table without the header row. Rows may have different lengths.
    Files ending in ``.xlsx`` or ``.xlsm`` are read from their first sheet
    with openpyxl; anything else is parsed as CSV.

`load_graduate_preferences(path)`
    Column 0 is the graduate id, the remaining columns rank placement ids.

`load_placements(path)`
    Column 0 is the placement id, column 1 its quota, the remaining columns
    rank graduate ids.

Every cell is stripped of non-digit characters before integer parsing, so
labels such as ``"Grad 12"`` or ``"P-3"`` read as ``12`` and ``3``. Blank
cells are skipped. Shape problems raise :class:`PreferenceFileError`.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Iterator, Mapping

import pandas as pd

from ..matching.models import GraduatePreference, Placement, PreferenceModel

__all__ = [
    "PreferenceFileError",
    "read_preference_table",
    "load_graduate_preferences",
    "load_placements",
    "load_preference_model",
    "solution_table",
]

WORKBOOK_SUFFIXES = (".xlsx", ".xlsm")


class PreferenceFileError(ValueError):
    """Raised when a preference file does not match the expected layout."""


def _column_count(csv_path: Path) -> int:
    lines = csv_path.read_text(encoding="utf-8").splitlines()
    return max((line.count(",") + 1 for line in lines), default=0)


def _cell_text(value: object) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    # numeric cells come back as floats such as 12.0
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _read_workbook(path: Path) -> pd.DataFrame:
    frame = pd.read_excel(path, sheet_name=0, header=None, skiprows=1, engine="openpyxl")
    if frame.shape[1] == 0:
        raise PreferenceFileError(f"Preference file is empty: {path}")
    frame = frame.map(_cell_text)
    frame.columns = list(range(frame.shape[1]))
    return frame


def _read_csv(csv_path: Path) -> pd.DataFrame:
    width = _column_count(csv_path)
    if width == 0:
        raise PreferenceFileError(f"Preference file is empty: {csv_path}")

    frame = pd.read_csv(
        csv_path,
        header=None,
        names=list(range(width)),
        skiprows=1,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    # short rows come back as NaN in the trailing columns
    return frame.fillna("")


def read_preference_table(path: str | Path) -> pd.DataFrame:
    table_path = Path(path)
    if not table_path.exists():
        raise FileNotFoundError(f"Preference file not found: {table_path}")

    if table_path.suffix.lower() in WORKBOOK_SUFFIXES:
        frame = _read_workbook(table_path)
    else:
        frame = _read_csv(table_path)
    return frame.apply(lambda column: column.str.replace(r"\D", "", regex=True))


def _row_values(cells: list[str]) -> list[int]:
    return [int(cell) for cell in cells if cell]


def _rows(frame: pd.DataFrame) -> Iterator[tuple[int, int, list[str]]]:
    for position, row in enumerate(frame.itertuples(index=False), start=1):
        cells = list(row)
        if not any(cells):
            continue
        if not cells[0]:
            raise PreferenceFileError(f"Data row {position} has no id in its first column")
        yield position, int(cells[0]), cells[1:]


def load_graduate_preferences(path: str | Path) -> list[GraduatePreference]:
    frame = read_preference_table(path)
    graduates = []
    for _, graduate_id, cells in _rows(frame):
        graduates.append(GraduatePreference(graduate_id, tuple(_row_values(cells))))
    return graduates


def load_placements(path: str | Path) -> list[Placement]:
    frame = read_preference_table(path)
    placements = []
    for position, placement_id, cells in _rows(frame):
        if not cells or not cells[0]:
            raise PreferenceFileError(f"Data row {position} has no quota in its second column")
        try:
            placements.append(Placement(placement_id, int(cells[0]), tuple(_row_values(cells[1:]))))
        except ValueError as exc:
            raise PreferenceFileError(f"Data row {position}: {exc}") from exc
    return placements


def load_preference_model(graduates_path: str | Path, placements_path: str | Path) -> PreferenceModel:
    try:
        return PreferenceModel(
            tuple(load_graduate_preferences(graduates_path)),
            tuple(load_placements(placements_path)),
        )
    except PreferenceFileError:
        raise
    except ValueError as exc:
        raise PreferenceFileError(str(exc)) from exc


def solution_table(solution: Mapping[int, int | None], model: PreferenceModel) -> pd.DataFrame:
    """One row per graduate with both sides' 1-based rank of the match."""
    records = []
    for graduate_id, placement_id in solution.items():
        graduate_rank = None if placement_id is None else model.graduate_rank(graduate_id, placement_id)
        placement_rank = None if placement_id is None else model.placement_rank(placement_id, graduate_id)
        records.append(
            {
                "graduate": graduate_id,
                "placement": placement_id,
                "graduate_rank": None if graduate_rank is None else graduate_rank + 1,
                "placement_rank": None if placement_rank is None else placement_rank + 1,
            }
        )
    frame = pd.DataFrame(records, columns=["graduate", "placement", "graduate_rank", "placement_rank"])
    return frame.astype(
        {"placement": "Int64", "graduate_rank": "Int64", "placement_rank": "Int64"}
    )
