"""Shared fixtures: synthetic sheet grids and Energy Trends style workbooks."""

# pylint: disable=missing-function-docstring

from pathlib import Path

import polars as pl
import pytest
import xlsxwriter

from config import NATION_LAYOUTS, UK_LAYOUT, Metric, SheetLayout

YEARS = [2009, 2010]


def make_grid(rows: list[list]) -> pl.DataFrame:
    """Build a raw grid (all String columns) like sheet_reader.read_grid returns."""
    width = max(len(row) for row in rows)
    padded = [
        [None if cell is None else str(cell) for cell in row] + [None] * (width - len(row))
        for row in rows
    ]
    return pl.DataFrame(
        padded,
        schema={f"column_{i + 1}": pl.String for i in range(width)},
        orient="row",
    )


def write_workbook(path: Path, sheets: dict[str, list[list]]) -> Path:
    """Write each sheet's rows to an xlsx file, leaving None cells blank."""
    with xlsxwriter.Workbook(str(path)) as workbook:
        for sheet_name, rows in sheets.items():
            worksheet = workbook.add_worksheet(sheet_name)
            for r, row in enumerate(rows):
                for c, cell in enumerate(row):
                    if cell is not None:
                        worksheet.write(r, c, cell)
    return path


# Data rows per section; the Total row is appended at the section's last row
UK_SECTIONS = {
    Metric.CAPACITY: [
        ("Onshore Wind [note 1]", [100, 150]),
        ("Offshore Wind [note 2]", [10, "[x]"]),
        ("Offshore Wind (Seabed)", [8, 9]),
        (None, [None, None]),
        ("Solar PV", [20, 30]),
        ("Plant biomass [note 14]", [5, "-"]),
    ],
    Metric.GENERATION: [
        ("Onshore Wind [note 1]", [1000, 1500]),
        ("Offshore Wind [note 2]", [100, 200]),
        ("Offshore Wind (Seabed)", [90, 180]),
        ("Solar PV", [50, 60]),
        ("Plant biomass [note 14]", [70, ".."]),
    ],
    Metric.LOAD_FACTOR: [
        ("Onshore Wind [note 1]", [25.5, 27.1]),
        ("Offshore Wind", [35.0, "x"]),
        ("Solar PV", [10.2, 11.0]),
    ],
}
UK_TOTALS = {
    Metric.CAPACITY: [60000, 61000],
    Metric.GENERATION: [135000, 136000],
    Metric.LOAD_FACTOR: [40, 41],
}

NATION_SECTIONS = {
    Metric.CAPACITY: [
        ("Wind [note 3]", [50, 60]),
        ("Offshore wind", [5, 6]),
        ("Solar photovoltaics", [10, 12]),
        ("Hydro", [2, 2]),
        ("Bioenergy", [3, "[x]"]),
    ],
    Metric.GENERATION: [
        ("Wind [note 3]", [500, 600]),
        ("Offshore wind", [50, 60]),
        ("Solar photovoltaics", [20, 24]),
        ("Hydro", [10, 10]),
        ("Load factors (%)", [None, None]),
    ],
}
NATION_TOTALS = {
    Metric.CAPACITY: [70, 80],
    Metric.GENERATION: [580, 694],
}


def build_sheet_rows(
    layout: SheetLayout,
    sections: dict,
    totals: dict,
    years: list[int] = YEARS,
) -> list[list]:
    """Lay out stacked tables at the row offsets of a SheetLayout."""
    n_rows = max(section.row_end for section in layout.sections) + 1
    rows: list[list] = [[None] * (len(years) + 1) for _ in range(n_rows)]
    for i in range(layout.year_header_row):
        rows[i][0] = f"Energy Trends 6.1 title line {i}"
    rows[layout.year_header_row] = ["Year", *years]

    for section in layout.sections:
        if section.row_start - 1 != layout.year_header_row:
            rows[section.row_start - 1][0] = f"{section.metric.value} section"
        for offset, (label, values) in enumerate(sections[section.metric]):
            rows[section.row_start + offset] = [label, *values]
        rows[section.row_end] = ["Total", *totals[section.metric]]
    return rows


def build_energy_trends_sheets() -> dict[str, list[list]]:
    sheets = {UK_LAYOUT.sheet_name: build_sheet_rows(UK_LAYOUT, UK_SECTIONS, UK_TOTALS)}
    for layout in NATION_LAYOUTS:
        sheets[layout.sheet_name] = build_sheet_rows(layout, NATION_SECTIONS, NATION_TOTALS)
    return sheets


@pytest.fixture
def energy_trends_workbook(tmp_path) -> Path:
    return write_workbook(tmp_path / "ET_6.1_test.xlsx", build_energy_trends_sheets())


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "cleaned"
