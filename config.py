# config.py

"""
Paths, tokens and sheet layouts for the DESNZ Energy Trends 6.1 workbook.

Row offsets are 0-based and inclusive, counted from the first used row of
each sheet as the Excel engine returns it. They are tied to one edition of
the publication (LAYOUT_VERSION); when DESNZ reshuffles the tables the
layout check in extract.py fails loudly instead of slicing the wrong rows.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# --- Paths ---
DATA_PATH = Path("data")
RAW_PATH = DATA_PATH / "raw"
CLEANED_PATH = DATA_PATH / "cleaned"

# Source: https://www.gov.uk/government/statistics/energy-trends-section-6-renewables
ENERGY_TRENDS_FILE = RAW_PATH / "ET_6.1_DEC_25.xlsx"
# Liquid biofuels workbook (ET 6.2); not read by the pipeline yet
BIOFUELS_FILE = RAW_PATH / "ET_6.2_DEC_25.xlsx"

REQUIRED_FILES = [ENERGY_TRENDS_FILE]

LOG_FILE = "renewables_etl.log"

# --- Cell handling ---
# Tokens DESNZ uses for suppressed or not applicable values
PLACEHOLDER_TOKENS = frozenset({"[x]", "x", "-", ".."})

FOOTNOTE_PATTERN = r"(?i)\s*\[note\s*\d+\]"

# Section titles that can leak into the data rows of the nation sheets
SECTION_HEADER_PATTERN = (
    r"(?i)load factor|electricity generated|cumulative|installed capacity"
)

UK_REGION = "United Kingdom"


class Metric(str, Enum):
    CAPACITY = "Capacity"
    GENERATION = "Generation"
    LOAD_FACTOR = "LoadFactor"


# --- Sheet layouts ---
LAYOUT_VERSION = "ET_6.1_DEC_25"


@dataclass(frozen=True)
class SectionLayout:
    """One stacked table inside a sheet."""

    metric: Metric
    row_start: int
    row_end: int
    # Regex the cleaned label of the last row must match
    last_label: str | None = r"(?i)total"


@dataclass(frozen=True)
class SheetLayout:
    sheet_name: str
    region: str
    year_header_row: int
    sections: tuple[SectionLayout, ...]
    drop_section_headers: bool = False


UK_LAYOUT = SheetLayout(
    sheet_name="Annual",
    region=UK_REGION,
    year_header_row=6,
    sections=(
        SectionLayout(Metric.CAPACITY, 7, 21),
        SectionLayout(Metric.GENERATION, 25, 39),
        SectionLayout(Metric.LOAD_FACTOR, 42, 55),
    ),
)


def nation_layout(sheet_name: str, region: str) -> SheetLayout:
    """Nation sheets share one layout: capacity then generation, no load factors."""
    return SheetLayout(
        sheet_name=sheet_name,
        region=region,
        year_header_row=6,
        sections=(
            SectionLayout(Metric.CAPACITY, 7, 14),
            SectionLayout(Metric.GENERATION, 17, 24),
        ),
        drop_section_headers=True,
    )


NATION_LAYOUTS = (
    nation_layout("England - Annual", "England"),
    nation_layout("Scotland- Annual", "Scotland"),
    nation_layout("Wales- Annual", "Wales"),
    nation_layout("Northern Ireland - Annual", "Northern Ireland"),
)

SHEET_LAYOUTS = (UK_LAYOUT, *NATION_LAYOUTS)

# --- Outputs ---
OUTPUT_FILES = {
    "generation_by_source": "uk_generation_by_source.csv",
    "capacity_by_source": "uk_capacity_by_source.csv",
    "load_factors": "uk_load_factors.csv",
    "region_comparison": "country_generation_comparison.csv",
    "annual_totals": "uk_annual_totals.csv",
}

# Written next to the CSV outputs
DB_FILENAME = "renewables.duckdb"

# Column name of each metric in the annual totals table
TOTALS_COLUMNS = {
    Metric.CAPACITY: "installed_capacity_mw",
    Metric.GENERATION: "electricity_generated_gwh",
    Metric.LOAD_FACTOR: "load_factor_percent",
}
