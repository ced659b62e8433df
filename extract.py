# extract.py

"""
Slice stacked tables out of a raw sheet grid and turn them into long-form
records: one row per (source label, year) with a float value or null.
"""

import logging
import re

import polars as pl

from config import (
    FOOTNOTE_PATTERN,
    PLACEHOLDER_TOKENS,
    SECTION_HEADER_PATTERN,
    Metric,
    SectionLayout,
    SheetLayout,
)
from errors import LayoutMismatch, MalformedValue

logger = logging.getLogger(__name__)

RECORD_SCHEMA = {
    "source": pl.String,
    "year": pl.Int32,
    "metric": pl.String,
    "value": pl.Float64,
}


def clean_label(label: str | None) -> str | None:
    """Strip '[note N]' footnote markers and surrounding whitespace."""
    if label is None:
        return None
    return re.sub(FOOTNOTE_PATTERN, "", label).strip()


def clean_label_expr(col: pl.Expr) -> pl.Expr:
    return col.str.replace_all(FOOTNOTE_PATTERN, "").str.strip_chars()


def parse_year_axis(grid: pl.DataFrame, header_row: int) -> list[int]:
    """
    Read the year header row of a sheet.

    Years start in the second column and run until the first blank cell
    after the last year. They must be consecutive: a gap would silently
    shift every value column after it.

    Args:
        grid: Raw sheet grid from sheet_reader.read_grid
        header_row: 0-based row index of the year header

    Returns:
        List of years, one per value column

    Raises:
        LayoutMismatch: the row is missing, holds no years, holds a cell
            that is not a year, or the years are not consecutive
    """
    if header_row >= grid.height:
        raise LayoutMismatch(
            f"Year header row {header_row} is beyond the sheet ({grid.height} rows)"
        )

    cells = [clean_label(cell) for cell in grid.row(header_row)[1:]]
    while cells and not cells[-1]:
        cells.pop()
    if not cells:
        raise LayoutMismatch(f"No years found in header row {header_row}")

    years = []
    for offset, cell in enumerate(cells, start=1):
        try:
            year = float(cell)
        except (TypeError, ValueError) as e:
            raise LayoutMismatch(
                f"Header row {header_row}, column {offset}: {cell!r} is not a year"
            ) from e
        if not year.is_integer():
            raise LayoutMismatch(
                f"Header row {header_row}, column {offset}: {cell!r} is not a year"
            )
        years.append(int(year))

    for previous, current in zip(years, years[1:]):
        if current != previous + 1:
            raise LayoutMismatch(
                f"Years in header row {header_row} are not consecutive: "
                f"{previous} followed by {current}"
            )

    return years


def extract_section(
    grid: pl.DataFrame,
    row_start: int,
    row_end: int,
    year_axis: list[int],
    metric: Metric,
    sheet_name: str | None = None,
    drop_labels: str | None = None,
) -> pl.DataFrame:
    """
    Convert one stacked table into long-form records.

    Column 0 holds the source label, columns 1..N the values for
    year_axis[0..N-1]. Rows whose cleaned label is blank are spacer rows and
    are dropped before any value is parsed, and so are rows whose label
    matches drop_labels (section titles that leaked into the range).

    Args:
        grid: Raw sheet grid
        row_start: First row of the table (inclusive, 0-based)
        row_end: Last row of the table (inclusive, 0-based)
        year_axis: Years matching the value columns
        metric: Metric held by the table
        sheet_name: Only used in error and log messages
        drop_labels: Regex of labels to discard along with their cells

    Returns:
        DataFrame with columns source, year, metric, value

    Raises:
        LayoutMismatch: the row range or year columns fall outside the grid
        MalformedValue: a cell is neither a placeholder token nor a number
    """
    n_years = len(year_axis)
    if row_start > row_end or row_end >= grid.height:
        raise LayoutMismatch(
            f"Rows {row_start}-{row_end} do not fit sheet "
            f"'{sheet_name}' ({grid.height} rows)"
        )
    if grid.width < n_years + 1:
        raise LayoutMismatch(
            f"Sheet '{sheet_name}' has {grid.width} columns, "
            f"{n_years + 1} needed for {n_years} years"
        )

    year_cols = [str(year) for year in year_axis]
    section = (
        grid.slice(row_start, row_end - row_start + 1)
        .select(grid.columns[: n_years + 1])
        .rename(dict(zip(grid.columns[: n_years + 1], ["source", *year_cols])))
        .with_row_index("row", offset=row_start)
        .with_columns(clean_label_expr(pl.col("source")).alias("source"))
        .filter(pl.col("source").is_not_null() & (pl.col("source") != ""))
    )
    if drop_labels is not None:
        section = drop_section_headers(section, sheet_name, drop_labels)

    trimmed = pl.col("raw").str.strip_chars()
    is_blank = trimmed.is_null() | (trimmed == "")
    is_placeholder = trimmed.str.to_lowercase().is_in(list(PLACEHOLDER_TOKENS))
    parsed = trimmed.cast(pl.Float64, strict=False)

    long = (
        section.unpivot(
            on=year_cols, index=["row", "source"], variable_name="year", value_name="raw"
        )
        .with_columns(pl.col("year").cast(pl.Int32))
        .with_columns(
            pl.when(is_blank | is_placeholder)
            .then(None)
            .otherwise(parsed)
            .alias("value"),
            (~is_blank & ~is_placeholder & (parsed.is_null() | ~parsed.is_finite()))
            .fill_null(True)
            .alias("malformed"),
        )
        .sort(["row", "year"])
    )

    bad = long.filter(pl.col("malformed"))
    if not bad.is_empty():
        first = bad.row(0, named=True)
        raise MalformedValue(
            row=first["row"],
            column=first["year"] - year_axis[0] + 1,
            raw_text=first["raw"],
            sheet_name=sheet_name,
        )

    return long.select(
        "source",
        "year",
        pl.lit(metric.value).alias("metric"),
        "value",
    ).cast(RECORD_SCHEMA)


def validate_section(grid: pl.DataFrame, section: SectionLayout, sheet_name: str):
    """Check the configured last row of a section carries the expected label."""
    if section.row_end >= grid.height:
        raise LayoutMismatch(
            f"Sheet '{sheet_name}': {section.metric.value} section ends at row "
            f"{section.row_end} but the sheet has {grid.height} rows"
        )
    if section.last_label is None:
        return
    label = clean_label(grid.item(section.row_end, 0)) or ""
    if not re.search(section.last_label, label):
        raise LayoutMismatch(
            f"Sheet '{sheet_name}': expected the {section.metric.value} section "
            f"to end with a row matching {section.last_label!r} at row "
            f"{section.row_end}, found {label!r}"
        )


def extract_sheet(grid: pl.DataFrame, layout: SheetLayout) -> pl.DataFrame:
    """
    Extract every configured section of a sheet.

    Args:
        grid: Raw sheet grid
        layout: Row layout of the sheet

    Returns:
        Records of all sections, in section order
    """
    years = parse_year_axis(grid, layout.year_header_row)
    logger.info(
        f"Sheet '{layout.sheet_name}': years {years[0]}-{years[-1]} ({len(years)})"
    )

    frames = []
    for section in layout.sections:
        validate_section(grid, section, layout.sheet_name)
        records = extract_section(
            grid,
            section.row_start,
            section.row_end,
            years,
            section.metric,
            sheet_name=layout.sheet_name,
            drop_labels=SECTION_HEADER_PATTERN if layout.drop_section_headers else None,
        )
        logger.info(
            f"  {section.metric.value} data extracted: {records.height} rows"
        )
        frames.append(records)

    return pl.concat(frames, how="vertical")


def drop_section_headers(
    records: pl.DataFrame, sheet_name: str | None, pattern: str = SECTION_HEADER_PATTERN
) -> pl.DataFrame:
    """Remove section titles such as 'LOAD FACTORS' that leaked into a data range."""
    is_header = pl.col("source").str.contains(pattern)
    leaked = records.filter(is_header)["source"].unique(maintain_order=True).to_list()
    if leaked:
        logger.warning(f"Sheet '{sheet_name}': dropping section header rows {leaked}")
    return records.filter(~is_header)
