# main.py

import logging
import sys
from pathlib import Path

import duckdb
import polars as pl

from assemble import build_tables
from classify import classify_records
from config import (
    CLEANED_PATH,
    ENERGY_TRENDS_FILE,
    LAYOUT_VERSION,
    LOG_FILE,
    REQUIRED_FILES,
    SHEET_LAYOUTS,
    SheetLayout,
)
from errors import RenewablesETLError
from extract import extract_sheet
from sheet_reader import Workbook
from utils import check_source_data, write_outputs

logger = logging.getLogger(__name__)


def extract_all(
    workbook: Workbook, layouts: tuple[SheetLayout, ...] = SHEET_LAYOUTS
) -> pl.DataFrame:
    """Read, extract and classify every configured sheet of the workbook."""
    frames = []
    for layout in layouts:
        grid = workbook.read_grid(layout.sheet_name)
        records = extract_sheet(grid, layout)
        frames.append(classify_records(records, layout.region))
        logger.info(f"{layout.region}: {records.height} records")
    return pl.concat(frames, how="vertical")


def run_pipeline(
    workbook: Path = ENERGY_TRENDS_FILE,
    output_dir: Path = CLEANED_PATH,
    layouts: tuple[SheetLayout, ...] = SHEET_LAYOUTS,
) -> dict[str, pl.DataFrame]:
    """
    Run the full cleaning pipeline against one Energy Trends workbook.

    All tables are built in memory before anything is written, so a failure
    at any stage leaves the output directory as it was.

    Returns:
        The output tables keyed like config.OUTPUT_FILES
    """
    logger.info(f"Reading: {workbook} (layout {LAYOUT_VERSION})")
    records = extract_all(Workbook(workbook), layouts)
    tables = build_tables(records)
    write_outputs(tables, Path(output_dir))
    return tables


def main():
    """Main function to run the ETL process."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(LOG_FILE), logging.StreamHandler()],
    )

    if not check_source_data(REQUIRED_FILES):
        sys.exit("ETL process aborted due to missing files.")

    try:
        tables = run_pipeline()
    except RenewablesETLError as e:
        logger.error(f"Data cleaning failed: {e}")
        sys.exit("ETL process failed.")
    except duckdb.Error as e:
        logger.error(f"DATABASE ERROR: {e}")
        sys.exit("ETL process failed.")
    except Exception:
        logger.exception("Unexpected error in the ETL process")
        sys.exit("ETL process failed.")

    logger.info("=== Data Cleaning Complete ===")
    for name, df in tables.items():
        logger.info(f"  {name}: {df.height} rows")


if __name__ == "__main__":
    main()
