# utils.py

import logging
import os
import tempfile
from pathlib import Path

import duckdb
import polars as pl

from config import DB_FILENAME, OUTPUT_FILES
from queries import TABLE_CREATION_QUERIES, VIEW_CREATION_QUERIES

logger = logging.getLogger(__name__)


def check_source_data(files: list[Path | str]) -> bool:
    """
    Checks if all required source data files exist.

    Args:
        files: A list of file paths to check.

    Returns:
        True if all files exist, False otherwise.
    """
    logger.info("Checking for presence of source data files...")
    all_files_found = True
    for f in files:
        if not os.path.exists(f):
            logger.error(f"Missing required file: {f}")
            all_files_found = False

    if all_files_found:
        logger.info("All source data files found.")

    return all_files_found


def build_database(tables: dict[str, pl.DataFrame], db_path: Path):
    """
    Load the cleaned tables into a new DuckDB file in a single transaction.

    Args:
        tables: Output tables keyed like config.OUTPUT_FILES
        db_path: Database file to create; must not exist yet
    """
    con = duckdb.connect(str(db_path))
    try:
        con.begin()
        for query_info in TABLE_CREATION_QUERIES:
            source = query_info["source"]
            con.register(source, tables[source])
            con.sql(query_info["sql"])
            logger.info(f"  - Created table: {query_info['name']}")
        for query_info in VIEW_CREATION_QUERIES:
            con.sql(query_info["sql"])
            logger.info(f"  - Created view: {query_info['name']}")

        con.commit()
    except duckdb.Error:
        logger.error("Database load failed, rolling back transaction")
        con.rollback()
        raise
    finally:
        con.close()


def write_outputs(
    tables: dict[str, pl.DataFrame],
    output_dir: Path,
    db_filename: str | None = DB_FILENAME,
) -> list[Path]:
    """
    Write the output tables as CSV (and optionally DuckDB) all-or-nothing.

    Everything is first written to a staging directory inside output_dir;
    the files replace their destinations only once all of them were written,
    so a failed run leaves the previous outputs untouched.

    Args:
        tables: Output tables keyed like config.OUTPUT_FILES
        output_dir: Destination directory
        db_filename: Name of the DuckDB file, or None to skip it

    Returns:
        Paths of the files written
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with tempfile.TemporaryDirectory(dir=output_dir, prefix=".staging-") as staging:
        staging = Path(staging)
        staged = []
        for name, df in tables.items():
            filename = OUTPUT_FILES[name]
            df.write_csv(staging / filename)
            staged.append(filename)

        if db_filename is not None:
            build_database(tables, staging / db_filename)
            staged.append(db_filename)

        written = []
        for filename in staged:
            os.replace(staging / filename, output_dir / filename)
            written.append(output_dir / filename)

    for path in written:
        logger.info(f"Saved {path}")
    return written
