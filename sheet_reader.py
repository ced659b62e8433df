# sheet_reader.py

"""
Read one sheet of an Excel workbook as a raw grid of text cells.

No header row and no type inference: every cell comes back as a string or
null, so the positional slicing in extract.py sees exactly what the
publisher typed.
"""

import io
import logging
from pathlib import Path

import fastexcel
import polars as pl

from errors import CorruptWorkbook, SourceNotFound

logger = logging.getLogger(__name__)


def _load_workbook_bytes(path: Path) -> bytes:
    # The handle is closed before any parsing starts, success or not
    try:
        with path.open("rb") as fh:
            return fh.read()
    except (FileNotFoundError, IsADirectoryError) as e:
        raise SourceNotFound(path) from e


def _sheet_names(path: Path, payload: bytes) -> list[str]:
    try:
        return list(fastexcel.read_excel(payload).sheet_names)
    except Exception as e:
        raise CorruptWorkbook(path, str(e)) from e


class Workbook:
    """
    An Excel workbook loaded into memory once.

    The file is read and its sheet list parsed when the object is created;
    every read_grid call afterwards parses from the in-memory bytes.

    Raises:
        SourceNotFound: the workbook does not exist
        CorruptWorkbook: the file cannot be parsed as a spreadsheet
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._payload = _load_workbook_bytes(self.path)
        self.sheet_names = _sheet_names(self.path, self._payload)
        logger.info(f"Found {len(self.sheet_names)} sheets in {self.path.name}")

    def read_grid(self, sheet_name: str) -> pl.DataFrame:
        """
        Read a named sheet into a string-only DataFrame.

        Args:
            sheet_name: Name of the sheet to read

        Returns:
            DataFrame with one String column per sheet column and one row per
            sheet row (starting at the first used row)

        Raises:
            SourceNotFound: the sheet does not exist
            CorruptWorkbook: the sheet cannot be parsed
        """
        if sheet_name not in self.sheet_names:
            raise SourceNotFound(self.path, sheet_name)

        try:
            grid = pl.read_excel(
                io.BytesIO(self._payload),
                sheet_name=sheet_name,
                engine="calamine",
                has_header=False,
                infer_schema_length=0,
                # Row positions are the layout contract; keep spacer rows
                drop_empty_rows=False,
                drop_empty_cols=False,
                raise_if_empty=False,
            )
        except Exception as e:
            raise CorruptWorkbook(self.path, f"sheet '{sheet_name}': {e}") from e

        grid = grid.select(pl.all().cast(pl.String))
        logger.info(
            f"Read sheet '{sheet_name}': {grid.height} rows x {grid.width} columns"
        )
        return grid


def read_grid(path: Path | str, sheet_name: str) -> pl.DataFrame:
    """Read one sheet of the workbook at path; see Workbook.read_grid."""
    return Workbook(path).read_grid(sheet_name)
