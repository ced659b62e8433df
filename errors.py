# errors.py

"""
Exceptions raised by the renewables cleaning pipeline.

Every failure aborts the run; nothing is written when one of these is raised.
"""


class RenewablesETLError(Exception):
    """Base class for all pipeline errors."""


class SourceNotFound(RenewablesETLError):
    """The workbook path or the requested sheet does not exist."""

    def __init__(self, path, sheet_name=None):
        self.path = path
        self.sheet_name = sheet_name
        if sheet_name is None:
            message = f"Workbook not found: {path}"
        else:
            message = f"Sheet '{sheet_name}' not found in workbook {path}"
        super().__init__(message)


class CorruptWorkbook(RenewablesETLError):
    """The file exists but cannot be parsed as a spreadsheet."""

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"Could not read {path} as an Excel workbook: {reason}")


class MalformedValue(RenewablesETLError):
    """A value cell is neither a placeholder token nor a number."""

    def __init__(self, row: int, column: int, raw_text: str, sheet_name: str | None = None):
        self.row = row
        self.column = column
        self.raw_text = raw_text
        self.sheet_name = sheet_name
        where = f"sheet '{sheet_name}', " if sheet_name else ""
        super().__init__(
            f"Malformed value at {where}row {row}, column {column}: {raw_text!r}"
        )


class LayoutMismatch(RenewablesETLError):
    """The sheet does not match the configured row layout."""


class InconsistentTotals(RenewablesETLError):
    """A year in the totals pivot lacks one of the expected metrics."""

    def __init__(self, year: int | None, problems: list[str]):
        self.year = year
        self.problems = problems
        where = f" for {year}" if year is not None else ""
        super().__init__(f"Inconsistent totals{where}: {', '.join(problems)}")
