"""
CSV Table Reader
================
Reads a logic analyzer / oscilloscope export and yields one record per
sample row.

Expected layout:
- First row is the header (column names).
- One column (default 'Time[s]') holds the sample time in seconds.
- Every other column holds a signal's logic level ('0', '1', 'Z', 'U', ...).
"""

import csv

from csv2vhdl.errors import InputNotFound, MalformedRow

DEFAULT_TIME_COLUMN = "Time[s]"

# Sentinel used by DictReader for fields past the header width
_EXTRA = object()


class TableReader:
    """Lazy record source over a single CSV file."""

    def __init__(self, path, time_column=DEFAULT_TIME_COLUMN):
        self.path = path
        self.time_column = time_column
        self.fieldnames = []
        self.line_num = 0

    def records(self):
        """
        Yields each data row as {column: raw string}, in header order.

        Raises:
            InputNotFound: the file cannot be opened
            MalformedRow: no header, missing time column, or a row whose
                field count differs from the header
        """
        try:
            f = open(self.path, "r", newline="")
        except OSError as e:
            raise InputNotFound(self.path, e.strerror or str(e)) from e

        with f:
            reader = csv.DictReader(f, restkey=_EXTRA, restval=None)
            if reader.fieldnames is None:
                raise MalformedRow(None, f"'{self.path}' has no header row")

            self.fieldnames = list(reader.fieldnames)
            if self.time_column not in self.fieldnames:
                raise MalformedRow(
                    1, f"time column '{self.time_column}' not found in header {self.fieldnames}"
                )

            for row in reader:
                self.line_num = reader.line_num
                if _EXTRA in row:
                    raise MalformedRow(
                        self.line_num,
                        f"expected {len(self.fieldnames)} fields, got "
                        f"{len(self.fieldnames) + len(row[_EXTRA])}",
                    )
                if any(value is None for value in row.values()):
                    present = sum(1 for value in row.values() if value is not None)
                    raise MalformedRow(
                        self.line_num,
                        f"expected {len(self.fieldnames)} fields, got {present}",
                    )
                yield row


def read_records(path, time_column=DEFAULT_TIME_COLUMN):
    """Reads the whole table into a list of records."""
    return list(TableReader(path, time_column).records())
