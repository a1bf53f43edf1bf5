"""
Conversion Errors
=================
Every failure the converter can report. All of them abort the run;
the CLI turns them into a non-zero exit status.
"""


class ConversionError(Exception):
    """Base class for all csv2vhdl failures."""


class InputNotFound(ConversionError):
    """The input table could not be opened."""

    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        msg = f"Cannot open input file '{path}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class MalformedRow(ConversionError):
    """A row (or the header) does not match the expected column layout."""

    def __init__(self, line, message):
        self.line = line
        msg = message if line is None else f"line {line}: {message}"
        super().__init__(msg)


class InvalidTimestamp(ConversionError):
    """The time column holds something that is not a finite number."""

    def __init__(self, line, value):
        self.line = line
        self.value = value
        where = "" if line is None else f"line {line}: "
        super().__init__(f"{where}invalid timestamp {value!r}")
