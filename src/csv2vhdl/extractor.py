"""
Waveform Extractor
==================
Turns the ordered sample records of a capture into the data a replay
testbench needs:

- delays:  time to wait before applying each sample (seconds, >= 0)
- signals: per-signal captured values, in header order
- min_positive_delay / total_duration: simulation precision and length hints

The scan is a single forward pass. Records are never reordered; a
timestamp that goes backwards yields a zero delay instead of a negative one.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, Mapping, Optional, Tuple

import numpy as np

from csv2vhdl.errors import InvalidTimestamp, MalformedRow
from csv2vhdl.reader import DEFAULT_TIME_COLUMN

# Records are numbered as file lines when no source is given: header is line 1
FIRST_DATA_LINE = 2


def parse_timestamp(value, line=None) -> float:
    """Parses a time-column cell as seconds. Only finite numbers are accepted."""
    if value is None:
        raise InvalidTimestamp(line, value)
    try:
        t = float(value.strip())
    except ValueError:
        raise InvalidTimestamp(line, value) from None
    if not math.isfinite(t):
        raise InvalidTimestamp(line, value)
    return t


def format_seconds(seconds: float) -> str:
    """
    Formats a delay as a VHDL time literal, e.g. '0.15 sec'.
    The mantissa always carries a decimal point ('1e-05' -> '1.0e-05').
    """
    text = repr(float(seconds))
    mantissa, sep, exponent = text.partition("e")
    if "." not in mantissa:
        mantissa += ".0"
    return f"{mantissa}{sep}{exponent} sec"


class RunningTimeState:
    """
    Scalars threaded through the scan.

    Invariants:
    - every delay returned by advance() is >= 0
    - total_duration is the left-to-right sum of all returned delays
    - min_positive_delay is the smallest delay > 0 seen, or inf
    """

    __slots__ = ("last_sample_time", "min_positive_delay", "total_duration")

    def __init__(self):
        self.last_sample_time = 0.0
        self.min_positive_delay = math.inf
        self.total_duration = 0.0

    def advance(self, t: float) -> float:
        """Consumes one timestamp and returns the delay before that sample."""
        reference = min(self.last_sample_time, t)
        delay = t - reference

        self.last_sample_time = t
        if delay > 0:
            self.min_positive_delay = min(self.min_positive_delay, delay)
        self.total_duration += delay
        return delay


class Waveform:
    """
    Finalized extraction result, handed to the emitter as-is.
    Index i of `delays` and of every `signals[name]` refers to the same record.
    """

    __slots__ = ("delays", "signals", "min_positive_delay", "total_duration", "time_column")

    def __init__(
        self,
        delays: Tuple[float, ...],
        signals: Dict[str, Tuple[str, ...]],
        min_positive_delay: float,
        total_duration: float,
        time_column: str = DEFAULT_TIME_COLUMN,
    ):
        self.delays = tuple(delays)
        self.signals = {name: tuple(values) for name, values in signals.items()}
        self.min_positive_delay = min_positive_delay
        self.total_duration = total_duration
        self.time_column = time_column

    def __len__(self):
        return len(self.delays)

    def __repr__(self):
        return (
            f"Waveform(samples={len(self)}, signals={self.signal_names}, "
            f"total_duration={self.total_duration!r}, "
            f"min_positive_delay={self.min_positive_delay!r})"
        )

    @property
    def signal_names(self):
        return list(self.signals)

    def delay_literals(self):
        return [format_seconds(d) for d in self.delays]

    def value_literals(self, name):
        return [f"'{v}'" for v in self.signals[name]]

    def sample_times(self) -> np.ndarray:
        """Absolute replay time of each sample (cumulative delays)."""
        return np.cumsum(np.asarray(self.delays, dtype=np.float64))


def extract_waveform(
    records: Iterable[Mapping[str, Optional[str]]],
    time_column: str = DEFAULT_TIME_COLUMN,
    source=None,
) -> Waveform:
    """
    Scans the records once and builds the Waveform.

    source, when given, is the object producing records (e.g. a TableReader);
    its line_num is used to locate errors in the file.

    Raises:
        InvalidTimestamp: a time cell is not a finite number
        MalformedRow: a record lacks the time column, or its signal columns
            differ from those of the first record
    """
    state = RunningTimeState()
    delays = []
    signals: Dict[str, list] = {}

    for index, record in enumerate(records):
        line = source.line_num if source is not None else FIRST_DATA_LINE + index
        if time_column not in record:
            raise MalformedRow(line, f"time column '{time_column}' missing")

        t = parse_timestamp(record[time_column], line)
        delays.append(state.advance(t))

        names = [name for name in record if name != time_column]
        if index > 0 and names != list(signals):
            raise MalformedRow(
                line, f"signal columns {names} do not match header {list(signals)}"
            )

        for name in names:
            value = record[name]
            if value is None:
                raise MalformedRow(line, f"no value for signal '{name}'")
            signals.setdefault(name, []).append(value.strip())

    return Waveform(
        delays,
        signals,
        state.min_positive_delay,
        state.total_duration,
        time_column,
    )
