"""
VHDL Testbench Emitter
======================
Renders an extracted Waveform as VHDL source that replays the capture.

Two layouts:
- Fragment (no entity): type/constant declarations plus the stimulus
  process, ready to paste into an existing architecture.
- Full template (entity given): banner, library clauses, an empty entity,
  an architecture declaring one signal per captured column, then the
  fragment wrapped in begin/end.
"""

from __future__ import annotations

from typing import IO, Iterator, Optional

from csv2vhdl.extractor import Waveform

DEFAULT_SIGNAL_TYPE = "std_ulogic"
ARCHITECTURE_NAME = "captured_waveforms"
BANNER_RULE = "-" * 82


class TemplateOptions:
    """Configuration that is supplied by the user, not computed from the capture."""

    __slots__ = ("entity", "signal_type")

    def __init__(self, entity: Optional[str] = None, signal_type: str = DEFAULT_SIGNAL_TYPE):
        self.entity = entity
        self.signal_type = signal_type


def aggregate(literals) -> str:
    """
    Array aggregate for a constant initializer. A one-element aggregate
    must use named association in VHDL.
    """
    if len(literals) == 1:
        return f"(0 => {literals[0]})"
    return "(" + ", ".join(literals) + ")"


class TestbenchEmitter:
    __test__ = False  # not a pytest class

    def __init__(self, options: Optional[TemplateOptions] = None):
        self.options = options or TemplateOptions()

    def lines(self, waveform: Waveform) -> Iterator[str]:
        entity = self.options.entity

        if entity is not None:
            yield from self._header(waveform)

        yield ""
        yield "  --Delays between the samples captured from the instrument."
        yield "  --These are used to re-create the captured waveforms."
        yield "  type sample_delay_times is array(natural range <>) of time;"
        yield (
            "  constant duration_of_previous_sample : sample_delay_times := "
            f"{aggregate(waveform.delay_literals())};"
        )
        yield ""
        yield "  --The actual samples captured by the instrument."
        yield "  --These are used to re-create the captured waveforms."
        yield "  type std_ulogic_samples is array(natural range <>) of std_ulogic;"
        for name in waveform.signal_names:
            yield (
                f"  constant {name}_samples : std_ulogic_samples := "
                f"{aggregate(waveform.value_literals(name))};"
            )

        if entity is not None:
            yield ""
            yield "begin"

        yield ""
        yield ""
        yield "  --Main stimulus process. This process applies the captured waveforms."
        yield "  process"
        yield "  begin"
        yield "    --Loop through all of the captured samples."
        yield f"    for i in 0 to {len(waveform) - 1} loop"
        yield "      wait for duration_of_previous_sample(i);"
        for name in waveform.signal_names:
            yield f"      {name} <= {name}_samples(i);"
        yield "    end loop;"
        yield "  end process;"

        if entity is not None:
            yield ""
            yield f"end {ARCHITECTURE_NAME};"

    def _header(self, waveform: Waveform) -> Iterator[str]:
        entity = self.options.entity
        yield BANNER_RULE
        yield f"-- Testbench file: {entity}"
        yield "--"
        yield "-- Generated automatically from Logic Analyzer / Oscilloscope output"
        yield "-- by csv2vhdl."
        yield "--"
        yield f"-- Minimum recommended simulation duration: {waveform.total_duration:.3e} sec"
        yield f"-- Minimum recommended simulation precision: {waveform.min_positive_delay:.3e} sec"
        yield "--"
        yield BANNER_RULE
        yield ""
        yield "library IEEE;"
        yield "use IEEE.STD_LOGIC_1164.ALL;"
        yield ""
        yield f"entity {entity} is"
        yield "end entity;"
        yield ""
        yield ""
        yield f"architecture {ARCHITECTURE_NAME} of {entity} is"
        yield ""
        yield "  --Signals automatically generated from CSV file:"
        for name in waveform.signal_names:
            yield f"  signal {name} : {self.options.signal_type};"

    def render(self, waveform: Waveform) -> str:
        return "\n".join(self.lines(waveform)) + "\n"

    def write(self, waveform: Waveform, fd: IO[str]) -> None:
        """Renders the whole testbench before touching fd."""
        fd.write(self.render(waveform))
