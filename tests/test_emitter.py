"""
VHDL Testbench Emitter Verification
===================================
Checks both output layouts:
1. Fragment only (no entity): constants + stimulus process
2. Full template (entity given): banner, entity, architecture, signals
"""

import sys
import os
import io
import math
import pytest

# Setup path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from csv2vhdl.emitter import TemplateOptions, TestbenchEmitter, aggregate
from csv2vhdl.extractor import Waveform, extract_waveform


@pytest.fixture
def waveform():
    records = [
        {"Time[s]": "0.0", "A": "0", "B": "Z"},
        {"Time[s]": "0.1", "A": "1", "B": "Z"},
        {"Time[s]": "0.25", "A": "1", "B": "0"},
    ]
    return extract_waveform(records)


def test_fragment_without_entity(waveform):
    text = TestbenchEmitter().render(waveform)

    assert "entity" not in text
    assert "architecture" not in text
    assert "library" not in text
    assert "end captured_waveforms;" not in text
    assert "\nbegin\n" not in text

    assert "  type sample_delay_times is array(natural range <>) of time;" in text
    assert ("  constant duration_of_previous_sample : sample_delay_times := "
            "(0.0 sec, 0.1 sec, 0.15 sec);") in text
    assert "  constant A_samples : std_ulogic_samples := ('0', '1', '1');" in text
    assert "  constant B_samples : std_ulogic_samples := ('Z', 'Z', '0');" in text


def test_stimulus_process(waveform):
    lines = list(TestbenchEmitter().lines(waveform))
    start = lines.index("  process")

    assert lines[start:] == [
        "  process",
        "  begin",
        "    --Loop through all of the captured samples.",
        "    for i in 0 to 2 loop",
        "      wait for duration_of_previous_sample(i);",
        "      A <= A_samples(i);",
        "      B <= B_samples(i);",
        "    end loop;",
        "  end process;",
    ]


def test_full_template(waveform):
    options = TemplateOptions(entity="tb_sensor")
    lines = list(TestbenchEmitter(options).lines(waveform))
    text = "\n".join(lines)

    assert lines[0].startswith("-" * 20)
    assert "-- Testbench file: tb_sensor" in lines
    assert "-- Minimum recommended simulation duration: 2.500e-01 sec" in lines
    assert "-- Minimum recommended simulation precision: 1.000e-01 sec" in lines
    assert "library IEEE;" in lines
    assert "use IEEE.STD_LOGIC_1164.ALL;" in lines
    assert "entity tb_sensor is" in lines
    assert "architecture captured_waveforms of tb_sensor is" in lines
    assert "  signal A : std_ulogic;" in lines
    assert "  signal B : std_ulogic;" in lines
    assert lines[-1] == "end captured_waveforms;"

    # declarations precede begin, the process follows it
    assert text.index("signal A") < text.index("constant A_samples") < text.index("\nbegin\n")
    assert text.index("\nbegin\n") < text.index("  process")


def test_custom_signal_type(waveform):
    options = TemplateOptions(entity="tb", signal_type="std_logic")
    text = TestbenchEmitter(options).render(waveform)
    assert "  signal A : std_logic;" in text
    assert "  signal B : std_logic;" in text
    # sample constants keep their own element type
    assert "type std_ulogic_samples is array(natural range <>) of std_ulogic;" in text


def test_signal_type_ignored_without_entity(waveform):
    options = TemplateOptions(signal_type="bit")
    text = TestbenchEmitter(options).render(waveform)
    assert ": bit;" not in text


def test_empty_entity_name_still_gets_template(waveform):
    """An empty --entity is present, not absent."""
    lines = list(TestbenchEmitter(TemplateOptions(entity="")).lines(waveform))
    assert "library IEEE;" in lines
    assert "architecture captured_waveforms of  is" in lines
    assert lines[-1] == "end captured_waveforms;"


def test_infinite_precision_banner():
    """A capture with no positive delay still renders the banner."""
    wf = extract_waveform([{"Time[s]": "0", "A": "1"}])
    assert wf.min_positive_delay == math.inf
    text = TestbenchEmitter(TemplateOptions(entity="tb")).render(wf)
    assert "-- Minimum recommended simulation precision: inf sec" in text
    assert "-- Minimum recommended simulation duration: 0.000e+00 sec" in text


def test_single_sample_aggregate():
    wf = Waveform((1e-05,), {"A": ("1",)}, 1e-05, 1e-05)
    text = TestbenchEmitter().render(wf)
    assert "sample_delay_times := (0 => 1.0e-05 sec);" in text
    assert "A_samples : std_ulogic_samples := (0 => '1');" in text
    assert "for i in 0 to 0 loop" in text


def test_aggregate():
    assert aggregate(["a"]) == "(0 => a)"
    assert aggregate(["a", "b"]) == "(a, b)"
    assert aggregate([]) == "()"


def test_index_alignment(waveform):
    """Index i in every constant refers to the same record."""
    lines = TestbenchEmitter().render(waveform).splitlines()
    delays = next(l for l in lines if "duration_of_previous_sample :" in l)
    a = next(l for l in lines if "A_samples :" in l)
    n_delays = delays.split(":=")[1].count("sec")
    n_a = a.split(":=")[1].count("'") // 2
    assert n_delays == n_a == len(waveform)


def test_write_renders_once(waveform):
    fd = io.StringIO()
    emitter = TestbenchEmitter(TemplateOptions(entity="tb"))
    emitter.write(waveform, fd)
    assert fd.getvalue() == emitter.render(waveform)
    assert fd.getvalue().endswith("end captured_waveforms;\n")


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
