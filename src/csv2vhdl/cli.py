"""
csv2vhdl CLI
============
Converts logic analyzer (or oscilloscope) CSV output into VHDL testbench
waveforms, so simulations can run against captures of real sensor input.

Usage:
    csv2vhdl [options] <csv_filename>
"""

import argparse
import sys

from csv2vhdl import __version__
from csv2vhdl.emitter import DEFAULT_SIGNAL_TYPE, TemplateOptions, TestbenchEmitter
from csv2vhdl.errors import ConversionError
from csv2vhdl.extractor import extract_waveform
from csv2vhdl.reader import DEFAULT_TIME_COLUMN, TableReader


def build_parser():
    parser = argparse.ArgumentParser(
        prog="csv2vhdl",
        description="CSV to VHDL: converts logic analyzer (or oscilloscope) output "
                    "into VHDL testbench waveforms.",
    )
    parser.add_argument("csv_filename", help="CSV export from the instrument")
    parser.add_argument("--time-column", default=DEFAULT_TIME_COLUMN,
                        help="The name of the column in the CSV which encodes sample times.")
    parser.add_argument("--entity",
                        help="If provided, a full VHDL template will be generated using the given entity name.")
    parser.add_argument("--signal-type", default=DEFAULT_SIGNAL_TYPE,
                        help="For use with --entity. Specifies the data type used for the captured signals.")
    parser.add_argument("-o", "--out", help="Output VHDL file (default: stdout)")
    parser.add_argument("--plot", metavar="PNG", help="Also save a preview plot of the captured waveform")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def cmd_convert(args):
    # 1. Scan the whole capture before emitting anything
    reader = TableReader(args.csv_filename, args.time_column)
    waveform = extract_waveform(reader.records(), args.time_column, source=reader)
    print(f"Read {len(waveform)} samples of {len(waveform.signals)} signals from {args.csv_filename}",
          file=sys.stderr)

    # 2. Render
    options = TemplateOptions(entity=args.entity, signal_type=args.signal_type)
    text = TestbenchEmitter(options).render(waveform)

    # 3. Write
    if args.out:
        with open(args.out, "w") as f:
            f.write(text)
        print(f"Testbench written to {args.out}", file=sys.stderr)
    else:
        sys.stdout.write(text)

    if args.plot:
        if not waveform.signals:
            print(f"No signal columns in {args.csv_filename}, skipping preview", file=sys.stderr)
        else:
            import matplotlib.pyplot as plt
            from csv2vhdl.monitor import WaveformMonitor
            fig = WaveformMonitor(waveform).plot(filename=args.plot, show=False)
            plt.close(fig)

    return waveform


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        cmd_convert(args)
    except ConversionError as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        return 1
    except OSError as e:
        # Output side (--out / --plot) could not be written
        print(f"[FAIL] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
