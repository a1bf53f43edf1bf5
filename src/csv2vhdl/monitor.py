import sys

import matplotlib
import matplotlib.pyplot as plt
import numpy as np

# Plot levels for std_ulogic literals. Everything else (X, Z, U, W, -)
# is drawn on the middle line.
LOW, MID, HIGH = 0.0, 0.5, 1.0
LEVELS = {"0": LOW, "L": LOW, "1": HIGH, "H": HIGH}


def level(value):
    """Maps a captured literal to its plot level."""
    return LEVELS.get(value.upper(), MID)


class WaveformMonitor:
    """
    Visualizes an extracted Waveform before it is turned into a testbench.
    Uses the same 4-state rendering as the simulator traces: valid levels
    in green, unknown / high-impedance samples as red markers on the mid line.
    """
    def __init__(self, waveform):
        self.waveform = waveform
        self.time = waveform.sample_times()
        self.history = {
            name: np.array([level(v) for v in values], dtype=np.float64)
            for name, values in waveform.signals.items()
        }

    def _draw_trace(self, ax, name, vals):
        """One signal: replay-time step line, unknown samples flagged on the mid line."""
        ax.step(self.time, vals, where='post', color='#00AA00', linewidth=2)

        unknown = vals == MID
        if unknown.any():
            ax.scatter(self.time[unknown], vals[unknown], color='red', s=30, zorder=3,
                       label=f"X/Z/U ({int(unknown.sum())})")
            ax.legend(loc='upper right', fontsize=8)

        ax.set_yticks([LOW, MID, HIGH], labels=['0', 'X', '1'])
        ax.set_ylim(-0.1, 1.1)
        ax.set_ylabel(name, rotation=0, ha='right', fontsize=10)
        ax.grid(axis='x', linestyle='--', alpha=0.5)

    def plot(self, filename=None, show=True):
        """
        Draws one step trace per signal against replay time (seconds).
        Saves a PNG when filename is given. Returns the figure; the caller
        owns it and should plt.close() it when not shown.
        """
        if not self.history:
            raise ValueError("Waveform has no signal columns to plot")

        rows = len(self.history)
        fig, axes = plt.subplots(rows, 1, figsize=(12, 2 * rows), sharex=True, squeeze=False)
        for ax, (name, vals) in zip(axes[:, 0], self.history.items()):
            self._draw_trace(ax, name, vals)

        axes[-1, 0].set_xlabel(f"Time (s), {len(self.time)} samples", fontsize=10)
        fig.suptitle(f"Captured Waveform ({self.waveform.time_column})",
                     fontsize=14, fontweight='bold')
        fig.tight_layout(rect=[0, 0.03, 1, 0.95])

        if filename:
            fig.savefig(filename)
            print(f"Waveform preview written to {filename}", file=sys.stderr)
        if show and matplotlib.get_backend().lower() != "agg":
            plt.show()
        return fig
