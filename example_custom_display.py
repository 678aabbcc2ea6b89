"""Example of writing a custom display for the wave simulation."""

import time

import numpy as np
from wavesim import COMBINED, Wave, WaveSimulationController, WaveSimulationDisplay, WaveType


class PeakDisplay(WaveSimulationDisplay):
    """Prints where the combined wave peaks along the sampled line."""

    def __init__(self, total_length: float):
        self.total_length = total_length
        self.updates = 0

    def update(self, samples, elapsed_ms):
        self.updates += 1
        combined = samples[COMBINED]
        peak = int(np.argmax(combined))
        position = peak * self.total_length / len(combined)
        print(f"t = {elapsed_ms:>4}ms  peak {combined[peak]:+.3f} at x = {position:6.2f}m")


class CancellationDisplay(WaveSimulationDisplay):
    """Reports whether the waves cancel each other out everywhere."""

    def update(self, samples, elapsed_ms):
        silent = np.allclose(samples[COMBINED], 0.0)
        print(f"t = {elapsed_ms:>4}ms  {'cancelled' if silent else 'audible'}")


if __name__ == "__main__":
    # Two harmonics drifting past each other
    display = PeakDisplay(total_length=100.0)
    simulation = WaveSimulationController(100.0, display, sample_count=512)
    simulation.add_wave(Wave(WaveType.SIN, 10, 1.0))
    simulation.add_wave(Wave(WaveType.COS, 20, 0.5))

    for _ in range(5):
        simulation.step(10)

    # Let the clock run on its own for a moment
    simulation.start()
    time.sleep(0.1)
    simulation.stop()
    print(f"{display.updates} updates")

    # Opposite amplitudes at the same frequency cancel perfectly
    simulation = WaveSimulationController(10.0, CancellationDisplay())
    simulation.add_wave(Wave(WaveType.SIN, 1, 1.0))
    simulation.add_wave(Wave(WaveType.SIN, 1, -1.0))
    simulation.step(250)
