"""Wave simulation clock and spatial sampler."""

import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from .generator import COMBINED, SeriesKey, WaveGenerator
from .timer import PeriodicTimer, check_step
from .waves import Wave

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_COUNT = 1024
DEFAULT_UPDATE_INTERVAL = 10  # ms


class SimulationStatus(Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"


class WaveSimulationDisplay(ABC):
    """Receives sampled wave data, e.g. a chart or a console printer."""

    @abstractmethod
    def update(self, samples: Dict[SeriesKey, np.ndarray], elapsed_ms: int):
        """Show the latest simulation data.

        Args:
            samples: Sampled displacement per series, keyed by wave id or
                     ``COMBINED`` for the sum of all waves
            elapsed_ms: Simulation time of the samples in milliseconds
        """
        pass


class WaveSimulationController:
    """Samples a wave generator across space while a clock advances time.

    While playing, a timer advances the clock by ``interval_ms`` every
    ``interval_ms`` milliseconds and pushes a fresh set of samples to the
    display.
    """

    def __init__(self, total_length: float, display: WaveSimulationDisplay,
                 sample_count: int = DEFAULT_SAMPLE_COUNT, waves: Optional[WaveGenerator] = None,
                 interval_ms: int = DEFAULT_UPDATE_INTERVAL):
        """Initialize the simulation.

        Args:
            total_length: Spatial extent to sample, in metres
            display: Sink receiving each set of samples
            sample_count: Number of sample points across ``total_length``
            waves: Wave generator to sample (shared with other consumers);
                   a new empty one is created if omitted
            interval_ms: Clock tick period in milliseconds
        """
        if total_length <= 0:
            raise ValueError("total_length must be positive")
        if sample_count <= 0:
            raise ValueError("sample_count must be positive")
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")

        self.total_length = total_length
        self.display = display
        self.sample_count = sample_count
        self.waves = waves if waves is not None else WaveGenerator()
        self.interval_ms = interval_ms

        self._lock = threading.RLock()
        self._status = SimulationStatus.STOPPED
        self._elapsed_ms = 0
        self._timer: Optional[PeriodicTimer] = None
        self._generation = 0

    @property
    def status(self) -> SimulationStatus:
        return self._status

    @property
    def elapsed_ms(self) -> int:
        return self._elapsed_ms

    def add_wave(self, wave: Wave) -> int:
        return self.waves.add_wave(wave)

    def remove_wave(self, wave: Wave) -> int:
        return self.waves.remove_wave(wave)

    def clear_waves(self):
        self.waves.clear_waves()

    def get_waves(self) -> List[Wave]:
        return self.waves.get_waves()

    def wave(self, key: SeriesKey) -> Optional[Wave]:
        """Look up the wave behind a series key (None for the combined series)."""
        if key.is_combined:
            return None
        return self.waves.get(key.wave_id)

    def positions(self) -> np.ndarray:
        gap = self.total_length / self.sample_count
        return np.arange(self.sample_count) * gap

    def sample(self) -> Dict[SeriesKey, np.ndarray]:
        """Sample every wave and their sum at the current time.

        The combined series is summed from the same snapshot of the wave set
        as the individual series, so both always agree.
        """
        x = self.positions()
        t = self._elapsed_ms / 1000.0

        combined = np.zeros(self.sample_count)
        samples = {COMBINED: combined}
        for wave_id, wave in self.waves.entries():
            series = wave.amplitude_at(x, t)
            combined += series
            samples[SeriesKey.individual(wave_id)] = series
        return samples

    def simulate(self) -> Dict[SeriesKey, np.ndarray]:
        """Sample the waves and push the result to the display."""
        with self._lock:
            samples = self.sample()
            self.display.update(samples, self._elapsed_ms)
            return samples

    def _tick(self, generation: int):
        with self._lock:
            # A cancelled timer may still be waiting on the lock
            if generation != self._generation:
                return
            self._elapsed_ms += self.interval_ms
            self.simulate()

    def _cancel_timer(self) -> Optional[PeriodicTimer]:
        # Caller holds the lock; join the returned timer after releasing it
        self._generation += 1
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel(wait=False)
        return timer

    def start(self):
        """Start (or resume) the simulation clock."""
        with self._lock:
            old_timer = self._cancel_timer()
            self._timer = PeriodicTimer(self.interval_ms / 1000.0, self._tick, args=(self._generation,))
            self._timer.start()
            self._status = SimulationStatus.PLAYING
            logger.debug("Simulation playing from %d ms", self._elapsed_ms)
        if old_timer is not None:
            old_timer.cancel()

    def pause(self):
        """Stop the clock, keeping the elapsed time."""
        with self._lock:
            timer = self._cancel_timer()
            self._status = SimulationStatus.PAUSED
            logger.debug("Simulation paused at %d ms", self._elapsed_ms)
        if timer is not None:
            timer.cancel()

    def stop(self):
        """Stop the clock and reset the elapsed time to zero."""
        with self._lock:
            timer = self._cancel_timer()
            self._elapsed_ms = 0
            self._status = SimulationStatus.STOPPED
            logger.debug("Simulation stopped")
        if timer is not None:
            timer.cancel()

    def step(self, milliseconds: int):
        """Advance the clock by ``milliseconds`` and sample once.

        Works in any state and leaves the status and timer untouched.

        Raises:
            ValueError: If ``milliseconds`` is negative or not a whole number
        """
        milliseconds = check_step(milliseconds)
        with self._lock:
            self._elapsed_ms += milliseconds
            return self.simulate()
