"""Playback-time readings of the synthesized audio buffer."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import NamedTuple, Optional

import numpy as np

from .sound import SoundController
from .timer import PeriodicTimer, check_step

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1  # ms


class AnalyzerReading(NamedTuple):
    elapsed_ms: int
    index: int
    volume: int
    frequencies: np.ndarray  # raw per-frequency amplitude, indexed by Hz


class AnalyzerDisplay(ABC):
    """Receives analyzer readings, e.g. a volume meter and a frequency chart."""

    @abstractmethod
    def update(self, reading: AnalyzerReading):
        pass


class Analyzer:
    """Polls the sound controller's buffer as if it were being played.

    Each tick advances a playback clock by one millisecond and reads the
    buffer sample that would be playing at that moment.
    """

    def __init__(self, sound: SoundController, display: AnalyzerDisplay,
                 interval_ms: int = DEFAULT_POLL_INTERVAL):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.sound = sound
        self.display = display
        self.interval_ms = interval_ms

        self._lock = threading.RLock()
        self._elapsed_ms = 0
        self._timer: Optional[PeriodicTimer] = None
        self._generation = 0

    @property
    def elapsed_ms(self) -> int:
        return self._elapsed_ms

    @property
    def is_running(self) -> bool:
        return self._timer is not None

    def read(self) -> AnalyzerReading:
        """Read the sample at the current playback time and show it."""
        with self._lock:
            buffer, frequency_buffer = self.sound.snapshot()
            if len(buffer) == 0:
                reading = self._zero_reading(frequency_buffer)
            else:
                # Each buffer index is 1/sample_rate of a second
                index = self._elapsed_ms * self.sound.sample_rate // 1000 % len(buffer)
                reading = AnalyzerReading(self._elapsed_ms, index, int(buffer[index]),
                                          frequency_buffer[index].copy())
            self.display.update(reading)
            return reading

    def _zero_reading(self, frequency_buffer: np.ndarray) -> AnalyzerReading:
        return AnalyzerReading(self._elapsed_ms, 0, 0,
                               np.zeros(frequency_buffer.shape[1], dtype=np.int8))

    def _tick(self, generation: int):
        with self._lock:
            if generation != self._generation:
                return
            self._elapsed_ms += self.interval_ms
            self.read()

    def _cancel_timer(self) -> Optional[PeriodicTimer]:
        self._generation += 1
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel(wait=False)
        return timer

    def start(self):
        with self._lock:
            old_timer = self._cancel_timer()
            self._timer = PeriodicTimer(self.interval_ms / 1000.0, self._tick, args=(self._generation,))
            self._timer.start()
            logger.debug("Analyzer started at %d ms", self._elapsed_ms)
        if old_timer is not None:
            old_timer.cancel()

    def pause(self):
        with self._lock:
            timer = self._cancel_timer()
        if timer is not None:
            timer.cancel()

    def stop(self):
        """Stop polling, rewind to zero and clear the display."""
        with self._lock:
            timer = self._cancel_timer()
            self._elapsed_ms = 0
            _, frequency_buffer = self.sound.snapshot()
            self.display.update(self._zero_reading(frequency_buffer))
        if timer is not None:
            timer.cancel()

    def step(self, milliseconds: int) -> AnalyzerReading:
        """Advance the playback clock and read once without starting the timer."""
        milliseconds = check_step(milliseconds)
        with self._lock:
            self._elapsed_ms += milliseconds
            return self.read()
