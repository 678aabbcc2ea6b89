import threading

import numpy as np
import pytest

from wavesim import AnalyzerDisplay, AudioDeviceUnavailable, AudioOutput, WaveSimulationDisplay


class RecordingDisplay(WaveSimulationDisplay):
    """Keeps every update it receives."""

    def __init__(self):
        self.updates = []
        self.lock = threading.Lock()

    def update(self, samples, elapsed_ms):
        with self.lock:
            self.updates.append((samples, elapsed_ms))

    @property
    def count(self):
        with self.lock:
            return len(self.updates)

    @property
    def last(self):
        with self.lock:
            return self.updates[-1]


class RecordingAnalyzerDisplay(AnalyzerDisplay):
    def __init__(self):
        self.readings = []
        self.lock = threading.Lock()

    def update(self, reading):
        with self.lock:
            self.readings.append(reading)

    @property
    def count(self):
        with self.lock:
            return len(self.readings)


class MemoryOutput(AudioOutput):
    """Audio line that only records what it was asked to do."""

    def __init__(self):
        self.opened = []
        self.calls = []
        self.playing = False
        self._open = False

    def open(self, buffer, sample_rate):
        self.calls.append("open")
        self.opened.append((np.array(buffer), sample_rate))
        self._open = True

    def start(self):
        self.calls.append("start")
        self.playing = True

    def stop(self):
        self.calls.append("stop")
        self.playing = False

    def close(self):
        self.calls.append("close")
        self.playing = False
        self._open = False

    @property
    def is_open(self):
        return self._open


class BrokenOutput(MemoryOutput):
    """Audio line that fails to open after ``working_opens`` successful opens."""

    def __init__(self, working_opens=0):
        super().__init__()
        self.working_opens = working_opens

    def open(self, buffer, sample_rate):
        if len(self.opened) >= self.working_opens:
            raise AudioDeviceUnavailable("no audio device")
        super().open(buffer, sample_rate)


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def analyzer_display():
    return RecordingAnalyzerDisplay()


@pytest.fixture
def output():
    return MemoryOutput()
