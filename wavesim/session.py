"""A simulation, its sound and its analyzer driven from one wave set."""

import logging
from typing import Iterable, List, Optional

from .analyzer import Analyzer, AnalyzerDisplay
from .generator import WaveGenerator
from .presets import load_preset
from .simulation import DEFAULT_SAMPLE_COUNT, WaveSimulationController, WaveSimulationDisplay
from .sound import DEFAULT_BUFFER_SIZE, AudioDeviceUnavailable, SoundController, SoundDeviceOutput
from .waves import Wave

logger = logging.getLogger(__name__)


class WaveSession:
    """Keeps the simulation and the sound synthesizer on the same waves.

    Both controllers read one :class:`WaveGenerator`, so a wave is added or
    removed exactly once and both views follow.
    """

    def __init__(self, total_length: float, display: WaveSimulationDisplay,
                 analyzer_display: Optional[AnalyzerDisplay] = None, audio: bool = False,
                 sample_count: int = DEFAULT_SAMPLE_COUNT, buffer_size: int = DEFAULT_BUFFER_SIZE):
        """Initialize the session.

        Args:
            total_length: Spatial extent of the simulation, in metres
            display: Sink for simulation samples
            analyzer_display: Sink for analyzer readings (no analyzer if None)
            audio: Play the synthesized sound on the default output device.
                   If the device cannot be opened the session continues
                   without audio.
            sample_count: Number of simulation sample points
            buffer_size: Length of the audio buffer in samples
        """
        self.waves = WaveGenerator()
        self.simulation = WaveSimulationController(total_length, display, sample_count=sample_count,
                                                   waves=self.waves)

        self.sound = None
        if audio:
            try:
                self.sound = SoundController(self.waves, output=SoundDeviceOutput(), buffer_size=buffer_size)
            except AudioDeviceUnavailable as exc:
                logger.warning("Continuing without audio: %s", exc)
        if self.sound is None:
            self.sound = SoundController(self.waves, buffer_size=buffer_size)

        self.analyzer = None
        if analyzer_display is not None:
            self.analyzer = Analyzer(self.sound, analyzer_display)

    @property
    def has_audio(self) -> bool:
        return self.sound.output is not None

    def add_wave(self, wave: Wave) -> int:
        """Add a wave and refresh the display.

        Raises:
            AudioDeviceUnavailable: If the audio line could not be reopened;
                the wave is added regardless
        """
        try:
            return self.waves.add_wave(wave)
        finally:
            self.simulation.simulate()

    def remove_wave(self, wave: Wave) -> int:
        try:
            return self.waves.remove_wave(wave)
        finally:
            self.simulation.simulate()

    def clear_waves(self):
        try:
            self.waves.clear_waves()
        finally:
            self.simulation.simulate()

    def load_waves(self, waves: Iterable[Wave]) -> List[int]:
        """Replace the current waves with ``waves``.

        The whole set is swapped in before the audio line is refreshed, so an
        :class:`AudioDeviceUnavailable` never leaves a partial set behind.
        """
        try:
            return self.waves.replace_waves(waves)
        finally:
            self.simulation.simulate()

    def load_preset(self, name: str) -> List[Wave]:
        try:
            return load_preset(self.waves, name)
        finally:
            self.simulation.simulate()

    def get_waves(self) -> List[Wave]:
        return self.waves.get_waves()

    def play(self):
        self.simulation.start()
        self.sound.start()
        if self.analyzer is not None:
            self.analyzer.start()

    def pause(self):
        self.simulation.pause()
        self.sound.stop()
        if self.analyzer is not None:
            self.analyzer.pause()

    def stop(self):
        self.simulation.stop()
        self.sound.stop()
        if self.analyzer is not None:
            self.analyzer.stop()

    def step(self, milliseconds: int):
        self.simulation.step(milliseconds)
        if self.analyzer is not None:
            self.analyzer.step(milliseconds)

    def close(self):
        self.stop()
        self.sound.close()
