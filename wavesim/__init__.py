"""WaveSim - Superposition of discrete waves, simulated and synthesized as sound."""

from .waves import Wave, WaveType, Color, InvalidWaveParameter
from .generator import WaveGenerator, SeriesKey, COMBINED
from .simulation import WaveSimulationController, WaveSimulationDisplay, SimulationStatus
from .sound import SoundController, SoundDeviceOutput, AudioOutput, AudioDeviceUnavailable
from .analyzer import Analyzer, AnalyzerDisplay, AnalyzerReading
from .io import import_waves, export_waves, load_waves, save_waves, write_tone, MalformedWaveData
from .presets import PRESETS, preset_waves, load_preset
from .session import WaveSession

__version__ = "0.1.0"
__all__ = [
    "Wave", "WaveType", "Color", "InvalidWaveParameter",
    "WaveGenerator", "SeriesKey", "COMBINED",
    "WaveSimulationController", "WaveSimulationDisplay", "SimulationStatus",
    "SoundController", "SoundDeviceOutput", "AudioOutput", "AudioDeviceUnavailable",
    "Analyzer", "AnalyzerDisplay", "AnalyzerReading",
    "import_waves", "export_waves", "load_waves", "save_waves", "write_tone", "MalformedWaveData",
    "PRESETS", "preset_waves", "load_preset",
    "WaveSession",
]
