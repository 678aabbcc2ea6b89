"""Canonical wave sets approximating classic waveforms."""

from collections import OrderedDict
from typing import List

from .generator import WaveGenerator
from .waves import Wave, WaveType

# Fourier-series approximations built from the first few harmonics
PRESETS = OrderedDict([
    ("Pure Sine", (
        (WaveType.SIN, 10, 1.0),
    )),
    ("Square Wave", (
        (WaveType.SIN, 10, 1.0),
        (WaveType.SIN, 30, 0.33),
        (WaveType.SIN, 50, 0.20),
        (WaveType.SIN, 70, 0.14),
    )),
    ("Triangle Wave", (
        (WaveType.SIN, 10, 1.0),
        (WaveType.SIN, 30, 0.11),
        (WaveType.SIN, 50, 0.04),
        (WaveType.SIN, 70, 0.02),
    )),
    ("Sawtooth Wave", (
        (WaveType.SIN, 10, 1.0),
        (WaveType.SIN, 20, 0.5),
        (WaveType.SIN, 30, 0.33),
        (WaveType.SIN, 40, 0.25),
    )),
])


def preset_waves(name: str) -> List[Wave]:
    """Build new waves (with random colours) for the named preset."""
    return [Wave(kind, frequency, amplitude) for kind, frequency, amplitude in PRESETS[name]]


def load_preset(generator: WaveGenerator, name: str) -> List[Wave]:
    """Replace the generator's waves with the named preset."""
    waves = preset_waves(name)
    generator.replace_waves(waves)
    return waves
