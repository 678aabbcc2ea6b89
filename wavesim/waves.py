"""Discrete sinusoidal waves."""

import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

import numpy as np


SPEED_OF_SOUND = 343.0  # m/s


class InvalidWaveParameter(ValueError):
    """Raised when a wave is given an out-of-range frequency or amplitude."""


class WaveType(Enum):
    """Shape of a discrete wave."""

    SIN = "SIN"
    COS = "COS"


@dataclass(frozen=True)
class Color:
    """RGB colour tag used to tell waves apart on a display."""

    red: int
    green: int
    blue: int

    def __post_init__(self):
        for name in ("red", "green", "blue"):
            value = getattr(self, name)
            if not isinstance(value, (int, np.integer)) or isinstance(value, bool) or not 0 <= value <= 255:
                raise ValueError(f"Colour channel {name} must be an integer between 0 and 255, got {value!r}")
            object.__setattr__(self, name, int(value))

    @classmethod
    def random(cls) -> "Color":
        """Create a colour with every channel drawn uniformly from 0-255."""
        red, green, blue = np.random.randint(0, 256, size=3)
        return cls(int(red), int(green), int(blue))


def _check_frequency(frequency) -> int:
    valid = (isinstance(frequency, numbers.Real) and not isinstance(frequency, bool)
             and np.isfinite(frequency) and int(frequency) == frequency and frequency > 0)
    if not valid:
        raise InvalidWaveParameter(f"Frequency must be an integer greater than 0, got {frequency!r}")
    return int(frequency)


def _check_amplitude(amplitude) -> float:
    if not isinstance(amplitude, numbers.Real) or isinstance(amplitude, bool):
        raise InvalidWaveParameter(f"Amplitude must be a number, got {amplitude!r}")
    value = float(amplitude)
    # NaN fails the comparison as well
    if not -1.0 <= value <= 1.0:
        raise InvalidWaveParameter(f"Amplitude must be between -1 and 1, got {amplitude!r}")
    return value


class Wave:
    """A single sinusoid travelling at the speed of sound.

    The displacement at position ``x`` (metres) and time ``t`` (seconds) is::

        y(x, t) = A * f(2*pi*freq*t - 2*pi*x / wavelength)

    where ``f`` is ``sin`` or ``cos`` depending on the wave type.
    """

    def __init__(self, kind: WaveType, frequency: int, amplitude: float,
                 color: Optional[Color] = None):
        """Create a wave.

        Args:
            kind: SIN or COS
            frequency: Frequency in Hz, an integer greater than 0
            amplitude: Amplitude between -1 and 1
            color: Display colour (random if omitted)

        Raises:
            InvalidWaveParameter: If frequency or amplitude is out of range
        """
        self._observers: List[Callable[[], None]] = []
        self.kind = kind
        self.frequency = frequency
        self.amplitude = amplitude
        self.color = color if color is not None else Color.random()

    def add_observer(self, callback: Callable[[], None]):
        """Call ``callback()`` whenever a parameter of this wave changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[], None]):
        self._observers.remove(callback)

    def _changed(self):
        for callback in list(self._observers):
            callback()

    @property
    def kind(self) -> WaveType:
        return self._kind

    @kind.setter
    def kind(self, kind: WaveType):
        if not isinstance(kind, WaveType):
            raise InvalidWaveParameter(f"Wave type must be a WaveType, got {kind!r}")
        self._kind = kind
        self._changed()

    @property
    def frequency(self) -> int:
        return self._frequency

    @frequency.setter
    def frequency(self, frequency: int):
        self._frequency = _check_frequency(frequency)
        self._changed()

    @property
    def amplitude(self) -> float:
        return self._amplitude

    @amplitude.setter
    def amplitude(self, amplitude: float):
        self._amplitude = _check_amplitude(amplitude)
        self._changed()

    @property
    def wavelength(self) -> float:
        """Wavelength in metres."""
        return SPEED_OF_SOUND / self._frequency

    def amplitude_at(self, x, t):
        """Displacement of the wave at position ``x`` and time ``t``.

        Args:
            x: Position in metres (scalar or numpy array)
            t: Time in seconds (scalar or numpy array)

        Returns:
            Displacement with the broadcast shape of ``x`` and ``t``
        """
        omega = 2 * np.pi * self._frequency
        k = 2 * np.pi / self.wavelength
        phase = omega * np.asarray(t, dtype=np.float64) - k * np.asarray(x, dtype=np.float64)
        if self._kind is WaveType.SIN:
            values = np.sin(phase)
        else:
            values = np.cos(phase)
        result = self._amplitude * values
        if np.ndim(result) == 0:
            return float(result)
        return result

    def switch_type(self):
        """Toggle the wave between SIN and COS."""
        self._kind = WaveType.COS if self._kind is WaveType.SIN else WaveType.SIN
        self._changed()

    def to_dict(self) -> dict:
        return {
            "waveType": self._kind.value,
            "frequency": self._frequency,
            "amplitude": self._amplitude,
            "color": {"red": self.color.red, "green": self.color.green, "blue": self.color.blue},
        }

    def __eq__(self, other):
        if not isinstance(other, Wave):
            return NotImplemented
        return (self._kind, self._frequency, self._amplitude, self.color) == \
            (other._kind, other._frequency, other._amplitude, other.color)

    __hash__ = None

    def __repr__(self):
        return (f"Wave({self._kind.name}, frequency={self._frequency}, "
                f"amplitude={self._amplitude}, color={self.color!r})")
