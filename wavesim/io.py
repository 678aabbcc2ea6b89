"""Wave set import/export and audio file output."""

import json
import numbers
import wave
from typing import Iterable, List

import numpy as np

from .sound import SAMPLE_RATE
from .waves import Color, Wave, WaveType


class MalformedWaveData(ValueError):
    """Raised when imported wave data does not have the expected layout."""


def export_waves(waves: Iterable[Wave]) -> str:
    """Serialize waves to a JSON array.

    Each entry looks like::

        {"waveType": "SIN", "frequency": 10, "amplitude": 1.0,
         "color": {"red": 145, "green": 16, "blue": 215}}
    """
    return json.dumps([wave.to_dict() for wave in waves])


def import_waves(text: str) -> List[Wave]:
    """Deserialize waves from a JSON array produced by :func:`export_waves`.

    The ``color`` field is optional; a random colour is used when it is
    missing.

    Raises:
        MalformedWaveData: If the JSON is invalid or an entry is missing a
            field, has an unknown wave type, a non-numeric frequency or
            amplitude, or a malformed colour
        InvalidWaveParameter: If a frequency or amplitude is out of range
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedWaveData(f"Invalid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise MalformedWaveData(f"Expected a JSON array of waves, got {type(data).__name__}")

    waves = []
    for position, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise MalformedWaveData(f"Wave {position}: expected an object, got {type(entry).__name__}")
        try:
            kind = WaveType(entry["waveType"])
            frequency = entry["frequency"]
            amplitude = entry["amplitude"]
        except KeyError as exc:
            raise MalformedWaveData(f"Wave {position}: missing field {exc}") from exc
        except ValueError as exc:
            raise MalformedWaveData(f"Wave {position}: unknown wave type {entry['waveType']!r}") from exc

        for field, value in (("frequency", frequency), ("amplitude", amplitude)):
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise MalformedWaveData(f"Wave {position}: {field} must be a number, got {value!r}")

        color = entry.get("color")
        if color is not None:
            try:
                color = Color(color["red"], color["green"], color["blue"])
            except (KeyError, TypeError, ValueError) as exc:
                raise MalformedWaveData(f"Wave {position}: malformed colour {color!r}") from exc

        waves.append(Wave(kind, frequency, amplitude, color))
    return waves


def save_waves(filename: str, waves: Iterable[Wave]):
    with open(filename, "w") as f:
        f.write(export_waves(waves))


def load_waves(filename: str) -> List[Wave]:
    with open(filename, "r") as f:
        return import_waves(f.read())


def write_tone(filename: str, buffer: np.ndarray, sample_rate: int = SAMPLE_RATE, repeats: int = 1):
    """Write a signed 8-bit buffer to a mono WAV file.

    Args:
        filename: Output WAV file path
        buffer: Signed 8-bit samples, as produced by the sound controller
        sample_rate: Sample rate in Hz
        repeats: Number of times the buffer loop is written
    """
    if repeats < 1:
        raise ValueError("repeats must be at least 1")

    # 8-bit WAV samples are unsigned with 128 as silence
    samples = np.asarray(buffer, dtype=np.int16) + 128
    audio_data = np.tile(samples.clip(0, 255).astype(np.uint8), repeats)

    with wave.open(filename, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(1)
        wav.setframerate(sample_rate)
        wav.writeframes(audio_data.tobytes())
