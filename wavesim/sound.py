"""Audio synthesis of the wave set and looping playback."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

import numpy as np

from .generator import WaveGenerator
from .waves import Wave

logger = logging.getLogger(__name__)

# Ceiling of the 8-bit signed sample range
MAX_VOLUME = 127
SAMPLE_RATE = 44100
DEFAULT_BUFFER_SIZE = 4410


class AudioDeviceUnavailable(RuntimeError):
    """Raised when no PCM output line can be opened."""


def to_byte(values) -> np.ndarray:
    """Round half up and convert to signed 8-bit samples."""
    return np.floor(np.asarray(values) + 0.5).astype(np.int8)


class AudioOutput(ABC):
    """An output line playing a buffer of 8-bit signed mono samples in a loop."""

    @abstractmethod
    def open(self, buffer: np.ndarray, sample_rate: int):
        """Prepare the line to play ``buffer``.

        Raises:
            AudioDeviceUnavailable: If the line cannot be acquired
        """
        pass

    @abstractmethod
    def start(self):
        """Loop the buffer continuously until stopped."""
        pass

    @abstractmethod
    def stop(self):
        pass

    @abstractmethod
    def close(self):
        pass

    @property
    @abstractmethod
    def is_open(self) -> bool:
        pass


class SoundDeviceOutput(AudioOutput):
    """Loops a buffer through a PortAudio output stream."""

    def __init__(self, block_size: int = 512, latency: str = "low"):
        self.block_size = block_size
        self.latency = latency
        self.stream = None
        self.buffer = np.zeros(0, dtype=np.int8)
        self.position = 0
        self.is_running = False

    def audio_callback(self, outdata, frames, time, status):
        """Audio callback for sounddevice."""
        if status:
            logger.warning("Audio callback status: %s", status)

        if len(self.buffer) == 0:
            outdata.fill(0)
            return

        # Wrap around the end of the buffer
        indices = (self.position + np.arange(frames)) % len(self.buffer)
        outdata[:, 0] = self.buffer[indices]
        self.position = (self.position + frames) % len(self.buffer)

    def open(self, buffer: np.ndarray, sample_rate: int):
        try:
            import sounddevice as sd
        except OSError as exc:
            # Raised when the PortAudio library itself is missing
            raise AudioDeviceUnavailable(f"PortAudio is not available: {exc}") from exc

        self.buffer = np.asarray(buffer, dtype=np.int8)
        self.position = 0
        try:
            self.stream = sd.OutputStream(
                samplerate=sample_rate,
                blocksize=self.block_size,
                channels=1,
                dtype="int8",
                callback=self.audio_callback,
                latency=self.latency,
            )
        except (sd.PortAudioError, ValueError) as exc:
            self.stream = None
            raise AudioDeviceUnavailable(f"Cannot open audio output: {exc}") from exc

    def start(self):
        if self.stream:
            self.stream.start()
            self.is_running = True

    def stop(self):
        if self.stream:
            self.stream.stop()
        self.is_running = False

    def close(self):
        if self.stream:
            self.stream.stop()
            self.stream.close()
            self.stream = None
        self.is_running = False

    @property
    def is_open(self) -> bool:
        return self.stream is not None


class SoundController:
    """Synthesizes the wave set into a looping 8-bit audio buffer.

    The buffer is rebuilt in full whenever the wave set changes. Alongside the
    mixed buffer, a per-frequency matrix records the contribution of every
    wave at every sample index for analysis displays.
    """

    def __init__(self, waves: Optional[WaveGenerator] = None, output: Optional[AudioOutput] = None,
                 buffer_size: int = DEFAULT_BUFFER_SIZE, sample_rate: int = SAMPLE_RATE):
        """Initialize the sound controller.

        Args:
            waves: Wave generator to synthesize (shared with other consumers);
                   a new empty one is created if omitted
            output: Audio line to play the buffer on. None synthesizes
                    buffers without playing them.
            buffer_size: Number of samples in the looping buffer
            sample_rate: Sample rate in Hz

        Raises:
            AudioDeviceUnavailable: If ``output`` cannot be opened
        """
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")

        self.wave_generator = waves if waves is not None else WaveGenerator()
        self.output = output
        self.buffer_size = buffer_size
        self.sample_rate = sample_rate

        self._lock = threading.RLock()
        self._playing = False
        self._closed = False
        self._buffer = np.zeros(buffer_size, dtype=np.int8)
        self._frequency_buffer = np.zeros((buffer_size, 0), dtype=np.int8)

        self.refresh_buffer()
        self.generate_tone()
        # Subscribe last so a failed construction leaves no listener behind
        self.wave_generator.subscribe(self._on_waves_changed)

    @property
    def waves(self) -> List[Wave]:
        """Held waves sorted by ascending frequency."""
        return sorted(self.wave_generator.get_waves(), key=lambda wave: wave.frequency)

    @property
    def buffer(self) -> np.ndarray:
        return self._buffer

    @property
    def frequency_buffer(self) -> np.ndarray:
        return self._frequency_buffer

    def snapshot(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return the mixed buffer and per-frequency matrix from the same refresh."""
        with self._lock:
            return self._buffer, self._frequency_buffer

    def get_buffer_value(self, amplitude, wave_count: int):
        """Scale a summed amplitude to the byte range, averaged over the waves.

        Dividing by the number of waves keeps the mix within -127..127.
        """
        return to_byte(np.asarray(amplitude) * MAX_VOLUME / wave_count)

    def refresh_buffer(self):
        """Recompute the audio buffer and the per-frequency matrix."""
        waves = self.waves
        t = np.arange(self.buffer_size) / self.sample_rate

        if waves:
            width = waves[-1].frequency + 1
        else:
            width = 0
        frequency_buffer = np.zeros((self.buffer_size, width), dtype=np.int8)
        total = np.zeros(self.buffer_size)
        for wave in waves:
            amplitude = wave.amplitude_at(0, t)
            total += amplitude
            # Raw per-wave amplitude, not averaged like the mixed buffer
            frequency_buffer[:, wave.frequency] = to_byte(amplitude * MAX_VOLUME)

        if waves:
            buffer = self.get_buffer_value(total, len(waves))
        else:
            buffer = np.zeros(self.buffer_size, dtype=np.int8)

        with self._lock:
            self._buffer = buffer
            self._frequency_buffer = frequency_buffer
        logger.debug("Refreshed audio buffer: %d samples, %d waves", self.buffer_size, len(waves))

    def generate_tone(self):
        """Reopen the audio line with the current buffer.

        If the old line was playing, the new one starts playing too.

        Raises:
            AudioDeviceUnavailable: If the line cannot be opened
        """
        if self.output is None:
            return
        with self._lock:
            self.output.stop()
            self.output.close()
            try:
                self.output.open(self._buffer, self.sample_rate)
            except AudioDeviceUnavailable as exc:
                logger.error("Audio output unavailable: %s", exc)
                raise
            if self._playing:
                self.output.start()

    def _on_waves_changed(self):
        self.refresh_buffer()
        self.generate_tone()

    def add_wave(self, wave: Wave) -> int:
        return self.wave_generator.add_wave(wave)

    def remove_wave(self, wave: Wave) -> int:
        return self.wave_generator.remove_wave(wave)

    def clear_waves(self):
        self.wave_generator.clear_waves()

    def start(self):
        """Play the buffer in a loop."""
        with self._lock:
            if self.output is None or not self.output.is_open:
                logger.warning("No open audio line, nothing to play")
                return
            self.output.start()
            self._playing = True

    def stop(self):
        with self._lock:
            self._playing = False
            if self.output is not None and self.output.is_open:
                self.output.stop()

    @property
    def is_playing(self) -> bool:
        return self._playing

    def close(self):
        """Release the audio line and stop following the wave set."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._playing = False
        self.wave_generator.unsubscribe(self._on_waves_changed)
        if self.output is not None:
            self.output.close()
