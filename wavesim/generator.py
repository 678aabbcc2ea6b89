"""Wave set shared by the simulation and the sound synthesizer."""

import itertools
import logging
import threading
from typing import Callable, Iterable, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np

from .waves import Wave, WaveType

logger = logging.getLogger(__name__)


class SeriesKey(NamedTuple):
    """Key of a sampled series: one wave (by id) or the combined signal."""

    wave_id: Optional[int]

    @classmethod
    def individual(cls, wave_id: int) -> "SeriesKey":
        return cls(wave_id)

    @property
    def is_combined(self) -> bool:
        return self.wave_id is None


COMBINED = SeriesKey(None)


class WaveGenerator:
    """Ordered collection of waves whose amplitudes superpose.

    Every wave gets a stable integer id when it is added. Ids are never reused,
    so they can key sampled data even if the wave is mutated or removed later.
    Listeners registered with :meth:`subscribe` are called after each change,
    including changes made directly on a held wave through its setters.
    """

    def __init__(self, waves=None):
        self._lock = threading.RLock()
        self._entries: List[Tuple[int, Wave]] = []
        self._ids = itertools.count()
        self._listeners: List[Callable[[], None]] = []
        self._muted = 0
        if waves:
            self.add_waves(waves)

    def subscribe(self, callback: Callable[[], None]):
        """Call ``callback()`` after every change to the wave set."""
        with self._lock:
            self._listeners.append(callback)

    def unsubscribe(self, callback: Callable[[], None]):
        with self._lock:
            self._listeners.remove(callback)

    def _notify(self):
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            callback()

    def _on_wave_changed(self):
        with self._lock:
            # Changes made by update_wave are announced once it is done
            if self._muted:
                return
        self._notify()

    def _attach(self, wave: Wave) -> int:
        # Caller holds the lock
        if not isinstance(wave, Wave):
            raise TypeError(f"Expected a Wave, got {type(wave).__name__}")
        wave_id = next(self._ids)
        self._entries.append((wave_id, wave))
        wave.add_observer(self._on_wave_changed)
        return wave_id

    def _detach(self, index: int) -> Tuple[int, Wave]:
        wave_id, wave = self._entries.pop(index)
        wave.remove_observer(self._on_wave_changed)
        return wave_id, wave

    def add_wave(self, wave: Wave) -> int:
        """Append a wave and return its id."""
        with self._lock:
            wave_id = self._attach(wave)
        logger.debug("Added wave %d: %r", wave_id, wave)
        self._notify()
        return wave_id

    def add_waves(self, waves: Iterable[Wave]) -> List[int]:
        """Append several waves, announcing the change once."""
        waves = list(waves)
        for wave in waves:
            if not isinstance(wave, Wave):
                raise TypeError(f"Expected a Wave, got {type(wave).__name__}")
        with self._lock:
            wave_ids = [self._attach(wave) for wave in waves]
        logger.debug("Added %d waves", len(wave_ids))
        self._notify()
        return wave_ids

    def replace_waves(self, waves: Iterable[Wave]) -> List[int]:
        """Swap the whole wave set for ``waves``, announcing the change once."""
        waves = list(waves)
        for wave in waves:
            if not isinstance(wave, Wave):
                raise TypeError(f"Expected a Wave, got {type(wave).__name__}")
        with self._lock:
            while self._entries:
                self._detach(-1)
            wave_ids = [self._attach(wave) for wave in waves]
        logger.debug("Replaced wave set with %d waves", len(wave_ids))
        self._notify()
        return wave_ids

    def remove_wave(self, wave: Wave) -> int:
        """Remove the first wave equal to ``wave`` and return its id.

        Raises:
            ValueError: If no such wave is held
        """
        with self._lock:
            for index, (_, held) in enumerate(self._entries):
                if held == wave:
                    wave_id, _ = self._detach(index)
                    break
            else:
                raise ValueError(f"{wave!r} is not in the wave generator")
        logger.debug("Removed wave %d", wave_id)
        self._notify()
        return wave_id

    def remove_id(self, wave_id: int) -> Wave:
        """Remove the wave with the given id and return it."""
        with self._lock:
            for index, (held_id, _) in enumerate(self._entries):
                if held_id == wave_id:
                    _, wave = self._detach(index)
                    break
            else:
                raise KeyError(wave_id)
        logger.debug("Removed wave %d", wave_id)
        self._notify()
        return wave

    def clear_waves(self):
        with self._lock:
            while self._entries:
                self._detach(-1)
        logger.debug("Cleared all waves")
        self._notify()

    def update_wave(self, wave_id: int, kind: Optional[WaveType] = None,
                    frequency: Optional[int] = None, amplitude: Optional[float] = None) -> Wave:
        """Change parameters of a held wave.

        The new values are validated before any of them is applied, so a
        rejected update leaves the wave untouched. Listeners hear about the
        update once.
        """
        with self._lock:
            wave = self.get(wave_id)
            # Validate against a scratch copy first
            Wave(kind if kind is not None else wave.kind,
                 frequency if frequency is not None else wave.frequency,
                 amplitude if amplitude is not None else wave.amplitude,
                 wave.color)
            self._muted += 1
            try:
                if kind is not None:
                    wave.kind = kind
                if frequency is not None:
                    wave.frequency = frequency
                if amplitude is not None:
                    wave.amplitude = amplitude
            finally:
                self._muted -= 1
        self._notify()
        return wave

    def get(self, wave_id: int) -> Wave:
        with self._lock:
            for held_id, wave in self._entries:
                if held_id == wave_id:
                    return wave
        raise KeyError(wave_id)

    def get_waves(self) -> List[Wave]:
        """Return the held waves in insertion order."""
        with self._lock:
            return [wave for _, wave in self._entries]

    def entries(self) -> List[Tuple[int, Wave]]:
        """Return ``(wave_id, wave)`` pairs in insertion order."""
        with self._lock:
            return list(self._entries)

    def combine_waves(self, pos, time):
        """Sum of all wave amplitudes at position ``pos`` and time ``time``.

        Accepts scalars or numpy arrays, like :meth:`Wave.amplitude_at`.
        """
        total = np.zeros(np.broadcast(np.asarray(pos), np.asarray(time)).shape)
        for wave in self.get_waves():
            total = total + wave.amplitude_at(pos, time)
        if total.ndim == 0:
            return float(total)
        return total

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[Wave]:
        return iter(self.get_waves())
