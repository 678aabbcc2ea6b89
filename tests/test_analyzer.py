import time

import numpy as np
import pytest

from wavesim import Analyzer, SoundController, Wave, WaveType

from conftest import RecordingAnalyzerDisplay


@pytest.fixture
def sound():
    sound = SoundController(buffer_size=441)
    sound.add_wave(Wave(WaveType.COS, 100, 1.0))
    sound.add_wave(Wave(WaveType.SIN, 200, 0.5))
    return sound


def test_step_reads_sample_at_playback_time(sound, analyzer_display):
    analyzer = Analyzer(sound, analyzer_display)
    reading = analyzer.step(3)

    # 3 ms at 44100 Hz is sample 132
    assert reading.elapsed_ms == 3
    assert reading.index == 132
    assert reading.volume == sound.buffer[132]
    np.testing.assert_array_equal(reading.frequencies, sound.frequency_buffer[132])
    assert analyzer_display.count == 1
    assert analyzer_display.readings[0] is reading
    assert not analyzer.is_running


def test_index_wraps_around_buffer(sound, analyzer_display):
    analyzer = Analyzer(sound, analyzer_display)
    reading = analyzer.step(10)
    assert reading.index == 10 * 44100 // 1000 % 441
    assert reading.index == 0
    assert reading.volume == sound.buffer[0]


def test_empty_wave_set_reads_silence(analyzer_display):
    analyzer = Analyzer(SoundController(buffer_size=100), analyzer_display)
    reading = analyzer.step(7)
    assert reading.volume == 0
    assert reading.frequencies.shape == (0,)


def test_stop_resets_and_clears(sound, analyzer_display):
    analyzer = Analyzer(sound, analyzer_display)
    analyzer.step(5)
    analyzer.stop()
    assert analyzer.elapsed_ms == 0
    cleared = analyzer_display.readings[-1]
    assert cleared.volume == 0
    assert cleared.frequencies.shape == (201,)
    assert not cleared.frequencies.any()


def test_polling_and_pause(sound, analyzer_display):
    analyzer = Analyzer(sound, analyzer_display)
    analyzer.start()
    assert analyzer.is_running
    time.sleep(0.05)
    analyzer.pause()

    elapsed = analyzer.elapsed_ms
    assert elapsed > 0
    count = analyzer_display.count
    time.sleep(0.02)
    assert analyzer.elapsed_ms == elapsed
    assert analyzer_display.count == count
    assert [r.elapsed_ms for r in analyzer_display.readings] == list(range(1, elapsed + 1))

    analyzer.stop()
    assert analyzer.elapsed_ms == 0


class SlowFirstAnalyzerDisplay(RecordingAnalyzerDisplay):
    """Blocks for 50 ms on the first timed reading."""

    def update(self, reading):
        super().update(reading)
        if reading.elapsed_ms == 1:
            time.sleep(0.05)


def test_clock_catches_up_after_slow_reading(sound):
    display = SlowFirstAnalyzerDisplay()
    analyzer = Analyzer(sound, display)
    started = time.monotonic()
    analyzer.start()
    time.sleep(0.2)
    analyzer.pause()
    wall_ms = (time.monotonic() - started) * 1000
    assert analyzer.elapsed_ms >= wall_ms - 30


@pytest.mark.parametrize("milliseconds", [-1, 2.5, None])
def test_step_rejects_bad_values(sound, analyzer_display, milliseconds):
    analyzer = Analyzer(sound, analyzer_display)
    analyzer.step(4)
    with pytest.raises(ValueError):
        analyzer.step(milliseconds)
    assert analyzer.elapsed_ms == 4
    assert analyzer_display.count == 1
