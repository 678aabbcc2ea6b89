import time

import pytest

from wavesim import COMBINED, AudioDeviceUnavailable, SimulationStatus, Wave, WaveSession, WaveType
from wavesim import session as session_module

from conftest import BrokenOutput, MemoryOutput


def test_wave_added_once_reaches_both_views(display):
    session = WaveSession(10.0, display, sample_count=32, buffer_size=64)
    session.add_wave(Wave(WaveType.COS, 10, 1.0))

    assert len(session.get_waves()) == 1
    assert session.sound.waves == session.simulation.get_waves()
    assert session.sound.buffer[0] == 127
    # Adding a wave refreshes the display
    assert display.last[0][COMBINED][0] == pytest.approx(1.0)
    session.close()


def test_remove_and_clear(display):
    session = WaveSession(10.0, display, buffer_size=64)
    wave = Wave(WaveType.COS, 10, 1.0)
    session.add_wave(wave)
    session.add_wave(Wave(WaveType.SIN, 20, 0.5))
    session.remove_wave(wave)
    assert [w.frequency for w in session.sound.waves] == [20]
    session.clear_waves()
    assert session.get_waves() == []
    assert not session.sound.buffer.any()
    assert list(display.last[0]) == [COMBINED]
    session.close()


def test_load_preset(display):
    session = WaveSession(10.0, display, buffer_size=64)
    session.add_wave(Wave(WaveType.COS, 5, 1.0))
    session.load_preset("Square Wave")
    assert [w.frequency for w in session.get_waves()] == [10, 30, 50, 70]
    assert session.sound.frequency_buffer.shape == (64, 71)
    session.close()


def test_step_drives_simulation_and_analyzer(display, analyzer_display):
    session = WaveSession(10.0, display, analyzer_display=analyzer_display, buffer_size=64)
    session.load_waves([Wave(WaveType.SIN, 10, 1.0)])
    session.step(20)
    assert session.simulation.elapsed_ms == 20
    assert session.analyzer.elapsed_ms == 20
    assert analyzer_display.count == 1
    session.close()


def test_play_pause_stop(display, analyzer_display):
    session = WaveSession(10.0, display, analyzer_display=analyzer_display, buffer_size=64)
    session.play()
    time.sleep(0.05)
    session.pause()
    assert session.simulation.status is SimulationStatus.PAUSED
    assert session.simulation.elapsed_ms > 0
    assert session.analyzer.elapsed_ms > 0

    session.stop()
    assert session.simulation.status is SimulationStatus.STOPPED
    assert session.simulation.elapsed_ms == 0
    assert session.analyzer.elapsed_ms == 0
    session.close()


def test_audio_unavailable_falls_back(display, monkeypatch):
    monkeypatch.setattr(session_module, "SoundDeviceOutput", BrokenOutput)
    session = WaveSession(10.0, display, audio=True, buffer_size=64)
    assert not session.has_audio
    session.add_wave(Wave(WaveType.COS, 10, 1.0))
    assert session.sound.buffer[0] == 127
    session.close()


def test_audio_failure_after_start_is_reported(display, monkeypatch):
    monkeypatch.setattr(session_module, "SoundDeviceOutput", lambda: BrokenOutput(working_opens=1))
    session = WaveSession(10.0, display, audio=True, sample_count=8, buffer_size=64)
    assert session.has_audio
    with pytest.raises(AudioDeviceUnavailable):
        session.add_wave(Wave(WaveType.COS, 10, 1.0))
    # The simulation still sees the new wave
    assert display.last[0][COMBINED][0] == pytest.approx(1.0)
    session.close()


def test_audio_plays_with_session(display, monkeypatch):
    output = MemoryOutput()
    monkeypatch.setattr(session_module, "SoundDeviceOutput", lambda: output)
    session = WaveSession(10.0, display, audio=True, buffer_size=64)
    session.play()
    assert output.playing
    session.pause()
    assert not output.playing
    session.close()
    assert not output.is_open


def test_preset_loads_fully_when_audio_fails(display, monkeypatch):
    monkeypatch.setattr(session_module, "SoundDeviceOutput", lambda: BrokenOutput(working_opens=1))
    session = WaveSession(10.0, display, audio=True, sample_count=8, buffer_size=64)
    with pytest.raises(AudioDeviceUnavailable):
        session.load_preset("Square Wave")
    assert [w.frequency for w in session.get_waves()] == [10, 30, 50, 70]
    assert session.sound.frequency_buffer.shape == (64, 71)
    session.close()


def test_loaded_waves_complete_when_audio_fails(display, monkeypatch):
    monkeypatch.setattr(session_module, "SoundDeviceOutput", lambda: BrokenOutput(working_opens=1))
    session = WaveSession(10.0, display, audio=True, sample_count=8, buffer_size=64)
    waves = [Wave(WaveType.SIN, 10, 1.0), Wave(WaveType.SIN, 20, 0.5), Wave(WaveType.COS, 40, 0.25)]
    with pytest.raises(AudioDeviceUnavailable):
        session.load_waves(waves)
    assert session.get_waves() == waves
    assert len(display.last[0]) == 4
    session.close()


def test_mutating_a_held_wave_resynthesizes(display):
    session = WaveSession(10.0, display, buffer_size=64)
    wave = Wave(WaveType.SIN, 10, 1.0)
    session.add_wave(wave)
    assert session.sound.buffer[0] == 0

    wave.switch_type()
    assert session.sound.buffer[0] == 127
    wave.amplitude = 0.5
    assert session.sound.buffer[0] == 64
    wave.frequency = 20
    assert session.sound.frequency_buffer.shape == (64, 21)
    session.close()


def test_removed_wave_no_longer_resynthesizes(display, monkeypatch):
    output = MemoryOutput()
    monkeypatch.setattr(session_module, "SoundDeviceOutput", lambda: output)
    session = WaveSession(10.0, display, audio=True, buffer_size=64)
    wave = Wave(WaveType.COS, 10, 1.0)
    session.add_wave(wave)
    session.remove_wave(wave)
    opens = len(output.opened)
    wave.switch_type()
    assert len(output.opened) == opens
    assert not session.sound.buffer.any()
    session.close()
