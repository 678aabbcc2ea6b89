import pytest

from wavesim import PRESETS, Wave, WaveGenerator, WaveType, load_preset, preset_waves


def params(waves):
    return [(wave.kind, wave.frequency, wave.amplitude) for wave in waves]


def test_catalog():
    assert list(PRESETS) == ["Pure Sine", "Square Wave", "Triangle Wave", "Sawtooth Wave"]
    assert params(preset_waves("Square Wave")) == [
        (WaveType.SIN, 10, 1.0), (WaveType.SIN, 30, 0.33), (WaveType.SIN, 50, 0.20), (WaveType.SIN, 70, 0.14)]
    assert params(preset_waves("Triangle Wave")) == [
        (WaveType.SIN, 10, 1.0), (WaveType.SIN, 30, 0.11), (WaveType.SIN, 50, 0.04), (WaveType.SIN, 70, 0.02)]
    assert params(preset_waves("Sawtooth Wave")) == [
        (WaveType.SIN, 10, 1.0), (WaveType.SIN, 20, 0.5), (WaveType.SIN, 30, 0.33), (WaveType.SIN, 40, 0.25)]
    assert params(preset_waves("Pure Sine")) == [(WaveType.SIN, 10, 1.0)]


def test_preset_waves_are_fresh():
    first, second = preset_waves("Pure Sine"), preset_waves("Pure Sine")
    assert first[0] is not second[0]


def test_unknown_preset():
    with pytest.raises(KeyError):
        preset_waves("Noise")


def test_load_preset_replaces_waves():
    generator = WaveGenerator([Wave(WaveType.COS, 5, 0.1)])
    load_preset(generator, "Sawtooth Wave")
    assert [wave.frequency for wave in generator] == [10, 20, 30, 40]


def test_load_preset_announces_one_change():
    generator = WaveGenerator([Wave(WaveType.COS, 5, 0.1)])
    seen = []
    generator.subscribe(lambda: seen.append(len(generator)))
    load_preset(generator, "Square Wave")
    assert seen == [4]
