import argparse
import logging
import sys
import time

from wavesim import (PRESETS, AnalyzerDisplay, AudioDeviceUnavailable, InvalidWaveParameter,
                     MalformedWaveData, Wave, WaveSession, WaveSimulationDisplay, WaveType,
                     load_waves, preset_waves, save_waves, write_tone)
from wavesim.sound import DEFAULT_BUFFER_SIZE, SAMPLE_RATE

logger = logging.getLogger("wavesim")


class ConsoleDisplay(WaveSimulationDisplay):
    """Prints the value of every series at x = 0."""

    def __init__(self):
        self.session = None

    def update(self, samples, elapsed_ms):
        for key, series in samples.items():
            if key.is_combined:
                label = "combined"
            else:
                wave = self.session.simulation.wave(key)
                label = f"{wave.kind.name} {wave.frequency}Hz x{wave.amplitude:g}"
            print(f"t = {elapsed_ms:>6}ms  {label:>22}: {series[0]:+.4f}")


class ConsoleAnalyzerDisplay(AnalyzerDisplay):
    """Prints the playback volume every 100 ms."""

    def update(self, reading):
        if reading.elapsed_ms % 100 == 0:
            print(f"Analyzer t = {reading.elapsed_ms:>6}ms  volume: {reading.volume:>4}/127")


def parse_wave(text):
    """Parse ``KIND:FREQ:AMP``, e.g. ``sin:10:1.0``."""
    try:
        kind, frequency, amplitude = text.split(":")
        return Wave(WaveType[kind.upper()], int(frequency), float(amplitude))
    except (KeyError, ValueError) as exc:
        raise argparse.ArgumentTypeError(f"invalid wave {text!r}, expected KIND:FREQ:AMP ({exc})")


def main():
    parser = argparse.ArgumentParser(description="WaveSim - Wave superposition simulator")
    parser.add_argument("--preset", choices=list(PRESETS), help="Load a preset wave set")
    parser.add_argument("--load", metavar="JSON", help="Load waves from a JSON file")
    parser.add_argument("--wave", type=parse_wave, action="append", default=[],
                        help="Add a wave as KIND:FREQ:AMP, e.g. sin:10:1.0 (repeatable)")
    parser.add_argument("--length", type=float, default=500.0, help="Simulated length in metres (default: 500)")
    parser.add_argument("--samples", type=int, default=1024, help="Sample points (default: 1024)")
    parser.add_argument("--duration", type=float, default=0.0, help="Play for this many seconds (default: 0)")
    parser.add_argument("--step", type=int, default=0, help="Advance the clock by this many ms once")
    parser.add_argument("--audio", action="store_true", help="Play the waves as sound")
    parser.add_argument("--analyze", action="store_true", help="Print analyzer readings")
    parser.add_argument("--buffer-size", type=int, default=DEFAULT_BUFFER_SIZE,
                        help=f"Audio buffer length in samples (default: {DEFAULT_BUFFER_SIZE})")
    parser.add_argument("--export-json", metavar="FILE", help="Write the waves to a JSON file")
    parser.add_argument("--export-wav", metavar="FILE", help="Write one second of the sound to a WAV file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    if args.step < 0:
        parser.error("--step must not be negative")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        waves = preset_waves(args.preset) if args.preset else []
        if args.load:
            waves.extend(load_waves(args.load))
    except (OSError, MalformedWaveData, InvalidWaveParameter) as e:
        logger.error("Cannot load waves: %s", e)
        return 1
    waves.extend(args.wave)

    display = ConsoleDisplay()
    session = WaveSession(
        args.length,
        display,
        analyzer_display=ConsoleAnalyzerDisplay() if args.analyze else None,
        audio=args.audio,
        sample_count=args.samples,
        buffer_size=args.buffer_size,
    )
    display.session = session

    try:
        try:
            session.load_waves(waves)
        except AudioDeviceUnavailable as e:
            logger.warning("Audio stopped: %s", e)

        print(f"Simulating {len(waves)} waves over {args.length:g}m")

        if args.step:
            session.step(args.step)

        if args.duration > 0:
            session.play()
            time.sleep(args.duration)
            session.pause()
            print(f"Paused at {session.simulation.elapsed_ms}ms")

        if args.export_json:
            save_waves(args.export_json, session.get_waves())
            print(f"Saved waves to {args.export_json}")

        if args.export_wav:
            buffer = session.sound.buffer
            repeats = max(1, SAMPLE_RATE // len(buffer))
            write_tone(args.export_wav, buffer, SAMPLE_RATE, repeats)
            print(f"Saved sound to {args.export_wav}")
    except KeyboardInterrupt:
        print("\nInterrupted")
    finally:
        session.close()

    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
