#!/usr/bin/env python3
"""Export every preset wave set as JSON and as an 8-bit WAV file."""

import argparse
import os

from wavesim import PRESETS, SoundController, WaveGenerator, load_preset, save_waves, write_tone
from wavesim.sound import DEFAULT_BUFFER_SIZE, SAMPLE_RATE


def slug(name):
    return name.lower().replace(" ", "_")


def main():
    parser = argparse.ArgumentParser(description="Export preset wave sets")
    parser.add_argument("output_dir", help="Directory for the exported files")
    parser.add_argument("--duration", type=float, default=1.0,
                       help="Length of each WAV file in seconds (default: 1.0)")
    parser.add_argument("--buffer-size", type=int, default=DEFAULT_BUFFER_SIZE,
                       help=f"Audio buffer length in samples (default: {DEFAULT_BUFFER_SIZE})")
    args = parser.parse_args()

    os.makedirs(args.output_dir, exist_ok=True)

    generator = WaveGenerator()
    # No output device, only synthesis
    sound = SoundController(generator, buffer_size=args.buffer_size)

    for name in PRESETS:
        waves = load_preset(generator, name)
        base = os.path.join(args.output_dir, slug(name))

        save_waves(base + ".json", waves)
        repeats = max(1, round(args.duration * SAMPLE_RATE / args.buffer_size))
        write_tone(base + ".wav", sound.buffer, SAMPLE_RATE, repeats)

        print(f"Exported {name}")
        print(f"  Waves: {', '.join(f'{w.frequency}Hz x{w.amplitude:g}' for w in waves)}")
        print(f"  Files: {base}.json, {base}.wav")

    sound.close()


if __name__ == "__main__":
    main()
