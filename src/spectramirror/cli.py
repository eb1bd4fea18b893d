"""
Command-line interface for offline rendering.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from spectramirror.config import (
    GapFill,
    MagnitudeMode,
    PipelineConfig,
    Profile,
    WindowMode,
)
from spectramirror.errors import ConfigurationError
from spectramirror.render import FileRenderer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spectramirror",
        description="Render mirrored spectrum magnitudes from audio files",
    )

    parser.add_argument(
        "input",
        type=Path,
        help="Input audio file (wav, mp3, flac)",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output manifest file path (default: <input>_spectrum.json)",
    )

    parser.add_argument(
        "-f", "--fps",
        type=int,
        default=60,
        help="Frames per second (default: 60)",
    )

    parser.add_argument(
        "-s", "--sample-rate",
        type=int,
        default=22050,
        help="Audio sample rate for analysis (default: 22050)",
    )

    parser.add_argument(
        "--format",
        choices=["json", "numpy"],
        default="json",
        help="Output format (default: json)",
    )

    # Pipeline params
    parser.add_argument(
        "--frame-size",
        type=int,
        default=None,
        help="Samples per frame, a power of two (default: 1024)",
    )

    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Output array length (default: 512)",
    )

    parser.add_argument(
        "--profile",
        choices=[p.value for p in Profile],
        default=None,
        help="Weighting profile (default: full)",
    )

    parser.add_argument(
        "--window",
        choices=[w.value for w in WindowMode],
        default=None,
        help="Hann window or flat amplification (default: hann)",
    )

    parser.add_argument(
        "--magnitude",
        choices=[m.value for m in MagnitudeMode],
        default=None,
        help="Magnitude scaling (default: scaled)",
    )

    parser.add_argument(
        "--gap-fill",
        choices=[g.value for g in GapFill],
        default=None,
        help="Fill rule between placed bins (default: midpoint)",
    )

    parser.add_argument(
        "--retention",
        type=float,
        default=None,
        help="Fraction of bins kept per frame (default: 0.25)",
    )

    # Config file (individual params above override it)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON pipeline config file",
    )

    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Ignore and do not write the manifest cache",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print manifest summary to stdout",
    )

    return parser


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Merge the config file (if any) with command-line overrides."""
    data = {}
    if args.config is not None:
        data = PipelineConfig.from_json(args.config).to_dict()

    overrides = {
        "frame_size": args.frame_size,
        "output_width": args.width,
        "profile": args.profile,
        "window_mode": args.window,
        "magnitude_mode": args.magnitude,
        "gap_fill": args.gap_fill,
        "retention": args.retention,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})

    return PipelineConfig.from_dict(data).validate()


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    if args.config is not None and not args.config.exists():
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return 1

    try:
        config = build_config(args)
        renderer = FileRenderer(config, fps=args.fps, sample_rate=args.sample_rate)
    except (ConfigurationError, json.JSONDecodeError, OSError) as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 2

    output_path = args.output
    if output_path is None:
        suffix = ".npz" if args.format == "numpy" else ".json"
        output_path = args.input.with_name(f"{args.input.stem}_spectrum{suffix}")

    if not args.quiet:
        print(f"Processing: {args.input}")
        print(
            f"Frame size: {config.frame_size}, width: {config.output_width}, "
            f"profile: {config.profile.value}"
        )

    result = renderer.process(
        args.input,
        output_path=output_path,
        format=args.format,
        use_cache=not args.no_cache,
    )

    if not args.quiet:
        print(f"Duration: {result['duration']:.2f}s")
        print(f"Frames: {result['n_frames']}")
        print(f"Output: {result['output_path']}")

    if args.summary:
        manifest = result["manifest"]
        print("\n--- Manifest Summary ---")
        print(json.dumps(manifest["metadata"], indent=2))

        frames = manifest["frames"]
        if frames:
            peaks = [frame["peak"] for frame in frames]
            loudest = max(range(len(frames)), key=peaks.__getitem__)
            print(f"\nLoudest frame: {loudest} (peak {peaks[loudest]:.4f})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
