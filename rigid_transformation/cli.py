"""
Command line entry point.

Usage:
    rigid-transformation [input_model] [output_format]
"""

import argparse
import sys

from .config import DEFAULT_INPUT_PATH, PipelineConfig
from .errors import InputUnreadable, ShapeMismatch
from .logging_config import setup_logging
from .pipeline import run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rigid-transformation",
        description="Rotate a model randomly and recover the rotation by rigid alignment",
    )
    parser.add_argument('input_model', nargs='?', default=DEFAULT_INPUT_PATH,
                        help=f'Model file to load (default: {DEFAULT_INPUT_PATH})')
    parser.add_argument('output_format', nargs='?', default=None,
                        help='Export format (default: extension of input_model)')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = PipelineConfig(input_path=args.input_model, output_format=args.output_format)
    setup_logging(config.log_level)

    print()
    print("Usage            : rigid-transformation <input_model> <output_format>")
    print(f"Default          : rigid-transformation {DEFAULT_INPUT_PATH} obj")
    print()

    try:
        run(config)
    except (InputUnreadable, ShapeMismatch) as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
