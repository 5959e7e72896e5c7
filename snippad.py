#!/usr/bin/env python3
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''

import sys
import argparse

from utils.paths import DEFAULT_STATE_DIR, state_dir

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SnipPad snippet manager")
    parser.add_argument(
        "--verbosity",
        type=int, default=0,
        help="Set verbosity level (0=quiet, 1=normal, 2=verbose, 3+=debug)"
    )
    parser.add_argument(
        "--stdexp",
        action="store_true",
        help="Use standard exception handling to stdout / stderr."
    )
    parser.add_argument(
        "--state-dir",
        default=None,
        help=f"Directory for saved state (default {DEFAULT_STATE_DIR})"
    )
    parser.add_argument(
        "--config",
        default="",
        help="Keep the snippet library in this JSON file (opened if it exists, created otherwise)"
    )
    return parser

def cli(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # wx is only needed once we actually open a window.
    from app import main

    return main(
        state_dir(args.state_dir),
        config_path=args.config,
        verbosity=args.verbosity,
        stdexp=args.stdexp,
    )

if __name__ == "__main__":
    sys.exit(cli())
