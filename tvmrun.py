#!/usr/bin/env python3
"""
tvmrun: tape machine runner CLI

Usage:
    tvmrun <program> [--profile reference|symmetric] [--max-steps N]
                     [--trace] [--listing] [--verbose] [--log-file PATH]

Program output goes to stdout. Diagnostics go to stderr.

Exit codes:
    0  program ran off its end (normal halt)
    1  program file could not be read
    2  usage error (argparse)
    3  execution fault (pointer underflow, unmatched bracket, empty cell)
    4  --max-steps exhausted
    5  internal error

Examples:
    tvmrun hello.b
    tvmrun loop.b --max-steps 100000 --trace
    tvmrun hello.b --listing
"""

import argparse
import logging
import sys

from tapevm import TapeMachine, MachineConfig, PROFILES, DEFAULT_PROFILE, StopReason, __version__
from tapevm.cpu.decoder import format_listing
from tapevm.log_setup import setup_logging

log = logging.getLogger("tapevm.cli")

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_FAULT = 3
EXIT_TIMEOUT = 4
EXIT_INTERNAL = 5


def parse_steps_arg(value: str) -> int:
    """Parse --max-steps; accepts decimal or 0x hex, must be positive."""
    value = value.strip()
    try:
        steps = int(value, 16) if value.lower().startswith("0x") else int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if steps <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")
    return steps


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tvmrun",
        description="Run an eight-symbol tape machine program",
        epilog="Profiles: " + ", ".join(PROFILES.keys()),
    )
    parser.add_argument("program", help="Program file (raw bytes)")
    parser.add_argument("--profile", default=DEFAULT_PROFILE,
                        choices=list(PROFILES.keys()),
                        help=f"Machine profile (default: {DEFAULT_PROFILE})")
    parser.add_argument("--max-steps", type=parse_steps_arg, default=None,
                        help="Stop after this many instructions (default: no limit)")
    parser.add_argument("--trace", action="store_true",
                        help="Write a per-instruction trace to stderr after the run")
    parser.add_argument("--listing", action="store_true",
                        help="Print the decoded instruction listing and exit")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log run details to stderr")
    parser.add_argument("--log-file", default=None,
                        help="Also write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"tvmrun {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Cells 0x80-0xFF print as Latin-1 code points; the console must take them
    if sys.stdout.encoding and sys.stdout.encoding.lower() not in ('utf-8', 'utf8'):
        try:
            sys.stdout.reconfigure(encoding='utf-8', errors='replace')
        except AttributeError:
            pass  # not a TextIOWrapper

    setup_logging(
        "tapevm",
        console_level=logging.INFO if args.verbose else logging.WARNING,
        log_file=args.log_file,
        force=True,
    )

    # Output goes straight to stdout; no need to keep a copy of it
    vm = TapeMachine(MachineConfig.from_profile(args.profile), record_output=False)

    # Read program
    try:
        vm.load_file(args.program)
    except FileNotFoundError:
        print(f"Error: File not found: {args.program}", file=sys.stderr)
        return EXIT_LOAD_ERROR
    except OSError as e:
        print(f"Error reading {args.program}: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR

    log.info("Program: %s (%d bytes, profile %s)",
             args.program, len(vm.program), args.profile)

    if args.listing:
        listing = format_listing(vm.program)
        if listing:
            print(listing)
        return EXIT_OK

    if args.trace:
        vm.enable_trace()

    try:
        reason = vm.run(max_steps=args.max_steps)
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return EXIT_INTERNAL
    finally:
        sys.stdout.flush()
        if args.trace:
            print(vm.get_trace(), file=sys.stderr)

    if reason.is_fault:
        print(f"Fault: {vm.last_fault}", file=sys.stderr)
        return EXIT_FAULT
    if reason is StopReason.TIMEOUT:
        print(f"Stopped: step limit {args.max_steps} reached at {vm.regs.display()}",
              file=sys.stderr)
        return EXIT_TIMEOUT
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
