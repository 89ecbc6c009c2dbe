#!/usr/bin/env python3
"""
wavdecode.py — AFSK WAV decoder CLI entry point.

Commands:
  decode  <wav>   Decode the AFSK message in a 16-bit stereo WAV to text
  info    <wav>   Show the WAV header and the derived bit-timing thresholds

Run `python3 wavdecode.py --help` for full usage.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from afsk import FAILURE_MESSAGE, decode_file
from afsk.modem.dsp import signal_lengths
from afsk.profiles import ONE_SIGNAL_TIME, SIGNAL_TOLERANCE
from afsk.wav import read_header


# ─────────────────────────────────────────────────────────────────────────────
# Sub-command handlers
# ─────────────────────────────────────────────────────────────────────────────

def cmd_decode(args: argparse.Namespace):
    print(f'→ Decoding {args.wav}  bit-time={args.bit_time}s  '
          f'tolerance={args.tolerance}', file=sys.stderr)

    result = decode_file(
        args.wav,
        one_signal_time=args.bit_time,
        tolerance=args.tolerance,
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    elif result.success:
        print(result.text)

    if not result.success:
        print(f'✗ {FAILURE_MESSAGE}  {result.summary()}', file=sys.stderr)
        sys.exit(1)

    if result.checksum_errors:
        print(f'⚠ {result.checksum_errors} block(s) failed the checksum '
              '(data kept).', file=sys.stderr)
    print(f'✓ {result.summary()}', file=sys.stderr)


def cmd_info(args: argparse.Namespace):
    with open(args.wav, 'rb') as f:
        header = read_header(f)

    min_one, min_zero = signal_lengths(header.sample_rate, args.bit_time, args.tolerance)
    info = header.to_dict()
    info.update({
        'pcm16_stereo':  header.is_pcm16_stereo,
        'duration_s':    round(header.duration_s, 3),
        'min_one_run':   min_one,
        'min_zero_run':  min_zero,
    })
    print(json.dumps(info, indent=2))


# ─────────────────────────────────────────────────────────────────────────────
# Argument parser
# ─────────────────────────────────────────────────────────────────────────────

def _add_timing_args(p: argparse.ArgumentParser):
    p.add_argument('--bit-time', type=float, default=ONE_SIGNAL_TIME,
                   metavar='SEC',
                   help=f'Nominal "1" half-wave duration (default: {ONE_SIGNAL_TIME})')
    p.add_argument('--tolerance', type=int, default=SIGNAL_TOLERANCE,
                   metavar='N',
                   help=f'Samples of slack on both run thresholds (default: {SIGNAL_TOLERANCE})')


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog='wavdecode',
        description='Decode AFSK-encoded text from 16-bit stereo WAV recordings.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 wavdecode.py decode file_1.wav
  python3 wavdecode.py decode file_1.wav --json
  python3 wavdecode.py -v decode file_2.wav            # log checksum diagnostics
  python3 wavdecode.py decode noisy.wav --tolerance 2
  python3 wavdecode.py info file_1.wav
""",
    )
    p.add_argument('-v', '--verbose', action='store_true',
                   help='Log per-block checksum results to stderr')
    sub = p.add_subparsers(dest='command', required=True)

    # ── decode ────────────────────────────────────────────────────────────────
    dec = sub.add_parser(
        'decode',
        help='Decode the AFSK message in a WAV file.',
        description=(
            'Reads the 44-byte WAV header and PCM payload, demodulates the '
            'AFSK bit stream and prints the recovered text on stdout. '
            'Exits 1 if the file is truncated.'
        ),
    )
    dec.add_argument('wav', help='Input WAV file (16-bit PCM, 2 channels)')
    dec.add_argument('--json', action='store_true',
                     help='Print the full decode result with diagnostics as JSON')
    _add_timing_args(dec)
    dec.set_defaults(func=cmd_decode)

    # ── info ──────────────────────────────────────────────────────────────────
    inf = sub.add_parser(
        'info',
        help='Show the WAV header and bit-timing thresholds (JSON).',
    )
    inf.add_argument('wav', help='Input WAV file')
    _add_timing_args(inf)
    inf.set_defaults(func=cmd_info)

    return p


# ─────────────────────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None):
    parser = build_parser()
    args   = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        args.func(args)
    except KeyboardInterrupt:
        print('\n⚠ Interrupted.', file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f'✗ Error: {e}', file=sys.stderr)
        if os.environ.get('WAVDECODE_DEBUG'):
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
