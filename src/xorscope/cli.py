"""
Command-Line Interface (CLI) for Xorscope
Primary interface for analysts working in terminals
"""

import argparse
import json
import sys
from pathlib import Path

from . import __version__
from .core.codec import SUPPORTED_ENCODINGS, bytes_to_hex
from .core.errors import XorscopeError
from .core.engine import XorscopeEngine
from .core.presets import PresetLibrary, apply_overrides, get_config, load_config
from .core.xor_ops import repeating_key_xor
from .utils.report_generator import ReportGenerator


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands"""
    parser = argparse.ArgumentParser(
        prog='xorscope',
        description='Xorscope - Repeating-key XOR cryptanalysis and ECB detection',
        epilog='For education and authorized testing only. MIT License.'
    )

    parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'Xorscope v{__version__}'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Print tracebacks on errors'
    )

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    # break: repeating-key XOR attack
    p_break = subparsers.add_parser('break', help='Recover a repeating XOR key from ciphertext')
    p_break.add_argument('input', type=str, help='Ciphertext file')
    p_break.add_argument(
        '--encoding',
        choices=SUPPORTED_ENCODINGS,
        default='base64',
        help='Ciphertext transport encoding (default: base64)'
    )
    p_break.add_argument(
        '--preset',
        choices=PresetLibrary.list_presets(),
        default='balanced',
        help='Breaker preset (default: balanced)'
    )
    p_break.add_argument('--config', type=str, metavar='FILE', help='YAML config file (overrides --preset)')
    p_break.add_argument('--max-keysize', type=int, metavar='N', help='Largest key length to try')
    p_break.add_argument('--top-n', type=int, metavar='N', help='Number of keysizes to solve')
    p_break.add_argument(
        '--all-blocks',
        action='store_true',
        help='Average Hamming distance over every chunk instead of four'
    )
    p_break.add_argument(
        '--out', '--output',
        type=str,
        metavar='DIR',
        help='Write JSON, YAML, plaintext and Markdown report to DIR'
    )
    p_break.add_argument('--name', type=str, default='xor_break', help='Base name for output files')
    p_break.add_argument('--no-report', action='store_true', help='Skip markdown report generation')
    p_break.add_argument('--json-only', action='store_true', help='Output JSON only (machine-readable)')

    # single: single-byte XOR line detection
    p_single = subparsers.add_parser('single', help='Find the hex line encrypted with single-byte XOR')
    p_single.add_argument('input', type=str, help='File with one hex ciphertext per line')
    p_single.add_argument('--json-only', action='store_true', help='Output JSON only')

    # ecb: repeated block detection
    p_ecb = subparsers.add_parser('ecb', help='Flag ciphertext lines with repeated blocks')
    p_ecb.add_argument('input', type=str, help='File with one ciphertext per line')
    p_ecb.add_argument('--block-size', type=int, default=16, metavar='N', help='Block size in bytes (default: 16)')
    p_ecb.add_argument('--encoding', choices=('hex', 'base64'), default='hex', help='Line encoding (default: hex)')
    p_ecb.add_argument('--out', '--output', type=str, metavar='DIR', help='Write JSON and Markdown report to DIR')
    p_ecb.add_argument('--name', type=str, default='ecb_detect', help='Base name for output files')
    p_ecb.add_argument('--no-report', action='store_true', help='Skip markdown report generation')
    p_ecb.add_argument('--json-only', action='store_true', help='Output JSON only')

    # aes: AES-ECB decryption with a known key
    p_aes = subparsers.add_parser('aes', help='Decrypt AES-ECB ciphertext with a known key')
    p_aes.add_argument('input', type=str, help='Ciphertext file')
    p_aes.add_argument('--key', type=str, required=True, help='AES key (16, 24 or 32 characters)')
    p_aes.add_argument('--encoding', choices=('base64', 'hex'), default='base64', help='Ciphertext encoding')
    p_aes.add_argument('--keep-padding', action='store_true', help='Do not strip PKCS#7 padding')
    p_aes.add_argument('--out', type=str, metavar='FILE', help='Write plaintext to FILE')

    # encrypt: repeating-key XOR
    p_enc = subparsers.add_parser('encrypt', help='Apply repeating-key XOR and print hex')
    p_enc.add_argument('input', type=str, help='Plaintext file')
    p_enc.add_argument('--key', type=str, required=True, help='Key text')
    p_enc.add_argument('--out', type=str, metavar='FILE', help='Write hex ciphertext to FILE')

    return parser


def main(argv=None):
    """
    Main CLI entry point

    Handles argument parsing and dispatches to the subcommand handlers
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"[!] Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    handlers = {
        'break': _run_break,
        'single': _run_single,
        'ecb': _run_ecb,
        'aes': _run_aes,
        'encrypt': _run_encrypt,
    }

    try:
        handlers[args.command](args, input_path)

    except KeyboardInterrupt:
        print(f"\n\n[!] Analysis interrupted by user", file=sys.stderr)
        sys.exit(130)

    except (XorscopeError, ValueError, OSError) as e:
        print(f"\n[!] Error: {e}", file=sys.stderr)
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)


def _run_break(args, input_path: Path):
    if args.config:
        config = load_config(args.config)
    else:
        config = get_config(args.preset)

    overrides = {}
    if args.max_keysize is not None:
        overrides['max_keysize'] = args.max_keysize
    if args.top_n is not None:
        overrides['top_n'] = args.top_n
    if args.all_blocks:
        overrides['sample_blocks'] = None
    if overrides:
        config = apply_overrides(config, **overrides)

    if not args.json_only:
        print_banner()
        print(f"\n[*] Breaking: {input_path.name} (preset: {config.name})")
        print("=" * 60)

    engine = XorscopeEngine(config=config, verbose=not args.json_only)
    result = engine.break_file(input_path, encoding=args.encoding)

    if args.json_only:
        print(json.dumps(result.to_dict(), indent=2))
        return

    print("=" * 60)

    if args.out:
        print(f"\n[*] Exporting results...")
        engine.export_results(result, args.out, args.name)

        if not args.no_report:
            report = ReportGenerator().generate_markdown(result, args.name)
            report_file = Path(args.out) / f"{args.name}_report.md"
            with open(report_file, 'w') as f:
                f.write(report)
            print(f"[+] Markdown report: {report_file}")

    best = result.best
    if best is None:
        print(f"\n[!] No key recovered")
        return

    print(f"\n[+] Key: {best.key_text!r} ({best.keysize} bytes)")
    print(f"\n{best.plaintext_text}")


def _run_single(args, input_path: Path):
    engine = XorscopeEngine(verbose=not args.json_only)
    found = engine.detect_single_byte_file(input_path)

    if args.json_only:
        print(json.dumps(found.to_dict() if found else None, indent=2))
        return

    if found is not None:
        print(f"\n[+] Plaintext: {found.plaintext.decode('latin-1')!r}")


def _run_ecb(args, input_path: Path):
    config = get_config('balanced', block_size=args.block_size)
    engine = XorscopeEngine(config=config, verbose=not args.json_only)
    candidates = engine.detect_ecb_file(input_path, encoding=args.encoding)

    if args.json_only:
        print(json.dumps([c.to_dict() for c in candidates], indent=2))
        return

    print(f"\n[+] {len(candidates)} line(s) likely encrypted in ECB mode")

    if args.out:
        print(f"\n[*] Exporting results...")
        engine.export_ecb_results(candidates, args.out, args.name)

        if not args.no_report:
            report = ReportGenerator().generate_ecb_markdown(candidates, args.name)
            report_file = Path(args.out) / f"{args.name}_report.md"
            with open(report_file, 'w') as f:
                f.write(report)
            print(f"[+] Markdown report: {report_file}")


def _run_aes(args, input_path: Path):
    engine = XorscopeEngine()
    plaintext = engine.decrypt_aes_file(
        input_path,
        args.key.encode('utf-8'),
        encoding=args.encoding,
        strip_padding=not args.keep_padding,
    )

    if args.out:
        with open(args.out, 'wb') as f:
            f.write(plaintext)
        print(f"[+] Plaintext: {args.out}")
    else:
        print(plaintext.decode('utf-8', errors='replace'))


def _run_encrypt(args, input_path: Path):
    ciphertext = bytes_to_hex(repeating_key_xor(input_path.read_bytes(), args.key.encode('utf-8')))

    if args.out:
        with open(args.out, 'w') as f:
            f.write(ciphertext)
        print(f"[+] Ciphertext: {args.out}")
    else:
        print(ciphertext)


def print_banner():
    """Print ASCII banner"""
    banner = f"""
 __  __
 \\ \\/ /___  _ __ ___  ___ ___  _ __   ___
  \\  // _ \\| '__/ __|/ __/ _ \\| '_ \\ / _ \\
  /  \\ (_) | |  \\__ \\ (_| (_) | |_) |  __/
 /_/\\_\\___/|_|  |___/\\___\\___/| .__/ \\___|
                              |_|
Repeating-key XOR Cryptanalysis
Version {__version__} | MIT License
"""
    print(banner)


if __name__ == '__main__':
    main()
