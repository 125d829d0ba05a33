#!/usr/bin/env python3
"""
NameKit CLI
===========
Command-line interface for phonetic name generation.

Usage:
    namekit generate --culture elven --gender female -n 5
    namekit generate --culture nordic --dialect icelandic --seed 7 -v
    namekit dialects --culture dwarven
    namekit validate
"""

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.table import Table
from rich import box

from namekit import __version__
from namekit.settings import get_setting

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

GENDER_CHOICES = ['male', 'female', 'any']

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = Console(highlight=False)

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def warning(self, msg: str):
        if not self.quiet:
            print(f"Warning: {msg}", file=sys.stderr)

    def success(self, msg: str):
        if not self.quiet:
            print(f"OK: {msg}")

    def table(self, headers: list, rows: list, title: str = None):
        """Print a formatted table."""
        if self.quiet:
            return

        table = Table(title=title, box=box.SIMPLE_HEAD, title_justify='left')
        for header in headers:
            table.add_column(str(header))
        for row in rows:
            table.add_row(*(str(c) for c in row))
        self.console.print(table)


def configure_logging(debug: bool = False):
    """Set up root logging from the ``logging`` section of app.yaml."""
    level = 'DEBUG' if debug else str(get_setting('logging.level', 'WARNING')).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format=get_setting('logging.format', LOG_FORMAT),
    )


def yes_no(flag: bool) -> str:
    return 'yes' if flag else 'no'


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate names."""
    from namekit.generators import PhoneticNameGenerator
    from namekit.generators.phonetic_generator import name_parts

    gen = PhoneticNameGenerator(seed=args.seed)

    culture = args.culture or get_setting('generation.default_culture', 'western')
    if culture not in gen.cultures:
        out.warning(f"Unknown culture '{culture}', using {gen.assembler.default_culture}")
    if args.dialect and args.dialect != 'any' and gen.dialects.get(args.dialect) is None:
        out.warning(f"Unknown dialect '{args.dialect}', ignored")

    names = gen.generate_batch(culture, args.gender, args.dialect, count=args.count)

    if args.json:
        print(json.dumps([n.to_dict() for n in names], indent=2, ensure_ascii=False))
        return 0

    label = f"{culture}/{args.dialect}" if args.dialect else culture
    out.print(f"Generating {len(names)} names for {label}...")
    out.print()

    rows = []
    for i, name in enumerate(names, 1):
        if args.verbose:
            rows.append([
                i,
                name.name,
                name.gender,
                ' - '.join(name_parts(name)),
                name.stress_index + 1,
                name.harmony_class or '-',
                name.ending or '-',
                name.prefix or '-',
            ])
        else:
            rows.append([i, name.name, name.gender])

    if args.verbose:
        out.table(['#', 'Name', 'Gender', 'Parts', 'Stress', 'Harmony', 'Ending', 'Prefix'], rows)
    else:
        out.table(['#', 'Name', 'Gender'], rows)

    return 0


def cmd_dialects(args, out: Output):
    """List dialect overlays."""
    from namekit.generators import PhoneticNameGenerator

    gen = PhoneticNameGenerator()
    options = gen.dialect_options(args.culture)

    if args.json:
        print(json.dumps(options, indent=2, ensure_ascii=False))
        return 0

    if not options:
        out.print(f"No dialects for culture '{args.culture}'.")
        return 0

    rows = []
    for option in options:
        dialect = gen.dialects.get(option['value'])
        endings = ', '.join(dialect.male_endings + dialect.female_endings) or '-'
        rows.append([
            option['value'],
            option['label'],
            dialect.base_culture,
            ', '.join(dialect.prefixes) or '-',
            endings,
        ])

    title = f"Dialects ({args.culture})" if args.culture else "Dialects"
    out.table(['Dialect', 'Label', 'Culture', 'Prefixes', 'Endings'], rows, title=title)
    return 0


def cmd_cultures(args, out: Output):
    """List base cultures."""
    from namekit.generators import PhoneticNameGenerator

    gen = PhoneticNameGenerator()

    rows = []
    for profile in gen.cultures.profiles():
        low, high = profile.length_range
        rows.append([
            profile.name,
            profile.label,
            f"{low}-{high}",
            profile.stress_pattern.value,
            yes_no(profile.vowel_harmony),
            len(gen.list_dialects_for_culture(profile.name)),
        ])

    out.table(['Culture', 'Label', 'Syllables', 'Stress', 'Harmony', 'Dialects'], rows,
              title="Cultures")
    return 0


def cmd_validate(args, out: Output):
    """Check the bundled phoneme data."""
    from namekit.generators.phonemes import (
        ProfileConfigError,
        load_cultures,
        load_dialects,
        validate_profiles,
    )

    try:
        cultures = load_cultures()
        dialects = load_dialects()
    except ProfileConfigError as e:
        out.error(str(e))
        return 1

    report = validate_profiles(cultures, dialects)

    for warning in report.warnings:
        out.warning(warning)
    for error in report.errors:
        out.error(error)

    if not report.ok:
        out.print(f"\n{len(report.errors)} error(s), {len(report.warnings)} warning(s)")
        return 1

    out.success(f"{len(cultures)} cultures, {len(dialects)} dialects "
                f"({len(report.warnings)} warning(s))")
    return 0


def cmd_demo(args, out: Output):
    """Print sample names for every dialect and base culture."""
    from namekit.generators import PhoneticNameGenerator

    gen = PhoneticNameGenerator(seed=args.seed)
    samples = args.samples

    rows = []
    for dialect in gen.dialects.profiles():
        for gender in ('male', 'female'):
            names = [gen.generate(dialect.base_culture, gender, dialect.name) for _ in range(samples)]
            rows.append([dialect.name, gender, ', '.join(names)])
    out.table(['Dialect', 'Gender', 'Names'], rows, title="Dialect samples")

    rows = []
    for culture in gen.list_cultures():
        for gender in ('male', 'female'):
            names = [gen.generate(culture, gender) for _ in range(samples)]
            rows.append([culture, gender, ', '.join(names)])
    out.table(['Culture', 'Gender', 'Names'], rows, title="Base cultures")

    return 0


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='namekit',
        description='NameKit - Phonetic Name Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate --culture elven --gender female -n 5
  %(prog)s generate --culture eastern --dialect arabic --seed 42 -v
  %(prog)s generate --culture orcish --json
  %(prog)s dialects --culture nordic
  %(prog)s cultures
  %(prog)s validate
  %(prog)s --debug validate
  %(prog)s demo
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--debug', action='store_true', help='Log debug records to stderr')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate names')
    p.add_argument('--culture', '-c', help='Base culture (default: from app.yaml)')
    p.add_argument('--gender', '-g', choices=GENDER_CHOICES, default='any',
                   help='Gender (default: any)')
    p.add_argument('--dialect', '-d', help='Dialect overlay')
    p.add_argument('-n', '--count', type=int, default=None,
                   help='Number of names (default: from app.yaml)')
    p.add_argument('--seed', type=int, help='Seed for reproducible output')
    p.add_argument('--verbose', '-v', action='store_true', help='Show how each name was built')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- dialects ---
    p = subparsers.add_parser('dialects', aliases=['ls'], help='List dialects')
    p.add_argument('--culture', '-c', help='Only dialects of this culture')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- cultures ---
    subparsers.add_parser('cultures', help='List base cultures')

    # --- validate ---
    subparsers.add_parser('validate', help='Validate phoneme data files')

    # --- demo ---
    p = subparsers.add_parser('demo', help='Sample names for every dialect and culture')
    p.add_argument('--samples', '-s', type=int, default=5, help='Names per row (default: 5)')
    p.add_argument('--seed', type=int, help='Seed for reproducible output')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Handle aliases
    cmd_map = {
        'gen': 'generate', 'g': 'generate',
        'ls': 'dialects',
    }
    command = cmd_map.get(args.command, args.command)

    configure_logging(args.debug)

    # Output handler
    out = Output(quiet=getattr(args, 'quiet', False))

    # Dispatch
    commands = {
        'generate': cmd_generate,
        'dialects': cmd_dialects,
        'cultures': cmd_cultures,
        'validate': cmd_validate,
        'demo': cmd_demo,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except Exception as e:
            logger.debug("Command %s failed", command, exc_info=True)
            out.error(str(e))
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
