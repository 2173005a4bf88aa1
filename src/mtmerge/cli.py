"""CLI entry point for mtmerge - merge maketest scores into a Canvas gradebook export."""

import argparse
import sys

from .common import MergeError


def build_parser():
    parser = argparse.ArgumentParser(
        prog='mtmerge',
        description='Merge scores keyed by GitHub ID into a gradebook keyed by SIS Login ID',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    # --- merge subcommand (explicit files) ---
    merge_parser = subparsers.add_parser(
        'merge',
        help='Merge the given scores and mapping files into a gradebook export',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Example:
    mtmerge merge -canvas canvas.csv -maketest project02.csv -map map.csv
    mtmerge merge -dst canvas.csv -src scores.csv -map map.csv -col "Project02-Automated"
""",
    )
    merge_parser.add_argument(
        '-dst', '-canvas', dest='dst', default='',
        help='CSV file exported from Canvas',
    )
    merge_parser.add_argument(
        '-src', '-maketest', dest='src', default='',
        help='CSV file containing scores',
    )
    merge_parser.add_argument(
        '-map', dest='map', default='',
        help='CSV file containing mappings from GitHub profile to SIS ID',
    )
    merge_parser.add_argument(
        '-o', '--output', default='out.csv',
        help='Output CSV file (default: out.csv)',
    )
    merge_parser.add_argument(
        '-col', '--column', default=None,
        help='Destination column name or fragment (default: "Project01-Automated")',
    )
    merge_parser.add_argument(
        '--config', default=None,
        help='YAML file with column name fragments (optional)',
    )
    merge_parser.add_argument(
        '-q', '--quiet', action='store_true',
        help='Suppress verbose output',
    )

    # --- menu subcommand (interactive) ---
    menu_parser = subparsers.add_parser(
        'menu',
        help='Pick files and the destination column from numbered menus',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Example:
    mtmerge menu -C grades/
""",
    )
    menu_parser.add_argument(
        '-C', dest='directory', default='.',
        help='Directory containing the CSV files (default: current directory)',
    )
    menu_parser.add_argument(
        '--config', default=None,
        help='YAML file with column name fragments (optional)',
    )
    menu_parser.add_argument(
        '-q', '--quiet', action='store_true',
        help='Suppress verbose output',
    )

    # --- web subcommand ---
    web_parser = subparsers.add_parser(
        'web',
        help='Start the web interface',
    )
    web_parser.add_argument('--host', default='127.0.0.1')
    web_parser.add_argument('--port', type=int, default=5000)
    web_parser.add_argument('--debug', action='store_true')

    return parser, merge_parser


def _fail(message):
    print(f"ERROR: {message}")
    sys.exit(1)


def _report(result, quiet, always_count=False):
    if not result.ok:
        _fail(result.error)
    if quiet:
        if always_count:
            print(f"Updated {result.updated} cells")
    else:
        print(f"\nUpdated {result.updated} cells")
        print(f"   {result.output}")
        print("\nDone!")


def run_merge_command(args, merge_parser):
    if not args.dst or not args.src or not args.map:
        merge_parser.print_usage()
        return

    from .config import load_columns
    from .join import merge_files

    try:
        fragments = load_columns(args.config, {'dest_value': args.column})
    except MergeError as e:
        _fail(e)

    if not args.quiet:
        print("\nScore Merger")
        print("=" * 60)

    result = merge_files(
        args.dst, args.src, args.map, args.output,
        fragments=fragments,
        verbose=not args.quiet,
    )
    _report(result, args.quiet)


def run_menu_command(args):
    from .config import load_columns
    from .menu import run_menu

    if not args.quiet:
        print("\nScore Merger (menu mode)")
        print("=" * 60)

    try:
        fragments = load_columns(args.config)
        result = run_menu(args.directory, fragments=fragments, verbose=not args.quiet)
    except MergeError as e:
        _fail(e)
    except EOFError:
        _fail("No selection made")

    _report(result, args.quiet, always_count=True)


def main(argv=None):
    parser, merge_parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == 'merge':
        run_merge_command(args, merge_parser)
    elif args.command == 'menu':
        run_menu_command(args)
    elif args.command == 'web':
        from .web import app
        app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == '__main__':
    main()
