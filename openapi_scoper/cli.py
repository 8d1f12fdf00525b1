"""
Command-line interface for OpenAPI Scoper.
"""

import argparse
import json
import sys
import os
import logging
from pathlib import Path
from . import __version__
from .scoper import OpenAPIScoper
from .core import OpenAPIScoperError


def setup_logging(verbose: bool = False) -> None:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(message)s' if not verbose else '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='openapi-scoper',
        description='Carve self-contained, per-controller OpenAPI documents out of a full spec',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s controllers openapi.yaml          # List controllers (tags)
  %(prog)s filter openapi.yaml pets          # Print the document scoped to "pets"
  %(prog)s filter openapi.yaml pets -o p.json
  %(prog)s split openapi.yaml                # One file per controller
  %(prog)s split openapi.yaml -f yaml -g pets -g owners
        """
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    controllers = subparsers.add_parser('controllers', help='List the controllers of a spec')
    controllers.add_argument('input_file', help='Path to the input OpenAPI file')

    filter_parser = subparsers.add_parser('filter', help='Scope a spec to one controller')
    filter_parser.add_argument('input_file', help='Path to the input OpenAPI file')
    filter_parser.add_argument('group', help='Controller (tag) to keep, matched verbatim')
    filter_parser.add_argument(
        '-o', '--output',
        help='Write the scoped JSON document to this file instead of stdout'
    )

    split = subparsers.add_parser('split', help='Write one scoped spec per controller')
    split.add_argument('input_file', help='Path to the input OpenAPI file')
    split.add_argument(
        '-o', '--output',
        default='scoped_specs',
        help='Output directory for scoped files (default: scoped_specs)'
    )
    split.add_argument(
        '-f', '--format',
        choices=['json', 'yaml'],
        default='json',
        help='Output format: json or yaml (default: json)'
    )
    split.add_argument(
        '-g', '--group',
        action='append',
        dest='groups',
        help='Controller to write; may be repeated (default: all controllers)'
    )

    return parser


def write_json(spec: dict, output: Path) -> None:
    """
    Write a specification as JSON to exactly the given path.

    Args:
        spec: Specification to write
        output: Destination file

    Raises:
        OpenAPIScoperError: If the file cannot be written
    """
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, 'w', encoding='utf-8') as f:
            json.dump(spec, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise OpenAPIScoperError(f"Error writing {output}: {e}") from e

    logging.getLogger(__name__).info(f"Created: {output}")


def run(args: argparse.Namespace) -> None:
    """Execute a parsed command."""
    if args.command == 'controllers':
        scoper = OpenAPIScoper(args.input_file)
        print(json.dumps({'controllers': scoper.list_groups()}, indent=2, ensure_ascii=False))

    elif args.command == 'filter':
        scoper = OpenAPIScoper(args.input_file)
        scoped = scoper.scoped_spec(args.group)
        if args.output:
            write_json(scoped, Path(args.output))
        else:
            print(json.dumps(scoped, indent=2, ensure_ascii=False))

    elif args.command == 'split':
        scoper = OpenAPIScoper(args.input_file, args.output, args.format)
        created_files = scoper.split(args.groups)
        print(f"Scoping complete. Output files in: {args.output}")
        for filepath in created_files:
            print(f"Created: {filepath}")


def main(argv=None):
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Set up logging
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    # Validate input file exists
    if not os.path.exists(args.input_file):
        print(f"Error: Input file '{args.input_file}' not found", file=sys.stderr)
        sys.exit(1)

    try:
        run(args)
    except OpenAPIScoperError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
